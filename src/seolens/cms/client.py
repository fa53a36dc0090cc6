"""
ButterCMS content client.

Fetches one content item by URL and maps either payload shape onto a
Document. All failures surface as FetchError.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import httpx
import structlog
from httpx import AsyncClient, HTTPError
from pydantic import ValidationError

from seolens.cms.schemas import PagePayload, PostPayload
from seolens.config.config import CMSConfig
from seolens.protocols import Document

logger = structlog.get_logger(__name__)


class FetchError(Exception):
    """The CMS could not be reached or returned an unusable payload."""

    def __init__(self, message: str, *, url: str = "", status: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


def parse_document(payload: Any, url: str = "") -> Document:
    """
    Map a decoded CMS response onto a Document.

    Posts carry ``data.body`` as an HTML string. Pages carry
    ``data.fields.body`` as a component array.

    Raises:
        FetchError: if the payload matches neither shape.
    """
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise FetchError("Response has no 'data' object", url=url)

    try:
        if isinstance(data.get("body"), str):
            return PostPayload.model_validate(data).to_document(url)
        if isinstance(data.get("fields"), dict):
            return PagePayload.model_validate(data).to_document(url)
    except ValidationError as e:
        raise FetchError(f"Unrecognized content shape: {e.error_count()} validation error(s)", url=url) from e

    raise FetchError("Unrecognized content shape: expected a post body or page fields", url=url)


class ButterCMSClient:
    """
    Asynchronous DocumentSource backed by httpx.

    An externally supplied AsyncClient is used as-is and never closed here.
    """

    def __init__(self, config: CMSConfig, client: Optional[AsyncClient] = None) -> None:
        self.config = config
        self._client = client
        self._owns_client = client is None
        self.logger = logger.bind(component="ButterCMSClient")

    def _headers(self) -> Dict[str, str]:
        return {"User-Agent": self.config.user_agent, "Accept": "application/json"}

    def _get_client(self) -> AsyncClient:
        if self._client is None:
            self._client = AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                headers=self._headers(),
                follow_redirects=True,
            )
        return self._client

    def _prepare_url(self, url: str) -> httpx.URL:
        try:
            parsed = httpx.URL(url)
        except (httpx.InvalidURL, TypeError) as e:
            raise FetchError(f"Invalid URL: {e}", url=url) from e

        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise FetchError("URL must be absolute http(s)", url=url)
        if self.config.allowed_hosts and parsed.host.lower() not in self.config.allowed_hosts:
            raise FetchError(f"Host not allowed: {parsed.host}", url=url)
        if self.config.auth_token and "auth_token" not in parsed.params:
            parsed = parsed.copy_merge_params({"auth_token": self.config.auth_token})
        return parsed

    async def fetch(self, url: str) -> Document:
        target = self._prepare_url(url)
        client = self._get_client()

        try:
            # Per request: a supplied client keeps its own default headers.
            response = await client.get(target, headers=self._headers())
        except HTTPError as e:
            self.logger.warning("CMS request failed", url=url, error=str(e), error_type=type(e).__name__)
            raise FetchError(f"CMS request failed: {e}", url=url) from e

        if not response.is_success:
            self.logger.warning("CMS returned error status", url=url, status=response.status_code)
            raise FetchError(
                f"CMS returned HTTP {response.status_code}",
                url=url,
                status=response.status_code,
            )

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FetchError(f"CMS response is not valid JSON: {e}", url=url, status=response.status_code) from e

        document = parse_document(payload, url)
        self.logger.debug("Document fetched", url=url, body_kind=document.body.kind.value, slug=document.slug)
        return document

    async def close(self) -> None:
        """Close the underlying HTTP client if it was created internally."""
        if self._client is not None and self._owns_client and not self._client.is_closed:
            await self._client.aclose()
        if self._owns_client:
            self._client = None

    async def __aenter__(self) -> ButterCMSClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
