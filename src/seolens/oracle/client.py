"""
OpenAI-backed oracle client.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import openai
import structlog
from openai import AsyncOpenAI

from seolens.config.config import OracleConfig
from seolens.oracle.prompts import SYSTEM_PROMPT

logger = structlog.get_logger(__name__)


class OracleError(Exception):
    """The oracle request failed or produced no usable content."""


class OpenAIOracle:
    """
    Chat-completion oracle.

    The underlying AsyncOpenAI client is created on first use and reused.
    Requests are not retried; every failure surfaces as OracleError.
    """

    def __init__(self, config: OracleConfig, client: Optional[AsyncOpenAI] = None) -> None:
        self.config = config
        self._client = client
        self.logger = logger.bind(component="OpenAIOracle", model=config.model)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            try:
                self._client = AsyncOpenAI(
                    api_key=self.config.api_key,
                    base_url=self.config.base_url,
                    timeout=self.config.timeout,
                    max_retries=0,
                )
            except openai.OpenAIError as e:
                raise OracleError(f"Oracle client could not be created: {e}") from e
        return self._client

    async def complete(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        json_output: bool = False,
        temperature: Optional[float] = None,
    ) -> str:
        """
        Send one chat completion request.

        Args:
            prompt: User message.
            system: System message, defaults to the SEO assistant prompt.
            json_output: Ask the model for a JSON object response.
            temperature: Sampling temperature override.

        Returns:
            The stripped completion text.

        Raises:
            OracleError: on API errors or an empty completion.
        """
        client = self._get_client()
        kwargs: Dict[str, Any] = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system or SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await client.chat.completions.create(**kwargs)
        except openai.OpenAIError as e:
            self.logger.warning("Oracle request failed", error=str(e), error_type=type(e).__name__)
            raise OracleError(f"Oracle request failed: {e}") from e

        choices = getattr(response, "choices", None) or []
        content = (choices[0].message.content or "").strip() if choices else ""
        if not content:
            raise OracleError("Oracle returned an empty completion")

        usage = getattr(response, "usage", None)
        self.logger.debug(
            "Oracle completion received",
            json_output=json_output,
            chars=len(content),
            total_tokens=getattr(usage, "total_tokens", None),
        )
        return content

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
