"""ButterCMS access: HTTP client and payload schemas."""

from __future__ import annotations

from .client import ButterCMSClient, FetchError, parse_document
from .schemas import PagePayload, PostPayload

__all__ = ["ButterCMSClient", "FetchError", "parse_document", "PagePayload", "PostPayload"]
