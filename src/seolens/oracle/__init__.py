"""Language-model oracle: client, errors and prompts."""

from __future__ import annotations

from .client import OpenAIOracle, OracleError
from .prompts import HEADLINE_CATEGORIES, headline_prompt, narrative_prompt

__all__ = [
    "OpenAIOracle",
    "OracleError",
    "HEADLINE_CATEGORIES",
    "headline_prompt",
    "narrative_prompt",
]
