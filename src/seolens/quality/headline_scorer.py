"""
Headline scoring from lexical heuristics plus oracle-supplied word categories.
"""

from __future__ import annotations

import json
import re
from typing import Any, Optional

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from seolens.config.config import OracleConfig
from seolens.oracle.prompts import headline_prompt
from seolens.protocols import HeadlineScore, HeadlineWordCounts, Oracle

logger = structlog.get_logger(__name__)

POINTS_PER_CATEGORY_WORD = 10
OPENING_BONUS = 10
LONG_HEADLINE_PENALTY = 10
LONG_HEADLINE_CHARS = 70

JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
OPENING_RE = re.compile(r"^(?:\d|how\b)", re.IGNORECASE)


def _category(name: str) -> Any:
    camel = name + "Words"
    return Field(default=0, ge=0, validation_alias=AliasChoices(name, f"{name}_words", camel))


class WordCountsPayload(BaseModel):
    """Schema of the oracle's categorized word counts."""

    model_config = ConfigDict(extra="ignore")

    power: int = _category("power")
    action: int = _category("action")
    descriptive: int = _category("descriptive")
    number: int = _category("number")
    question: int = _category("question")
    adjective: int = _category("adjective")
    emotional: int = _category("emotional")

    def to_counts(self) -> HeadlineWordCounts:
        return HeadlineWordCounts(**self.model_dump())


def parse_word_counts(raw: str) -> HeadlineWordCounts:
    """
    Parse the oracle reply into word counts.

    Tolerates code fences and text around the JSON object.

    Raises:
        ValueError: if no valid JSON object with non-negative counts is found.
    """
    match = JSON_OBJECT_RE.search(raw or "")
    if not match:
        raise ValueError("No JSON object in oracle reply")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ValueError(f"Oracle reply is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Oracle reply is not a JSON object")
    try:
        return WordCountsPayload.model_validate(data).to_counts()
    except ValidationError as e:
        raise ValueError(f"Oracle reply has invalid counts: {e}") from e


def length_bonus(word_count: int) -> int:
    if 5 <= word_count <= 10:
        return 30
    if word_count > 10:
        return 20
    return 10


def compute_headline_score(headline: str, counts: HeadlineWordCounts) -> int:
    """Score a headline in [0, 100] from its word counts and shape."""
    text = headline.strip()
    score = POINTS_PER_CATEGORY_WORD * counts.total()
    score += length_bonus(len(text.split()))
    if OPENING_RE.match(text):
        score += OPENING_BONUS
    if len(text) > LONG_HEADLINE_CHARS:
        score -= LONG_HEADLINE_PENALTY
    return min(max(score, 0), 100)


class HeadlineScorer:
    """
    Scores a single headline.

    Word categorization is delegated to the oracle. If that call fails or its
    reply cannot be parsed the score degrades to 0 instead of raising.
    """

    def __init__(self, oracle: Oracle, config: Optional[OracleConfig] = None) -> None:
        self.oracle = oracle
        self.config = config or OracleConfig()

    async def score(self, headline: str) -> HeadlineScore:
        if not headline or not headline.strip():
            return HeadlineScore(headline=headline or "", score=0, degraded=True)

        try:
            raw = await self.oracle.complete(
                headline_prompt(headline),
                json_output=True,
                temperature=self.config.headline_temperature,
            )
            counts = parse_word_counts(raw)
        except Exception as e:
            logger.warning(
                "Headline scoring degraded",
                headline=headline,
                error=str(e),
                error_type=type(e).__name__,
            )
            return HeadlineScore(headline=headline, score=0, degraded=True)

        score = compute_headline_score(headline, counts)
        logger.debug("Headline scored", headline=headline, score=score, word_counts=counts.total())
        return HeadlineScore(headline=headline, score=score, word_counts=counts)
