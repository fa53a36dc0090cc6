"""
Weighted content score built from structural counts and lexical stats.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Optional

import structlog

from seolens.config.config import ScoringConfig
from seolens.protocols import ContentSignals, Document, ExtractionResult, LexicalStats, ScoreBreakdown

logger = structlog.get_logger(__name__)

# Maximum contribution of each factor. They sum to 100.
FACTOR_MAXIMA: Dict[str, float] = {
    "word_count": 20,
    "headings": 15,
    "images": 10,
    "paragraphs": 10,
    "read_time": 10,
    "keyword_usage": 15,
    "meta_description": 10,
    "title_length": 10,
}

META_DESCRIPTION_RANGE = (120, 155)
TITLE_LENGTH_RANGE = (50, 60)


def length_points(length: int, ideal: tuple[int, int]) -> float:
    """10 inside the ideal range, 5 for any other non-empty value, else 0."""
    low, high = ideal
    if low <= length <= high:
        return 10
    if length > 0:
        return 5
    return 0


FACTOR_FORMULAS: Dict[str, Callable[[ContentSignals], float]] = {
    "word_count": lambda s: s.word_count / 25,
    "headings": lambda s: s.heading_count * 3,
    "images": lambda s: s.image_count * 2,
    "paragraphs": lambda s: s.paragraph_count / 2,
    "read_time": lambda s: math.floor(s.read_time_minutes),
    "keyword_usage": lambda s: s.term_count,
    "meta_description": lambda s: length_points(s.meta_description_length, META_DESCRIPTION_RANGE),
    "title_length": lambda s: length_points(s.title_length, TITLE_LENGTH_RANGE),
}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def signals_for(document: Document, extraction: ExtractionResult, lexical: LexicalStats) -> ContentSignals:
    """Collect the stated counts for one document."""
    return ContentSignals(
        word_count=lexical.word_count,
        heading_count=extraction.heading_count,
        image_count=extraction.image_count,
        paragraph_count=extraction.paragraph_count,
        read_time_minutes=lexical.read_time.minutes,
        term_count=len(lexical.terms),
        meta_description_length=len(document.seo_description or ""),
        title_length=len(document.seo_title or ""),
    )


class ContentScorer:
    """Scores content on eight independently clamped factors."""

    def __init__(self, config: Optional[ScoringConfig] = None) -> None:
        self.config = config or ScoringConfig()

    def score(self, signals: ContentSignals) -> ScoreBreakdown:
        """
        Compute the factor breakdown and total.

        Each factor is clamped to [0, its maximum]. The total is the sum
        rounded half-up, additionally clamped to [0, 100] when
        ``clamp_total`` is set.
        """
        factors: Dict[str, float] = {}
        for name, formula in FACTOR_FORMULAS.items():
            factors[name] = min(max(formula(signals), 0), FACTOR_MAXIMA[name])

        total = round_half_up(sum(factors.values()))
        if self.config.clamp_total:
            total = min(max(total, 0), 100)

        logger.debug("Content scored", total=total, factors=factors)
        return ScoreBreakdown(factors=factors, total=total)

    def score_document(
        self, document: Document, extraction: ExtractionResult, lexical: LexicalStats
    ) -> ScoreBreakdown:
        return self.score(signals_for(document, extraction, lexical))
