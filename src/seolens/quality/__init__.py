"""
seolens quality scoring: lexical statistics, content score and headline score.
"""

from __future__ import annotations

from .content_scorer import FACTOR_MAXIMA, ContentScorer, signals_for
from .headline_scorer import HeadlineScorer, compute_headline_score, parse_word_counts
from .lexical_analyzer import LexicalAnalyzer, estimate_read_time, keyword_density
from .stopwords import get_stopwords

__all__ = [
    "FACTOR_MAXIMA",
    "ContentScorer",
    "signals_for",
    "HeadlineScorer",
    "compute_headline_score",
    "parse_word_counts",
    "LexicalAnalyzer",
    "estimate_read_time",
    "keyword_density",
    "get_stopwords",
]
