from __future__ import annotations

import math
import re
from collections import Counter
from typing import Dict, List, Optional, Tuple

import structlog

from seolens.config.config import AnalyzerConfig
from seolens.protocols import LexicalStats, ReadTime, TermCount
from seolens.quality.stopwords import get_stopwords

logger = structlog.get_logger(__name__)

URL_TOKEN_RE = re.compile(r"^(?:https?://|www\.)", re.IGNORECASE)
HAS_WORD_CHAR_RE = re.compile(r"\w")
# Alphanumeric runs with inner apostrophes; runs containing a digit are dropped.
CANDIDATE_RE = re.compile(r"[^\W_]+(?:'[^\W_]+)*")
DENSITY_WORD_RE = re.compile(r"\b\w+\b")


def count_words(text: str) -> int:
    """Whitespace tokens containing a word character, excluding URLs."""
    return sum(1 for token in text.split() if HAS_WORD_CHAR_RE.search(token) and not URL_TOKEN_RE.match(token))


def keyword_candidates(text: str, stopwords: frozenset[str]) -> List[str]:
    """
    Lowercased keyword candidates in document order, duplicates retained.

    URLs are skipped, tokens containing digits are dropped, and stopwords and
    single characters are removed.
    """
    candidates: List[str] = []
    for token in text.lower().replace("’", "'").split():
        if URL_TOKEN_RE.match(token):
            continue
        for match in CANDIDATE_RE.finditer(token):
            word = match.group(0)
            if any(char.isdigit() for char in word):
                continue
            if len(word) < 2 or word in stopwords:
                continue
            candidates.append(word)
    return candidates


def estimate_read_time(word_count: int, words_per_minute: int = 200) -> ReadTime:
    """Read time at ``words_per_minute``, reported as at least one minute."""
    minutes = word_count / words_per_minute if word_count > 0 else 0.0
    displayed = max(1, math.ceil(round(minutes, 2)))
    return ReadTime(minutes=minutes, words=word_count, text=f"{displayed} min read")


def keyword_density(text: str, terms: List[str]) -> Tuple[Dict[str, float], int]:
    """
    Percentage of the lowercased text's words taken up by each term.

    Returns the density map and the word count used as its denominator.
    """
    lowered = text.lower().replace("’", "'")
    total = len(DENSITY_WORD_RE.findall(lowered))
    if total == 0:
        return {}, 0

    density: Dict[str, float] = {}
    for term in terms:
        # Same boundaries as CANDIDATE_RE, so "_" separates terms.
        occurrences = len(re.findall(rf"(?<![^\W_]){re.escape(term)}(?![^\W_])", lowered))
        # One "_"-joined word can hold several occurrences.
        density[term] = min(round(occurrences / total * 100, 2), 100.0)
    return density, total


class LexicalAnalyzer:
    """
    Derives word counts, term frequencies, keyword density and read time
    from the plain-text rendering of a document.
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None) -> None:
        self.config = config or AnalyzerConfig()
        self.stopwords = get_stopwords(self.config.language)

    def analyze(self, text: str) -> LexicalStats:
        """
        Analyze plain text.

        Args:
            text: Plain text produced by the markup extractor.

        Returns:
            LexicalStats. Empty text yields zero counts, no terms, no density
            and the minimum read time.
        """
        word_count = count_words(text)
        terms = self.term_frequency(text)
        density, density_word_count = keyword_density(
            text, [term.term for term in terms[: self.config.density_terms]]
        )
        read_time = estimate_read_time(word_count, self.config.words_per_minute)

        logger.debug(
            "Lexical analysis complete",
            word_count=word_count,
            density_word_count=density_word_count,
            terms=len(terms),
            read_time=read_time.text,
        )
        return LexicalStats(
            word_count=word_count,
            density_word_count=density_word_count,
            terms=terms,
            keyword_density=density,
            read_time=read_time,
        )

    def term_frequency(self, text: str) -> Tuple[TermCount, ...]:
        """Top terms by count. Counter keeps first-occurrence order and sorted() is stable."""
        counts = Counter(keyword_candidates(text, self.stopwords))
        ranked = sorted(counts.items(), key=lambda item: -item[1])
        return tuple(TermCount(term, count) for term, count in ranked[: self.config.top_terms])
