"""
Core contracts and dataclasses for seolens.

This module defines the records that flow through the analysis pipeline:

- Document and its two body variants (HTML string vs. component array)
- ExtractionResult produced by the markup extractor
- LexicalStats produced by the lexical analyzer
- ScoreBreakdown and HeadlineScore produced by the scorers
- AnalysisResult returned to callers

plus the protocols for the two external collaborators (CMS and oracle).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Tuple, Union

# ============================================================================
# Document model
# ============================================================================


class BodyKind(Enum):
    """Body shapes observed in CMS payloads."""

    HTML = "html"
    ELEMENTS = "elements"


@dataclass(frozen=True)
class Taxonomy:
    """A tag or category attached to a document."""

    name: str
    slug: str = ""


@dataclass(frozen=True)
class BodyElement:
    """One component of a page body (hero, headline, paragraph, image, ...)."""

    type: str
    fields: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class HtmlBody:
    """Blog-post body delivered as a single HTML string."""

    markup: str

    @property
    def kind(self) -> BodyKind:
        return BodyKind.HTML


@dataclass(frozen=True)
class ElementBody:
    """Page body delivered as an ordered array of components."""

    elements: Tuple[BodyElement, ...] = ()

    @property
    def kind(self) -> BodyKind:
        return BodyKind.ELEMENTS


DocumentBody = Union[HtmlBody, ElementBody]


@dataclass(frozen=True)
class Document:
    """A CMS content item. Immutable for the lifetime of one analysis."""

    title: str
    body: DocumentBody
    seo_title: str = ""
    seo_description: str = ""
    author: str = ""
    published: Optional[str] = None
    updated: Optional[str] = None
    featured_image: Optional[str] = None
    tags: Tuple[Taxonomy, ...] = ()
    categories: Tuple[Taxonomy, ...] = ()
    slug: str = ""
    url: str = ""


# ============================================================================
# Pipeline stage outputs
# ============================================================================


@dataclass(frozen=True)
class ExtractionResult:
    """Plain text and structural counts taken from a document body."""

    text: str
    heading_count: int = 0
    paragraph_count: int = 0
    image_count: int = 0
    headings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TermCount:
    term: str
    count: int


@dataclass(frozen=True)
class ReadTime:
    """Estimated reading time."""

    minutes: float
    words: int
    text: str


@dataclass(frozen=True)
class LexicalStats:
    """
    Lexical metrics for a plain-text rendering.

    ``word_count`` excludes URL tokens and drives scoring and read time.
    ``density_word_count`` is the plain word-boundary count of the lowercased
    text and is the denominator of ``keyword_density``.
    """

    word_count: int
    density_word_count: int
    terms: Tuple[TermCount, ...]
    keyword_density: Dict[str, float]
    read_time: ReadTime


@dataclass(frozen=True)
class ContentSignals:
    """Stated counts the content score is computed from."""

    word_count: int = 0
    heading_count: int = 0
    image_count: int = 0
    paragraph_count: int = 0
    read_time_minutes: float = 0.0
    term_count: int = 0
    meta_description_length: int = 0
    title_length: int = 0


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-factor contributions (each clamped to its maximum) and their total."""

    factors: Dict[str, float]
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return {"total": self.total, "factors": dict(self.factors)}


@dataclass(frozen=True)
class HeadlineWordCounts:
    """Categorized word counts for a headline, as reported by the oracle."""

    power: int = 0
    action: int = 0
    descriptive: int = 0
    number: int = 0
    question: int = 0
    adjective: int = 0
    emotional: int = 0

    def total(self) -> int:
        return sum(asdict(self).values())


@dataclass(frozen=True)
class HeadlineScore:
    headline: str
    score: int
    word_counts: Optional[HeadlineWordCounts] = None
    degraded: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.score <= 100:
            raise ValueError("Headline score must be between 0 and 100")


@dataclass(frozen=True)
class AnalysisResult:
    """Everything one analysis run produces for one document."""

    document: Document
    extraction: ExtractionResult
    lexical: LexicalStats
    content_score: ScoreBreakdown
    headline_score: HeadlineScore
    narrative: Optional[str] = None
    elapsed_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation."""
        doc = self.document
        return {
            "url": doc.url,
            "slug": doc.slug,
            "title": doc.title,
            "seo_title": doc.seo_title,
            "seo_description": doc.seo_description,
            "author": doc.author,
            "published": doc.published,
            "updated": doc.updated,
            "featured_image": doc.featured_image,
            "tags": [asdict(tag) for tag in doc.tags],
            "categories": [asdict(category) for category in doc.categories],
            "body_kind": doc.body.kind.value,
            "word_count": self.lexical.word_count,
            "density_word_count": self.lexical.density_word_count,
            "headings_count": self.extraction.heading_count,
            "paragraphs_count": self.extraction.paragraph_count,
            "images_count": self.extraction.image_count,
            "headings": list(self.extraction.headings),
            "terms": [{"term": t.term, "count": t.count} for t in self.lexical.terms],
            "keyword_density": dict(self.lexical.keyword_density),
            "read_time": self.lexical.read_time.text,
            "read_time_minutes": round(self.lexical.read_time.minutes, 2),
            "content_score": self.content_score.total,
            "score_breakdown": dict(self.content_score.factors),
            "headline_score": self.headline_score.score,
            "headline_word_counts": (
                asdict(self.headline_score.word_counts) if self.headline_score.word_counts else None
            ),
            "headline_score_degraded": self.headline_score.degraded,
            "narrative": self.narrative,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
        }


# ============================================================================
# Collaborator protocols
# ============================================================================


class DocumentSource(Protocol):
    """Retrieves one document from a CMS."""

    async def fetch(self, url: str) -> Document:
        """
        Fetch and parse the document identified by ``url``.

        Raises:
            FetchError: on network, status, decoding or shape failures.
        """
        ...


class Oracle(Protocol):
    """Language-model completion service."""

    async def complete(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        json_output: bool = False,
        temperature: Optional[float] = None,
    ) -> str:
        """
        Return the completion text for ``prompt``.

        Raises:
            OracleError: if the request fails or yields no content.
        """
        ...
