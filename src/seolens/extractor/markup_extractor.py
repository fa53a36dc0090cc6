"""
BeautifulSoup-based markup extractor.

Converts a document body into plain text and counts its structural
elements. Counts are taken from the raw markup because the structural tags
are gone once the text has been rendered.
"""

from __future__ import annotations

import html
import re
from typing import Iterable, List

import structlog
from bs4 import BeautifulSoup, ParserRejectedMarkup

from seolens.protocols import BodyElement, DocumentBody, ElementBody, ExtractionResult, HtmlBody

logger = structlog.get_logger(__name__)

# An opening tag must not be self-closing and must be followed by a closing
# tag of the same name to count.
HEADING_RE = re.compile(r"<h([1-6])(?:\s[^<>]*?)?(?<!/)>(.*?)</h\1\s*>", re.IGNORECASE | re.DOTALL)
PARAGRAPH_RE = re.compile(r"<p(?:\s[^<>]*?)?(?<!/)>.*?</p\s*>", re.IGNORECASE | re.DOTALL)
IMAGE_RE = re.compile(r"<img(?:\s[^<>]*)?/?>", re.IGNORECASE)

TAG_RE = re.compile(r"<[a-zA-Z!/]")
INLINE_SPACE_RE = re.compile(r"[ \t\r\f\v\u00a0]+")
# Declarations and marked sections, leaving comments alone.
DECLARATION_RE = re.compile(r"<!(?!--)")

BLOCK_TAGS = [
    "address",
    "article",
    "aside",
    "blockquote",
    "dd",
    "div",
    "dl",
    "dt",
    "figcaption",
    "figure",
    "footer",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "header",
    "hr",
    "li",
    "main",
    "ol",
    "p",
    "pre",
    "section",
    "table",
    "td",
    "th",
    "tr",
    "ul",
]
DROP_TAGS = ["script", "style", "noscript", "template"]


def render_elements(elements: Iterable[BodyElement]) -> str:
    """Render a component-array body to markup."""
    parts: List[str] = []
    for element in elements:
        fields = element.fields or {}
        kind = (element.type or "").lower()

        if kind == "hero" or "headline" in kind:
            headline = fields.get("headline") or fields.get("title")
            if isinstance(headline, str) and headline.strip():
                parts.append(f"<h2>{html.escape(headline.strip())}</h2>")
            subheadline = fields.get("subheadline")
            if isinstance(subheadline, str) and subheadline.strip():
                parts.append(f"<p>{html.escape(subheadline.strip())}</p>")

        paragraph = fields.get("paragraph")
        if isinstance(paragraph, str) and paragraph.strip():
            if TAG_RE.search(paragraph):
                parts.append(paragraph)
            else:
                parts.append(f"<p>{html.escape(paragraph.strip())}</p>")

        image = fields.get("image")
        if isinstance(image, str) and image.strip():
            src = html.escape(image.strip(), quote=True)
            alt = html.escape(str(fields.get("image_alt") or fields.get("alt") or ""), quote=True)
            parts.append(f'<img src="{src}" alt="{alt}">')

    return "\n".join(parts)


def body_markup(body: DocumentBody) -> str:
    """Raw markup for either body variant."""
    if isinstance(body, HtmlBody):
        return body.markup or ""
    if isinstance(body, ElementBody):
        return render_elements(body.elements)
    raise TypeError(f"Unsupported document body: {type(body).__name__}")


class MarkupExtractor:
    """Extracts plain text and element counts from document bodies."""

    name = "markup"

    def __init__(self, parser: str = "html.parser") -> None:
        self.parser = parser

    def extract(self, body: DocumentBody) -> ExtractionResult:
        """
        Extract text and structural counts.

        Args:
            body: Either body variant of a Document.

        Returns:
            ExtractionResult. Malformed markup yields whatever text can be
            recovered and zero for elements that do not match.
        """
        markup = body_markup(body)
        if not markup.strip():
            return ExtractionResult(text="")

        heading_matches = list(HEADING_RE.finditer(markup))
        headings = (self._inline_text(match.group(2)) for match in heading_matches)
        result = ExtractionResult(
            text=self.to_text(markup),
            heading_count=len(heading_matches),
            paragraph_count=len(PARAGRAPH_RE.findall(markup)),
            image_count=len(IMAGE_RE.findall(markup)),
            headings=tuple(text for text in headings if text),
        )

        logger.debug(
            "Markup extracted",
            body_kind=body.kind.value,
            markup_length=len(markup),
            text_length=len(result.text),
            headings=result.heading_count,
            paragraphs=result.paragraph_count,
            images=result.image_count,
        )
        return result

    def to_text(self, markup: str) -> str:
        """Render markup as plain text with one line per block element."""
        soup = self._soup(markup)

        for tag in soup.find_all(DROP_TAGS):
            tag.decompose()
        for br in soup.find_all("br"):
            br.replace_with("\n")
        for tag in soup.find_all(BLOCK_TAGS):
            tag.insert_before("\n")
            tag.insert_after("\n")

        lines = (INLINE_SPACE_RE.sub(" ", line).strip() for line in soup.get_text().split("\n"))
        return "\n".join(line for line in lines if line)

    def _inline_text(self, fragment: str) -> str:
        soup = self._soup(fragment)
        return INLINE_SPACE_RE.sub(" ", soup.get_text(" ")).strip()

    def _soup(self, markup: str) -> BeautifulSoup:
        """Parse markup, degrading to escaped text when the parser rejects it."""
        try:
            return BeautifulSoup(markup, self.parser)
        except ParserRejectedMarkup as e:
            logger.warning("Parser rejected markup, escaping declarations", parser=self.parser, error=str(e))

        try:
            return BeautifulSoup(DECLARATION_RE.sub("&lt;!", markup), self.parser)
        except ParserRejectedMarkup as e:
            logger.warning("Parser rejected escaped markup", parser=self.parser, error=str(e))
            return BeautifulSoup(html.escape(markup, quote=False), self.parser)
