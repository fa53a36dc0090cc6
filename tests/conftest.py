"""
Shared fixtures for the seolens test suite.

Provides sample CMS payloads and documents, an in-memory oracle and
document source, and a configuration with metrics recording enabled.
"""

import copy
import json
from typing import Any, Dict, List, Optional

import pytest

from seolens.cms import FetchError, parse_document
from seolens.config import Config, MonitoringConfig
from seolens.observability import configure_logging
from seolens.oracle import OracleError
from seolens.protocols import Document, HtmlBody

SEO_TITLE = "Improve Your Blog SEO With Five Practical Steps Today!!"  # 55 chars
SEO_DESCRIPTION = (
    "Learn how to improve your blog SEO with five practical steps covering headings, "
    "paragraphs, images and keyword usage for readers."
)  # 129 chars

POST_BODY = (
    "<h2>Why SEO matters</h2>"
    "<p>Search engines reward helpful content that answers questions.</p>"
    "<h2>Getting started</h2>"
    "<p>Write clear headings and useful paragraphs for your readers.</p>"
    '<img src="https://cdn.example.com/seo.png" alt="SEO chart">'
    "<p>Measure SEO results and iterate on your content.</p>"
)

POST_PAYLOAD: Dict[str, Any] = {
    "data": {
        "slug": "seo-basics",
        "url": "seo-basics",
        "title": "5 Ways How to Improve SEO Today",
        "body": POST_BODY,
        "seo_title": SEO_TITLE,
        "meta_description": SEO_DESCRIPTION,
        "summary": "SEO basics",
        "author": {"first_name": "Ada", "last_name": "Lovelace", "slug": "ada-lovelace"},
        "published": "2024-01-15T09:00:00Z",
        "updated": None,
        "featured_image": None,
        "tags": [{"name": "SEO", "slug": "seo"}],
        "categories": [{"name": "Marketing", "slug": "marketing"}],
    },
    "meta": {"next_post": None, "previous_post": None},
}

PAGE_PAYLOAD: Dict[str, Any] = {
    "data": {
        "slug": "landing",
        "name": "Landing",
        "published": "2024-02-01T00:00:00Z",
        "updated": "2024-02-02T00:00:00Z",
        "fields": {
            "seo": {"title": "Landing SEO", "description": "Landing page description"},
            "body": [
                {"type": "hero", "fields": {"headline": "Grow Your Audience", "subheadline": "Practical tips"}},
                {"type": "paragraph", "fields": {"paragraph": "<p>Content marketing works.</p>"}},
                {"type": "image", "fields": {"image": "https://cdn.example.com/a.png", "image_alt": "Audience"}},
            ],
        },
    }
}

HEADLINE_REPLY = json.dumps(
    {"power": 1, "action": 1, "descriptive": 1, "number": 1, "question": 1, "adjective": 0, "emotional": 0}
)

NARRATIVE_REPLY = """## Suggestions
1. Add the focus keyword to the first paragraph.
2. Link to related posts.

## Meta Description
Five practical steps to improve your blog SEO today.

## Alternative Headlines
- Blog SEO in Five Steps
"""


class FakeOracle:
    """In-memory oracle that records every request."""

    def __init__(
        self,
        headline_reply: str = HEADLINE_REPLY,
        narrative_reply: str = NARRATIVE_REPLY,
        fail: bool = False,
    ) -> None:
        self.headline_reply = headline_reply
        self.narrative_reply = narrative_reply
        self.fail = fail
        self.calls: List[Dict[str, Any]] = []

    async def complete(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        json_output: bool = False,
        temperature: Optional[float] = None,
    ) -> str:
        self.calls.append({"prompt": prompt, "json_output": json_output, "temperature": temperature})
        if self.fail:
            raise OracleError("oracle unavailable")
        return self.headline_reply if json_output else self.narrative_reply


class StaticSource:
    """DocumentSource serving fixed documents by URL."""

    def __init__(self, documents: Optional[Dict[str, Document]] = None) -> None:
        self.documents = documents or {}
        self.requested: List[str] = []

    async def fetch(self, url: str) -> Document:
        self.requested.append(url)
        try:
            return self.documents[url]
        except KeyError:
            raise FetchError("CMS returned HTTP 404", url=url, status=404) from None


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    """Route structlog through stdlib logging at WARNING for the session."""
    configure_logging(MonitoringConfig(log_level="WARNING"))


@pytest.fixture
def post_payload() -> Dict[str, Any]:
    return copy.deepcopy(POST_PAYLOAD)


@pytest.fixture
def page_payload() -> Dict[str, Any]:
    return copy.deepcopy(PAGE_PAYLOAD)


@pytest.fixture
def post_document() -> Document:
    return parse_document(copy.deepcopy(POST_PAYLOAD), "https://api.buttercms.com/v2/posts/seo-basics/")


@pytest.fixture
def page_document() -> Document:
    return parse_document(copy.deepcopy(PAGE_PAYLOAD), "https://api.buttercms.com/v2/pages/*/landing/")


@pytest.fixture
def empty_document() -> Document:
    return Document(
        title="Empty post",
        body=HtmlBody(markup=""),
        seo_title=SEO_TITLE,
        seo_description=SEO_DESCRIPTION,
    )


@pytest.fixture
def test_config() -> Config:
    return Config(monitoring=MonitoringConfig(metrics_enabled=True))


@pytest.fixture
def fake_oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture
def failing_oracle() -> FakeOracle:
    return FakeOracle(fail=True)


@pytest.fixture
def make_oracle():
    """Factory for oracles with custom replies."""
    return FakeOracle


@pytest.fixture
def make_source():
    """Factory for in-memory document sources."""
    return StaticSource
