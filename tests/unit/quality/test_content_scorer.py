"""
Unit tests for the content scorer.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from seolens.config import ScoringConfig
from seolens.extractor import MarkupExtractor
from seolens.protocols import ContentSignals, Document, HtmlBody
from seolens.quality import FACTOR_MAXIMA, ContentScorer, LexicalAnalyzer, signals_for
from seolens.quality.content_scorer import length_points, round_half_up


def score_document(document: Document):
    extraction = MarkupExtractor().extract(document.body)
    lexical = LexicalAnalyzer().analyze(extraction.text)
    return ContentScorer().score_document(document, extraction, lexical)


class TestFactors:
    def test_structural_scenario(self):
        """Three paragraphs, two h2, one image, in-range title and description."""
        markup = (
            "<h2>First</h2><p>Alpha paragraph.</p>"
            "<h2>Second</h2><p>Beta paragraph.</p>"
            '<img src="x.png"><p>Gamma paragraph.</p>'
        )
        document = Document(title="Post", body=HtmlBody(markup), seo_title="t" * 55, seo_description="d" * 140)
        breakdown = score_document(document)

        assert breakdown.factors["headings"] == 6
        assert breakdown.factors["images"] == 2
        assert breakdown.factors["paragraphs"] == 1.5
        assert breakdown.factors["title_length"] == 10
        assert breakdown.factors["meta_description"] == 10

    def test_factors_clamped_to_maxima(self):
        signals = ContentSignals(
            word_count=1000,
            heading_count=10,
            image_count=10,
            paragraph_count=30,
            read_time_minutes=5.0,
            term_count=15,
        )
        breakdown = ContentScorer().score(signals)

        assert breakdown.factors == {
            "word_count": 20,
            "headings": 15,
            "images": 10,
            "paragraphs": 10,
            "read_time": 5,
            "keyword_usage": 15,
            "meta_description": 0,
            "title_length": 0,
        }
        assert breakdown.total == 75

    def test_read_time_floors(self):
        breakdown = ContentScorer().score(ContentSignals(read_time_minutes=3.99))

        assert breakdown.factors["read_time"] == 3

    @pytest.mark.parametrize(
        "length,points",
        [(0, 0), (1, 5), (119, 5), (120, 10), (155, 10), (156, 5)],
    )
    def test_meta_description_points(self, length, points):
        assert length_points(length, (120, 155)) == points

    @pytest.mark.parametrize("length,points", [(0, 0), (49, 5), (50, 10), (60, 10), (61, 5)])
    def test_title_points(self, length, points):
        assert length_points(length, (50, 60)) == points


class TestTotal:
    def test_half_up_rounding(self):
        breakdown = ContentScorer().score(ContentSignals(paragraph_count=1))

        assert breakdown.factors["paragraphs"] == 0.5
        assert breakdown.total == 1

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2
        assert round_half_up(0) == 0

    def test_empty_signals(self):
        assert ContentScorer().score(ContentSignals()).total == 0

    def test_total_clamp(self, monkeypatch):
        monkeypatch.setitem(FACTOR_MAXIMA, "word_count", 200)
        signals = ContentSignals(word_count=5000, heading_count=5, image_count=5, paragraph_count=20, term_count=15)

        assert ContentScorer().score(signals).total == 100
        assert ContentScorer(ScoringConfig(clamp_total=False)).score(signals).total == 250

    def test_signals_for_uses_seo_fields(self, post_document):
        extraction = MarkupExtractor().extract(post_document.body)
        lexical = LexicalAnalyzer().analyze(extraction.text)
        signals = signals_for(post_document, extraction, lexical)

        assert signals.title_length == len(post_document.seo_title)
        assert signals.meta_description_length == len(post_document.seo_description)
        assert signals.heading_count == 2
        assert signals.paragraph_count == 3
        assert signals.image_count == 1
        assert signals.term_count == len(lexical.terms)

    def test_deterministic(self, post_document):
        assert score_document(post_document) == score_document(post_document)

    def test_breakdown_to_dict(self):
        breakdown = ContentScorer().score(ContentSignals(heading_count=1))

        assert breakdown.to_dict()["total"] == 3
        assert breakdown.to_dict()["factors"]["headings"] == 3


class TestBounds:
    @given(
        word_count=st.integers(min_value=0, max_value=100_000),
        heading_count=st.integers(min_value=0, max_value=1000),
        image_count=st.integers(min_value=0, max_value=1000),
        paragraph_count=st.integers(min_value=0, max_value=1000),
        read_time_minutes=st.floats(min_value=0, max_value=1000, allow_nan=False),
        term_count=st.integers(min_value=0, max_value=15),
        meta_description_length=st.integers(min_value=0, max_value=500),
        title_length=st.integers(min_value=0, max_value=200),
    )
    @settings(max_examples=200, deadline=None)
    def test_factor_and_total_bounds(self, **counts):
        breakdown = ContentScorer().score(ContentSignals(**counts))

        for name, value in breakdown.factors.items():
            assert 0 <= value <= FACTOR_MAXIMA[name]
        assert 0 <= breakdown.total <= 100
        assert breakdown.total == round_half_up(sum(breakdown.factors.values()))
