"""
Tests for AnalysisPipeline orchestration.
"""

import asyncio
import threading
from dataclasses import replace

import pytest
from prometheus_client import REGISTRY
from seolens.cms import FetchError
from seolens.config import Config, MonitoringConfig, OracleConfig
from seolens.pipeline import AnalysisPipeline
from seolens.quality.content_scorer import round_half_up

POST_URL = "https://api.buttercms.com/v2/posts/seo-basics/"


def sample(name, labels=None):
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestRunMetrics:
    def test_idempotent(self, post_document, fake_oracle, make_source, test_config):
        pipeline = AnalysisPipeline(make_source(), fake_oracle, test_config)

        assert pipeline.run_metrics(post_document) == pipeline.run_metrics(post_document)

    def test_empty_body(self, empty_document, fake_oracle, make_source, test_config):
        extraction, lexical, score = AnalysisPipeline(make_source(), fake_oracle, test_config).run_metrics(
            empty_document
        )

        assert (extraction.heading_count, extraction.paragraph_count, extraction.image_count) == (0, 0, 0)
        assert lexical.word_count == 0
        assert lexical.terms == ()
        assert lexical.keyword_density == {}
        assert lexical.read_time.text == "1 min read"
        # Only the title and meta description contribute.
        assert score.total == 20
        assert score.factors["title_length"] == 10
        assert score.factors["meta_description"] == 10


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_analyze(self, post_document, fake_oracle, make_source, test_config):
        pipeline = AnalysisPipeline(make_source(), fake_oracle, test_config)
        result = await pipeline.analyze(post_document)

        assert result.document is post_document
        assert result.extraction.heading_count == 2
        assert result.headline_score.score == 90
        assert result.narrative.startswith("## Suggestions")
        assert result.elapsed_seconds >= 0
        assert len(fake_oracle.calls) == 2

        narrative_call = next(call for call in fake_oracle.calls if not call["json_output"])
        assert "Search engines reward helpful content" in narrative_call["prompt"]
        assert narrative_call["temperature"] == test_config.oracle.narrative_temperature

    @pytest.mark.asyncio
    async def test_to_dict(self, post_document, fake_oracle, make_source, test_config):
        data = (await AnalysisPipeline(make_source(), fake_oracle, test_config).analyze(post_document)).to_dict()

        assert data["url"] == post_document.url
        assert data["body_kind"] == "html"
        assert data["headings"] == ["Why SEO matters", "Getting started"]
        assert data["headings_count"] == 2
        assert data["paragraphs_count"] == 3
        assert data["images_count"] == 1
        assert data["terms"][0] == {"term": "seo", "count": 2}
        assert list(data["keyword_density"]) == [entry["term"] for entry in data["terms"][:5]]
        assert data["read_time"] == "1 min read"
        assert data["headline_score"] == 90
        assert data["headline_word_counts"]["power"] == 1
        assert data["headline_score_degraded"] is False
        assert data["tags"] == [{"name": "SEO", "slug": "seo"}]
        assert data["content_score"] == round_half_up(sum(data["score_breakdown"].values()))

    @pytest.mark.asyncio
    async def test_failing_oracle(self, post_document, fake_oracle, failing_oracle, make_source, test_config):
        healthy = await AnalysisPipeline(make_source(), fake_oracle, test_config).analyze(post_document)

        before = sample("seolens_oracle_failures_total", {"purpose": "headline"})
        before_narrative = sample("seolens_oracle_failures_total", {"purpose": "narrative"})
        degraded = await AnalysisPipeline(make_source(), failing_oracle, test_config).analyze(post_document)

        assert degraded.headline_score.score == 0
        assert degraded.headline_score.degraded is True
        assert degraded.narrative is None
        assert degraded.content_score == healthy.content_score
        assert degraded.lexical == healthy.lexical
        assert sample("seolens_oracle_failures_total", {"purpose": "headline"}) == before + 1
        assert sample("seolens_oracle_failures_total", {"purpose": "narrative"}) == before_narrative + 1

    @pytest.mark.asyncio
    async def test_narrative_disabled(self, post_document, fake_oracle, make_source):
        config = Config(oracle=OracleConfig(narrative_enabled=False))
        result = await AnalysisPipeline(make_source(), fake_oracle, config).analyze(post_document)

        assert result.narrative is None
        assert [call["json_output"] for call in fake_oracle.calls] == [True]

    @pytest.mark.asyncio
    async def test_element_body(self, page_document, fake_oracle, make_source, test_config):
        result = await AnalysisPipeline(make_source(), fake_oracle, test_config).analyze(page_document)

        assert result.extraction.heading_count == 1
        assert result.extraction.image_count == 1
        assert result.to_dict()["body_kind"] == "elements"

    @pytest.mark.asyncio
    async def test_metrics_disabled(self, post_document, failing_oracle, make_source):
        config = Config(monitoring=MonitoringConfig(metrics_enabled=False))
        before = sample("seolens_analyses_total", {"status": "success"})

        await AnalysisPipeline(make_source(), failing_oracle, config).analyze(post_document)

        assert sample("seolens_analyses_total", {"status": "success"}) == before

    @pytest.mark.asyncio
    async def test_extraction_failure_cancels_headline(self, post_document, fake_oracle, make_source, test_config):
        headline_started = threading.Event()
        cancelled = []

        class BrokenExtractor:
            def extract(self, body):
                headline_started.wait(5)
                raise RuntimeError("extraction failed")

        class SlowHeadlineScorer:
            async def score(self, headline):
                headline_started.set()
                try:
                    await asyncio.sleep(30)
                except asyncio.CancelledError:
                    cancelled.append(headline)
                    raise

        pipeline = AnalysisPipeline(
            make_source(),
            fake_oracle,
            test_config,
            extractor=BrokenExtractor(),
            headline_scorer=SlowHeadlineScorer(),
        )

        with pytest.raises(RuntimeError, match="extraction failed"):
            await pipeline.analyze(post_document)

        assert cancelled == [post_document.title]
        assert fake_oracle.calls == []


class TestAnalyzeUrl:
    @pytest.mark.asyncio
    async def test_fetches_then_analyzes(self, post_document, fake_oracle, make_source, test_config):
        source = make_source({POST_URL: post_document})
        result = await AnalysisPipeline(source, fake_oracle, test_config).analyze_url(POST_URL)

        assert source.requested == [POST_URL]
        assert result.document == post_document

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self, fake_oracle, make_source, test_config):
        before = sample("seolens_cms_fetch_failures_total", {"reason": "http_status"})

        with pytest.raises(FetchError):
            await AnalysisPipeline(make_source(), fake_oracle, test_config).analyze_url(POST_URL)

        assert fake_oracle.calls == []
        assert sample("seolens_cms_fetch_failures_total", {"reason": "http_status"}) == before + 1


class TestScoreHeadline:
    @pytest.mark.asyncio
    async def test_score_headline(self, fake_oracle, make_source, test_config):
        result = await AnalysisPipeline(make_source(), fake_oracle, test_config).score_headline("How to write")

        # 5 category words + short bonus + "how" opening
        assert result.score == 70

    @pytest.mark.asyncio
    async def test_title_change_only_moves_headline_score(self, post_document, fake_oracle, make_source, test_config):
        pipeline = AnalysisPipeline(make_source(), fake_oracle, test_config)
        first = await pipeline.analyze(post_document)
        second = await pipeline.analyze(replace(post_document, title="Short"))

        assert first.content_score == second.content_score
        assert second.headline_score.score == 60
