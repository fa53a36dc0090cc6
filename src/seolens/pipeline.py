"""
Pipeline orchestration for seolens.

Runs the deterministic stages (extract, analyze, score) in a worker thread
while the oracle-backed headline score and narrative run on the event loop,
then merges everything into one AnalysisResult.
"""

from __future__ import annotations

import asyncio
import time
from typing import Optional, Tuple

import structlog

from seolens.cms.client import FetchError
from seolens.config.config import Config
from seolens.extractor import MarkupExtractor
from seolens.observability import increment, observe
from seolens.oracle.prompts import narrative_prompt
from seolens.protocols import (
    AnalysisResult,
    Document,
    DocumentSource,
    ExtractionResult,
    HeadlineScore,
    LexicalStats,
    Oracle,
    ScoreBreakdown,
)
from seolens.quality import ContentScorer, HeadlineScorer, LexicalAnalyzer

logger = structlog.get_logger(__name__)

MetricsReport = Tuple[ExtractionResult, LexicalStats, ScoreBreakdown]


class AnalysisPipeline:
    """
    Analyzes CMS documents.

    Components default to instances built from ``config`` and can be
    replaced individually.
    """

    def __init__(
        self,
        source: DocumentSource,
        oracle: Oracle,
        config: Optional[Config] = None,
        *,
        extractor: Optional[MarkupExtractor] = None,
        analyzer: Optional[LexicalAnalyzer] = None,
        scorer: Optional[ContentScorer] = None,
        headline_scorer: Optional[HeadlineScorer] = None,
    ) -> None:
        self.config = config or Config()
        self.source = source
        self.oracle = oracle
        self.extractor = extractor or MarkupExtractor()
        self.analyzer = analyzer or LexicalAnalyzer(self.config.analyzer)
        self.scorer = scorer or ContentScorer(self.config.scoring)
        self.headline_scorer = headline_scorer or HeadlineScorer(oracle, self.config.oracle)
        self.logger = logger.bind(component="AnalysisPipeline")

    @property
    def metrics_enabled(self) -> bool:
        return self.config.monitoring.metrics_enabled

    def run_metrics(self, document: Document) -> MetricsReport:
        """Deterministic stages only. Same document in, same report out."""
        extraction = self.extractor.extract(document.body)
        lexical = self.analyzer.analyze(extraction.text)
        content_score = self.scorer.score_document(document, extraction, lexical)
        return extraction, lexical, content_score

    async def analyze(self, document: Document) -> AnalysisResult:
        start = time.perf_counter()
        self.logger.info("Analysis started", url=document.url, title=document.title)

        metrics_task = asyncio.create_task(asyncio.to_thread(self.run_metrics, document))
        tasks = [
            metrics_task,
            asyncio.create_task(self.headline_scorer.score(document.title)),
            asyncio.create_task(self._narrate(document, metrics_task)),
        ]
        try:
            report, headline, narrative = await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            if self.metrics_enabled:
                increment("analyses", labels={"status": "error"})
            raise

        extraction, lexical, content_score = report
        elapsed = time.perf_counter() - start
        result = AnalysisResult(
            document=document,
            extraction=extraction,
            lexical=lexical,
            content_score=content_score,
            headline_score=headline,
            narrative=narrative,
            elapsed_seconds=elapsed,
        )

        if self.metrics_enabled:
            self._record(result)
        self.logger.info(
            "Analysis complete",
            url=document.url,
            content_score=content_score.total,
            headline_score=headline.score,
            headline_degraded=headline.degraded,
            narrative=narrative is not None,
            elapsed_seconds=round(elapsed, 3),
        )
        return result

    async def analyze_url(self, url: str) -> AnalysisResult:
        """
        Fetch a document and analyze it.

        Raises:
            FetchError: if the document cannot be retrieved or parsed.
        """
        try:
            document = await self.source.fetch(url)
        except FetchError as e:
            self.logger.warning("Document fetch failed", url=url, status=e.status, error=str(e))
            if self.metrics_enabled:
                increment("cms_fetch_failures", labels={"reason": "http_status" if e.status else "request"})
                increment("analyses", labels={"status": "fetch_error"})
            raise
        return await self.analyze(document)

    async def score_headline(self, headline: str) -> HeadlineScore:
        result = await self.headline_scorer.score(headline)
        if self.metrics_enabled:
            self._record_headline(result)
        return result

    async def _narrate(self, document: Document, metrics_task: "asyncio.Task[MetricsReport]") -> Optional[str]:
        oracle_config = self.config.oracle
        if not oracle_config.narrative_enabled:
            return None

        extraction, _, _ = await metrics_task
        prompt = narrative_prompt(document, extraction.text, oracle_config.max_content_chars)
        try:
            return await self.oracle.complete(prompt, temperature=oracle_config.narrative_temperature)
        except Exception as e:
            self.logger.warning("Narrative unavailable", url=document.url, error=str(e), error_type=type(e).__name__)
            if self.metrics_enabled:
                increment("oracle_failures", labels={"purpose": "narrative"})
            return None

    def _record(self, result: AnalysisResult) -> None:
        increment("analyses", labels={"status": "success"})
        observe("analysis_duration_seconds", result.elapsed_seconds)
        observe("content_score", result.content_score.total)
        self._record_headline(result.headline_score)

    def _record_headline(self, headline: HeadlineScore) -> None:
        observe("headline_score", headline.score)
        if headline.degraded and headline.headline.strip():
            increment("oracle_failures", labels={"purpose": "headline"})
