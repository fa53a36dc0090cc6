"""
Defines Prometheus metrics for the analysis pipeline.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Module re-imports during the test suite must not register a collector twice.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race, fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]

_SCORE_BUCKETS = (0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100)


def _create_metrics() -> Dict[str, Any]:
    return {
        "analyses": Counter(
            "seolens_analyses_total",
            "Total number of document analyses",
            ["status"],
        ),
        "analysis_duration_seconds": Histogram(
            "seolens_analysis_duration_seconds",
            "Time taken to analyze one document",
        ),
        "content_score": Histogram(
            "seolens_content_score",
            "Distribution of content scores",
            buckets=_SCORE_BUCKETS,
        ),
        "headline_score": Histogram(
            "seolens_headline_score",
            "Distribution of headline scores",
            buckets=_SCORE_BUCKETS,
        ),
        "oracle_failures": Counter(
            "seolens_oracle_failures_total",
            "Oracle requests that failed and were degraded",
            ["purpose"],
        ),
        "cms_fetch_failures": Counter(
            "seolens_cms_fetch_failures_total",
            "CMS fetches that failed",
            ["reason"],
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()
