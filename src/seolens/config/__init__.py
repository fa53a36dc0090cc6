"""Configuration models and the process-wide lazy settings proxy."""

from __future__ import annotations

from .config import (
    AnalyzerConfig,
    CMSConfig,
    Config,
    LazyConfig,
    MonitoringConfig,
    OracleConfig,
    ScoringConfig,
    WebUIConfig,
    find_config_file,
    load_config,
    settings,
)

__all__ = [
    "AnalyzerConfig",
    "CMSConfig",
    "Config",
    "LazyConfig",
    "MonitoringConfig",
    "OracleConfig",
    "ScoringConfig",
    "WebUIConfig",
    "find_config_file",
    "load_config",
    "settings",
]
