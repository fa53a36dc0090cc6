"""
seolens - SEO analysis for ButterCMS blog content.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .container import DependencyContainer
from .pipeline import AnalysisPipeline

__all__ = ["__version__", "Config", "DependencyContainer", "AnalysisPipeline"]
