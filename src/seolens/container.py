"""
Dependency injection container for seolens components.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, AsyncIterator, Callable, Dict, Generic, Optional, TypeVar

import structlog

from seolens.config.config import Config, load_config

if TYPE_CHECKING:
    from seolens.cms import ButterCMSClient
    from seolens.oracle import OpenAIOracle
    from seolens.pipeline import AnalysisPipeline

T = TypeVar("T")


class LazyInstance(Generic[T]):
    """Lazy-loaded instance with lifecycle management."""

    def __init__(self, factory: Callable[..., T], *args: Any, **kwargs: Any) -> None:
        self._factory = factory
        self._args = args
        self._kwargs = kwargs
        self._instance: Optional[T] = None

    @property
    def created(self) -> bool:
        return self._instance is not None

    def get(self) -> T:
        """Get or create the instance."""
        if self._instance is None:
            self._instance = self._factory(*self._args, **self._kwargs)
        return self._instance

    async def cleanup(self) -> None:
        """Close the instance if it was created."""
        close = getattr(self._instance, "close", None)
        if close is not None and callable(close):
            await close()
        self._instance = None


class DependencyContainer:
    """
    Builds and owns the CMS client, the oracle and the analysis pipeline.

    Configuration is loaded once: an explicit ``config`` wins, then
    ``config_path``, then the shared process-wide settings.
    """

    def __init__(self, config_path: Optional[Path] = None, config: Optional[Config] = None) -> None:
        self.config_path = config_path
        self.config = config or load_config(config_path)
        self.logger = structlog.get_logger(self.__class__.__name__)
        self._lock = asyncio.Lock()
        self._instances: Dict[str, LazyInstance[Any]] = self._create_instances()

    def _create_instances(self) -> Dict[str, LazyInstance[Any]]:
        # Imported here to keep `seolens.config` importable without the HTTP stack.
        from seolens.cms import ButterCMSClient
        from seolens.oracle import OpenAIOracle
        from seolens.pipeline import AnalysisPipeline

        return {
            "cms": LazyInstance(ButterCMSClient, self.config.cms),
            "oracle": LazyInstance(OpenAIOracle, self.config.oracle),
            "pipeline": LazyInstance(
                lambda: AnalysisPipeline(self.get_cms(), self.get_oracle(), self.config)
            ),
        }

    def get_cms(self) -> ButterCMSClient:
        return self._instances["cms"].get()  # type: ignore[no-any-return]

    def get_oracle(self) -> OpenAIOracle:
        return self._instances["oracle"].get()  # type: ignore[no-any-return]

    def get_pipeline(self) -> AnalysisPipeline:
        return self._instances["pipeline"].get()  # type: ignore[no-any-return]

    @asynccontextmanager
    async def lifecycle(self) -> AsyncIterator[DependencyContainer]:
        """Context manager that shuts the container down on exit."""
        try:
            yield self
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Close every HTTP client the container created."""
        async with self._lock:
            for name, instance in self._instances.items():
                if not instance.created:
                    continue
                try:
                    await instance.cleanup()
                except Exception as e:
                    self.logger.error("Error cleaning up instance", instance=name, error=str(e))
        self.logger.debug("Dependency container shut down")

    def get_health_status(self) -> Dict[str, Any]:
        return {
            "config_path": str(self.config_path) if self.config_path else None,
            "model": self.config.oracle.model,
            "narrative_enabled": self.config.oracle.narrative_enabled,
            "metrics_enabled": self.config.monitoring.metrics_enabled,
            "instances_created": sorted(name for name, inst in self._instances.items() if inst.created),
        }
