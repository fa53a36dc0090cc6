"""
FastAPI application exposing document analysis over HTTP.
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Callable, Dict, Optional
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST
from pydantic import BaseModel, Field

from seolens import __version__
from seolens.container import DependencyContainer
from seolens.observability import export_prometheus
from seolens.pipeline import AnalysisPipeline

logger = structlog.get_logger(__name__)

ANALYZE_ERROR = "Error fetching or analyzing content"


class AnalyzeRequest(BaseModel):
    url: str = Field(..., min_length=1, description="ButterCMS content API URL of the post or page.")


def create_app(
    container: Optional[DependencyContainer] = None,
    pipeline: Optional[AnalysisPipeline] = None,
) -> FastAPI:
    """
    Build the application.

    Without arguments a DependencyContainer is created on startup. The
    active container is shut down on exit. A supplied ``pipeline`` is used
    as-is.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        active = container or (DependencyContainer() if pipeline is None else None)
        app.state.container = active
        app.state.pipeline = pipeline or active.get_pipeline()  # type: ignore[union-attr]
        app.state.start_time = time.time()
        logger.info("seolens API starting", version=__version__)

        yield

        if active is not None:
            await active.shutdown()
        logger.info("seolens API stopped")

    app = FastAPI(title="seolens", version=__version__, lifespan=lifespan)

    @app.middleware("http")
    async def bind_request_id(request: Request, call_next: Callable) -> Any:
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start_time = time.time()
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        logger.warning("Rejected analysis request", path=request.url.path, details=details)
        return JSONResponse(status_code=500, content={"error": ANALYZE_ERROR, "details": details})

    @app.post("/api/analyze")
    async def analyze(body: AnalyzeRequest, request: Request) -> Any:
        """Fetch the document at ``url`` and return its analysis."""
        active: AnalysisPipeline = request.app.state.pipeline
        try:
            result = await active.analyze_url(body.url)
        except Exception as e:
            logger.error("Analysis request failed", url=body.url, error=str(e), error_type=type(e).__name__)
            return JSONResponse(status_code=500, content={"error": ANALYZE_ERROR, "details": str(e)})
        return result.to_dict()

    @app.get("/health")
    async def health_check(request: Request) -> Dict[str, Any]:
        """Health check endpoint for Kubernetes/Docker."""
        active_container: Optional[DependencyContainer] = request.app.state.container
        return {
            "status": "healthy",
            "timestamp": time.time(),
            "uptime_seconds": time.time() - request.app.state.start_time,
            "version": __version__,
            "components": active_container.get_health_status() if active_container else {},
        }

    @app.get("/metrics")
    async def get_prometheus_metrics(request: Request) -> Response:
        """Endpoint for Prometheus to scrape."""
        if not request.app.state.pipeline.metrics_enabled:
            return JSONResponse(status_code=404, content={"error": "Metrics are disabled"})
        return Response(export_prometheus(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()
