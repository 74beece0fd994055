"""Health-check and metrics export routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from duplicati_exporter.api.dependencies import get_registry
from duplicati_exporter.core.config import get_version
from duplicati_exporter.core.metrics import MetricsRegistry
from duplicati_exporter.schemas import HealthResponse, IngestResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

_version = get_version()


# ── Routes ──────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Liveness probe; returns OK if the web process runs."""
    return HealthResponse(status="ok", version=_version)


@router.get(
    "/metrics",
    response_class=PlainTextResponse,
    tags=["observability"],
)
def prometheus_metrics(
    registry: MetricsRegistry = Depends(get_registry),
) -> Response:
    """Expose the backup gauges in the Prometheus text format.

    Rendering reads the registry without mutating it. Any
    failure is reported as a ``500`` JSON body rather than a
    half-written exposition.
    """
    try:
        content = registry.render()
    except Exception as exc:
        logger.exception("Error collecting metrics")
        body = IngestResponse(
            status="error",
            message=str(exc) or "Unknown error",
        )
        return JSONResponse(status_code=500, content=body.model_dump())

    return Response(content=content, media_type=registry.content_type)
