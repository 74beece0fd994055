"""
FastAPI application factory.

``create_app`` wires one ``MetricsRegistry`` into both the
webhook and the ``/metrics`` route via ``app.state``. Without
the CLI, serve it with
``uvicorn --factory duplicati_exporter.main:create_app``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from duplicati_exporter.api.routes import health, webhook
from duplicati_exporter.core.config import Settings, get_settings, get_version
from duplicati_exporter.core.logging import setup_logging
from duplicati_exporter.core.metrics import MetricsRegistry, build_backup_registry
from duplicati_exporter.services.ingestor import ReportIngestor

logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup / shutdown hooks."""
    settings: Settings = app.state.settings
    setup_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)
    logger.info(
        "%s listening on %s:%d",
        settings.APP_NAME,
        settings.HOST,
        settings.PORT,
    )
    yield
    logger.info("Shutting down %s", settings.APP_NAME)


# ── App factory ─────────────────────────────────────────────────────────────
def create_app(
    *,
    settings: Settings | None = None,
    registry: MetricsRegistry | None = None,
) -> FastAPI:
    """Build the exporter application.

    Args:
        settings: Runtime settings; defaults to ``get_settings()``.
        registry: Gauge registry to serve; defaults to a fresh
            one from ``build_backup_registry()``.
    """
    settings = settings or get_settings()
    registry = registry if registry is not None else build_backup_registry()

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Receives Duplicati backup reports over a webhook and "
            "exposes them as Prometheus gauges."
        ),
        version=get_version(),
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.ingestor = ReportIngestor(registry)

    # ── Register routers ───────────────────────────────────────────────────
    app.include_router(webhook.router)
    app.include_router(health.router)
    return app

