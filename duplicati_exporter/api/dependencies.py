"""FastAPI dependencies resolving per-app state.

``create_app`` stores the registry and ingestor on
``app.state``; routes pull them from there so tests can build
apps around fresh registries.
"""

from __future__ import annotations

from fastapi import Request

from duplicati_exporter.core.metrics import MetricsRegistry
from duplicati_exporter.services.ingestor import ReportIngestor


def get_registry(request: Request) -> MetricsRegistry:
    return request.app.state.registry


def get_ingestor(request: Request) -> ReportIngestor:
    return request.app.state.ingestor
