"""
Pydantic models for the inbound report and API responses.

Every public model is re-exported from this ``__init__`` so
``from duplicati_exporter.schemas import BackupReport`` works.
"""

from duplicati_exporter.schemas.report import (
    BackupReport,
    ReportData,
    ReportExtra,
)
from duplicati_exporter.schemas.responses import (
    HealthResponse,
    IngestResponse,
)

__all__ = [
    "BackupReport",
    "HealthResponse",
    "IngestResponse",
    "ReportData",
    "ReportExtra",
]
