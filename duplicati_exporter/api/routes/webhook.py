"""Webhook route receiving Duplicati backup reports."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from duplicati_exporter.api.dependencies import get_ingestor
from duplicati_exporter.core.errors import ReportError
from duplicati_exporter.schemas import IngestResponse
from duplicati_exporter.services.ingestor import ReportIngestor

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])


def _error(status_code: int, message: str) -> JSONResponse:
    body = IngestResponse(status="error", message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.post(
    "/webhook",
    response_model=IngestResponse,
    response_model_exclude_none=True,
)
async def receive_report(
    request: Request,
    ingestor: ReportIngestor = Depends(get_ingestor),
) -> JSONResponse:
    """Ingest one Duplicati JSON report.

    Point Duplicati at this endpoint with
    ``--send-http-url=http://<host>:<port>/webhook`` and
    ``--send-http-result-output-format=Json``.

    The body is read manually instead of through a pydantic
    parameter so that malformed reports get the
    ``{"status": "error", "message": ...}`` shape rather than
    FastAPI's default ``422`` payload.
    """
    try:
        payload = await request.json()
    except ValueError as exc:
        logger.warning("Rejected webhook body: not valid JSON (%s)", exc)
        return _error(400, f"Request body is not valid JSON: {exc}")

    try:
        result = ingestor.ingest(payload)
    except ReportError as exc:
        logger.warning("Rejected backup report: %s", exc)
        return _error(400, str(exc))
    except Exception as exc:
        logger.exception("Error processing webhook")
        return _error(500, str(exc) or "Unknown error")

    logger.info(
        "Recorded backup '%s' on '%s': %s in %.1fs",
        result.backup_name,
        result.machine_name,
        result.status,
        result.duration_seconds,
    )
    return JSONResponse(
        content=IngestResponse(status="success").model_dump(exclude_none=True),
    )
