"""Response bodies returned by the HTTP routes."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class IngestResponse(BaseModel):
    """Webhook acknowledgement.

    ``message`` is only set on errors; serialise with
    ``exclude_none=True`` so a success is exactly
    ``{"status": "success"}``.
    """

    status: Literal["success", "error"]
    message: str | None = None


class HealthResponse(BaseModel):
    status: str
    version: str
