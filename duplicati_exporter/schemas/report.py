"""Inbound Duplicati report shape.

Only the fields the exporter turns into gauges are modelled.
Everything else Duplicati sends (``LogLines``, the remaining
``Data`` counters, extra ``Extra`` keys) is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ReportExtra(BaseModel):
    """The ``Extra`` block: job identity."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    backup_name: str = Field(..., alias="backup-name")
    machine_name: str = Field(..., alias="machine-name")


class ReportData(BaseModel):
    """The ``Data`` block: outcome and counters of the run."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    parsed_result: str = Field(..., alias="ParsedResult")
    duration: str = Field(
        ...,
        alias="Duration",
        description="``H:MM:SS.fffffff``, optionally ``d.HH:MM:SS``.",
    )
    examined_files: int = Field(..., alias="ExaminedFiles", ge=0)
    size_of_added_files: int = Field(..., alias="SizeOfAddedFiles", ge=0)


class BackupReport(BaseModel):
    """A Duplicati ``--send-http-result-output-format=Json`` body."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    extra: ReportExtra = Field(..., alias="Extra")
    data: ReportData = Field(..., alias="Data")
