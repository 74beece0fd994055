"""
Report ingestion: maps one Duplicati report onto the gauges.

The ingest is all-or-nothing: the report is validated and
every derived value computed before the first registry write,
so a malformed report never leaves a half-updated set of
series for its backup/machine pair.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import ValidationError

from duplicati_exporter.core.errors import ReportError
from duplicati_exporter.core.metrics import (
    BACKUP_DURATION,
    BACKUP_FILES_INCLUDED,
    BACKUP_SIZE,
    BACKUP_STATUS,
    BACKUP_STATUS_STATE,
    MetricsRegistry,
)
from duplicati_exporter.schemas import BackupReport

logger = logging.getLogger(__name__)


class BackupStatus(str, Enum):
    """Duplicati ``ParsedResult`` values the exporter knows about."""

    SUCCESS = "Success"
    WARNING = "Warning"
    ERROR = "Error"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: str) -> BackupStatus:
        """Map a raw ``ParsedResult`` string, ``OTHER`` if unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


# Unknown results count as errors, never as successes.
_STATUS_CODES: dict[BackupStatus, int] = {
    BackupStatus.SUCCESS: 1,
    BackupStatus.WARNING: 2,
    BackupStatus.ERROR: 3,
    BackupStatus.OTHER: 3,
}


def status_code(status: str | BackupStatus) -> int:
    """Return the 1/2/3 code for *status* (3 for anything unknown)."""
    if not isinstance(status, BackupStatus):
        status = BackupStatus.parse(status)
    return _STATUS_CODES[status]


def binary_status(status: str | BackupStatus) -> int:
    """Return ``1`` for ``Success`` and ``0`` for everything else.

    ``Warning`` maps to ``0`` here even though its status code
    is ``2``; the two gauges intentionally disagree on it.
    """
    if not isinstance(status, BackupStatus):
        status = BackupStatus.parse(status)
    return 1 if status is BackupStatus.SUCCESS else 0


def parse_duration(text: str) -> float:
    """Convert a Duplicati duration string to seconds.

    Accepts ``H:MM:SS`` with an optional fractional part on
    the seconds (``00:05:30.0000000``). Runs of a day or more
    are serialised by .NET as ``d.HH:MM:SS``; the day prefix on
    the hours field is honoured.

    Args:
        text: The ``Data.Duration`` value.

    Returns:
        The duration in seconds.

    Raises:
        ReportError: If *text* does not split into exactly
            three numeric parts.
    """
    parts = text.split(":")
    if len(parts) != 3:
        raise ReportError(
            f"Unparseable duration '{text}': expected H:MM:SS",
        )

    hours_part, minutes_part, seconds_part = (p.strip() for p in parts)
    days = 0
    try:
        if "." in hours_part:
            days_part, hours_part = hours_part.split(".", 1)
            days = int(days_part)
        hours = int(hours_part)
        minutes = int(minutes_part)
        seconds = float(seconds_part)
    except ValueError as exc:
        raise ReportError(f"Unparseable duration '{text}': {exc}") from exc

    if min(days, hours, minutes) < 0 or not (
        math.isfinite(seconds) and seconds >= 0
    ):
        raise ReportError(
            f"Unparseable duration '{text}': negative or non-finite part",
        )

    try:
        total = float((days * 24 + hours) * 3600 + minutes * 60) + seconds
    except OverflowError as exc:
        raise ReportError(f"Unparseable duration '{text}': too large") from exc
    if not math.isfinite(total):
        raise ReportError(f"Unparseable duration '{text}': too large")
    return total


def _as_gauge_value(value: int, field: str) -> float:
    """Convert a report counter to the float a gauge stores.

    Raises:
        ReportError: If *value* does not fit a finite float.
    """
    try:
        converted = float(value)
    except OverflowError as exc:
        raise ReportError(f"{field} is too large for a gauge") from exc
    if not math.isfinite(converted):
        raise ReportError(f"{field} is too large for a gauge")
    return converted


@dataclass(frozen=True)
class IngestResult:
    """Values written for one successfully ingested report."""

    backup_name: str
    machine_name: str
    status: str
    status_code: int
    duration_seconds: float
    files_included: float
    size_bytes: float


def _describe_validation_error(exc: ValidationError) -> str:
    """Flatten pydantic errors into ``Data.Duration: Field required``."""
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"]) or "report"
        messages.append(f"{location}: {err['msg']}")
    return "Invalid backup report: " + "; ".join(messages)


class ReportIngestor:
    """Writes the five backup gauges for each inbound report."""

    def __init__(self, registry: MetricsRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> MetricsRegistry:
        return self._registry

    def ingest(self, payload: BackupReport | dict[str, Any]) -> IngestResult:
        """Validate *payload* and update the registry.

        Args:
            payload: A decoded JSON body or an already-built
                ``BackupReport``.

        Returns:
            The values that were written.

        Raises:
            ReportError: If a required field is missing or
                mistyped, or the duration cannot be parsed.
                Nothing is written in that case.
        """
        result = self.evaluate(payload)

        labels = {
            "backup_name": result.backup_name,
            "machine_name": result.machine_name,
        }
        self._registry.set(
            BACKUP_STATUS,
            labels,
            binary_status(result.status),
        )
        self._registry.set(
            BACKUP_STATUS_STATE,
            {**labels, "status": result.status},
            result.status_code,
        )
        self._registry.set(BACKUP_DURATION, labels, result.duration_seconds)
        self._registry.set(BACKUP_FILES_INCLUDED, labels, result.files_included)
        self._registry.set(BACKUP_SIZE, labels, result.size_bytes)

        logger.debug(
            "Updated gauges for %s/%s",
            result.backup_name,
            result.machine_name,
        )
        return result

    @staticmethod
    def evaluate(payload: BackupReport | dict[str, Any]) -> IngestResult:
        """Derive every gauge value without touching the registry.

        Every value is already a finite float, so the writes in
        ``ingest`` cannot fail on conversion.

        Raises:
            ReportError: On any malformed input.
        """
        if isinstance(payload, BackupReport):
            report = payload
        else:
            try:
                report = BackupReport.model_validate(payload)
            except ValidationError as exc:
                raise ReportError(_describe_validation_error(exc)) from exc

        status = report.data.parsed_result
        return IngestResult(
            backup_name=report.extra.backup_name,
            machine_name=report.extra.machine_name,
            status=status,
            status_code=status_code(status),
            duration_seconds=parse_duration(report.data.duration),
            files_included=_as_gauge_value(
                report.data.examined_files,
                "Data.ExaminedFiles",
            ),
            size_bytes=_as_gauge_value(
                report.data.size_of_added_files,
                "Data.SizeOfAddedFiles",
            ),
        )
