"""
In-process gauge registry.

Wraps a dedicated ``prometheus_client.CollectorRegistry`` so
that each application instance (and each test) owns its own
set of gauges instead of sharing the library's global default
registry. Both the webhook route (writes) and the ``/metrics``
route (reads) receive the same ``MetricsRegistry`` through
``app.state``.

Every per-series value lives behind ``prometheus_client``'s
own value lock, so a scrape never observes a torn write.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Gauge,
    generate_latest,
)

from duplicati_exporter.core.errors import (
    DuplicateMetricError,
    MetricsError,
    UnknownMetricError,
)

# ── Gauge catalog ───────────────────────────────────────────────

BACKUP_LABELS: tuple[str, ...] = ("backup_name", "machine_name")
BACKUP_STATE_LABELS: tuple[str, ...] = (*BACKUP_LABELS, "status")

BACKUP_STATUS = "duplicati_backup_status"
BACKUP_STATUS_STATE = "duplicati_backup_status_state"
BACKUP_DURATION = "duplicati_backup_duration_seconds"
BACKUP_FILES_INCLUDED = "duplicati_backup_files_included"
BACKUP_SIZE = "duplicati_backup_size_bytes"

BACKUP_GAUGES: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    (
        BACKUP_STATUS,
        "Status of the last Duplicati backup (1 = success, 0 = failure)",
        BACKUP_LABELS,
    ),
    (
        BACKUP_STATUS_STATE,
        "Status of the last Duplicati backup as a string "
        "(1 = success, 2 = warning, 3 = error)",
        BACKUP_STATE_LABELS,
    ),
    (
        BACKUP_DURATION,
        "Duration of the last Duplicati backup in seconds",
        BACKUP_LABELS,
    ),
    (
        BACKUP_FILES_INCLUDED,
        "Number of files included in the last Duplicati backup",
        BACKUP_LABELS,
    ),
    (
        BACKUP_SIZE,
        "Size of the last Duplicati backup in bytes",
        BACKUP_LABELS,
    ),
)


class MetricsRegistry:
    """Named gauges addressed by label sets, last write wins."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._registry = CollectorRegistry(auto_describe=True)
        self._gauges: dict[str, Gauge] = {}
        self._label_names: dict[str, tuple[str, ...]] = {}

    @property
    def names(self) -> list[str]:
        """Defined gauge names, in definition order."""
        with self._lock:
            return list(self._gauges)

    @property
    def content_type(self) -> str:
        """Content type of the ``render()`` output."""
        return CONTENT_TYPE_LATEST

    def define(
        self,
        name: str,
        help_text: str,
        label_names: Sequence[str],
    ) -> None:
        """Register a gauge.

        Args:
            name: Metric name as exposed to Prometheus.
            help_text: ``# HELP`` line content.
            label_names: Label names every sample must carry.

        Raises:
            DuplicateMetricError: If *name* is already defined.
        """
        with self._lock:
            if name in self._gauges:
                raise DuplicateMetricError(
                    f"Gauge '{name}' is already defined",
                )
            self._label_names[name] = tuple(label_names)
            self._gauges[name] = Gauge(
                name,
                help_text,
                labelnames=self._label_names[name],
                registry=self._registry,
            )

    def set(
        self,
        name: str,
        label_values: Mapping[str, str],
        value: float,
    ) -> None:
        """Store *value* for one label combination of gauge *name*.

        Raises:
            UnknownMetricError: If *name* was never defined.
            MetricsError: If *label_values* does not name exactly
                the gauge's labels.
        """
        self._child(name, label_values).set(value)

    def get(
        self,
        name: str,
        label_values: Mapping[str, str],
    ) -> float | None:
        """Return the current value of one series, or ``None``."""
        self._gauge(name)
        return self._registry.get_sample_value(
            name,
            {key: str(val) for key, val in label_values.items()},
        )

    def render(self) -> bytes:
        """Render every gauge in the Prometheus text format.

        Gauges without samples still emit their ``# HELP`` and
        ``# TYPE`` lines.
        """
        return generate_latest(self._registry)

    def _gauge(self, name: str) -> Gauge:
        with self._lock:
            gauge = self._gauges.get(name)
        if gauge is None:
            raise UnknownMetricError(f"Gauge '{name}' is not defined")
        return gauge

    def _child(self, name: str, label_values: Mapping[str, str]) -> Gauge:
        gauge = self._gauge(name)
        expected = set(self._label_names[name])
        if set(label_values) != expected:
            raise MetricsError(
                f"Gauge '{name}' expects labels {sorted(expected)}, "
                f"got {sorted(label_values)}",
            )
        return gauge.labels(
            **{key: str(val) for key, val in label_values.items()},
        )


def build_backup_registry() -> MetricsRegistry:
    """Return a fresh registry with the Duplicati gauges defined."""
    registry = MetricsRegistry()
    for name, help_text, label_names in BACKUP_GAUGES:
        registry.define(name, help_text, label_names)
    return registry
