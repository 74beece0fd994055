"""
Exception hierarchy shared by the registry, the ingestor and
the HTTP layer.

Route handlers map ``ReportError`` to a ``400`` response and
everything else to ``500``.
"""

from __future__ import annotations


class ExporterError(Exception):
    """Base class for all exporter errors."""


class MetricsError(ExporterError):
    """A metrics registry operation was used incorrectly."""


class DuplicateMetricError(MetricsError):
    """A gauge with the same name is already defined."""


class UnknownMetricError(MetricsError):
    """A write or read referenced a gauge that was never defined."""


class ReportError(ExporterError):
    """The inbound backup report could not be ingested.

    The message is returned verbatim to the webhook caller.
    """
