"""
Logging for the exporter process, rendered by structlog.

The exporter runs inside uvicorn, which installs its own
handlers on ``uvicorn``, ``uvicorn.error`` and
``uvicorn.access``. ``setup_logging`` strips those so server
lines go through the same renderer as webhook lines (console
output locally, JSON lines when ``LOG_JSON`` is set).

Prometheus scrapes ``/metrics`` every few seconds, so the
access log is held at WARNING unless the app runs at DEBUG;
rejected reports are still visible through the WARNING the
webhook route logs itself.

Called by the CLI before uvicorn starts and again by the app
lifespan, so ``uvicorn --factory`` runs get the same setup.
"""

from __future__ import annotations

import logging
import sys

import structlog


def setup_logging(
    level: str = "INFO",
    *,
    json_format: bool = False,
) -> None:
    """Configure structlog + stdlib root logger.

    structlog wraps stdlib ``logging`` so every
    ``logging.getLogger(__name__)`` in the package, and
    uvicorn's own loggers, share one output format.

    Args:
        level: Logging level name (e.g. ``"INFO"``,
            ``"DEBUG"``).
        json_format: If ``True``, emit structured JSON lines.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    # ── structlog: events from structlog-native loggers ─────
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # ── stdlib root: package, uvicorn and library records ───
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    _route_server_loggers(log_level)


def _route_server_loggers(app_level: int) -> None:
    """Route uvicorn loggers through the root handler.

    One access line per scrape would drown the webhook log,
    hence the WARNING floor below DEBUG.

    Args:
        app_level: The application's configured log level.
    """
    for name in ("uvicorn", "uvicorn.error"):
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True

    access = logging.getLogger("uvicorn.access")
    access.handlers.clear()
    access.propagate = True
    access.setLevel(
        app_level if app_level <= logging.DEBUG else logging.WARNING,
    )
