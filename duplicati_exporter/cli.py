"""Command-line entry point: ``duplicati-exporter -p 9010``."""

from __future__ import annotations

import argparse

import uvicorn

from duplicati_exporter.core.config import DEFAULT_HOST, DEFAULT_PORT, Settings
from duplicati_exporter.core.logging import setup_logging
from duplicati_exporter.main import create_app


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="duplicati-exporter",
        description="Prometheus exporter for Duplicati backup reports",
        epilog="Environment variables PORT, HOST and LOG_LEVEL override these options.",
    )
    p.add_argument(
        "-p",
        "--port",
        type=int,
        default=None,
        help=f"server port (default: {DEFAULT_PORT})",
    )
    p.add_argument(
        "--host",
        default=None,
        help=f"bind address (default: {DEFAULT_HOST})",
    )
    p.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="log level (default: INFO)",
    )
    return p


def load_settings(argv: list[str] | None = None) -> Settings:
    """Parse *argv* and resolve settings (env > options > defaults)."""
    args = build_parser().parse_args(argv)
    overrides = {
        key: value
        for key, value in (
            ("PORT", args.port),
            ("HOST", args.host),
            ("LOG_LEVEL", args.log_level),
        )
        if value is not None
    }
    return Settings(**overrides)


def main(argv: list[str] | None = None) -> None:
    settings = load_settings(argv)
    setup_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
