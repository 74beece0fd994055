"""Shared pytest fixtures for the exporter test suite."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from prometheus_client.parser import text_string_to_metric_families

from duplicati_exporter.core.config import Settings
from duplicati_exporter.core.metrics import MetricsRegistry, build_backup_registry
from duplicati_exporter.main import create_app


def _make_report(
    *,
    backup_name: str = "db",
    machine_name: str = "srv1",
    status: str = "Success",
    duration: str = "00:05:30.0000000",
    examined_files: int = 120,
    size_of_added_files: int = 4096,
) -> dict[str, Any]:
    """Build a Duplicati JSON report body."""
    return {
        "Extra": {
            "backup-name": backup_name,
            "machine-name": machine_name,
        },
        "Data": {
            "ParsedResult": status,
            "Duration": duration,
            "ExaminedFiles": examined_files,
            "SizeOfAddedFiles": size_of_added_files,
        },
    }


def _parse_samples(text: str) -> dict[tuple[str, frozenset], float]:
    """Index rendered samples by ``(name, labels)``."""
    samples = {}
    for family in text_string_to_metric_families(text):
        for sample in family.samples:
            key = (sample.name, frozenset(sample.labels.items()))
            samples[key] = sample.value
    return samples


@pytest.fixture
def make_report():
    """Factory fixture building report bodies; override any field."""
    return _make_report


@pytest.fixture
def report() -> dict[str, Any]:
    return _make_report()


@pytest.fixture
def parse_samples():
    """Factory fixture indexing rendered samples by name and labels."""
    return _parse_samples


@pytest.fixture
def registry() -> MetricsRegistry:
    """A fresh registry with the backup gauges defined."""
    return build_backup_registry()


@pytest.fixture
def app(registry: MetricsRegistry):
    return create_app(settings=Settings(), registry=registry)


@pytest.fixture
async def client(app):
    """
    Yield an async HTTP client bound to a fresh exporter app.

    Usage::

        async def test_something(client: AsyncClient):
            response = await client.get("/metrics")
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
    ) as ac:
        yield ac
