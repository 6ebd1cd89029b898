"""
Shared pytest fixtures for datapool tests.

This module provides:
- A fresh process-wide pool registry per test
- A fake pool provider that records what it was asked to open
- A recording log observer

No test here needs a database server or a JVM: remote engines go through
the fake provider, SQLite uses the stdlib driver.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from datapool.registry import PoolRegistry
from tests._support import FakeProvider, RecordingLogger


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Registry Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_default_registry(monkeypatch: pytest.MonkeyPatch) -> PoolRegistry:
    """Swap the process-wide registry for an empty one."""
    registry = PoolRegistry()
    monkeypatch.setattr("datapool.registry.pool_registry", registry)
    return registry


# =============================================================================
# Fakes
# =============================================================================


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def failing_provider() -> FakeProvider:
    return FakeProvider(fail=True)


@pytest.fixture
def recorder() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def sqlite_path(tmp_path: Path) -> Path:
    return tmp_path / "storage.db"
