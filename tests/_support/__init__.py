"""
Test support utilities for datapool tests.

Fakes that stand in for a pool provider and a log observer, so builder
tests never need a database server or a JVM.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

from datapool.config import ResolvedConfig
from datapool.engines import StorageType


class FakePool:
    """Pool whose connections are mocks; can be told to refuse them."""

    def __init__(self, name: str, *, fail: bool = False) -> None:
        self.name = name
        self.fail = fail
        self.connects = 0
        self.closed = False
        self.connections: list[MagicMock] = []

    def connect(self) -> Any:
        self.connects += 1
        if self.fail:
            raise RuntimeError("connection refused")
        conn = MagicMock(name=f"{self.name}-conn")
        self.connections.append(conn)
        return conn

    def close(self) -> None:
        self.closed = True


class FakeProvider:
    """Records every (engine, config) it opens."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.opened: list[tuple[StorageType, ResolvedConfig]] = []
        self.pools: list[FakePool] = []

    def open(self, engine: StorageType, config: ResolvedConfig) -> FakePool:
        self.opened.append((engine, config))
        pool = FakePool(config.pool_name, fail=self.fail)
        self.pools.append(pool)
        return pool

    @property
    def last_config(self) -> ResolvedConfig:
        return self.opened[-1][1]


class RecordingLogger:
    """Log observer that keeps (level, message) pairs."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str]] = []
        self.exc_info: list[Any] = []

    def info(self, event: str, *args: Any, **kwargs: Any) -> None:
        self.records.append(("info", event))

    def warning(self, event: str, *args: Any, **kwargs: Any) -> None:
        self.records.append(("warning", event))

    def error(self, event: str, *args: Any, **kwargs: Any) -> None:
        self.records.append(("error", event))
        self.exc_info.append(kwargs.get("exc_info"))

    def messages(self, level: str) -> list[str]:
        return [message for lvl, message in self.records if lvl == level]
