"""Tests for ``datapool.pool``: DataSourcePool, probe() and establish()."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from datapool.config import ConnectionParameters, ResolvedConfig
from datapool.engines import StorageType
from datapool.errors import DatabaseConnectionError
from datapool.pool import (
    ConnectionPool,
    DataSourcePool,
    SQLAlchemyPoolProvider,
    StorageDataSource,
    establish,
    probe,
)
from datapool.urls import resolve_flexible

from tests._support import FakePool, FakeProvider


def _sqlite_config(path: Path | str, name: str = "sqlite") -> ResolvedConfig:
    return resolve_flexible(StorageType.SQLITE, ConnectionParameters(path=str(path)), name)


def _memory_pool(name: str = "mem") -> DataSourcePool:
    return DataSourcePool(
        StorageType.SQLITE,
        _sqlite_config(":memory:", name),
        lambda: sqlite3.connect(":memory:", check_same_thread=False),
    )


class TestDataSourcePool:
    def test_attributes(self):
        pool = _memory_pool("inventory")
        assert pool.name == "inventory"
        assert pool.engine is StorageType.SQLITE
        assert pool.config.pool_name == "inventory"
        assert isinstance(pool, ConnectionPool)
        pool.close()

    def test_connect_and_query(self):
        pool = _memory_pool()
        conn = pool.connect()
        try:
            assert conn.execute("SELECT 2").fetchone() == (2,)
        finally:
            conn.close()
        pool.close()

    def test_close_is_idempotent(self):
        pool = _memory_pool()
        pool.close()
        pool.close()
        assert pool.is_closed

    def test_connect_after_close(self):
        pool = _memory_pool("done")
        pool.close()
        with pytest.raises(DatabaseConnectionError, match="done is closed"):
            pool.connect()

    def test_status(self):
        pool = _memory_pool()
        assert isinstance(pool.status(), str)
        pool.close()

    def test_repr(self):
        pool = _memory_pool("named")
        assert "named" in repr(pool)
        pool.close()


class TestProbe:
    def test_closes_probe_connection(self):
        pool = FakePool("p")
        probe(pool)
        assert pool.connects == 1
        pool.connections[0].close.assert_called_once_with()

    def test_wraps_driver_error(self):
        pool = FakePool("p", fail=True)
        with pytest.raises(DatabaseConnectionError) as excinfo:
            probe(pool)
        assert isinstance(excinfo.value.cause, RuntimeError)
        assert excinfo.value.retryable

    def test_passes_datapool_error_through(self):
        pool = _memory_pool()
        pool.close()
        with pytest.raises(DatabaseConnectionError, match="is closed"):
            probe(pool)


class TestEstablish:
    def test_returns_probed_pool(self, provider: FakeProvider):
        config = _sqlite_config("/tmp/db")
        pool = establish(StorageType.SQLITE, config, provider)
        assert pool is provider.pools[0]
        assert pool.connects == 1
        assert not pool.closed

    def test_closes_pool_on_failed_probe(self, failing_provider: FakeProvider):
        with pytest.raises(DatabaseConnectionError):
            establish(StorageType.SQLITE, _sqlite_config("/tmp/db"), failing_provider)
        assert failing_provider.pools[0].closed

    def test_wraps_open_failure(self):
        class Broken:
            def open(self, engine, config):
                raise ValueError("bad config")

        with pytest.raises(DatabaseConnectionError, match="bad config"):
            establish(StorageType.SQLITE, _sqlite_config("/tmp/db"), Broken())

    def test_default_provider_with_sqlite(self, sqlite_path: Path):
        pool = establish(StorageType.SQLITE, _sqlite_config(sqlite_path))
        assert isinstance(pool, DataSourcePool)
        assert sqlite_path.exists()
        pool.close()

    def test_default_provider_bad_path(self, tmp_path: Path):
        missing = tmp_path / "no" / "such" / "dir" / "db.sqlite"
        with pytest.raises(DatabaseConnectionError):
            establish(StorageType.SQLITE, _sqlite_config(missing))


class TestSQLAlchemyPoolProvider:
    def test_open_is_lazy(self):
        config = resolve_flexible(
            StorageType.MYSQL,
            ConnectionParameters(host="unreachable.invalid", port=3306, database="x"),
            "lazy",
        )
        pool = SQLAlchemyPoolProvider().open(StorageType.MYSQL, config)
        assert isinstance(pool, DataSourcePool)
        pool.close()

    def test_pool_size_from_config(self, sqlite_path: Path):
        config = _sqlite_config(sqlite_path)
        pool = SQLAlchemyPoolProvider().open(StorageType.SQLITE, config)
        assert pool.config.maximum_pool_size == 10
        pool.close()


class TestStorageDataSource:
    def test_close_delegates(self):
        pool = FakePool("p")
        source = StorageDataSource(StorageType.H2, pool)
        source.close()
        assert pool.closed

    def test_is_frozen(self):
        source = StorageDataSource(StorageType.H2, FakePool("p"))
        with pytest.raises(AttributeError):
            source.type = StorageType.SQLITE  # type: ignore[misc]
