"""Tests for flexible builds (``builder(engine)``)."""

from __future__ import annotations

from pathlib import Path

import pytest

from datapool.builder import BuildMode, ConnectionBuilder, builder
from datapool.config import FLEXIBLE_OPTIMIZATIONS
from datapool.engines import StorageType
from datapool.errors import MissingConfigError
from datapool.pool import DataSourcePool, StorageDataSource

from tests._support import FakeProvider


class TestDefaults:
    def test_mode_and_engine(self):
        b = builder(StorageType.H2)
        assert b.mode is BuildMode.FLEXIBLE
        assert b.engine is StorageType.H2

    def test_default_parameters(self):
        params = builder(StorageType.POSTGRESQL).parameters
        assert params.host == "localhost"
        assert params.database == ""
        assert params.port == 0
        assert params.path is None
        assert params.memory is False

    def test_optimize_default_only_for_mysql(self):
        assert builder(StorageType.MYSQL).parameters.optimize is True
        assert builder(StorageType.MARIADB).parameters.optimize is False
        assert builder(StorageType.SQLITE).parameters.optimize is False

    def test_setters_chain(self):
        b = builder(StorageType.MYSQL)
        assert b.host("h").port(1).database("d").username("u").password("p") is b

    def test_path_accepts_pathlike(self, tmp_path: Path):
        b = builder(StorageType.SQLITE).path(tmp_path / "x.db")
        assert b.parameters.path == str(tmp_path / "x.db")


class TestLocalBuild:
    @pytest.mark.parametrize("engine", [StorageType.SQLITE, StorageType.H2, StorageType.HSQL])
    def test_missing_path_raises(self, engine: StorageType, provider: FakeProvider):
        with pytest.raises(MissingConfigError, match="Connection path is missing!"):
            builder(engine, provider=provider).build("pool")
        assert provider.opened == []

    def test_empty_path_raises(self, provider: FakeProvider):
        with pytest.raises(MissingConfigError):
            builder(StorageType.H2, provider=provider).path("").build("pool")

    def test_h2_url(self, provider: FakeProvider):
        source = builder(StorageType.H2, provider=provider).path("/tmp/db").build("h2")
        assert isinstance(source, StorageDataSource)
        assert source.type is StorageType.H2
        assert provider.last_config.url == "jdbc:h2:/tmp/db"
        assert provider.last_config.driver == "org.h2.Driver"

    def test_hsql_memory_url(self, provider: FakeProvider):
        builder(StorageType.HSQL, provider=provider).path("/tmp/db").memory(True).build("hsql")
        assert provider.last_config.url == "jdbc:hsqldb:mem:/tmp/db"

    def test_probe_connection_closed(self, provider: FakeProvider):
        builder(StorageType.H2, provider=provider).path("/tmp/db").build("h2")
        pool = provider.pools[0]
        assert pool.connects == 1
        pool.connections[0].close.assert_called_once_with()
        assert not pool.closed

    def test_real_sqlite(self, sqlite_path: Path):
        source = builder(StorageType.SQLITE).path(sqlite_path).build("sqlite")
        assert source is not None
        try:
            assert isinstance(source.source, DataSourcePool)
            assert source.source.config.url == f"jdbc:sqlite:{sqlite_path}"
            conn = source.source.connect()
            try:
                assert conn.execute("SELECT 1").fetchone() == (1,)
            finally:
                conn.close()
        finally:
            source.close()
        assert source.source.is_closed

    def test_real_sqlite_memory(self):
        source = builder(StorageType.SQLITE).path("ignored").memory(True).build("mem")
        assert source is not None
        assert source.source.config.url == "jdbc:sqlite::memory:"
        source.close()


class TestRemoteBuild:
    def _mysql(self, provider: FakeProvider) -> ConnectionBuilder[StorageDataSource]:
        return (
            builder(StorageType.MYSQL, provider=provider)
            .host("db.example")
            .port(3306)
            .database("app")
            .username("svc")
            .password("pw")
        )

    def test_mysql_config(self, provider: FakeProvider):
        source = self._mysql(provider).build("mysql")
        assert source is not None
        config = provider.last_config
        assert config.url == "jdbc:mysql://db.example:3306/app"
        assert config.driver == "com.mysql.cj.jdbc.Driver"
        assert config.username == "svc"
        for key in FLEXIBLE_OPTIMIZATIONS:
            assert key in config.properties

    def test_no_optimization(self, provider: FakeProvider):
        self._mysql(provider).no_optimization().build("mysql")
        assert not set(FLEXIBLE_OPTIMIZATIONS) & set(provider.last_config.properties)

    def test_remote_does_not_need_path(self, provider: FakeProvider):
        assert builder(StorageType.POSTGRESQL, provider=provider).build("pg") is not None

    def test_configure_overrides(self, provider: FakeProvider):
        def tweak(pool):
            pool.url = "jdbc:mysql://replica:3306/app"
            pool.maximum_pool_size = 2

        self._mysql(provider).configure(tweak).build("mysql")
        assert provider.last_config.url == "jdbc:mysql://replica:3306/app"
        assert provider.last_config.maximum_pool_size == 2

    def test_properties_consumer(self, provider: FakeProvider):
        self._mysql(provider).properties(lambda p: p.update(useSSL=False)).build("mysql")
        assert provider.last_config.properties["useSSL"] is False


class TestFailures:
    def test_connection_failure_returns_none(self, failing_provider: FakeProvider):
        result = builder(StorageType.H2, provider=failing_provider).path("/tmp/db").build("h2")
        assert result is None
        assert failing_provider.pools[0].closed

    def test_open_failure_returns_none(self):
        class Broken:
            def open(self, engine, config):
                raise RuntimeError("boom")

        assert builder(StorageType.POSTGRESQL, provider=Broken()).build("pg") is None

    def test_flexible_ignores_registry(self, provider: FakeProvider, fresh_default_registry):
        b = builder(StorageType.H2, provider=provider).path("/tmp/db")
        assert b.build("same") is not None
        assert b.build("same") is not None
        assert len(fresh_default_registry) == 0


class TestPoolName:
    def test_empty_name_returns_none(self, provider: FakeProvider):
        assert builder(StorageType.H2, provider=provider).path("/tmp/db").build("") is None
        assert provider.opened == []

    def test_missing_path_checked_before_name(self, provider: FakeProvider):
        with pytest.raises(MissingConfigError):
            builder(StorageType.SQLITE, provider=provider).build("")


class TestResolve:
    def test_resolve_does_not_connect(self, provider: FakeProvider):
        config = builder(StorageType.H2, provider=provider).path("/tmp/db").resolve("h2")
        assert config.url == "jdbc:h2:/tmp/db"
        assert provider.opened == []
