"""DB-API connect functions for the default pool provider.

Each engine's driver is **import-guarded**: it is only required when a pool
actually opens a connection, not at import time. Install the matching
extra::

    pip install datapool[mysql]        # mysql-connector-python (MySQL, MariaDB)
    pip install datapool[postgresql]   # psycopg2-binary
    pip install datapool[jdbc]         # JayDeBeApi (H2, HSQL)

SQLite uses the stdlib ``sqlite3`` module and needs nothing extra.

Connection details come from the resolved URL when there is one, otherwise
from the ``serverName``/``portNumber``/``databaseName``/``user``/``password``
properties of a data-source style configuration.

Guardrails:
    ❌ Importing optional drivers at module scope
    ✅ Import-guarded at connect time with a clear ``ConfigError``
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, assert_never
from urllib.parse import urlsplit

from .config import ResolvedConfig
from .engines import StorageType
from .errors import ConfigError, DatabaseConnectionError
from .urls import JDBC_PREFIX

DEFAULT_PORTS: dict[StorageType, int] = {
    StorageType.MYSQL: 3306,
    StorageType.MARIADB: 3306,
    StorageType.POSTGRESQL: 5432,
}


@dataclass(frozen=True)
class ServerAddress:
    """Discrete connection fields of a remote engine."""

    host: str
    port: int
    database: str
    user: str | None
    password: str | None


def server_address(engine: StorageType, config: ResolvedConfig) -> ServerAddress:
    """Extract host/port/database/credentials from *config*."""
    props = config.properties
    user = config.username or props.get("user")
    password = config.password or props.get("password")

    if config.url:
        parts = urlsplit(config.url.removeprefix(JDBC_PREFIX))
        host = parts.hostname or "localhost"
        port = parts.port
        database = parts.path.lstrip("/")
    else:
        host = str(props.get("serverName") or "localhost")
        port = _as_port(props.get("portNumber"))
        database = str(props.get("databaseName") or "")

    return ServerAddress(
        host=host,
        port=port or DEFAULT_PORTS.get(engine, 0),
        database=database,
        user=user,
        password=password,
    )


def local_target(engine: StorageType, config: ResolvedConfig) -> str:
    """Return the part of a local engine URL after ``jdbc:<scheme>:``."""
    if not config.url:
        raise ConfigError(f"{engine} requires a connection URL")
    return config.url.removeprefix(f"{JDBC_PREFIX}{engine.value.scheme}:")


def connect(engine: StorageType, config: ResolvedConfig) -> Any:
    """Open one DB-API connection for *config*."""
    match engine:
        case StorageType.MYSQL | StorageType.MARIADB:
            return _connect_mysql(engine, config)
        case StorageType.POSTGRESQL:
            return _connect_postgresql(engine, config)
        case StorageType.SQLITE:
            return _connect_sqlite(engine, config)
        case StorageType.H2 | StorageType.HSQL:
            return _connect_jdbc(engine, config)
        case _:
            assert_never(engine)


def connector_for(engine: StorageType, config: ResolvedConfig) -> Callable[[], Any]:
    """Zero-argument connection factory, the shape a pool ``creator`` takes."""

    def _creator() -> Any:
        return connect(engine, config)

    return _creator


def _connect_mysql(engine: StorageType, config: ResolvedConfig) -> Any:
    try:
        import mysql.connector
    except ImportError:
        raise ConfigError(
            f"mysql-connector-python is required for {engine}. "
            "Install with: pip install mysql-connector-python"
        ) from None

    address = server_address(engine, config)
    try:
        return mysql.connector.connect(
            host=address.host,
            port=address.port,
            database=address.database,
            user=address.user,
            password=address.password,
            connection_timeout=int(config.connection_timeout),
        )
    except mysql.connector.Error as e:
        raise DatabaseConnectionError(f"Failed to connect to {engine}: {e}", cause=e) from e


def _connect_postgresql(engine: StorageType, config: ResolvedConfig) -> Any:
    try:
        import psycopg2
    except ImportError:
        raise ConfigError(
            "psycopg2 is required for PostgreSQL. Install with: pip install psycopg2-binary"
        ) from None

    address = server_address(engine, config)
    try:
        return psycopg2.connect(
            host=address.host,
            port=address.port,
            dbname=address.database,
            user=address.user,
            password=address.password,
            connect_timeout=int(config.connection_timeout),
        )
    except psycopg2.Error as e:
        raise DatabaseConnectionError(f"Failed to connect to PostgreSQL: {e}", cause=e) from e


def _connect_sqlite(engine: StorageType, config: ResolvedConfig) -> Any:
    import sqlite3

    path = local_target(engine, config)
    uri = path.startswith("file:")
    try:
        return sqlite3.connect(
            path,
            timeout=config.connection_timeout,
            check_same_thread=False,
            uri=uri,
        )
    except sqlite3.Error as e:
        raise DatabaseConnectionError(f"Failed to connect to SQLite: {e}", cause=e) from e


def _connect_jdbc(engine: StorageType, config: ResolvedConfig) -> Any:
    try:
        import jaydebeapi
    except ImportError:
        raise ConfigError(
            f"JayDeBeApi is required for {engine}. Install with: pip install JayDeBeApi"
        ) from None

    if not config.driver or not config.url:
        raise ConfigError(f"{engine} requires a driver and a connection URL")

    driver_args: dict[str, str] = {}
    user = config.username or config.properties.get("user")
    password = config.password or config.properties.get("password")
    if user:
        driver_args["user"] = str(user)
    if password:
        driver_args["password"] = str(password)
    try:
        return jaydebeapi.connect(config.driver, config.url, driver_args or None)
    except jaydebeapi.Error as e:
        raise DatabaseConnectionError(f"Failed to connect to {engine}: {e}", cause=e) from e


def _as_port(value: Any) -> int | None:
    if value in (None, ""):
        return None
    return int(value)


__all__ = [
    "DEFAULT_PORTS",
    "ServerAddress",
    "server_address",
    "local_target",
    "connect",
    "connector_for",
]
