"""Connection URL and property synthesis.

Pure functions from (engine, parameters) to a :class:`ResolvedConfig`.
Every engine-specific string lives here; the URL shapes are compared
byte for byte by consumers and must not drift.

URL shapes
----------
==================  ==========================================
Case                Example
==================  ==========================================
remote              ``jdbc:mysql://localhost:3306/app``
local file          ``jdbc:h2:/tmp/db``
HSQL file           ``jdbc:hsqldb:file:/tmp/db``
SQLite memory       ``jdbc:sqlite::memory:``
H2 / HSQL memory    ``jdbc:h2:mem:/tmp/db``
==================  ==========================================

Driver identity, URL and data-source identity are only filled in when the
caller has not set them through ``configure()``.
"""

from __future__ import annotations

from dataclasses import replace
from types import MappingProxyType
from typing import Any, assert_never

from .config import (
    FLEXIBLE_OPTIMIZATIONS,
    VALIDATED_MAXIMUM_POOL_SIZE,
    VALIDATED_MINIMUM_IDLE,
    VALIDATED_OPTIMIZATIONS,
    ConnectionParameters,
    PoolConfig,
    ResolvedConfig,
)
from .engines import StorageType

JDBC_PREFIX = "jdbc:"

SQLITE_MEMORY_MARKER = ":memory:"
MEMORY_MARKER = "mem:"
FILE_MARKER = "file:"


def remote_url(engine: StorageType, host: str, port: int, database: str) -> str:
    """``jdbc:<scheme>://<host>:<port>/<database>``"""
    return f"{JDBC_PREFIX}{engine.value.scheme}://{host}:{port}/{database}"


def format_url(engine: StorageType, extra: str, *, memory: bool = False) -> str:
    """Prefix *extra* with the engine's scheme and local-storage marker.

    For local engines the marker is the in-memory token when *memory* is
    set, otherwise ``file:`` for HSQL and nothing for the rest.
    """
    url = f"{JDBC_PREFIX}{engine.value.scheme}:"
    if engine.is_local:
        if memory:
            url += SQLITE_MEMORY_MARKER if engine is StorageType.SQLITE else MEMORY_MARKER
        elif engine is StorageType.HSQL:
            url += FILE_MARKER
    return url + extra


def flexible_url(engine: StorageType, params: ConnectionParameters) -> str:
    """URL used by a flexible build."""
    if not engine.is_local:
        return format_url(engine, f"//{params.host}:{params.port}/{params.database}")
    if params.memory and engine is StorageType.SQLITE:
        # the path is dropped on purpose: SQLite memory databases are anonymous
        # and sqlite3 cannot open ":memory:" followed by a path
        return format_url(engine, "", memory=True)
    return format_url(engine, params.path or "", memory=params.memory)


def apply_driver_and_url(pool: PoolConfig, driver: str | None, url: str | None) -> None:
    """Set driver and URL on *pool* unless already present."""
    if driver and not pool.driver:
        pool.driver = driver
    if url and not pool.url:
        pool.url = url


def apply_data_source(pool: PoolConfig, data_source: str) -> None:
    if not pool.data_source:
        pool.data_source = data_source


def validated_wiring(engine: StorageType, params: ConnectionParameters, pool: PoolConfig) -> None:
    """Per-engine driver/URL wiring used by a validated build."""
    descriptor = engine.value
    match engine:
        case StorageType.MYSQL:
            apply_driver_and_url(
                pool, descriptor.driver,
                remote_url(engine, params.host, params.port, params.database),
            )
        case StorageType.MARIADB | StorageType.POSTGRESQL:
            apply_data_source(pool, descriptor.data_source)
        case StorageType.SQLITE | StorageType.H2:
            apply_driver_and_url(pool, descriptor.driver, format_url(engine, params.path or ""))
        case StorageType.HSQL:
            apply_driver_and_url(
                pool, descriptor.driver, f"{JDBC_PREFIX}{descriptor.scheme}:{FILE_MARKER}{params.path}"
            )
        case _:
            assert_never(engine)


def resolve_flexible(
    engine: StorageType, params: ConnectionParameters, pool_name: str
) -> ResolvedConfig:
    """Resolve a flexible build. Does not mutate *params*."""
    pool = _copy_pool(params.pool)
    pool.pool_name = pool_name
    if pool.username is None:
        pool.username = params.username
    if pool.password is None:
        pool.password = params.password

    properties: dict[str, Any] = {}
    if not engine.is_local:
        properties.update(
            serverName=params.host,
            portNumber=params.port,
            databaseName=params.database,
        )
    if params.optimize and engine.mysql_family:
        properties.update(FLEXIBLE_OPTIMIZATIONS)
    properties.update(pool.properties)
    properties.update(params.properties)
    pool.properties = properties

    apply_driver_and_url(pool, engine.value.driver, flexible_url(engine, params))
    return resolve(pool)


def resolve_validated(
    engine: StorageType,
    params: ConnectionParameters,
    pool_name: str,
    *,
    optimize: bool = True,
) -> ResolvedConfig:
    """Resolve a validated build with the fixed pool sizing policy."""
    pool = _copy_pool(params.pool)
    pool.pool_name = pool_name
    pool.maximum_pool_size = VALIDATED_MAXIMUM_POOL_SIZE
    pool.minimum_idle = VALIDATED_MINIMUM_IDLE
    if pool.username is None:
        pool.username = params.username
    if pool.password is None:
        pool.password = params.password

    properties: dict[str, Any] = {
        "serverName": params.host,
        "portNumber": params.port,
        "databaseName": params.database,
        "user": params.username,
        "password": params.password,
    }
    if optimize and engine.mysql_family:
        properties.update(VALIDATED_OPTIMIZATIONS)
    properties.update(pool.properties)
    properties.update(params.properties)
    pool.properties = properties

    validated_wiring(engine, params, pool)
    return resolve(pool)


def resolve(pool: PoolConfig) -> ResolvedConfig:
    """Freeze *pool* into a :class:`ResolvedConfig`."""
    if not pool.pool_name:
        raise ValueError("pool_name is required")
    return ResolvedConfig(
        pool_name=pool.pool_name,
        driver=pool.driver,
        url=pool.url,
        data_source=pool.data_source,
        properties=MappingProxyType(dict(pool.properties)),
        username=pool.username,
        password=pool.password,
        maximum_pool_size=pool.maximum_pool_size,
        minimum_idle=pool.minimum_idle,
        connection_timeout=pool.connection_timeout,
    )


def _copy_pool(pool: PoolConfig) -> PoolConfig:
    return replace(pool, properties=dict(pool.properties))


__all__ = [
    "JDBC_PREFIX",
    "remote_url",
    "format_url",
    "flexible_url",
    "apply_driver_and_url",
    "apply_data_source",
    "validated_wiring",
    "resolve_flexible",
    "resolve_validated",
    "resolve",
]
