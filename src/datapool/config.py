"""Connection parameters, pool configuration and the resolved descriptor.

``ConnectionParameters`` is what a builder accumulates, ``PoolConfig`` is
the mutable record handed to ``ConnectionBuilder.configure()`` and
``ResolvedConfig`` is the frozen result the pool provider receives.

Tags:
    datapool, configuration, dataclass

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

# https://github.com/brettwooldridge/HikariCP/wiki/MySQL-Configuration
FLEXIBLE_OPTIMIZATIONS: Mapping[str, Any] = MappingProxyType({
    "cachePrepStmts": True,
    "prepStmtCacheSize": 250,
    "prepStmtCacheSqlLimit": 2048,
    "useServerPrepStmts": True,
    "useLocalSessionState": True,
    "rewriteBatchedStatements": True,
    "cacheResultSetMetadata": True,
    "cacheServerConfiguration": True,
    "elideSetAutoCommits": True,
    "maintainTimeStats": False,
})

# Differs from FLEXIBLE_OPTIMIZATIONS in two keys; both are published as is.
VALIDATED_OPTIMIZATIONS: Mapping[str, Any] = MappingProxyType({
    "cachePrepStmts": True,
    "prepStmtCacheSize": 250,
    "prepStmtCacheSqlLimit": 2048,
    "useServerPrepStmts": True,
    "cacheCallableStmts": True,
    "cacheResultSetMetadata": True,
    "cacheServerConfiguration": True,
    "useLocalSessionState": True,
    "elideSetAutoCommits": True,
    "alwaysSendSetIsolation": False,
})

VALIDATED_MAXIMUM_POOL_SIZE = 5
VALIDATED_MINIMUM_IDLE = 3


@dataclass
class PoolConfig:
    """
    Pool options passed to the pool provider.

    Fields left empty here are filled in by the builder; anything a caller
    sets through ``configure()`` is kept.
    """

    pool_name: str | None = None
    driver: str | None = None
    url: str | None = None
    data_source: str | None = None
    username: str | None = None
    password: str | None = None

    maximum_pool_size: int = 10
    minimum_idle: int = 10
    connection_timeout: float = 30.0

    properties: dict[str, Any] = field(default_factory=dict)


@dataclass
class ConnectionParameters:
    """Values accumulated by a builder before ``build()``."""

    path: str | None = None
    host: str = "localhost"
    database: str = ""
    username: str | None = None
    password: str | None = None
    port: int = 0
    memory: bool = False
    optimize: bool = False

    # Extra driver properties and pool options (``properties()`` / ``configure()``)
    properties: dict[str, Any] = field(default_factory=dict)
    pool: PoolConfig = field(default_factory=PoolConfig)


@dataclass(frozen=True)
class ResolvedConfig:
    """Complete connection descriptor for one build attempt."""

    pool_name: str
    driver: str | None
    url: str | None
    data_source: str | None
    properties: Mapping[str, Any]
    username: str | None = None
    password: str | None = None
    maximum_pool_size: int = 10
    minimum_idle: int = 10
    connection_timeout: float = 30.0

    def __repr__(self) -> str:
        parts = [f"pool_name={self.pool_name!r}"]
        if self.url:
            parts.append(f"url={self.url!r}")
        else:
            parts.append(f"data_source={self.data_source!r}")
        return f"ResolvedConfig({', '.join(parts)})"


__all__ = [
    "FLEXIBLE_OPTIMIZATIONS",
    "VALIDATED_OPTIMIZATIONS",
    "VALIDATED_MAXIMUM_POOL_SIZE",
    "VALIDATED_MINIMUM_IDLE",
    "PoolConfig",
    "ConnectionParameters",
    "ResolvedConfig",
]
