"""Pooled data sources and the one-shot liveness probe.

Manifesto:
    A configuration is only worth handing out once a real connection has
    been opened with it. ``establish()`` wraps a resolved configuration in a
    pool, opens and closes exactly one connection, and reports the pool or
    nothing. There is no retry: a failed probe ends the build attempt.

Architecture::

    ResolvedConfig ──► PoolProvider.open() ──► ConnectionPool
                                                  │
                                  probe(): connect() ─► close()
                                                  │
                         ok ──► pool       failed ──► pool.close(), None

    PoolProvider (protocol)        anything that turns a config into a pool
        └── SQLAlchemyPoolProvider sqlalchemy QueuePool + datapool.connectors

Guardrails:
    - The caller owns the returned pool and must ``close()`` it
    - Pool timeouts come from ``PoolConfig.connection_timeout``

Tags:
    datapool, pool, sqlalchemy, liveness

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from sqlalchemy.pool import QueuePool

from .config import ResolvedConfig
from .connectors import connector_for
from .engines import StorageType
from .errors import DatabaseConnectionError
from .logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class ConnectionPool(Protocol):
    """A live pool of DB-API connections."""

    @property
    def name(self) -> str: ...

    def connect(self) -> Any:
        """Check out a connection; closing it returns it to the pool."""
        ...

    def close(self) -> None:
        """Shut the pool down."""
        ...


class PoolProvider(Protocol):
    """Turns a resolved configuration into a pool."""

    def open(self, engine: StorageType, config: ResolvedConfig) -> ConnectionPool: ...


class DataSourcePool:
    """
    Named pool backed by ``sqlalchemy.pool.QueuePool``.

    ``maximum_pool_size`` bounds the pool (no overflow); ``minimum_idle`` is
    recorded but not enforced, as ``QueuePool`` opens connections lazily.
    """

    def __init__(
        self,
        engine: StorageType,
        config: ResolvedConfig,
        creator: Callable[[], Any],
    ) -> None:
        self._engine = engine
        self._config = config
        self._pool = QueuePool(
            creator,
            pool_size=config.maximum_pool_size,
            max_overflow=0,
            timeout=config.connection_timeout,
        )
        self._closed = False

    @property
    def name(self) -> str:
        return self._config.pool_name

    @property
    def engine(self) -> StorageType:
        return self._engine

    @property
    def config(self) -> ResolvedConfig:
        return self._config

    @property
    def is_closed(self) -> bool:
        return self._closed

    def connect(self) -> Any:
        if self._closed:
            raise DatabaseConnectionError(f"Pool {self.name} is closed")
        return self._pool.connect()

    def close(self) -> None:
        if not self._closed:
            self._pool.dispose()
            self._closed = True
            logger.debug("pool_closed", pool=self.name)

    def status(self) -> str:
        return self._pool.status()

    def __repr__(self) -> str:
        return f"DataSourcePool(name={self.name!r}, engine={self._engine})"


class SQLAlchemyPoolProvider:
    """Default provider: QueuePool over the engine's DB-API driver."""

    def open(self, engine: StorageType, config: ResolvedConfig) -> DataSourcePool:
        return DataSourcePool(engine, config, connector_for(engine, config))


default_provider = SQLAlchemyPoolProvider()


@dataclass(frozen=True)
class StorageDataSource:
    """Immutable pairing of an engine with its live pool."""

    type: StorageType
    source: ConnectionPool

    def close(self) -> None:
        """Shut down the underlying pool."""
        self.source.close()


def probe(pool: ConnectionPool) -> None:
    """Open one connection and close it immediately.

    Raises:
        DatabaseConnectionError: if the connection cannot be opened
    """
    try:
        conn = pool.connect()
    except DatabaseConnectionError:
        raise
    except Exception as e:
        raise DatabaseConnectionError(
            f"Failed to open a connection for pool {pool.name}: {e}", cause=e
        ) from e
    conn.close()


def establish(
    engine: StorageType,
    config: ResolvedConfig,
    provider: PoolProvider | None = None,
) -> ConnectionPool:
    """Open a pool for *config* and prove it with :func:`probe`.

    The pool is closed again before the error propagates.

    Raises:
        DatabaseConnectionError: if the pool cannot be opened or probed
    """
    provider = provider or default_provider
    try:
        pool = provider.open(engine, config)
    except Exception as e:
        raise DatabaseConnectionError(
            f"Failed to open pool {config.pool_name}: {e}", cause=e
        ) from e

    try:
        probe(pool)
    except DatabaseConnectionError:
        pool.close()
        raise
    return pool


__all__ = [
    "ConnectionPool",
    "PoolProvider",
    "DataSourcePool",
    "SQLAlchemyPoolProvider",
    "default_provider",
    "StorageDataSource",
    "probe",
    "establish",
]
