"""Connection builders.

Manifesto:
    Callers describe *what* they want to connect to; the builder works out
    the driver, URL and properties for the chosen engine, proves the
    configuration with one real connection, and hands back a handle.

    One builder type serves two usage styles, selected by :class:`BuildMode`:

    - ``FLEXIBLE`` (``builder(engine)``): anything can be overridden through
      ``configure()``/``properties()``; a missing path on a local engine is
      fatal; connection failures yield ``None`` silently.
    - ``VALIDATED`` (``ConnectionBuilder.create(creator, engine)``): every
      field is checked, a fixed pool size is applied, failures are logged
      and yield ``None``, and the pool name is claimed in a registry.

Examples:
    Flexible build of an embedded H2 database::

        source = builder(StorageType.H2).path("/var/lib/app/db").build("app-h2")
        if source is None:
            ...

    Validated build returning an application type::

        storage = (
            ConnectionBuilder.create(AppStorage, StorageType.POSTGRESQL)
            .host("db.internal").port(5432).database("app")
            .username("app").password(secret)
            .build("app-main", logger)
        )

Guardrails:
    ❌ Sharing one builder between threads
    ✅ One builder per build, discarded afterwards
    ❌ Treating ``None`` as "try again later"; the failure is terminal
    ✅ Re-run the whole builder to retry

Tags:
    datapool, builder, fluent-api, validation

Doc-Types:
    api-reference
"""

from __future__ import annotations

import os
from collections.abc import Callable
from enum import Enum
from typing import Any, Generic, TypeVar, cast

from . import registry as _registry
from .config import ConnectionParameters, PoolConfig, ResolvedConfig
from .engines import StorageType
from .errors import DatabaseConnectionError, MissingConfigError
from .logging import LogObserver, get_logger
from .pool import ConnectionPool, PoolProvider, StorageDataSource, establish
from .registry import PoolRegistry
from .urls import resolve_flexible, resolve_validated

logger = get_logger(__name__)

T = TypeVar("T")

StorageCreator = Callable[[StorageType, LogObserver, ConnectionPool], T]
"""Builds the caller's result type from (engine, logger, live pool)."""


class BuildMode(str, Enum):
    """How strictly a builder validates and reports."""

    FLEXIBLE = "flexible"
    VALIDATED = "validated"


class ConnectionBuilder(Generic[T]):
    """
    Fluent builder for pooled connections.

    Default host is ``"localhost"``; everything else is empty.
    """

    def __init__(
        self,
        engine: StorageType,
        *,
        mode: BuildMode = BuildMode.FLEXIBLE,
        creator: StorageCreator[T] | None = None,
        registry: PoolRegistry | None = None,
        provider: PoolProvider | None = None,
    ) -> None:
        if mode is BuildMode.VALIDATED and creator is None:
            raise ValueError("a validated builder needs a creator")
        self._engine = engine
        self._mode = mode
        self._creator = creator
        self._registry = registry
        self._provider = provider
        self._params = ConnectionParameters(
            optimize=mode is BuildMode.FLEXIBLE and engine is StorageType.MYSQL,
        )
        self._optimization_disabled = False

    @classmethod
    def create(
        cls,
        creator: StorageCreator[T],
        engine: StorageType,
        *,
        registry: PoolRegistry | None = None,
        provider: PoolProvider | None = None,
    ) -> ConnectionBuilder[T]:
        """Create a validated builder whose result is built by *creator*."""
        return cls(
            engine,
            mode=BuildMode.VALIDATED,
            creator=creator,
            registry=registry,
            provider=provider,
        )

    # --- properties ---

    @property
    def engine(self) -> StorageType:
        return self._engine

    @property
    def mode(self) -> BuildMode:
        return self._mode

    @property
    def registry(self) -> PoolRegistry:
        # looked up per call so the module default can be swapped
        if self._registry is not None:
            return self._registry
        return _registry.pool_registry

    @property
    def parameters(self) -> ConnectionParameters:
        return self._params

    # --- setters ---

    def path(self, path: str | os.PathLike[str]) -> ConnectionBuilder[T]:
        """
        Set the file path for the connection.

        Only required for local file databases. JDBC URL options can be
        appended to the path.
        """
        self._params.path = os.fspath(path)
        return self

    def host(self, host: str) -> ConnectionBuilder[T]:
        self._params.host = host
        return self

    def database(self, database: str) -> ConnectionBuilder[T]:
        self._params.database = database
        return self

    def username(self, username: str | None) -> ConnectionBuilder[T]:
        self._params.username = username
        return self

    def password(self, password: str | None) -> ConnectionBuilder[T]:
        self._params.password = password
        return self

    def port(self, port: int) -> ConnectionBuilder[T]:
        self._params.port = port
        return self

    def configure(self, consumer: Callable[[PoolConfig], None]) -> ConnectionBuilder[T]:
        """Configure the pool options using a consumer.

        Driver and URL set here are never replaced by synthesized values.
        """
        consumer(self._params.pool)
        return self

    def properties(self, consumer: Callable[[dict[str, Any]], None]) -> ConnectionBuilder[T]:
        """Configure the driver properties using a consumer."""
        consumer(self._params.properties)
        return self

    def no_optimization(self) -> ConnectionBuilder[T]:
        """Do not include optimization properties on MySQL storage type.

        Applies to both modes; in ``VALIDATED`` mode it overrides the
        *optimize* argument of ``build()``.
        """
        self._params.optimize = False
        self._optimization_disabled = True
        return self

    def memory(self, memory: bool) -> ConnectionBuilder[T]:
        """Set whether the database should be in memory.

        Only affects local types in ``FLEXIBLE`` mode; validated builds always
        use the file URL.
        """
        self._params.memory = memory
        return self

    # --- build ---

    def build(
        self,
        pool_name: str,
        log: LogObserver | None = None,
        optimize: bool = True,
    ) -> T | StorageDataSource | None:
        """
        Attempt to build.

        In ``FLEXIBLE`` mode *log* and *optimize* are ignored (use
        ``no_optimization()``) and the result is a :class:`StorageDataSource`.
        In ``VALIDATED`` mode the result comes from the creator. An empty
        *pool_name* yields ``None`` in both modes.

        Returns:
            The constructed object if the connection was successful, ``None`` otherwise.

        Raises:
            MissingConfigError: flexible build of a local engine without a path
        """
        if self._mode is BuildMode.VALIDATED:
            return self._build_validated(pool_name, log or logger, optimize)
        return self._build_flexible(pool_name)

    def resolve(self, pool_name: str, optimize: bool = True) -> ResolvedConfig:
        """Synthesize the configuration a build would use, without connecting."""
        if self._mode is BuildMode.VALIDATED:
            optimize = optimize and not self._optimization_disabled
            return resolve_validated(self._engine, self._params, pool_name, optimize=optimize)
        return resolve_flexible(self._engine, self._params, pool_name)

    def _build_flexible(self, pool_name: str) -> StorageDataSource | None:
        if self._engine.is_local and not self._params.path:
            raise MissingConfigError("path", "Connection path is missing!")
        if not pool_name:
            return None
        config = resolve_flexible(self._engine, self._params, pool_name)
        try:
            pool = establish(self._engine, config, self._provider)
        except DatabaseConnectionError:
            return None
        return StorageDataSource(self._engine, pool)

    def _build_validated(self, pool_name: str, log: LogObserver, optimize: bool) -> T | None:
        params = self._params
        if not pool_name:
            log.warning("Pool name is missing!")
            return None
        if self.registry.contains(pool_name):
            log.warning(f"{pool_name} is already registered!")
            return None
        if not (params.host and params.database and params.username and params.password):
            log.warning("Connection info is invalid! One or more values is empty!")
            return None
        if self._engine.is_local and not params.path:
            log.warning("Connection path is missing!")
            return None

        log.info(f"Loading storage provider... [{self._engine}]")

        optimize = optimize and not self._optimization_disabled
        config = resolve_validated(self._engine, params, pool_name, optimize=optimize)
        try:
            pool = establish(self._engine, config, self._provider)
        except DatabaseConnectionError as e:
            log.error(e.message, exc_info=e)
            return None

        # handle first, then the name: neither exists without the other
        creator = cast("StorageCreator[T]", self._creator)
        try:
            result = creator(self._engine, log, pool)
        except Exception as e:
            pool.close()
            log.error(f"Failed to create storage for {pool_name}: {e}", exc_info=e)
            return None

        if not self.registry.register_if_absent(pool_name):
            pool.close()
            log.warning(f"{pool_name} is already registered!")
            return None
        return result


def builder(
    engine: StorageType,
    *,
    provider: PoolProvider | None = None,
) -> ConnectionBuilder[StorageDataSource]:
    """Create a flexible builder for *engine*."""
    return ConnectionBuilder(engine, mode=BuildMode.FLEXIBLE, provider=provider)


__all__ = [
    "BuildMode",
    "ConnectionBuilder",
    "StorageCreator",
    "builder",
]
