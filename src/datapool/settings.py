"""Environment-driven connection settings.

``StorageSettings`` reads ``DATAPOOL_*`` environment variables (and a
``.env`` file) so deployments can pick an engine and its connection details
without code changes. ``builder_from_settings()`` turns them into a
flexible builder.

Examples:
    >>> import os
    >>> os.environ["DATAPOOL_ENGINE"] = "postgresql"
    >>> settings = StorageSettings()
    >>> settings.storage_type is StorageType.POSTGRESQL
    True

Tags:
    settings, configuration, pydantic, environment, datapool

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .builder import ConnectionBuilder, builder
from .engines import StorageType, parse
from .logging import configure_logging
from .pool import PoolProvider, StorageDataSource


class StorageSettings(BaseSettings):
    """Connection settings for one pool.

    Fields
    ──────
    engine              : Engine name, parsed case-insensitively (default SQLite)
    host/port/database  : Remote server location
    username/password   : Credentials
    path / memory       : Local engine file and in-memory switch
    optimize            : MySQL driver optimizations (None = engine default)
    pool_name           : Name registered for the pool
    connection_timeout  : Seconds to wait for a connection
    log_level           : Structlog log level
    """

    model_config = SettingsConfigDict(
        env_prefix="DATAPOOL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Engine ───────────────────────────────────────────────────
    engine: str = "SQLite"

    # ── Remote ───────────────────────────────────────────────────
    host: str = "localhost"
    port: int = 0
    database: str = ""
    username: str | None = None
    password: str | None = None

    # ── Local ────────────────────────────────────────────────────
    path: str | None = None
    memory: bool = False

    # ── Pool ─────────────────────────────────────────────────────
    optimize: bool | None = None
    pool_name: str = "datapool"
    connection_timeout: float = Field(default=30.0, gt=0)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"

    @property
    def storage_type(self) -> StorageType:
        return parse(self.engine, StorageType.SQLITE)

    def setup_logging(self, json_format: bool | None = None) -> None:
        """Configure structlog at ``log_level``, tagged with the pool name."""
        configure_logging(level=self.log_level, json_format=json_format, service=self.pool_name)


def builder_from_settings(
    settings: StorageSettings,
    *,
    provider: PoolProvider | None = None,
) -> ConnectionBuilder[StorageDataSource]:
    """Return a flexible builder seeded from *settings*."""
    b = (
        builder(settings.storage_type, provider=provider)
        .host(settings.host)
        .port(settings.port)
        .database(settings.database)
        .username(settings.username)
        .password(settings.password)
        .memory(settings.memory)
    )
    if settings.path:
        b.path(settings.path)
    if settings.optimize is not None:
        b.parameters.optimize = settings.optimize
    timeout = settings.connection_timeout
    b.configure(lambda pool: setattr(pool, "connection_timeout", timeout))
    return b


__all__ = [
    "StorageSettings",
    "builder_from_settings",
]
