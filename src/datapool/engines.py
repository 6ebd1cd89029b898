"""Supported storage engines and their fixed attributes.

Manifesto:
    The engine set is closed. Each member of :class:`StorageType` carries an
    immutable :class:`EngineDescriptor`; nothing in the catalog changes after
    import. Code that matches over engines ends with ``assert_never`` so a
    new member cannot fall through unhandled.

Features:
    - ``StorageType`` enum of the six engines (3 remote, 3 local)
    - ``describe()`` total lookup of an engine's descriptor
    - ``parse()`` case-insensitive name lookup with a caller default

Tags:
    datapool, engines, registry, enum

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class EngineDescriptor:
    """Fixed attributes of one engine."""

    name: str
    """Canonical display name, matched by :func:`parse`."""

    scheme: str
    """JDBC sub-protocol used in connection URLs."""

    driver: str
    """Driver identity."""

    data_source: str
    """Data-source class identity for property-based construction."""

    local: bool
    """Whether the engine stores data in a local file."""

    schema_file: str
    """File name of the engine's schema script."""


class StorageType(Enum):
    """Enum holding the supported types of storage and their descriptors."""

    # Remote databases
    MYSQL = EngineDescriptor(
        "MySQL", "mysql", "com.mysql.cj.jdbc.Driver",
        "com.mysql.cj.jdbc.MysqlDataSource", False, "mariadb.sql",
    )
    MARIADB = EngineDescriptor(
        "MariaDB", "mariadb", "org.mariadb.jdbc.Driver",
        "org.mariadb.jdbc.MariaDbDataSource", False, "mariadb.sql",
    )
    POSTGRESQL = EngineDescriptor(
        "PostgreSQL", "postgresql", "org.postgresql.Driver",
        "org.postgresql.ds.PGSimpleDataSource", False, "postgre.sql",
    )
    # Local databases
    SQLITE = EngineDescriptor(
        "SQLite", "sqlite", "org.sqlite.JDBC",
        "org.sqlite.SQLiteDataSource", True, "sqlite.sql",
    )
    H2 = EngineDescriptor(
        "H2", "h2", "org.h2.Driver",
        "org.h2.jdbcx.JdbcDataSource", True, "h2.sql",
    )
    HSQL = EngineDescriptor(
        "HSQL", "hsqldb", "org.hsqldb.jdbc.JDBCDriver",
        "org.hsqldb.jdbc.JDBCDataSource", True, "hsql.sql",
    )

    @property
    def descriptor(self) -> EngineDescriptor:
        return self.value

    @property
    def is_local(self) -> bool:
        """Whether this type represents a local database type."""
        return self.value.local

    @property
    def schema_path(self) -> str:
        return self.value.schema_file

    @property
    def mysql_family(self) -> bool:
        """MySQL and MariaDB share the driver optimization properties."""
        return self in (StorageType.MYSQL, StorageType.MARIADB)

    def __str__(self) -> str:
        return self.value.name


def describe(engine: StorageType) -> EngineDescriptor:
    """Return the descriptor of *engine*."""
    return engine.value


def parse(name: str, default: StorageType) -> StorageType:
    """
    Parse *name* into a :class:`StorageType`.

    Matching is case-insensitive and exact against canonical names; any
    other input yields *default*.

    Usage:
        parse("mariadb", StorageType.SQLITE)   # StorageType.MARIADB
        parse("oracle", StorageType.SQLITE)    # StorageType.SQLITE
    """
    wanted = name.casefold()
    for engine in StorageType:
        if engine.value.name.casefold() == wanted:
            return engine
    return default


__all__ = [
    "EngineDescriptor",
    "StorageType",
    "describe",
    "parse",
]
