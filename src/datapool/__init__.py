"""datapool -- build and validate pooled connections for six database engines.

Manifesto:
    Connecting to MySQL, MariaDB, PostgreSQL, SQLite, H2 or HSQL should be a
    matter of naming the engine and filling in the blanks. The engine-specific
    driver identities, connection URLs and driver properties are derived
    once, here, and a configuration is only handed out after a real
    connection has been opened with it.

Architecture::

    StorageType (engines.py)          closed catalog of engines + descriptors
    ConnectionBuilder (builder.py)    FLEXIBLE / VALIDATED fluent builder
        └── urls.py                   URL + property synthesis (pure)
        └── pool.py                   QueuePool wrapper + liveness probe
              └── connectors.py       import-guarded DB-API drivers
        └── registry.py               pool names in use
    StorageSettings (settings.py)     DATAPOOL_* environment settings
    sql_reader.py                     schema script splitter

Modules
-------
engines         StorageType enum, EngineDescriptor, describe(), parse()
config          ConnectionParameters, PoolConfig, ResolvedConfig, optimization tables
urls            URL/property synthesis
pool            ConnectionPool protocol, DataSourcePool, establish(), probe()
connectors      Per-engine DB-API connect functions
registry        PoolRegistry + process-wide default
builder         ConnectionBuilder, BuildMode, builder()
settings        StorageSettings, builder_from_settings()
sql_reader      parse_queries(), load_schema()
errors          Error hierarchy
logging         structlog configuration

Tags:
    datapool, database, connection-pool, builder, mysql, mariadb,
    postgresql, sqlite, h2, hsql

Doc-Types:
    package-overview, module-index
"""

from .builder import BuildMode, ConnectionBuilder, StorageCreator, builder
from .config import (
    FLEXIBLE_OPTIMIZATIONS,
    VALIDATED_OPTIMIZATIONS,
    ConnectionParameters,
    PoolConfig,
    ResolvedConfig,
)
from .engines import EngineDescriptor, StorageType, describe, parse
from .errors import (
    ConfigError,
    DatabaseConnectionError,
    DatapoolError,
    DuplicatePoolError,
    MissingConfigError,
)
from .pool import (
    ConnectionPool,
    DataSourcePool,
    PoolProvider,
    SQLAlchemyPoolProvider,
    StorageDataSource,
    establish,
    probe,
)
from .registry import PoolRegistry, pool_registry
from .sql_reader import load_schema, parse_queries

__version__ = "0.1.0"

__all__ = [
    # Engines
    "StorageType",
    "EngineDescriptor",
    "describe",
    "parse",
    # Configuration
    "ConnectionParameters",
    "PoolConfig",
    "ResolvedConfig",
    "FLEXIBLE_OPTIMIZATIONS",
    "VALIDATED_OPTIMIZATIONS",
    # Builders
    "BuildMode",
    "ConnectionBuilder",
    "StorageCreator",
    "builder",
    # Pools
    "ConnectionPool",
    "DataSourcePool",
    "PoolProvider",
    "SQLAlchemyPoolProvider",
    "StorageDataSource",
    "establish",
    "probe",
    # Registry
    "PoolRegistry",
    "pool_registry",
    # Scripts
    "parse_queries",
    "load_schema",
    # Errors
    "DatapoolError",
    "ConfigError",
    "MissingConfigError",
    "DuplicatePoolError",
    "DatabaseConnectionError",
]
