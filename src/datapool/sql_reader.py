"""SQL script reader.

Splits a schema script into statements: lines starting with ``--`` are
skipped, a statement ends at a line ending with ``;``, and anything left
without a closing ``;`` is dropped. The lines of one statement are joined
with a single space.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO

from .engines import StorageType
from .logging import get_logger

logger = get_logger(__name__)


def parse_queries(stream: BinaryIO) -> list[str]:
    """Read UTF-8 SQL from *stream* and return its statements in order.

    Read errors are logged; the statements parsed up to that point are
    returned.
    """
    queries: list[str] = []
    buffer: list[str] = []
    try:
        with io.TextIOWrapper(stream, encoding="utf-8") as reader:
            for raw in reader:
                line = raw.rstrip("\r\n")
                if line.startswith("--"):
                    continue
                buffer.append(line)
                if line.endswith(";"):
                    statement = " ".join(buffer)[:-1].strip()
                    if statement:
                        queries.append(statement)
                    buffer = []
    except (OSError, UnicodeDecodeError) as e:
        logger.error("sql_read_failed", error=str(e), parsed=len(queries))
    return queries


def load_schema(engine: StorageType, directory: str | Path) -> list[str]:
    """Parse the schema script of *engine* found in *directory*."""
    path = Path(directory) / engine.schema_path
    with path.open("rb") as handle:
        return parse_queries(handle)


__all__ = [
    "parse_queries",
    "load_schema",
]
