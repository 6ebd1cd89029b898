"""
Datapool logging - structured logging via structlog.

Builders log through ``get_logger(__name__)`` unless the caller hands in its
own logger. Anything exposing ``info``/``warning``/``error`` works as a log
observer: a structlog ``BoundLogger`` or a stdlib ``logging.Logger``.

Examples:
    >>> from datapool.logging import configure_logging, get_logger
    >>> configure_logging(level="INFO", json_format=True, service="inventory")
    >>> logger = get_logger(__name__)
    >>> logger.info("pool_opened", pool="inventory-main", engine="MySQL")

Guardrails:
    - Auto-detects JSON vs console based on TTY
    - Service name stored globally (set once at startup)
    - Log content never drives control flow

Tags:
    logging, structlog, observability, datapool
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Protocol

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_SERVICE_NAME = "datapool"


class LogObserver(Protocol):
    """Leveled logger accepted by the validated builder."""

    def info(self, event: str, *args: Any, **kwargs: Any) -> Any: ...

    def warning(self, event: str, *args: Any, **kwargs: Any) -> Any: ...

    def error(self, event: str, *args: Any, **kwargs: Any) -> Any: ...


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _elasticsearch_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Make field names Elasticsearch/ECS compatible."""
    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")
    if "level" in event_dict:
        event_dict["log.level"] = event_dict.pop("level")
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "datapool",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        shared_processors.append(_elasticsearch_compatible)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


__all__ = [
    "LogObserver",
    "configure_logging",
    "get_logger",
]
