"""
Structured error types for datapool.

Every failure that leaves a builder is either a value (``None``) or one of
the typed errors below. Errors carry a category and an optional chained
cause so they can be logged with :meth:`DatapoolError.to_dict`.

Manifesto:
    - **Typed hierarchy:** configuration mistakes and connection failures
      are different problems with different owners
    - **Explicit retry semantics:** connection errors are retryable,
      configuration errors never are
    - **Error chaining:** the driver exception is kept as ``cause``

Architecture:
    ::

        DatapoolError (category, retryable, cause)
        ├── ConfigError            (CONFIG, never retryable)
        │   ├── MissingConfigError
        │   └── DuplicatePoolError
        └── DatabaseConnectionError (DATABASE, retryable)

Guardrails:
    ❌ DON'T: raise these out of a validated build, return ``None`` and log
    ✅ DO: raise ``MissingConfigError`` when a flexible build has no path

Tags:
    error-handling, exception-hierarchy, datapool

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    CONFIG = "CONFIG"
    DATABASE = "DATABASE"
    INTERNAL = "INTERNAL"


class DatapoolError(Exception):
    """
    Base exception for all datapool errors.

    Subclasses set ``default_category`` and ``default_retryable``; both can
    be overridden per instance.

    Examples:
        >>> error = DatapoolError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.retryable
        False
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(DatapoolError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class MissingConfigError(ConfigError):
    """Required configuration is missing."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}")


class DuplicatePoolError(ConfigError):
    """Pool name is already registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} is already registered!")


# =============================================================================
# CONNECTION ERRORS
# =============================================================================


class DatabaseConnectionError(DatapoolError):
    """Database connection or pool error."""

    default_category = ErrorCategory.DATABASE
    default_retryable = True


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, DatapoolError):
        return error.retryable
    return isinstance(error, (ConnectionError, OSError))


__all__ = [
    "ErrorCategory",
    "DatapoolError",
    "ConfigError",
    "MissingConfigError",
    "DuplicatePoolError",
    "DatabaseConnectionError",
    "is_retryable",
]
