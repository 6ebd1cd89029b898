"""Registry of pool names in use.

Manifesto:
    Two pools with the same name make pool metrics and logs ambiguous.
    Builders check the registry before connecting and claim the name with
    an atomic insert-if-absent once the connection is proven, so two
    concurrent builds of the same name cannot both succeed.

Features:
    - ``PoolRegistry`` lock-guarded name set, injectable per builder
    - ``register_if_absent()`` atomic claim
    - ``pool_registry`` process-wide default instance

Tags:
    datapool, registry, pool-names, thread-safe

Doc-Types:
    api-reference
"""

from __future__ import annotations

import threading
from collections.abc import Iterator

from .errors import DuplicatePoolError


class PoolRegistry:
    """Set of registered pool names. Names are never removed."""

    def __init__(self) -> None:
        self._names: set[str] = set()
        self._lock = threading.Lock()

    def contains(self, name: str) -> bool:
        with self._lock:
            return name in self._names

    def register(self, name: str) -> None:
        """Register *name*; raises :class:`DuplicatePoolError` if taken."""
        if not self.register_if_absent(name):
            raise DuplicatePoolError(name)

    def register_if_absent(self, name: str) -> bool:
        """Claim *name*. Returns ``False`` if it was already registered."""
        with self._lock:
            if name in self._names:
                return False
            self._names.add(name)
            return True

    def names(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._names)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.names()))


# Process-wide default, used by builders that are not given a registry
pool_registry = PoolRegistry()


__all__ = [
    "PoolRegistry",
    "pool_registry",
]
