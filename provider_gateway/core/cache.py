"""Process-wide namespaced cache with TTL expiry.

Used to memoize provider-fetched token metadata. Entries are keyed by
``(namespace, key)``; each read checks the entry's deadline and drops it
once expired.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

TOKEN_CONFIG_NAMESPACE = "token_config"


@dataclass(frozen=True, slots=True)
class _Entry:
    value: Any
    expires_at: float | None


class MemoryCache:
    """In-memory async cache shared by every request in the process.

    Operations never await while touching the store, so each get/set is
    atomic under asyncio's cooperative scheduling. The async signatures keep
    callers agnostic of a future networked backend.
    """

    def __init__(
        self,
        default_ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            default_ttl: TTL in seconds applied when set() is given none.
                None means entries never expire.
            clock: Monotonic time source, injectable for tests.
        """
        self._default_ttl = default_ttl
        self._clock = clock
        self._store: dict[tuple[str, str], _Entry] = {}

    async def get(self, namespace: str, key: str) -> Any | None:
        entry = self._store.get((namespace, key))
        if entry is None:
            logger.debug(f"Cache miss: {namespace}:{key}")
            return None
        if entry.expires_at is not None and self._clock() >= entry.expires_at:
            logger.debug(f"Cache entry expired: {namespace}:{key}")
            self._store.pop((namespace, key), None)
            return None
        logger.debug(f"Cache hit: {namespace}:{key}")
        return entry.value

    async def set(
        self,
        namespace: str,
        key: str,
        value: Any,
        ttl: float | None = None,
    ) -> None:
        effective_ttl = ttl if ttl is not None else self._default_ttl
        expires_at = self._clock() + effective_ttl if effective_ttl is not None else None
        self._store[(namespace, key)] = _Entry(value=value, expires_at=expires_at)
        logger.debug(f"Cache set: {namespace}:{key}", extra={"ttl": effective_ttl})

    async def delete(self, namespace: str, key: str) -> None:
        self._store.pop((namespace, key), None)

    def clear(self) -> None:
        """Drop every entry. This is primarily useful for testing."""
        self._store.clear()

    def namespace(self, namespace: str) -> NamespacedCache:
        return NamespacedCache(self, namespace)


class NamespacedCache:
    """View of a MemoryCache bound to one namespace."""

    def __init__(self, backend: MemoryCache, namespace: str) -> None:
        self._backend = backend
        self.namespace = namespace

    async def get(self, key: str) -> Any | None:
        return await self._backend.get(self.namespace, key)

    async def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        await self._backend.set(self.namespace, key, value, ttl)

    async def delete(self, key: str) -> None:
        await self._backend.delete(self.namespace, key)


def standard_cache(namespace: str) -> NamespacedCache:
    """Return the process-wide cache bound to `namespace`."""
    from provider_gateway.core.config.config import get_config

    return get_config().cache.namespace(namespace)
