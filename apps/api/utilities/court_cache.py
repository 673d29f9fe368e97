"""In-process cache for the public court list."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from logging import getLogger
from typing import Generic, TypeVar

log = getLogger(__name__)

T = TypeVar("T")

Subscriber = Callable[[list[T] | None], None]

DEFAULT_TTL_SECONDS = 300.0


class CourtListCache(Generic[T]):
    """Cache one list of courts for a fixed time-to-live.

    Concurrent ``get`` calls made while the list is stale share a single load.
    Subscribers are notified with the new list after a refresh, and with ``None``
    after an invalidation.
    """

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl
        self._clock = clock
        self._items: list[T] | None = None
        self._loaded_at = 0.0
        self._generation = 0
        self._lock = asyncio.Lock()
        self._subscribers: list[Subscriber[T]] = []

    @property
    def is_fresh(self) -> bool:
        return self._items is not None and self._clock() - self._loaded_at < self._ttl

    async def get(self, loader: Callable[[], Awaitable[list[T]]]) -> list[T]:
        """Return the cached list, loading it with ``loader`` when stale."""
        if self.is_fresh:
            return self._items  # type: ignore[return-value]
        async with self._lock:
            if self.is_fresh:
                return self._items  # type: ignore[return-value]
            generation = self._generation
            items = await loader()
            if generation != self._generation:
                # Invalidated while loading; keep the cache empty.
                return items
            self._items = items
            self._loaded_at = self._clock()
        self._notify(items)
        return items

    def invalidate(self) -> None:
        """Drop the cached list so the next ``get`` reloads it."""
        self._generation += 1
        self._items = None
        self._loaded_at = 0.0
        self._notify(None)

    def subscribe(self, callback: Subscriber[T]) -> Callable[[], None]:
        """Register ``callback`` for refreshes and invalidations.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, items: list[T] | None) -> None:
        for callback in list(self._subscribers):
            try:
                callback(items)
            except Exception:
                log.exception("Court cache subscriber %r failed", callback)
