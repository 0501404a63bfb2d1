"""Process-lifetime cache of fetched star events."""

import asyncio
from collections.abc import Awaitable, Callable, Hashable, Iterable
from datetime import datetime, timedelta, timezone
from typing import Generic, TypeVar

from starlens.logging import get_logger
from starlens.types.stars import CacheEntry, CollectionKey, StarEvent

logger = get_logger("cache")

T = TypeVar("T")

DEFAULT_TTL = timedelta(days=7)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EventCache:
    """
    Memory-resident store of the last successful fetch per collection.

    Entries are replaced wholesale by ``put``; stale entries are ignored by
    ``get`` and overwritten by the next successful fetch rather than evicted.
    One instance is shared per process by whoever constructs it.
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[CollectionKey, CacheEntry] = {}

    def get(self, key: CollectionKey) -> CacheEntry | None:
        """Return the entry for ``key`` if it is younger than the TTL."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss for %s", key.slug)
            return None
        if self._clock() - entry.fetched_at >= self.ttl:
            logger.debug("Cache entry for %s is stale", key.slug)
            return None
        logger.debug("Cache hit for %s (%d events)", key.slug, len(entry.events))
        return entry

    def put(self, key: CollectionKey, events: Iterable[StarEvent]) -> CacheEntry:
        """Store ``events`` for ``key``, replacing any previous entry."""
        ordered = tuple(sorted(set(events), key=lambda e: (e.timestamp, e.actor)))
        entry = CacheEntry(key=key, fetched_at=self._clock(), events=ordered)
        self._entries[key] = entry
        return entry

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class SingleFlight(Generic[T]):
    """
    Shares one in-flight operation among concurrent callers of the same key.

    The shared task is shielded: a caller that is cancelled stops waiting
    but does not cancel the work for the others.
    """

    def __init__(self) -> None:
        self._inflight: dict[Hashable, asyncio.Task[T]] = {}

    async def do(self, key: Hashable, fn: Callable[[], Awaitable[T]]) -> T:
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(fn())
            self._inflight[key] = task
            task.add_done_callback(lambda _: self._forget(key, task))
        else:
            logger.debug("Joining in-flight fetch for %s", key)
        return await asyncio.shield(task)

    def _forget(self, key: Hashable, task: "asyncio.Task[T]") -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    def __contains__(self, key: object) -> bool:
        return key in self._inflight
