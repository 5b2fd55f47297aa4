"""In-process TTL caches for the aggregated list and detail records."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Cached value with its monotonic and wall-clock set times."""

    data: T
    timestamp: float
    """Monotonic clock reading at ``set`` time; drives expiry."""
    fetched_at: float
    """Wall-clock epoch seconds at ``set`` time; reported to callers."""


class ListingCache(Generic[T]):
    """Single-slot cache for the aggregated vehicle list.

    The slot is replaced wholesale by :meth:`set` and never cleared by
    expiry: an expired entry is still returned (flagged not fresh) so
    callers can fall back to it when a refresh fails.
    """

    def __init__(
        self,
        ttl: float,
        *,
        clock: Clock = time.monotonic,
        wall_clock: Clock = time.time,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._wall_clock = wall_clock
        self._entry: CacheEntry[T] | None = None

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def entry(self) -> CacheEntry[T] | None:
        return self._entry

    def is_fresh(self, entry: CacheEntry[T] | None = None) -> bool:
        entry = entry if entry is not None else self._entry
        if entry is None:
            return False
        return (self._clock() - entry.timestamp) < self._ttl

    def get(self) -> tuple[T | None, bool]:
        """Return ``(data, is_fresh)``; ``(None, False)`` when never set."""
        entry = self._entry
        if entry is None:
            return None, False
        return entry.data, self.is_fresh(entry)

    def set(self, data: T) -> CacheEntry[T]:
        """Replace the slot and reset its timestamp."""
        entry = CacheEntry(data=data, timestamp=self._clock(), fetched_at=self._wall_clock())
        self._entry = entry
        return entry

    def clear(self) -> None:
        self._entry = None


class DetailCache(Generic[T]):
    """Id-keyed cache with an independent TTL per entry.

    Expired entries are evicted lazily when they are next looked up;
    there is no background sweep.
    """

    def __init__(self, ttl: float, *, clock: Clock = time.monotonic) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[T, float]] = {}

    def get(self, key: str) -> T | None:
        item = self._entries.get(key)
        if item is None:
            return None
        data, stored_at = item
        if (self._clock() - stored_at) >= self._ttl:
            del self._entries[key]
            return None
        return data

    def set(self, key: str, data: T) -> None:
        self._entries[key] = (data, self._clock())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
