"""Shared in-memory cache with per-read staleness checks.

Async-safe via asyncio.Lock. Expired entries are kept (not evicted) so a
caller can still fall back to the last known value when a refresh fails.
"""

import asyncio
import time
from collections.abc import Callable
from typing import Any


class TtlCache:
    """Key -> (value, stored_at) map with age-based lookups.

    Args:
        clock: Monotonic time source in seconds; injectable for tests.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, tuple[Any, float]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            self._entries[key] = (value, self._clock())

    async def get(self, key: str, max_age: float) -> Any | None:
        """Return the cached value if it is younger than max_age seconds."""
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, stored_at = entry
            if self._clock() - stored_at >= max_age:
                return None
            return value

    async def get_stale(self, key: str) -> Any | None:
        """Return the cached value regardless of age, or None if never cached."""
        async with self._lock:
            entry = self._entries.get(key)
            return entry[0] if entry is not None else None

    async def age(self, key: str) -> float | None:
        """Seconds since key was stored, or None if never cached."""
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            return self._clock() - entry[1]

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
