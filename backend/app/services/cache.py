"""
Notes API - In-Memory Expiring Cache
====================================

What:  Process-local key/value cache with sliding and absolute expiration.
How:   A dict of entries, each remembering when it was stored and when it
       was last read. Expired entries are dropped lazily on access.
Who:   NoteService keeps the full note listing here (key "all_notes").
When:  One instance per application, created in create_app() and cleared at
       shutdown.

Expiration:
    An entry dies at whichever comes first:
    - sliding:  `sliding_seconds` after it was last read or written
    - absolute: `absolute_seconds` after it was written

    stored at t=0, sliding=300, absolute=900
    read at t=200  → hit, idle deadline moves to t=500
    read at t=480  → hit, idle deadline moves to t=780
    read at t=760  → hit, idle deadline moves to t=1060
    read at t=900  → miss (absolute limit reached first)

Concurrency:
    All operations are synchronous dict operations with no awaits inside,
    so under asyncio each call runs to completion without interleaving.
    This cache is per process; with several workers each keeps its own copy.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class _CacheEntry:
    value: Any
    stored_at: float
    last_access: float
    sliding_seconds: Optional[float]
    absolute_seconds: Optional[float]

    def is_expired(self, now: float) -> bool:
        if self.absolute_seconds is not None and now - self.stored_at >= self.absolute_seconds:
            return True
        if self.sliding_seconds is not None and now - self.last_access >= self.sliding_seconds:
            return True
        return False


class MemoryCache:
    """
    Expiring in-memory cache.

    Args:
        clock: Monotonic time source in seconds. Tests pass a fake clock.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, _CacheEntry] = {}
        self._invalidations = 0

    def get(self, key: str) -> Optional[Any]:
        """Returns the live value for `key` (renewing its sliding window) or None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        now = self._clock()
        if entry.is_expired(now):
            del self._entries[key]
            logger.debug("Cache entry '%s' expired", key)
            return None
        entry.last_access = now
        return entry.value

    def set(
        self,
        key: str,
        value: Any,
        sliding_seconds: Optional[float] = None,
        absolute_seconds: Optional[float] = None,
    ) -> None:
        """Stores `value`, replacing any existing entry under `key`."""
        now = self._clock()
        self._entries[key] = _CacheEntry(
            value=value,
            stored_at=now,
            last_access=now,
            sliding_seconds=sliding_seconds,
            absolute_seconds=absolute_seconds,
        )

    def remove(self, key: str) -> None:
        """Evicts `key`. Missing keys are ignored."""
        self._entries.pop(key, None)
        self._invalidations += 1

    def clear(self) -> None:
        self._entries.clear()
        self._invalidations += 1

    @property
    def invalidations(self) -> int:
        """
        Count of remove() and clear() calls so far.

        A reader that loads a value from the source of truth compares this
        before and after the load; a change means a write evicted the key in
        between and the loaded value may already be stale.
        """
        return self._invalidations

    def __len__(self) -> int:
        """Number of live entries. Purges expired ones as a side effect."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if e.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(self._entries)
