# =============================================================================
# lib/cache.py - Time-Based In-Process Cache
# =============================================================================
# A small TTL cache for data that is cheap to refetch but hit on every page:
# subject catalogs, the unfiltered marketplace listing, contributor lists.
#
# Entries expire after a fixed number of seconds. There is no size bound and
# no eviction beyond expiry; keys are plain strings.
#
# Usage:
#   from lib.cache import TTLCache
#   cache = TTLCache(ttl_seconds=300)
#   cache.set("fy-comps-odd", subjects)
#   subjects = cache.get("fy-comps-odd")  # None once expired
# =============================================================================

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

logger = logging.getLogger(__name__)


class TTLCache:
    """
    Thread-safe dict with per-entry expiry.

    A ttl of 0 disables caching: set() is a no-op and get() always misses.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key}")
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        if self.ttl_seconds <= 0:
            return
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
