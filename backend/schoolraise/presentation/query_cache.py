"""
Read cache used by the dashboard pages.

Each entry maps a request key (the API path the data comes from, e.g.
"/api/school/students") to a QueryState. Concurrent fetches of the same key
share a single in-flight load. Writes invalidate keys explicitly; an
invalidation that happens while a load is in flight prevents that (stale)
result from being stored.

Errors are returned as an ERROR state and never cached.
"""

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional

logger = logging.getLogger(__name__)


class QueryStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class QueryState:
    key: str
    status: QueryStatus = QueryStatus.PENDING
    data: Any = None
    error: Optional[str] = None
    updated_at: float = field(default=0.0)


class QueryCache:
    def __init__(self, ttl_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, QueryState] = {}
        self._inflight: Dict[str, Future] = {}
        self._generations: Dict[str, int] = {}

    def fetch(self, key: str, loader: Callable[[], Any]) -> QueryState:
        """
        Returns the cached state for key, loading it with loader() when absent or stale.
        A caller arriving while another load of the same key is running waits for it.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._is_fresh(entry):
                return entry

            future = self._inflight.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._inflight[key] = future
                generation = self._generations.get(key, 0)

        if not owner:
            return future.result()

        try:
            state = QueryState(key=key, status=QueryStatus.SUCCESS, data=loader(), updated_at=self._clock())
        except Exception as exc:
            logger.error("Query %s failed: %s", key, exc, exc_info=True)
            state = QueryState(key=key, status=QueryStatus.ERROR, error=str(exc), updated_at=self._clock())

        with self._lock:
            self._inflight.pop(key, None)
            if state.status == QueryStatus.SUCCESS and self._generations.get(key, 0) == generation:
                self._entries[key] = state

        future.set_result(state)
        return state

    def invalidate(self, *keys: str) -> None:
        with self._lock:
            for key in keys:
                self._entries.pop(key, None)
                self._generations[key] = self._generations.get(key, 0) + 1

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._entries)

    def _is_fresh(self, entry: QueryState) -> bool:
        if entry.status != QueryStatus.SUCCESS:
            return False
        return self.ttl_seconds <= 0 or (self._clock() - entry.updated_at) < self.ttl_seconds


class QueryCacheRegistry:
    """One QueryCache per authenticated user; keys are only shared within a user."""

    def __init__(self, ttl_seconds: float = 30.0):
        self.ttl_seconds = ttl_seconds
        self._lock = threading.Lock()
        self._caches: Dict[int, QueryCache] = {}

    def for_user(self, user_id: int) -> QueryCache:
        with self._lock:
            cache = self._caches.get(user_id)
            if cache is None:
                cache = QueryCache(self.ttl_seconds)
                self._caches[user_id] = cache
            return cache

    def invalidate(self, keys: Iterable[str], user_id: Optional[int] = None) -> None:
        """Invalidates keys for one user, or for every user when user_id is None."""
        keys = tuple(keys)
        with self._lock:
            caches = list(self._caches.values()) if user_id is None else [self._caches.get(user_id)]
        for cache in caches:
            if cache is not None:
                cache.invalidate(*keys)

    def drop(self, user_id: int) -> None:
        """Forgets a user's cache (logout)."""
        with self._lock:
            self._caches.pop(user_id, None)
