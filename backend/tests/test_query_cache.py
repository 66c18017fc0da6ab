"""
Tests for the page query cache: deduplication, freshness and invalidation.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

from schoolraise.presentation.query_cache import QueryCache, QueryCacheRegistry, QueryStatus


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


# ============================================================
# fetch
# ============================================================

def test_fetch_loads_once_then_serves_cache():
    cache = QueryCache(ttl_seconds=30)
    calls = []

    def loader():
        calls.append(1)
        return ["school"]

    first = cache.fetch("/api/admin/schools", loader)
    second = cache.fetch("/api/admin/schools", loader)

    assert first.status == QueryStatus.SUCCESS
    assert second.data == ["school"]
    assert len(calls) == 1


def test_concurrent_fetches_share_one_load():
    cache = QueryCache(ttl_seconds=30)
    started = threading.Event()
    release = threading.Event()
    calls = []

    def slow_loader():
        calls.append(1)
        started.set()
        release.wait(timeout=5)
        return 42

    with ThreadPoolExecutor(max_workers=4) as pool:
        first = pool.submit(cache.fetch, "/api/dashboard/stats", slow_loader)
        started.wait(timeout=5)
        others = [pool.submit(cache.fetch, "/api/dashboard/stats", slow_loader) for _ in range(3)]
        time.sleep(0.05)
        release.set()
        results = [first.result(timeout=5)] + [f.result(timeout=5) for f in others]

    assert len(calls) == 1
    assert all(r.data == 42 for r in results)


def test_stale_entry_is_reloaded():
    clock = FakeClock()
    cache = QueryCache(ttl_seconds=30, clock=clock)
    values = iter([1, 2])

    assert cache.fetch("k", lambda: next(values)).data == 1
    clock.now += 31
    assert cache.fetch("k", lambda: next(values)).data == 2


def test_errors_are_returned_but_not_cached():
    cache = QueryCache(ttl_seconds=30)

    def broken():
        raise RuntimeError("database unavailable")

    state = cache.fetch("k", broken)

    assert state.status == QueryStatus.ERROR
    assert "database unavailable" in state.error
    assert cache.fetch("k", lambda: "ok").data == "ok"


# ============================================================
# invalidate
# ============================================================

def test_invalidate_forces_reload():
    cache = QueryCache(ttl_seconds=30)
    values = iter(["before", "after"])
    cache.fetch("/api/school/students", lambda: next(values))

    cache.invalidate("/api/school/students")

    assert cache.fetch("/api/school/students", lambda: next(values)).data == "after"


def test_invalidation_during_load_discards_result():
    cache = QueryCache(ttl_seconds=30)

    def loader():
        cache.invalidate("k")
        return "stale"

    assert cache.fetch("k", loader).data == "stale"
    assert "k" not in cache.keys()


# ============================================================
# QueryCacheRegistry
# ============================================================

def test_registry_keeps_users_apart():
    registry = QueryCacheRegistry(ttl_seconds=30)
    registry.for_user(1).fetch("/api/notifications", lambda: ["for amy"])

    state = registry.for_user(2).fetch("/api/notifications", lambda: ["for ben"])

    assert state.data == ["for ben"]


def test_registry_invalidate_for_one_user_or_everyone():
    registry = QueryCacheRegistry(ttl_seconds=30)
    for user_id in (1, 2):
        registry.for_user(user_id).fetch("k", lambda: "v")

    registry.invalidate(["k"], user_id=1)
    assert registry.for_user(1).keys() == []
    assert registry.for_user(2).keys() == ["k"]

    registry.invalidate(["k"])
    assert registry.for_user(2).keys() == []


def test_registry_drop_forgets_user():
    registry = QueryCacheRegistry()
    cache = registry.for_user(1)
    registry.drop(1)
    assert registry.for_user(1) is not cache
