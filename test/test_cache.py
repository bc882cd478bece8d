import threading
import time

import pytest

from conftest import FakeClock
from services.cache import FreshnessCache


@pytest.fixture
def cache(clock):
    return FreshnessCache(ttl=300, clock=clock)


def test_get_never_populated(cache):
    assert cache.get("people") is None


def test_entry_served_until_expiry(cache, clock):
    cache.put("people", [{"name": "Luke"}])

    clock.advance(299)
    assert cache.get("people") == ({"name": "Luke"},)

    clock.advance(1)
    assert cache.get("people") is None


def test_put_custom_ttl(cache, clock):
    cache.put("planets", [], ttl=5)
    clock.advance(4)
    assert cache.get("planets") == ()
    clock.advance(1)
    assert cache.get("planets") is None


def test_put_snapshots_collection(cache):
    data = [{"name": "Luke"}]
    cache.put("people", data)
    data.append({"name": "Leia"})

    assert len(cache.get("people")) == 1


def test_invalidate(cache):
    cache.put("people", [])
    cache.put("planets", [])

    cache.invalidate("people")
    assert cache.get("people") is None
    assert cache.get("planets") == ()

    cache.invalidate()
    assert cache.get("planets") is None


def test_get_or_load_loads_once_per_window(cache, clock):
    calls = []

    def loader():
        calls.append(1)
        return [{"n": len(calls)}]

    assert cache.get_or_load("people", loader) == ({"n": 1},)
    assert cache.get_or_load("people", loader) == ({"n": 1},)
    assert len(calls) == 1

    clock.advance(300)
    assert cache.get_or_load("people", loader) == ({"n": 2},)
    assert len(calls) == 2


def test_get_or_load_failure_populates_nothing(cache):
    def broken():
        raise RuntimeError("upstream down")

    with pytest.raises(RuntimeError):
        cache.get_or_load("people", broken)
    assert cache.get("people") is None


def test_get_or_load_coalesces_concurrent_misses():
    cache = FreshnessCache(ttl=300, clock=FakeClock())
    loading = threading.Event()
    release = threading.Event()
    waiting = threading.Semaphore(0)
    calls = []

    def loader():
        calls.append(1)
        loading.set()
        release.wait(timeout=2)
        return [{"name": "Luke"}]

    results = []

    def first():
        results.append(cache.get_or_load("people", loader))

    def waiter():
        waiting.release()
        results.append(cache.get_or_load("people", loader))

    owner = threading.Thread(target=first)
    owner.start()
    assert loading.wait(timeout=2)

    # os outros chegam com a carga ainda em andamento: cache vazio, lock ocupado
    waiters = [threading.Thread(target=waiter) for _ in range(4)]
    for t in waiters:
        t.start()
    for _ in waiters:
        assert waiting.acquire(timeout=2)
    time.sleep(0.1)
    assert cache.get("people") is None

    release.set()
    for t in [owner, *waiters]:
        t.join(timeout=2)

    assert len(calls) == 1
    assert results == [({"name": "Luke"},)] * 5
