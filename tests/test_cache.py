"""Tests for the per-root status cache."""

from pathlib import Path

from gitoverlay.cache import StatusCache


class _Clock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


ROOT = Path("/repo")


def test_get_returns_entry_within_ttl():
    clock = _Clock(1000.0)
    cache = StatusCache(ttl_ms=2000, clock=clock)
    status = {"/repo/a.txt": " M"}
    cache.put(ROOT, status)

    clock.now = 2999.0
    entry = cache.get(ROOT)
    assert entry is not None
    assert entry.status is status
    assert entry.root == ROOT


def test_get_reports_miss_once_stale_but_keeps_entry():
    clock = _Clock(0.0)
    cache = StatusCache(ttl_ms=2000, clock=clock)
    cache.put(ROOT, {})

    clock.now = 2000.0
    assert cache.get(ROOT) is None
    assert ROOT in cache


def test_get_unknown_root():
    cache = StatusCache()
    assert cache.get(Path("/nowhere")) is None


def test_put_overwrites_entry():
    clock = _Clock(10.0)
    cache = StatusCache(clock=clock)
    cache.put(ROOT, {"/repo/a": "??"})
    clock.now = 20.0
    cache.put(ROOT, {"/repo/b": "??"})
    assert cache.get(ROOT).status == {"/repo/b": "??"}
    assert len(cache) == 1


def test_timestamps_strictly_increase():
    clock = _Clock(50.0)
    cache = StatusCache(clock=clock)
    first = cache.put(ROOT, {})
    second = cache.put(ROOT, {})
    third = cache.put(ROOT, {}, now=10.0)
    assert first.timestamp < second.timestamp < third.timestamp


def test_invalidate_all():
    cache = StatusCache(clock=_Clock())
    other = Path("/other")
    cache.put(ROOT, {})
    cache.put(other, {})
    assert other in cache

    cache.invalidate_all()
    assert len(cache) == 0
    assert cache.get(ROOT) is None
    assert other not in cache
