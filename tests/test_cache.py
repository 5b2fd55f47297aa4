from __future__ import annotations

from conftest import FakeClock

from dealerstock._cache import DetailCache, ListingCache


def test_listing_cache_empty_until_set(clock: FakeClock, wall_clock: FakeClock) -> None:
    cache: ListingCache[list[str]] = ListingCache(60, clock=clock, wall_clock=wall_clock)

    assert cache.entry is None
    assert cache.get() == (None, False)
    assert cache.is_fresh() is False


def test_listing_cache_expires_but_keeps_entry(clock: FakeClock, wall_clock: FakeClock) -> None:
    cache: ListingCache[list[str]] = ListingCache(60, clock=clock, wall_clock=wall_clock)
    entry = cache.set(["a"])

    assert entry.fetched_at == wall_clock.now
    assert cache.get() == (["a"], True)

    clock.advance(59)
    assert cache.is_fresh() is True

    clock.advance(1)
    assert cache.get() == (["a"], False)
    assert cache.entry is entry


def test_listing_cache_set_replaces_slot(clock: FakeClock, wall_clock: FakeClock) -> None:
    cache: ListingCache[list[str]] = ListingCache(60, clock=clock, wall_clock=wall_clock)
    cache.set(["old"])
    clock.advance(120)

    cache.set(["new"])

    assert cache.get() == (["new"], True)


def test_detail_cache_evicts_lazily(clock: FakeClock) -> None:
    cache: DetailCache[str] = DetailCache(30, clock=clock)
    cache.set("1", "first")
    clock.advance(10)
    cache.set("2", "second")

    clock.advance(20)

    assert "1" in cache
    assert cache.get("1") is None
    assert "1" not in cache
    assert cache.get("2") == "second"
    assert len(cache) == 1


def test_detail_cache_entries_have_independent_ttls(clock: FakeClock) -> None:
    cache: DetailCache[str] = DetailCache(30, clock=clock)
    cache.set("1", "first")
    clock.advance(25)
    cache.set("1", "refreshed")
    clock.advance(25)

    assert cache.get("1") == "refreshed"
