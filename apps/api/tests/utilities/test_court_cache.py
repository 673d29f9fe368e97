import asyncio

import pytest

from utilities.court_cache import CourtListCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return CourtListCache(ttl=60, clock=clock)


class Loader:
    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> list[str]:
        self.calls += 1
        await asyncio.sleep(0)
        return [f"load-{self.calls}"]


async def test_fresh_list_is_reused(cache, clock) -> None:
    loader = Loader()

    assert await cache.get(loader) == ["load-1"]
    clock.now += 59
    assert await cache.get(loader) == ["load-1"]
    assert loader.calls == 1


async def test_expired_list_is_reloaded(cache, clock) -> None:
    loader = Loader()

    await cache.get(loader)
    clock.now += 60

    assert await cache.get(loader) == ["load-2"]


async def test_concurrent_callers_share_one_load(cache) -> None:
    loader = Loader()

    results = await asyncio.gather(*(cache.get(loader) for _ in range(5)))

    assert loader.calls == 1
    assert all(result == ["load-1"] for result in results)


async def test_invalidate_forces_reload(cache) -> None:
    loader = Loader()

    await cache.get(loader)
    cache.invalidate()

    assert not cache.is_fresh
    assert await cache.get(loader) == ["load-2"]


async def test_subscribers_see_refresh_and_invalidation(cache) -> None:
    seen: list[list[str] | None] = []
    unsubscribe = cache.subscribe(seen.append)

    await cache.get(Loader())
    cache.invalidate()
    unsubscribe()
    cache.invalidate()

    assert seen == [["load-1"], None]


async def test_failing_subscriber_does_not_break_others(cache, caplog) -> None:
    seen: list[list[str] | None] = []

    def broken(_items):
        raise RuntimeError("boom")

    cache.subscribe(broken)
    cache.subscribe(seen.append)

    cache.invalidate()

    assert seen == [None]
    assert "subscriber" in caplog.text


async def test_failed_load_leaves_cache_empty(cache) -> None:
    async def failing() -> list[str]:
        raise RuntimeError("database down")

    with pytest.raises(RuntimeError):
        await cache.get(failing)

    assert not cache.is_fresh


async def test_invalidate_during_load_is_not_lost(cache) -> None:
    release = asyncio.Event()

    async def slow_loader() -> list[str]:
        await release.wait()
        return ["stale"]

    async def fresh_loader() -> list[str]:
        return ["fresh"]

    pending = asyncio.create_task(cache.get(slow_loader))
    await asyncio.sleep(0)
    cache.invalidate()
    release.set()

    assert await pending == ["stale"]
    assert not cache.is_fresh
    assert await cache.get(fresh_loader) == ["fresh"]
