"""
Tests for in-flight refresh deduplication and the memory tier.
"""

import asyncio

import pytest

from weatherfx.cache.memory import MemoryCache
from weatherfx.services.inflight import InflightRequests


class TestInflightRequests:
    """Tests for InflightRequests."""

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_result(self):
        inflight = InflightRequests()
        calls = []

        async def refresh():
            calls.append(1)
            await asyncio.sleep(0.01)
            return {"CAD": 1.35}

        results = await asyncio.gather(
            inflight.run("rates_USD", refresh),
            inflight.run("rates_USD", refresh),
        )

        assert results == [{"CAD": 1.35}, {"CAD": 1.35}]
        assert len(calls) == 1
        assert len(inflight) == 0

    @pytest.mark.asyncio
    async def test_sequential_calls_refresh_again(self):
        inflight = InflightRequests()
        calls = []

        async def refresh():
            calls.append(1)
            return len(calls)

        assert await inflight.run("k", refresh) == 1
        assert await inflight.run("k", refresh) == 2

    @pytest.mark.asyncio
    async def test_failure_clears_entry(self):
        inflight = InflightRequests()

        async def refresh():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await inflight.run("k", refresh)

        assert not inflight.is_pending("k")

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_refresh(self):
        inflight = InflightRequests()
        release = asyncio.Event()

        async def refresh():
            await release.wait()
            return "done"

        first = asyncio.ensure_future(inflight.run("k", refresh))
        second = asyncio.ensure_future(inflight.run("k", refresh))
        await asyncio.sleep(0)

        first.cancel()
        release.set()

        assert await second == "done"

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        inflight = InflightRequests()

        async def refresh_a():
            return "a"

        async def refresh_b():
            return "b"

        assert await asyncio.gather(
            inflight.run("a", refresh_a), inflight.run("b", refresh_b)
        ) == ["a", "b"]


class TestMemoryCache:
    """Tests for MemoryCache."""

    def test_get_set(self):
        memory = MemoryCache()
        memory.set("rates_USD", {"CAD": 1.35})

        assert memory.get("rates_USD") == {"CAD": 1.35}
        assert "rates_USD" in memory
        assert memory.get("rates_EUR") is None

    def test_remove(self):
        memory = MemoryCache()
        memory.set("k", 1)

        assert memory.remove("k")
        assert not memory.remove("k")

    def test_clear(self):
        memory = MemoryCache()
        memory.set("a", 1)
        memory.set("b", 2)

        assert memory.clear() == 2
        assert len(memory) == 0
