import asyncio

import pytest

from noves_mcp.rate_limiter import PerKeyRateLimiter


@pytest.mark.asyncio
async def test_per_key_rate_limiter_allows_then_blocks():
    limiter = PerKeyRateLimiter(rate_per_sec=1, burst=1)
    assert await limiter.allow("tool")
    # Immediately requesting again should fail due to no tokens
    assert not await limiter.allow("tool")
    # Other keys have their own bucket
    assert await limiter.allow("other_tool")
    await asyncio.sleep(1.05)
    assert await limiter.allow("tool")


@pytest.mark.asyncio
async def test_per_tool_override():
    limiter = PerKeyRateLimiter(rate_per_sec=10, burst=5, per_tool={"slow_tool": 0.1})
    assert await limiter.allow("slow_tool")
    assert await limiter.allow("fast_tool")
    slow = limiter._buckets["slow_tool"]
    fast = limiter._buckets["fast_tool"]
    assert slow.rate == pytest.approx(0.1)
    assert slow.capacity == pytest.approx(1.0)
    assert fast.rate == pytest.approx(10)
    assert fast.capacity == pytest.approx(5)
    assert not await limiter.allow("slow_tool")
