import asyncio
from datetime import datetime, timezone

import pytest

import noves_mcp.tools.tokens as tokens_mod
from noves_mcp.models import PricedBy, TokenInfo, TokenPrice
from noves_mcp.noves_api import NotFoundError
from noves_mcp.observability import NullObserver
from noves_mcp.tools import analytics, get_current_token_price, get_historical_token_price, get_token_price_comparison
from noves_stubs import StubProvider, text_of

QUIET = NullObserver()
AT = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


def _price(amount, block="100", **overrides):
    values = dict(
        amount=amount,
        currency="USD",
        status="resolved",
        block=block,
        token=TokenInfo(address="0xt", symbol="WETH", name="Wrapped Ether"),
        priced_by=PricedBy(exchange_name="Uniswap", pool_address="0xpool", liquidity=1500000),
        price_type="dexHighestLiquidity",
    )
    values.update(overrides)
    return TokenPrice(**values)


@pytest.mark.asyncio
async def test_current_price(monkeypatch):
    monkeypatch.setattr(tokens_mod, "_utcnow", lambda: AT)
    provider = StubProvider(prices={None: _price("3000.5")})
    text = text_of(
        await get_current_token_price({"chain": "eth", "tokenAddress": "0xt"}, provider=provider, observer=QUIET)
    )
    assert text.split("\n") == [
        "**Current Token Price**",
        "",
        "**Token Address:** 0xt",
        "**Chain:** eth",
        "**Current Price:** 3000.5 USD",
        "**Symbol:** WETH",
        "**Name:** Wrapped Ether",
        "",
        "**Price Information:**",
        "- Amount: 3000.5",
        "- Currency: USD",
        "- Status: resolved",
        "- Block: 100",
        "- Retrieved at: 2024-01-15T10:30:00.000Z",
        "",
        "**Pricing Details:**",
        "- Priced by: Uniswap (0xpool)",
        "- Liquidity: $1,500,000",
        "- Price Type: dexHighestLiquidity",
    ]
    assert provider.calls == [("fetch_token_price", "eth", "0xt", {})]


@pytest.mark.asyncio
async def test_current_price_is_stable_apart_from_retrieval_time():
    provider = StubProvider(prices={None: _price("1")})
    args = {"chain": "eth", "tokenAddress": "0xt"}
    first = text_of(await get_current_token_price(args, provider=provider, observer=QUIET)).split("\n")
    second = text_of(await get_current_token_price(args, provider=provider, observer=QUIET)).split("\n")
    strip = lambda lines: [line for line in lines if not line.startswith("- Retrieved at:")]  # noqa: E731
    assert strip(first) == strip(second)


@pytest.mark.asyncio
async def test_current_price_missing_symbol_keeps_blank_lines(monkeypatch):
    monkeypatch.setattr(tokens_mod, "_utcnow", lambda: AT)
    provider = StubProvider(prices={None: _price("1", token=TokenInfo(address="0xt"), priced_by=None)})
    lines = text_of(await get_current_token_price({"chain": "eth", "tokenAddress": "0xt"}, provider=provider)).split("\n")
    assert lines[4:8] == ["**Current Price:** 1 USD", "", "", ""]
    assert "- Priced by: Unknown (N/A)" in lines
    assert "- Liquidity: N/A" in lines


@pytest.mark.asyncio
async def test_historical_price():
    provider = StubProvider(prices={"1705314600": _price("2500")})
    text = text_of(
        await get_historical_token_price(
            {"chain": "eth", "tokenAddress": "0xt", "timestamp": "1705314600"}, provider=provider, observer=QUIET
        )
    )
    lines = text.split("\n")
    assert lines[0] == "**Historical Token Price**"
    assert "**Historical Price:** 2500 USD" in lines
    assert "**Date:** 2024-01-15T10:30:00.000Z" in lines
    assert "- Timestamp: 1705314600 (Unix)" in lines
    assert "- Date: 1/15/2024 10:30:00 AM" in lines
    assert provider.calls == [("fetch_token_price", "eth", "0xt", {"timestamp": "1705314600"})]


@pytest.mark.asyncio
async def test_historical_price_requires_timestamp():
    provider = StubProvider()
    text = text_of(await get_historical_token_price({"chain": "eth", "tokenAddress": "0xt"}, provider=provider))
    assert text.startswith("Error fetching historical token price: timestamp: Field required")
    assert provider.calls == []


@pytest.mark.asyncio
async def test_historical_price_invalid_timestamp_is_error_text():
    provider = StubProvider(prices={"yesterday": _price("1")})
    text = text_of(
        await get_historical_token_price(
            {"chain": "eth", "tokenAddress": "0xt", "timestamp": "yesterday"}, provider=provider, observer=QUIET
        )
    )
    assert text == "Error fetching historical token price: Invalid timestamp: yesterday"


@pytest.mark.asyncio
async def test_comparison_until_now_uses_current_price():
    provider = StubProvider(prices={"1000": _price("10", block="100"), None: _price("12", block="200")})
    text = text_of(
        await get_token_price_comparison(
            {"chain": "eth", "tokenAddress": "0xt", "fromTimestamp": "1000"}, provider=provider, observer=QUIET
        )
    )
    assert "- **From:** 1/1/1970 - 10 USD" in text
    assert "**Price Movement:** 📈" in text
    assert "- **Change:** +2.000000 USD" in text
    assert "- **Percentage:** +20.00%" in text
    assert "- **Direction:** Price has increased 📈" in text
    assert "The token price has increased by 20.00% over the selected period." in text
    assert "- From Block: 100" in text
    assert "- To Block: 200" in text
    assert sorted(provider.calls, key=lambda call: len(call[3])) == [
        ("fetch_token_price", "eth", "0xt", {}),
        ("fetch_token_price", "eth", "0xt", {"timestamp": "1000"}),
    ]


@pytest.mark.asyncio
async def test_comparison_between_two_timestamps():
    provider = StubProvider(prices={"1000": _price("10"), "1705314600": _price("8")})
    text = text_of(
        await get_token_price_comparison(
            {"chain": "eth", "tokenAddress": "0xt", "fromTimestamp": "1000", "toTimestamp": "1705314600"},
            provider=provider,
            observer=QUIET,
        )
    )
    assert "- **To:** 1/15/2024 - 8 USD" in text
    assert "**Price Movement:** 📉" in text
    assert "- **Change:** -2.000000 USD" in text
    assert "- **Percentage:** -20.00%" in text
    assert "The token price has decreased by 20.00% over the selected period." in text
    assert {tuple(sorted(call[3].items())) for call in provider.calls} == {
        (("timestamp", "1000"),),
        (("timestamp", "1705314600"),),
    }


@pytest.mark.asyncio
async def test_comparison_end_equal_to_now_uses_current_price(monkeypatch):
    monkeypatch.setattr(analytics, "current_unix_timestamp", lambda: "5000")
    provider = StubProvider(prices={"1000": _price("10"), None: _price("10")})
    await get_token_price_comparison(
        {"chain": "eth", "tokenAddress": "0xt", "fromTimestamp": "1000", "toTimestamp": "5000"},
        provider=provider,
        observer=QUIET,
    )
    assert ("fetch_token_price", "eth", "0xt", {}) in provider.calls


@pytest.mark.asyncio
async def test_comparison_from_zero_price_reports_zero_percent():
    provider = StubProvider(prices={"1000": _price("0"), None: _price("5")})
    text = text_of(
        await get_token_price_comparison(
            {"chain": "eth", "tokenAddress": "0xt", "fromTimestamp": "1000"}, provider=provider, observer=QUIET
        )
    )
    assert "- **Change:** +5.000000 USD" in text
    assert "- **Percentage:** +0.00%" in text


@pytest.mark.asyncio
async def test_comparison_fails_when_one_lookup_fails():
    provider = StubProvider(prices={"1000": _price("10"), None: NotFoundError("Resource not found.")})
    text = text_of(
        await get_token_price_comparison(
            {"chain": "eth", "tokenAddress": "0xt", "fromTimestamp": "1000"}, provider=provider, observer=QUIET
        )
    )
    assert text == "Error comparing token prices: Resource not found."


@pytest.mark.asyncio
async def test_comparison_missing_amount_is_error_text():
    provider = StubProvider(prices={"1000": _price(None), None: _price("5")})
    text = text_of(
        await get_token_price_comparison(
            {"chain": "eth", "tokenAddress": "0xt", "fromTimestamp": "1000"}, provider=provider, observer=QUIET
        )
    )
    assert text.startswith("Error comparing token prices: ")


class SlowEndProvider:
    """Fails the start-of-window lookup at once and stalls the end lookup."""

    def __init__(self):
        self.end_cancelled = False

    async def fetch_token_price(self, chain, token_address, **kwargs):
        if kwargs.get("timestamp") == "1000":
            raise NotFoundError("Resource not found.")
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.end_cancelled = True
            raise
        raise AssertionError("end lookup should have been cancelled")


@pytest.mark.asyncio
async def test_comparison_cancels_pending_lookup_on_failure():
    provider = SlowEndProvider()
    text = text_of(
        await asyncio.wait_for(
            get_token_price_comparison(
                {"chain": "eth", "tokenAddress": "0xt", "fromTimestamp": "1000"}, provider=provider, observer=QUIET
            ),
            timeout=5,
        )
    )
    assert text == "Error comparing token prices: Resource not found."
    assert provider.end_cancelled is True


@pytest.mark.asyncio
async def test_historical_price_fractional_timestamp_uses_whole_seconds():
    provider = StubProvider(prices={"1705314600.5": _price("2500")})
    text = text_of(
        await get_historical_token_price(
            {"chain": "eth", "tokenAddress": "0xt", "timestamp": "1705314600.5"}, provider=provider, observer=QUIET
        )
    )
    assert "**Date:** 2024-01-15T10:30:00.000Z" in text
    assert "- Timestamp: 1705314600.5 (Unix)" in text
