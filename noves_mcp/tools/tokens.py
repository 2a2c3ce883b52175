"""Token price tools."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, List, TypeVar

from noves_mcp.models import ToolResponse
from noves_mcp.noves_api import default_client
from noves_mcp.observability import ToolObserver, default_observer
from noves_mcp.provider import ChainDataProvider
from noves_mcp.tools.analytics import (
    parse_price_amount,
    parse_unix_timestamp,
    price_delta,
    resolve_time_range,
)
from noves_mcp.tools.common import call_provider, error_response, text_response, validate
from noves_mcp.tools.formatters import (
    format_current_price,
    format_historical_price,
    format_price_comparison,
)
from noves_mcp.tools.validators import (
    HistoricalPriceArguments,
    PriceComparisonArguments,
    TokenArguments,
)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def _gather_or_cancel(*calls: Awaitable[T]) -> List[T]:
    """Run ``calls`` concurrently. On the first failure the rest are cancelled and drained."""
    tasks = [asyncio.ensure_future(call) for call in calls]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def get_current_token_price(
    arguments: Any,
    *,
    provider: ChainDataProvider = default_client,
    observer: ToolObserver = default_observer,
) -> ToolResponse:
    tool = "get_current_token_price"
    try:
        args = validate(tool, TokenArguments, arguments, observer)
        price = await call_provider(
            tool,
            "fetch_token_price",
            provider.fetch_token_price(args.chain, args.token_address),
            observer,
            chain=args.chain,
            token=args.token_address,
        )
        return text_response(format_current_price(args.token_address, args.chain, price, _utcnow()))
    except Exception as exc:
        return error_response(tool, "fetching current token price", exc, observer)


async def get_historical_token_price(
    arguments: Any,
    *,
    provider: ChainDataProvider = default_client,
    observer: ToolObserver = default_observer,
) -> ToolResponse:
    tool = "get_historical_token_price"
    try:
        args = validate(tool, HistoricalPriceArguments, arguments, observer)
        price = await call_provider(
            tool,
            "fetch_token_price",
            provider.fetch_token_price(args.chain, args.token_address, timestamp=args.timestamp),
            observer,
            chain=args.chain,
            token=args.token_address,
            timestamp=args.timestamp,
        )
        at = parse_unix_timestamp(args.timestamp)
        return text_response(
            format_historical_price(args.token_address, args.chain, args.timestamp, at, price)
        )
    except Exception as exc:
        return error_response(tool, "fetching historical token price", exc, observer)


async def get_token_price_comparison(
    arguments: Any,
    *,
    provider: ChainDataProvider = default_client,
    observer: ToolObserver = default_observer,
) -> ToolResponse:
    """
    Compare a token's price at two points in time.

    Both lookups run concurrently; if either fails the comparison fails and
    the other lookup is cancelled. When the end of the window is "now" the
    end lookup asks for the current price instead of a timestamped one.
    """
    tool = "get_token_price_comparison"
    try:
        args = validate(tool, PriceComparisonArguments, arguments, observer)
        window = resolve_time_range(args.from_timestamp, args.to_timestamp)
        end_timestamp = None if window.to_is_now else window.to_timestamp
        end_options = {} if end_timestamp is None else {"timestamp": end_timestamp}
        from_price, to_price = await _gather_or_cancel(
            call_provider(
                tool,
                "fetch_token_price",
                provider.fetch_token_price(args.chain, args.token_address, timestamp=window.from_timestamp),
                observer,
                chain=args.chain,
                token=args.token_address,
                timestamp=window.from_timestamp,
            ),
            call_provider(
                tool,
                "fetch_token_price",
                provider.fetch_token_price(args.chain, args.token_address, **end_options),
                observer,
                chain=args.chain,
                token=args.token_address,
                timestamp=end_timestamp,
            ),
        )
        movement = price_delta(parse_price_amount(from_price.amount), parse_price_amount(to_price.amount))
        return text_response(
            format_price_comparison(
                args.token_address,
                args.chain,
                parse_unix_timestamp(window.from_timestamp),
                parse_unix_timestamp(window.to_timestamp),
                from_price,
                to_price,
                movement,
            )
        )
    except Exception as exc:
        return error_response(tool, "comparing token prices", exc, observer)
