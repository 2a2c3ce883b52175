"""Wallet activity summaries."""

from __future__ import annotations

from typing import Any

from noves_mcp.models import ToolResponse
from noves_mcp.noves_api import default_client
from noves_mcp.observability import ToolObserver, default_observer
from noves_mcp.provider import ChainDataProvider
from noves_mcp.tools.analytics import frequency_table
from noves_mcp.tools.common import call_provider, error_response, text_response, validate
from noves_mcp.tools.formatters import format_wallet_analysis, format_wallet_summary
from noves_mcp.tools.validators import AnalyzeWalletArguments, WalletSummaryArguments, effective_limit


async def get_wallet_summary(
    arguments: Any,
    *,
    provider: ChainDataProvider = default_client,
    observer: ToolObserver = default_observer,
) -> ToolResponse:
    """
    Summarize recent wallet activity.

    Type counts cover every fetched transaction; only the activity list is
    cut down to ``limit``.
    """
    tool = "get_wallet_summary"
    try:
        args = validate(tool, WalletSummaryArguments, arguments, observer)
        transactions = await call_provider(
            tool,
            "fetch_recent_transactions",
            provider.fetch_recent_transactions(args.chain, args.wallet_address),
            observer,
            chain=args.chain,
            wallet=args.wallet_address,
        )
        shown = transactions[: effective_limit(args.limit)]
        table = frequency_table(transactions)
        return text_response(
            format_wallet_summary(args.wallet_address, args.chain, transactions, shown, table)
        )
    except Exception as exc:
        return error_response(tool, "fetching wallet summary", exc, observer)


async def analyze_wallet(
    arguments: Any,
    *,
    provider: ChainDataProvider = default_client,
    observer: ToolObserver = default_observer,
) -> ToolResponse:
    """Break wallet activity down by transaction type. ``timeframe`` is a label only."""
    tool = "analyze_wallet"
    try:
        args = validate(tool, AnalyzeWalletArguments, arguments, observer)
        transactions = await call_provider(
            tool,
            "fetch_recent_transactions",
            provider.fetch_recent_transactions(args.chain, args.wallet_address),
            observer,
            chain=args.chain,
            wallet=args.wallet_address,
        )
        table = frequency_table(transactions)
        return text_response(
            format_wallet_analysis(args.wallet_address, args.chain, args.timeframe, transactions, table)
        )
    except Exception as exc:
        return error_response(tool, "analyzing wallet", exc, observer)
