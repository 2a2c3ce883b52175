"""
Text renderers for tool responses.

Every function here is pure: it receives provider data (and any derived
analytics) and returns the markdown-flavoured text placed in the response
envelope. Missing provider fields are rendered as ``Unknown`` or ``N/A``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from noves_mcp.models import TokenPrice, Transaction
from noves_mcp.tools.analytics import PriceDelta, most_common, ranked_types

UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"
SUMMARY_BREAKDOWN_SIZE = 5
ACTIVITY_SAMPLE_SIZE = 3


def iso_datetime(value: datetime) -> str:
    """Render as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` (value must be UTC)."""
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def locale_date(value: datetime) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def locale_time(value: datetime) -> str:
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d}:{value.second:02d} {suffix}"


def _or(value: Optional[str], placeholder: str = UNKNOWN) -> str:
    return value if value else placeholder


def _signed(value: float, digits: int) -> str:
    value = value + 0.0  # normalise -0.0
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{digits}f}"


def format_liquidity(liquidity: Optional[float]) -> str:
    if not liquidity:
        return NOT_AVAILABLE
    text = f"{liquidity:,.3f}".rstrip("0").rstrip(".")
    return f"${text}"


def _token_identity_lines(price: TokenPrice) -> List[str]:
    # Slots stay as blank lines when the provider omits symbol or name.
    return [
        f"**Symbol:** {price.token.symbol}" if price.token.symbol else "",
        f"**Name:** {price.token.name}" if price.token.name else "",
    ]


def _pricing_details(price: TokenPrice) -> List[str]:
    priced_by = price.priced_by
    exchange = priced_by.exchange_name if priced_by else None
    pool = priced_by.pool_address if priced_by else None
    liquidity = priced_by.liquidity if priced_by else None
    return [
        "**Pricing Details:**",
        f"- Priced by: {_or(exchange)} ({_or(pool, NOT_AVAILABLE)})",
        f"- Liquidity: {format_liquidity(liquidity)}",
        f"- Price Type: {_or(price.price_type)}",
    ]


def _price_information(price: TokenPrice) -> List[str]:
    return [
        "**Price Information:**",
        f"- Amount: {_or(price.amount)}",
        f"- Currency: {_or(price.currency)}",
        f"- Status: {_or(price.status)}",
        f"- Block: {_or(price.block)}",
    ]


# Transactions


def format_recent_transactions(
    wallet_address: str, chain: str, transactions: Sequence[Transaction], shown: Sequence[Transaction]
) -> str:
    summary = (
        f"Found {len(transactions)} total transactions for wallet {wallet_address} on {chain}. "
        f"Showing {len(shown)} most recent:\n\n"
    )
    details = "\n".join(
        f"{index}. **{tx.description}**\n"
        f"   - Type: {tx.type}\n"
        f"   - Hash: {tx.transaction_hash}\n"
        "   "
        for index, tx in enumerate(shown, start=1)
    )
    return summary + details


def format_transaction_not_found(transaction_hash: str, chain: str) -> str:
    return (
        f"Transaction {transaction_hash} not found in recent transactions on {chain}. "
        "This might be an older transaction or from a different address."
    )


def format_transaction_details(transaction: Transaction, chain: str) -> str:
    return "\n".join(
        [
            "**Transaction Analysis**",
            "",
            f"**Description:** {transaction.description}",
            f"**Type:** {transaction.type}",
            f"**Hash:** {transaction.transaction_hash}",
            f"**Chain:** {chain}",
        ]
    )


def format_translated_transaction(transaction_hash: str, chain: str, transaction: Transaction) -> str:
    return "\n".join(
        [
            "**Transaction Translation**",
            "",
            f"**Hash:** {transaction_hash}",
            f"**Chain:** {chain}",
            f"**Description:** {transaction.description}",
            f"**Type:** {transaction.type}",
            "",
            "**Human-Readable Summary:**",
            transaction.description,
        ]
    )


def format_transaction_transfers(wallet_address: str, chain: str, shown: Sequence[Transaction]) -> str:
    header = "\n".join(
        [
            f"**Token Transfer Analysis for {wallet_address}**",
            "",
            f"**Chain:** {chain}",
            f"**Analyzing:** {len(shown)} recent transactions",
            "",
            "**Detailed Transfer Information:**",
            "",
            "",
        ]
    )
    entries = "\n\n".join(
        f"{index}. **{tx.description}**\n"
        f"   - **Type:** {tx.type}\n"
        f"   - **Hash:** {tx.transaction_hash}\n"
        f"   - **Transfer Details:** {tx.description}"
        for index, tx in enumerate(shown, start=1)
    )
    return header + entries


# Wallets


def _activity_list(transactions: Sequence[Transaction]) -> str:
    return "\n".join(f"{index}. {tx.description}" for index, tx in enumerate(transactions, start=1))


def _breakdown(table: Dict[str, int], limit: Optional[int] = None) -> str:
    ranked = ranked_types(table)
    if limit is not None:
        ranked = ranked[:limit]
    return "\n".join(f"- {tx_type}: {count} transactions" for tx_type, count in ranked)


def format_wallet_summary(
    wallet_address: str,
    chain: str,
    transactions: Sequence[Transaction],
    shown: Sequence[Transaction],
    table: Dict[str, int],
) -> str:
    top = most_common(table)
    most_common_text = f"{top[0]} ({top[1]}x)" if top else "None"
    return "\n".join(
        [
            "**Comprehensive Wallet Summary**",
            "",
            f"**Wallet:** {wallet_address}",
            f"**Chain:** {chain}",
            f"**Analysis of {len(shown)} Recent Transactions**",
            "",
            "**Quick Stats:**",
            f"- Total Recent Transactions: {len(transactions)}",
            f"- Most Common Activity: {most_common_text}",
            f"- Transaction Types: {len(table)}",
            "",
            "**Recent Activity:**",
            _activity_list(shown),
            "",
            "**Activity Breakdown:**",
            _breakdown(table, SUMMARY_BREAKDOWN_SIZE),
        ]
    )


def format_wallet_analysis(
    wallet_address: str,
    chain: str,
    timeframe: str,
    transactions: Sequence[Transaction],
    table: Dict[str, int],
) -> str:
    top = most_common(table)
    most_common_text = f"{top[0]} ({top[1]} times)" if top else "None"
    return "\n".join(
        [
            f"**Wallet Analysis for {wallet_address}**",
            "",
            "**Summary:**",
            f"- Total Recent Transactions: {len(transactions)}",
            f"- Unique Transaction Types: {len(table)}",
            f"- Most Common Activity: {most_common_text}",
            f"- Chain: {chain}",
            f"- Analysis Period: {timeframe}",
            "",
            "**Transaction Type Breakdown:**",
            _breakdown(table),
            "",
            "**Recent Activity Sample:**",
            _activity_list(transactions[:ACTIVITY_SAMPLE_SIZE]),
        ]
    )


# Token prices


def format_current_price(token_address: str, chain: str, price: TokenPrice, retrieved_at: datetime) -> str:
    lines = [
        "**Current Token Price**",
        "",
        f"**Token Address:** {token_address}",
        f"**Chain:** {chain}",
        f"**Current Price:** {_or(price.amount)} {_or(price.currency)}",
        *_token_identity_lines(price),
        "",
        *_price_information(price),
        f"- Retrieved at: {iso_datetime(retrieved_at)}",
        "",
        *_pricing_details(price),
    ]
    return "\n".join(lines)


def format_historical_price(token_address: str, chain: str, timestamp: str, at: datetime, price: TokenPrice) -> str:
    lines = [
        "**Historical Token Price**",
        "",
        f"**Token Address:** {token_address}",
        f"**Chain:** {chain}",
        f"**Historical Price:** {_or(price.amount)} {_or(price.currency)}",
        f"**Date:** {iso_datetime(at)}",
        *_token_identity_lines(price),
        "",
        *_price_information(price),
        f"- Timestamp: {timestamp} (Unix)",
        f"- Date: {locale_date(at)} {locale_time(at)}",
        "",
        *_pricing_details(price),
    ]
    return "\n".join(lines)


def format_price_comparison(
    token_address: str,
    chain: str,
    from_date: datetime,
    to_date: datetime,
    from_price: TokenPrice,
    to_price: TokenPrice,
    movement: PriceDelta,
) -> str:
    indicator = "📈" if movement.increased else "📉"
    direction = "increased" if movement.increased else "decreased"
    currency = _or(from_price.currency)
    lines = [
        "**Token Price Comparison**",
        "",
        f"**Token Address:** {token_address}",
        f"**Chain:** {chain}",
        *_token_identity_lines(from_price),
        "",
        "**Price Comparison:**",
        f"- **From:** {locale_date(from_date)} - {_or(from_price.amount)} {currency}",
        f"- **To:** {locale_date(to_date)} - {_or(to_price.amount)} {_or(to_price.currency)}",
        "",
        f"**Price Movement:** {indicator}",
        f"- **Change:** {_signed(movement.delta, 6)} {currency}",
        f"- **Percentage:** {_signed(movement.percentage, 2)}%",
        f"- **Direction:** Price has {direction} {indicator}",
        "",
        "**Analysis:**",
        f"The token price has {direction} by {abs(movement.percentage):.2f}% over the selected period.",
        "",
        "**Pricing Details:**",
        f"- From Block: {_or(from_price.block)}",
        f"- To Block: {_or(to_price.block)}",
        f"- Price Type: {_or(from_price.price_type)}",
    ]
    return "\n".join(lines)
