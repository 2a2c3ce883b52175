"""Transaction lookup tools."""

from __future__ import annotations

from typing import Any, List, Optional

from noves_mcp.models import ToolResponse, Transaction
from noves_mcp.noves_api import default_client
from noves_mcp.observability import ToolObserver, default_observer
from noves_mcp.provider import ChainDataProvider
from noves_mcp.tools.common import call_provider, error_response, text_response, validate
from noves_mcp.tools.formatters import (
    format_recent_transactions,
    format_transaction_details,
    format_transaction_not_found,
    format_transaction_transfers,
    format_translated_transaction,
)
from noves_mcp.tools.validators import (
    RecentTransactionsArguments,
    TransactionArguments,
    TransactionTransfersArguments,
    effective_limit,
)


def find_transaction(transactions: List[Transaction], transaction_hash: str) -> Optional[Transaction]:
    """Return the first transaction whose hash matches, ignoring case."""
    wanted = transaction_hash.lower()
    for tx in transactions:
        if tx.transaction_hash.lower() == wanted:
            return tx
    return None


async def get_recent_transactions(
    arguments: Any,
    *,
    provider: ChainDataProvider = default_client,
    observer: ToolObserver = default_observer,
) -> ToolResponse:
    """List the most recent classified transactions for a wallet."""
    tool = "get_recent_transactions"
    try:
        args = validate(tool, RecentTransactionsArguments, arguments, observer)
        transactions = await call_provider(
            tool,
            "fetch_recent_transactions",
            provider.fetch_recent_transactions(args.chain, args.wallet_address),
            observer,
            chain=args.chain,
            wallet=args.wallet_address,
        )
        shown = transactions[: effective_limit(args.limit)]
        return text_response(format_recent_transactions(args.wallet_address, args.chain, transactions, shown))
    except Exception as exc:
        return error_response(tool, "fetching recent transactions", exc, observer)


async def get_transaction_details(
    arguments: Any,
    *,
    provider: ChainDataProvider = default_client,
    observer: ToolObserver = default_observer,
) -> ToolResponse:
    """
    Describe one transaction by scanning the recent transactions of its hash.

    The hash is passed where the provider expects an account address; the
    lookup only succeeds when the provider resolves it that way.
    """
    tool = "get_transaction_details"
    try:
        args = validate(tool, TransactionArguments, arguments, observer)
        transactions = await call_provider(
            tool,
            "fetch_recent_transactions",
            provider.fetch_recent_transactions(args.chain, args.transaction_hash),
            observer,
            chain=args.chain,
            wallet=args.transaction_hash,
        )
        transaction = find_transaction(transactions, args.transaction_hash)
        if transaction is None:
            return text_response(format_transaction_not_found(args.transaction_hash, args.chain))
        return text_response(format_transaction_details(transaction, args.chain))
    except Exception as exc:
        return error_response(tool, "fetching transaction details", exc, observer)


async def get_translated_transaction(
    arguments: Any,
    *,
    provider: ChainDataProvider = default_client,
    observer: ToolObserver = default_observer,
) -> ToolResponse:
    tool = "get_translated_transaction"
    try:
        args = validate(tool, TransactionArguments, arguments, observer)
        transaction = await call_provider(
            tool,
            "fetch_translated_transaction",
            provider.fetch_translated_transaction(args.chain, args.transaction_hash),
            observer,
            chain=args.chain,
            transaction_hash=args.transaction_hash,
        )
        return text_response(format_translated_transaction(args.transaction_hash, args.chain, transaction))
    except Exception as exc:
        return error_response(tool, "fetching translated transaction", exc, observer)


async def get_transaction_transfers(
    arguments: Any,
    *,
    provider: ChainDataProvider = default_client,
    observer: ToolObserver = default_observer,
) -> ToolResponse:
    tool = "get_transaction_transfers"
    try:
        args = validate(tool, TransactionTransfersArguments, arguments, observer)
        transactions = await call_provider(
            tool,
            "fetch_recent_transactions",
            provider.fetch_recent_transactions(args.chain, args.wallet_address),
            observer,
            chain=args.chain,
            wallet=args.wallet_address,
        )
        shown = transactions[: effective_limit(args.limit)]
        return text_response(format_transaction_transfers(args.wallet_address, args.chain, shown))
    except Exception as exc:
        return error_response(tool, "fetching transaction transfers", exc, observer)
