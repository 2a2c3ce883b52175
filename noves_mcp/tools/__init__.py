"""LLM-facing tool implementations."""

from .transactions import (
    get_recent_transactions,
    get_transaction_details,
    get_translated_transaction,
    get_transaction_transfers,
)
from .wallet import analyze_wallet, get_wallet_summary
from .tokens import (
    get_current_token_price,
    get_historical_token_price,
    get_token_price_comparison,
)
from . import analytics, formatters, validators

__all__ = [
    "get_recent_transactions",
    "get_transaction_details",
    "get_translated_transaction",
    "get_transaction_transfers",
    "get_wallet_summary",
    "analyze_wallet",
    "get_current_token_price",
    "get_historical_token_price",
    "get_token_price_comparison",
    "analytics",
    "formatters",
    "validators",
]
