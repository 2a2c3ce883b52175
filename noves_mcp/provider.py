"""Capabilities the tool layer needs from a chain data provider."""

from __future__ import annotations

from typing import List, Optional, Protocol

from noves_mcp.models import TokenPrice, Transaction


class ChainDataProvider(Protocol):
    async def fetch_recent_transactions(self, chain: str, wallet_or_address: str) -> List[Transaction]:
        ...

    async def fetch_translated_transaction(self, chain: str, transaction_hash: str) -> Transaction:
        ...

    async def fetch_token_price(
        self, chain: str, token_address: str, timestamp: Optional[str] = None
    ) -> TokenPrice:
        ...
