"""Minimal sanity checks for the Noves MCP tools against the live APIs."""

from __future__ import annotations

import asyncio
import os
import sys
import time

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from noves_mcp.mcp import call_tool  # noqa: E402
from noves_mcp.noves_api import default_client  # noqa: E402

SAMPLE_CHAIN = os.getenv("NOVES_SAMPLE_CHAIN", "eth")
# Public wallet with steady activity; override via env.
SAMPLE_WALLET = os.getenv("NOVES_SAMPLE_WALLET", "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045")
# WETH on mainnet.
SAMPLE_TOKEN = os.getenv("NOVES_SAMPLE_TOKEN", "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2")
# Opt-in to the price comparison (two pricing calls).
RUN_COMPARISON = os.getenv("RUN_COMPARISON_SANITY", "false").lower() in {"1", "true", "yes"}


def _show(label: str, response: dict) -> None:
    print(f"== {label} ==")
    print(response["content"][0]["text"])
    print()


async def main() -> None:
    wallet_args = {"chain": SAMPLE_CHAIN, "walletAddress": SAMPLE_WALLET}
    token_args = {"chain": SAMPLE_CHAIN, "tokenAddress": SAMPLE_TOKEN}
    try:
        _show("Recent transactions", await call_tool("get_recent_transactions", {**wallet_args, "limit": 3}))
        _show("Wallet summary", await call_tool("get_wallet_summary", {**wallet_args, "limit": 5}))
        _show("Current price", await call_tool("get_current_token_price", token_args))
        if RUN_COMPARISON:
            week_ago = str(int(time.time()) - 7 * 24 * 3600)
            _show(
                "Price comparison (7d)",
                await call_tool("get_token_price_comparison", {**token_args, "fromTimestamp": week_ago}),
            )
    finally:
        await default_client.aclose()


if __name__ == "__main__":
    asyncio.run(main())
