"""
Tool catalog and dispatcher for MCP-style tooling.

This keeps a fixed mapping of tool names to handler coroutines. Handlers shape
their own failures into text; the dispatcher only adds a last-resort net for
unknown tool names and unexpected handler bugs.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from noves_mcp.errors import UnknownToolError
from noves_mcp.models import ToolResponse
from noves_mcp.tools import (
    analyze_wallet,
    get_current_token_price,
    get_historical_token_price,
    get_recent_transactions,
    get_token_price_comparison,
    get_transaction_details,
    get_transaction_transfers,
    get_translated_transaction,
    get_wallet_summary,
)
from noves_mcp.tools.analytics import current_unix_timestamp
from noves_mcp.tools.common import error_message, text_response
from noves_mcp.tools.validators import (
    DEFAULT_RECENT_LIMIT,
    DEFAULT_SUMMARY_LIMIT,
    DEFAULT_TIMEFRAME,
    DEFAULT_TRANSFERS_LIMIT,
)

logger = logging.getLogger(__name__)

ToolHandler = Callable[..., Awaitable[ToolResponse]]

CHAIN_DESCRIPTION = "Blockchain network (e.g., ethereum, polygon, arbitrum)"


def _chain_schema(description: str = "Blockchain network") -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _limit_schema(default: int, description: str) -> Dict[str, Any]:
    return {
        "type": "number",
        "description": f"{description} (default: {default})",
        "default": default,
    }


def _object_schema(properties: Dict[str, Any], required: List[str]) -> Dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


@dataclass(slots=True)
class ToolDefinition:
    name: str
    description: str
    params: Dict[str, Any]
    input_schema: Dict[str, Any]
    callable: ToolHandler


TOOL_REGISTRY: Dict[str, ToolDefinition] = {
    "get_recent_transactions": ToolDefinition(
        name="get_recent_transactions",
        description="Get recent transactions for a wallet address with natural language descriptions",
        params={
            "chain": "string (required)",
            "walletAddress": "string (required)",
            "limit": f"number (optional, default {DEFAULT_RECENT_LIMIT})",
        },
        input_schema=_object_schema(
            {
                "chain": _chain_schema("Blockchain network (e.g., ethereum, polygon, arbitrum, bsc)"),
                "walletAddress": {"type": "string", "description": "Wallet address to analyze"},
                "limit": _limit_schema(DEFAULT_RECENT_LIMIT, "Number of transactions to return"),
            },
            ["chain", "walletAddress"],
        ),
        callable=get_recent_transactions,
    ),
    "get_transaction_details": ToolDefinition(
        name="get_transaction_details",
        description="Get detailed analysis of a specific transaction with natural language description",
        params={"chain": "string (required)", "transactionHash": "string (required)"},
        input_schema=_object_schema(
            {
                "chain": _chain_schema(),
                "transactionHash": {"type": "string", "description": "Transaction hash to analyze"},
            },
            ["chain", "transactionHash"],
        ),
        callable=get_transaction_details,
    ),
    "get_translated_transaction": ToolDefinition(
        name="get_translated_transaction",
        description="Get human-readable description of a specific transaction using Noves translation",
        params={"chain": "string (required)", "transactionHash": "string (required)"},
        input_schema=_object_schema(
            {
                "chain": _chain_schema(),
                "transactionHash": {
                    "type": "string",
                    "description": "Transaction hash to get human-readable description",
                },
            },
            ["chain", "transactionHash"],
        ),
        callable=get_translated_transaction,
    ),
    "get_transaction_transfers": ToolDefinition(
        name="get_transaction_transfers",
        description="Get detailed transfer information from recent transactions (focus on token movements)",
        params={
            "chain": "string (required)",
            "walletAddress": "string (required)",
            "limit": f"number (optional, default {DEFAULT_TRANSFERS_LIMIT})",
        },
        input_schema=_object_schema(
            {
                "chain": _chain_schema(),
                "walletAddress": {"type": "string", "description": "Wallet address to analyze"},
                "limit": _limit_schema(DEFAULT_TRANSFERS_LIMIT, "Number of transactions to return"),
            },
            ["chain", "walletAddress"],
        ),
        callable=get_transaction_transfers,
    ),
    "get_wallet_summary": ToolDefinition(
        name="get_wallet_summary",
        description="Get a comprehensive summary of wallet activity with key insights",
        params={
            "chain": "string (required)",
            "walletAddress": "string (required)",
            "limit": f"number (optional, default {DEFAULT_SUMMARY_LIMIT})",
        },
        input_schema=_object_schema(
            {
                "chain": _chain_schema(),
                "walletAddress": {"type": "string", "description": "Wallet address to analyze"},
                "limit": _limit_schema(
                    DEFAULT_SUMMARY_LIMIT, "Number of recent transactions to include in summary"
                ),
            },
            ["chain", "walletAddress"],
        ),
        callable=get_wallet_summary,
    ),
    "analyze_wallet": ToolDefinition(
        name="analyze_wallet",
        description="Analyze wallet activity and provide insights with natural language summaries",
        params={
            "chain": "string (required)",
            "walletAddress": "string (required)",
            "timeframe": f'string (optional, default "{DEFAULT_TIMEFRAME}")',
        },
        input_schema=_object_schema(
            {
                "chain": _chain_schema(),
                "walletAddress": {"type": "string", "description": "Wallet address to analyze"},
                "timeframe": {
                    "type": "string",
                    "description": 'Time period to analyze (e.g., "7d", "30d", "1y")',
                    "default": DEFAULT_TIMEFRAME,
                },
            },
            ["chain", "walletAddress"],
        ),
        callable=analyze_wallet,
    ),
    "get_current_token_price": ToolDefinition(
        name="get_current_token_price",
        description="Get current price of a token on a specific blockchain",
        params={"chain": "string (required)", "tokenAddress": "string (required)"},
        input_schema=_object_schema(
            {
                "chain": _chain_schema(CHAIN_DESCRIPTION),
                "tokenAddress": {"type": "string", "description": "Token contract address"},
            },
            ["chain", "tokenAddress"],
        ),
        callable=get_current_token_price,
    ),
    "get_historical_token_price": ToolDefinition(
        name="get_historical_token_price",
        description="Get historical price of a token at a specific timestamp",
        params={
            "chain": "string (required)",
            "tokenAddress": "string (required)",
            "timestamp": "string (required, Unix seconds)",
        },
        input_schema=_object_schema(
            {
                "chain": _chain_schema(CHAIN_DESCRIPTION),
                "tokenAddress": {"type": "string", "description": "Token contract address"},
                "timestamp": {"type": "string", "description": "Unix timestamp for historical price"},
            },
            ["chain", "tokenAddress", "timestamp"],
        ),
        callable=get_historical_token_price,
    ),
    "get_token_price_comparison": ToolDefinition(
        name="get_token_price_comparison",
        description="Compare token price between two timestamps to show price change",
        params={
            "chain": "string (required)",
            "tokenAddress": "string (required)",
            "fromTimestamp": "string (required, Unix seconds)",
            "toTimestamp": "string (optional, default current time)",
        },
        input_schema=_object_schema(
            {
                "chain": _chain_schema(CHAIN_DESCRIPTION),
                "tokenAddress": {"type": "string", "description": "Token contract address"},
                "fromTimestamp": {"type": "string", "description": "Start Unix timestamp for comparison"},
                "toTimestamp": {
                    "type": "string",
                    "description": "End Unix timestamp for comparison (default: current time)",
                },
            },
            ["chain", "tokenAddress", "fromTimestamp"],
        ),
        callable=get_token_price_comparison,
    ),
}


def _listed_schema(tool: ToolDefinition) -> Dict[str, Any]:
    schema = copy.deepcopy(tool.input_schema)
    if tool.name == "get_token_price_comparison":
        # The advertised default tracks the wall clock at listing time.
        schema["properties"]["toTimestamp"]["default"] = current_unix_timestamp()
    return schema


def list_tools() -> List[Dict[str, Any]]:
    """Return the tool catalog."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "params": tool.params,
            "inputSchema": _listed_schema(tool),
        }
        for tool in TOOL_REGISTRY.values()
    ]


def get_tool(tool_name: str) -> ToolDefinition:
    tool = TOOL_REGISTRY.get(tool_name)
    if tool is None:
        raise UnknownToolError(tool_name)
    return tool


async def call_tool(
    tool_name: str, arguments: Optional[Dict[str, Any]] = None, **handler_options: Any
) -> ToolResponse:
    """
    Dispatch to a tool by exact name.

    Always returns a response envelope. ``handler_options`` (``provider``,
    ``observer``) are forwarded to the handler.
    """
    try:
        tool = get_tool(tool_name)
        return await tool.callable({} if arguments is None else arguments, **handler_options)
    except Exception as exc:
        if not isinstance(exc, UnknownToolError):
            logger.exception("Unexpected error while calling tool %s", tool_name, extra={"tool": tool_name})
        return text_response(f"Error: {error_message(exc)}")
