"""Input contracts for the Noves MCP tools."""

from __future__ import annotations

from typing import Annotated, Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from noves_mcp.errors import ToolValidationError

# JSON numbers only: booleans and numeric strings are rejected.
Number = Annotated[float, Field(strict=True, allow_inf_nan=False)]

DEFAULT_RECENT_LIMIT = 10
DEFAULT_TRANSFERS_LIMIT = 5
DEFAULT_SUMMARY_LIMIT = 10
DEFAULT_TIMEFRAME = "30d"


class ToolArguments(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class WalletArguments(ToolArguments):
    chain: StrictStr
    wallet_address: StrictStr = Field(alias="walletAddress")


class RecentTransactionsArguments(WalletArguments):
    limit: Number = DEFAULT_RECENT_LIMIT


class TransactionTransfersArguments(WalletArguments):
    limit: Number = DEFAULT_TRANSFERS_LIMIT


class WalletSummaryArguments(WalletArguments):
    limit: Number = DEFAULT_SUMMARY_LIMIT


class AnalyzeWalletArguments(WalletArguments):
    timeframe: StrictStr = DEFAULT_TIMEFRAME


class TransactionArguments(ToolArguments):
    chain: StrictStr
    transaction_hash: StrictStr = Field(alias="transactionHash")


class TokenArguments(ToolArguments):
    chain: StrictStr
    token_address: StrictStr = Field(alias="tokenAddress")


class HistoricalPriceArguments(TokenArguments):
    timestamp: StrictStr


class PriceComparisonArguments(TokenArguments):
    from_timestamp: StrictStr = Field(alias="fromTimestamp")
    to_timestamp: Optional[StrictStr] = Field(default=None, alias="toTimestamp")

    @field_validator("to_timestamp", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        # Optional means omitted, not null.
        if value is None:
            raise ValueError("Input should be a valid string")
        return value


ArgumentsT = TypeVar("ArgumentsT", bound=ToolArguments)


def _describe(error: ValidationError) -> str:
    problems: Dict[str, str] = {}
    for item in error.errors():
        loc = item.get("loc") or ()
        field = str(loc[0]) if loc else "arguments"
        problems.setdefault(field, item.get("msg", "invalid value"))
    return "; ".join(f"{field}: {message}" for field, message in problems.items())


def validate_arguments(model: Type[ArgumentsT], arguments: Any) -> ArgumentsT:
    """
    Validate raw tool arguments against ``model``.

    Raises:
        ToolValidationError: naming each missing or mistyped field.
    """
    try:
        return model.model_validate(arguments)
    except ValidationError as exc:
        raise ToolValidationError(_describe(exc)) from exc


def effective_limit(value: float) -> int:
    """Truncate a numeric limit toward zero for slicing."""
    return int(value)
