"""Read-only views over Noves provider payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

UNKNOWN = "Unknown"


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    return str(value)


def _optional_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


@dataclass(frozen=True, slots=True)
class Transaction:
    """A classified transaction as returned by the translation service."""

    transaction_hash: str
    description: str
    type: str

    @classmethod
    def from_payload(cls, payload: Any) -> "Transaction":
        data = _as_mapping(payload)
        raw = _as_mapping(data.get("rawTransactionData"))
        classification = _as_mapping(data.get("classificationData"))
        return cls(
            transaction_hash=_optional_str(raw.get("transactionHash")) or "",
            description=_optional_str(classification.get("description")) or UNKNOWN,
            type=_optional_str(classification.get("type")) or UNKNOWN,
        )


@dataclass(frozen=True, slots=True)
class TokenInfo:
    address: Optional[str] = None
    symbol: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PricedBy:
    exchange_name: Optional[str] = None
    pool_address: Optional[str] = None
    liquidity: Optional[float] = None


@dataclass(frozen=True, slots=True)
class TokenPrice:
    """
    A token price lookup result.

    Every field is optional because the pricing service omits fields it could
    not resolve; formatters are responsible for placeholders.
    """

    amount: Optional[str] = None
    currency: Optional[str] = None
    status: Optional[str] = None
    block: Optional[str] = None
    token: TokenInfo = field(default_factory=TokenInfo)
    priced_by: Optional[PricedBy] = None
    price_type: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "TokenPrice":
        data = _as_mapping(payload)
        price = _as_mapping(data.get("price"))
        token = _as_mapping(data.get("token"))
        priced_by: Optional[PricedBy] = None
        raw_priced_by = data.get("pricedBy")
        if isinstance(raw_priced_by, Mapping):
            exchange = _as_mapping(raw_priced_by.get("exchange"))
            priced_by = PricedBy(
                exchange_name=_optional_str(exchange.get("name")),
                pool_address=_optional_str(raw_priced_by.get("poolAddress")),
                liquidity=_optional_number(raw_priced_by.get("liquidity")),
            )
        return cls(
            amount=_optional_str(price.get("amount")),
            currency=_optional_str(price.get("currency")),
            status=_optional_str(price.get("status")),
            block=_optional_str(data.get("block")),
            token=TokenInfo(
                address=_optional_str(token.get("address")),
                symbol=_optional_str(token.get("symbol")),
                name=_optional_str(token.get("name")),
            ),
            priced_by=priced_by,
            price_type=_optional_str(data.get("priceType")),
        )


ToolResponse = Dict[str, Any]
