"""Local aggregations over provider data: type counts, price movement, time ranges."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from noves_mcp.models import Transaction

# Leading integer of a timestamp string; trailing text such as ".5" is ignored.
_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True, slots=True)
class PriceDelta:
    delta: float
    percentage: float

    @property
    def increased(self) -> bool:
        return self.delta >= 0


@dataclass(frozen=True, slots=True)
class TimeRange:
    from_timestamp: str
    to_timestamp: str
    to_is_now: bool


def frequency_table(transactions: Iterable[Transaction]) -> Dict[str, int]:
    """Count transactions per type, keyed in order of first occurrence."""
    table: Dict[str, int] = {}
    for tx in transactions:
        table[tx.type] = table.get(tx.type, 0) + 1
    return table


def ranked_types(table: Dict[str, int]) -> List[Tuple[str, int]]:
    # sorted() is stable, so equal counts keep first-occurrence order.
    return sorted(table.items(), key=lambda entry: entry[1], reverse=True)


def most_common(table: Dict[str, int]) -> Optional[Tuple[str, int]]:
    ranked = ranked_types(table)
    return ranked[0] if ranked else None


def parse_price_amount(value: Optional[str]) -> float:
    if value is None:
        raise ValueError("Price amount missing from provider response")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid price amount: {value}") from None


def price_delta(from_amount: float, to_amount: float) -> PriceDelta:
    delta = to_amount - from_amount
    percentage = (delta / from_amount) * 100 if from_amount != 0 else 0.0
    return PriceDelta(delta=delta, percentage=percentage)


def current_unix_timestamp() -> str:
    return str(int(time.time()))


def resolve_time_range(
    from_timestamp: str, to_timestamp: Optional[str], *, now: Optional[str] = None
) -> TimeRange:
    """
    Resolve the end of a price comparison window.

    The clock is read exactly once. An absent or empty end resolves to that
    reading, and ``to_is_now`` records whether the resolved end equals it so
    callers never compare clocks a second time.
    """
    now_value = now if now is not None else current_unix_timestamp()
    end = to_timestamp or now_value
    return TimeRange(from_timestamp=from_timestamp, to_timestamp=end, to_is_now=end == now_value)


def parse_unix_timestamp(value: str) -> datetime:
    """
    Convert Unix seconds (as a string) to an aware UTC datetime.

    Only the leading integer is read, so ``"1700000000.5"`` is second
    1700000000. A value with no leading digits is invalid.
    """
    match = _LEADING_INTEGER.match(str(value))
    if match is None:
        raise ValueError(f"Invalid timestamp: {value}")
    try:
        return datetime.fromtimestamp(int(match.group(1)), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        raise ValueError(f"Invalid timestamp: {value}") from None
