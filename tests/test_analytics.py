from datetime import datetime, timezone

import pytest

from noves_mcp.models import Transaction
from noves_mcp.tools import analytics
from noves_mcp.tools.analytics import (
    frequency_table,
    most_common,
    parse_price_amount,
    parse_unix_timestamp,
    price_delta,
    ranked_types,
    resolve_time_range,
)


def _tx(tx_type: str, index: int = 0) -> Transaction:
    return Transaction(transaction_hash=f"0x{index}", description=f"{tx_type} #{index}", type=tx_type)


def test_frequency_table_counts_sum_to_total():
    txs = [_tx(t, i) for i, t in enumerate(["swap", "send", "swap", "receive", "send", "swap"])]
    table = frequency_table(txs)
    assert table == {"swap": 3, "send": 2, "receive": 1}
    assert sum(table.values()) == len(txs)
    assert list(table) == ["swap", "send", "receive"]


def test_frequency_table_empty():
    assert frequency_table([]) == {}


def test_most_common_unique_winner():
    assert most_common({"send": 1, "swap": 4, "receive": 2}) == ("swap", 4)


def test_most_common_tie_prefers_first_occurrence():
    txs = [_tx(t, i) for i, t in enumerate(["send", "swap", "swap", "send"])]
    assert most_common(frequency_table(txs)) == ("send", 2)


def test_most_common_empty_is_none():
    assert most_common({}) is None


def test_ranked_types_is_stable_descending():
    table = {"a": 1, "b": 3, "c": 1, "d": 3}
    assert ranked_types(table) == [("b", 3), ("d", 3), ("a", 1), ("c", 1)]


def test_price_delta_increase():
    movement = price_delta(100, 150)
    assert movement.delta == 50
    assert movement.percentage == pytest.approx(50.0)
    assert movement.increased is True


def test_price_delta_zero_base_has_zero_percentage():
    movement = price_delta(0, 10)
    assert movement.delta == 10
    assert movement.percentage == 0


def test_price_delta_decrease():
    movement = price_delta(10, 8)
    assert movement.delta == pytest.approx(-2)
    assert movement.percentage == pytest.approx(-20.0)
    assert movement.increased is False


def test_price_delta_flat_counts_as_increase():
    assert price_delta(5, 5).increased is True


def test_parse_price_amount():
    assert parse_price_amount("1.25") == 1.25
    with pytest.raises(ValueError, match="missing"):
        parse_price_amount(None)
    with pytest.raises(ValueError, match="Invalid price amount"):
        parse_price_amount("abc")


def test_resolve_time_range_defaults_to_now():
    window = resolve_time_range("1000", None, now="5000")
    assert window.to_timestamp == "5000"
    assert window.to_is_now is True


def test_resolve_time_range_empty_end_is_now():
    window = resolve_time_range("1000", "", now="5000")
    assert window.to_timestamp == "5000"
    assert window.to_is_now is True


def test_resolve_time_range_explicit_end():
    window = resolve_time_range("1000", "2000", now="5000")
    assert window.from_timestamp == "1000"
    assert window.to_timestamp == "2000"
    assert window.to_is_now is False


def test_resolve_time_range_explicit_end_equal_to_now():
    window = resolve_time_range("1000", "5000", now="5000")
    assert window.to_is_now is True


def test_resolve_time_range_reads_clock_once(monkeypatch):
    readings = iter(["5000", "5001"])
    monkeypatch.setattr(analytics, "current_unix_timestamp", lambda: next(readings))
    window = resolve_time_range("1000", None)
    assert window.to_timestamp == "5000"
    assert window.to_is_now is True


def test_parse_unix_timestamp():
    assert parse_unix_timestamp("1705314600") == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    with pytest.raises(ValueError, match="Invalid timestamp: soon"):
        parse_unix_timestamp("soon")


@pytest.mark.parametrize("raw", ["1705314600.5", " 1705314600", "1705314600s"])
def test_parse_unix_timestamp_reads_leading_integer(raw):
    assert parse_unix_timestamp(raw) == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw", ["", ".5", "abc1705314600"])
def test_parse_unix_timestamp_requires_leading_digits(raw):
    with pytest.raises(ValueError, match="Invalid timestamp"):
        parse_unix_timestamp(raw)
