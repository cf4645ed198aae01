"""Period Parser — tests for MM-YYYY parsing, formatting and window ordering.

Tests cover:
    - parse_period returns first-of-month anchors
    - format_period(parse_period(t)) == t
    - strict format: single-digit months, bad months, whitespace, other separators rejected
    - Period.is_ordered accepts single-month windows, rejects reversed ones
"""

from datetime import date

import pytest

from subaggregator.core.errors import InvalidPeriodFormatError
from subaggregator.core.period import (
    Period,
    format_period,
    parse_optional_period,
    parse_period,
    to_anchor,
)


# ─── parse_period / format_period ────────────────────────────────

def test_parse_period_returns_first_of_month():
    assert parse_period("01-2024") == date(2024, 1, 1)
    assert parse_period("12-1999") == date(1999, 12, 1)


@pytest.mark.parametrize("text", ["01-2024", "07-2025", "12-0001", "10-9999"])
def test_format_inverts_parse(text):
    assert format_period(parse_period(text)) == text


def test_format_period_ignores_day():
    assert format_period(date(2024, 3, 17)) == "03-2024"


@pytest.mark.parametrize("text", [
    "1-2024", "13-2024", "00-2024", "01-24", "2024-01",
    "01/2024", " 01-2024", "01-2024 ", "01-2024\n", "", "invalid-date",
    "01-0000", "01-20245",
])
def test_parse_period_rejects_malformed_text(text):
    with pytest.raises(InvalidPeriodFormatError) as exc_info:
        parse_period(text, "start_date")
    assert exc_info.value.field == "start_date"
    assert exc_info.value.http_status == 400


def test_parse_optional_period_treats_empty_as_absent():
    assert parse_optional_period(None) is None
    assert parse_optional_period("") is None
    assert parse_optional_period("05-2024") == date(2024, 5, 1)


def test_to_anchor_drops_day():
    assert to_anchor(date(2024, 2, 29)) == date(2024, 2, 1)


def test_single_month_window_is_ordered():
    assert Period(start=date(2024, 5, 1), end=date(2024, 5, 1)).is_ordered
    assert not Period(start=date(2024, 5, 1), end=date(2024, 4, 1)).is_ordered
