"""Tests for price conversion and date formatting helpers."""

from datetime import datetime, UTC as datetime_utc
from decimal import Decimal

import pytest

from ticket_marketplace.exceptions import ValidationError
from ticket_marketplace.utils.data_helpers import (
    dollars_to_cents,
    format_date,
    format_datetime,
    format_price,
    parse_api_date,
    to_db_timestamp,
)


def test_price_round_trip():
    """A 150.00 listing is sent as 15000 cents and displayed as $150.00."""
    cents = dollars_to_cents("150.00")
    assert cents == 15000
    assert format_price(cents) == "$150.00"


def test_dollars_to_cents_rounds_to_nearest_cent():
    assert dollars_to_cents("19.99") == 1999
    assert dollars_to_cents("19.994") == 1999
    assert dollars_to_cents("19.995") == 2000
    assert dollars_to_cents(0.1) == 10
    assert dollars_to_cents(25) == 2500
    assert dollars_to_cents(Decimal("7.5")) == 750


def test_dollars_to_cents_rejects_garbage():
    with pytest.raises(ValidationError):
        dollars_to_cents("twenty")
    with pytest.raises(ValidationError):
        dollars_to_cents("NaN")


def test_format_price():
    assert format_price(0) == "$0.00"
    assert format_price(5) == "$0.05"
    assert format_price(123456) == "$1234.56"


def test_timestamps_sort_chronologically():
    """Fixed-width timestamps compare in time order as plain strings."""
    earlier = datetime(2026, 10, 18, 12, 0, 0, tzinfo=datetime_utc)
    later = datetime(2026, 10, 18, 12, 0, 0, 500, tzinfo=datetime_utc)

    assert to_db_timestamp(earlier) == "2026-10-18T12:00:00.000000Z"
    assert to_db_timestamp(earlier) < to_db_timestamp(later)
    assert parse_api_date(to_db_timestamp(later)) == later


def test_parse_api_date():
    assert parse_api_date("2026-10-18T12:00:00Z") == datetime(2026, 10, 18, 12, 0, tzinfo=datetime_utc)
    # Naive strings are treated as UTC
    assert parse_api_date("2026-10-18T12:00:00") == datetime(2026, 10, 18, 12, 0, tzinfo=datetime_utc)
    assert parse_api_date("") is None
    assert parse_api_date("not a date") is None


def test_format_date_and_datetime():
    value = datetime(2026, 10, 3, 19, 5, tzinfo=datetime_utc)
    assert format_date(value) == "Sat, Oct 3, 2026"
    assert format_datetime(value) == "Sat, Oct 3, 2026, 7:05 PM"
    assert format_datetime("2026-10-03T00:30:00Z") == "Sat, Oct 3, 2026, 12:30 AM"
    assert format_date("garbage") == ""


def test_dollars_to_cents_too_many_digits():
    with pytest.raises(ValidationError, match="Invalid price"):
        dollars_to_cents("1e30")
    with pytest.raises(ValidationError):
        dollars_to_cents("9" * 40)
