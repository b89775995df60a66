"""Helper functions for prices, timestamps and display formatting."""

from datetime import datetime, UTC as datetime_utc
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from ..exceptions import ValidationError

CENT = Decimal("0.01")


def dollars_to_cents(amount: str | int | float | Decimal) -> int:
    """Convert a decimal-dollar amount to integer cents.

    The amount is rounded to the nearest cent (halves round up) before
    conversion, so ``"150.00"`` becomes ``15000`` and ``"19.995"`` becomes
    ``2000``.

    Args:
        amount: Dollar amount as entered by a seller

    Returns:
        Price in cents

    Raises:
        ValidationError: If the amount is not a finite number
    """
    try:
        # str() first so floats like 0.1 convert by their shortest repr
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid price: {amount!r}")

    if not value.is_finite():
        raise ValidationError(f"Invalid price: {amount!r}")

    try:
        cents = value.quantize(CENT, rounding=ROUND_HALF_UP) * 100
    except InvalidOperation:
        # More digits than the decimal context holds
        raise ValidationError(f"Invalid price: {amount!r}")
    return int(cents)


def format_price(cents: int, currency: str = "$") -> str:
    """Format a price in cents for display.

    Args:
        cents: Price in integer cents
        currency: Currency symbol

    Returns:
        Formatted price string, e.g. ``$150.00``
    """
    return f"{currency}{Decimal(cents) / 100:.2f}"


def utc_now() -> datetime:
    return datetime.now(datetime_utc)


def to_db_timestamp(value: datetime) -> str:
    """Serialize a datetime as a fixed-width UTC string.

    Fixed width keeps lexicographic order equal to chronological order,
    which the storage layer relies on for cutoff and deadline comparisons.
    Naive datetimes are assumed to already be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime_utc)
    return value.astimezone(datetime_utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def parse_api_date(date_string: str | None) -> datetime | None:
    """Parse an API or database timestamp into an aware UTC datetime.

    Args:
        date_string: ISO 8601 timestamp, with or without a ``Z`` suffix

    Returns:
        Parsed datetime or None if the value is empty or unparseable
    """
    if not date_string:
        return None

    try:
        parsed = datetime.fromisoformat(date_string.strip().replace("Z", "+00:00"))
    except ValueError:
        return None

    if parsed.tzinfo is None:
        # Assume naive datetime string is in UTC
        parsed = parsed.replace(tzinfo=datetime_utc)
    return parsed


def _coerce_datetime(value: datetime | str) -> datetime | None:
    if isinstance(value, datetime):
        return value
    return parse_api_date(value)


def format_date(value: datetime | str) -> str:
    """Format a date like ``Sun, Oct 18, 2026``."""
    parsed = _coerce_datetime(value)
    if parsed is None:
        return ""
    return f"{parsed:%a, %b} {parsed.day}, {parsed.year}"


def format_datetime(value: datetime | str) -> str:
    """Format a timestamp like ``Sun, Oct 18, 2026, 7:05 PM``."""
    parsed = _coerce_datetime(value)
    if parsed is None:
        return ""
    hour = parsed.hour % 12 or 12
    return f"{format_date(parsed)}, {hour}:{parsed:%M %p}"
