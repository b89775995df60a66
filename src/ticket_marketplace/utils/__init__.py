"""Utility functions for prices, validation, security and logging."""

from .data_helpers import dollars_to_cents, format_date, format_datetime, format_price, parse_api_date
from .logging_config import setup_logging
from .validation import validate_password, validate_school_email

__all__ = [
    "dollars_to_cents",
    "format_price",
    "format_date",
    "format_datetime",
    "parse_api_date",
    "setup_logging",
    "validate_password",
    "validate_school_email",
]
