"""Tests for input validation shared by client and server."""

import pytest

from ticket_marketplace.exceptions import ValidationError
from ticket_marketplace.utils.validation import (
    MAX_PRICE_CENTS,
    validate_password,
    validate_price_cents,
    validate_school_email,
    validate_seat_details,
)


@pytest.mark.parametrize("email", ["student@msu.edu", "Student@MSU.EDU", "a.b@cse.msu.edu"])
def test_school_email_accepted(email):
    validate_school_email(email, "msu.edu")


@pytest.mark.parametrize("email", ["student@gmail.com", "student@notmsu.edu", "student@msu.edu.evil.com"])
def test_school_email_outside_domain(email):
    with pytest.raises(ValidationError, match="must end with msu.edu"):
        validate_school_email(email, "msu.edu")


@pytest.mark.parametrize("email", ["", "student", "@msu.edu", "student@", "a@b@msu.edu"])
def test_malformed_email(email):
    with pytest.raises(ValidationError, match="Invalid email format"):
        validate_school_email(email)


def test_password_length():
    validate_password("12345678")
    with pytest.raises(ValidationError, match="at least 8 characters"):
        validate_password("1234567")


def test_seat_details_cannot_be_blank():
    validate_seat_details(level="STUD", seat_section="GEN", seat_row="1", seat_number="2")

    with pytest.raises(ValidationError) as exc_info:
        validate_seat_details(level="STUD", seat_section=" ", seat_row="1", seat_number="")
    assert "seat_section" in exc_info.value.message
    assert "seat_number" in exc_info.value.message


def test_price_cents():
    validate_price_cents(0)
    validate_price_cents(15000)

    with pytest.raises(ValidationError, match=">= 0"):
        validate_price_cents(-1)
    with pytest.raises(ValidationError):
        validate_price_cents(1.5)
    with pytest.raises(ValidationError):
        validate_price_cents(True)


def test_price_cents_upper_bound():
    validate_price_cents(MAX_PRICE_CENTS)
    with pytest.raises(ValidationError, match="Price must be <="):
        validate_price_cents(MAX_PRICE_CENTS + 1)
