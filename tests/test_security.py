"""Tests for password hashing and session tokens."""

import jwt
import pytest
from datetime import timedelta

from ticket_marketplace.exceptions import AuthenticationError
from ticket_marketplace.utils.data_helpers import utc_now
from ticket_marketplace.utils.security import (
    JWT_ALGORITHM,
    generate_token,
    generate_verification_code,
    hash_password,
    validate_token,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("password123")

    assert hashed != "password123"
    assert verify_password("password123", hashed)
    assert not verify_password("password124", hashed)
    assert not verify_password("password123", "not-a-bcrypt-hash")


def test_verification_code_format():
    for _ in range(20):
        code = generate_verification_code()
        assert len(code) == 6
        assert code.isdigit()


def test_token_claims():
    token = generate_token("user-1", "a@msu.edu", "secret")
    claims = validate_token(token, "secret")

    assert claims["sub"] == "user-1"
    assert claims["email"] == "a@msu.edu"


def test_token_with_wrong_secret():
    token = generate_token("user-1", "a@msu.edu", "secret")
    with pytest.raises(AuthenticationError):
        validate_token(token, "other-secret")


def test_expired_token():
    expired = jwt.encode(
        {"sub": "user-1", "exp": utc_now() - timedelta(minutes=1)}, "secret", algorithm=JWT_ALGORITHM
    )
    with pytest.raises(AuthenticationError, match="Unauthorized"):
        validate_token(expired, "secret")


def test_token_without_subject():
    token = jwt.encode({"email": "a@msu.edu"}, "secret", algorithm=JWT_ALGORITHM)
    with pytest.raises(AuthenticationError):
        validate_token(token, "secret")
