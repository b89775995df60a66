"""Password hashing, verification codes and JWT session tokens."""

import logging
import secrets
from datetime import timedelta
from typing import Any

import bcrypt
import jwt

from ..exceptions import AuthenticationError
from .data_helpers import utc_now

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def generate_verification_code() -> str:
    """Generate a 6-digit email verification code."""
    return f"{secrets.randbelow(900000) + 100000:06d}"


def generate_token(user_id: str, email: str, secret: str, expiry_hours: int = 24) -> str:
    """Create a signed session token for a user.

    Args:
        user_id: User identifier stored in the ``sub`` claim
        email: User email stored alongside the subject
        secret: HMAC signing secret
        expiry_hours: Token lifetime

    Returns:
        Encoded JWT
    """
    payload = {
        "sub": user_id,
        "email": email,
        "exp": utc_now() + timedelta(hours=expiry_hours),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def validate_token(token: str, secret: str) -> dict[str, Any]:
    """Decode a session token and return its claims.

    Raises:
        AuthenticationError: If the token is malformed, tampered with or expired
    """
    try:
        claims = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError as e:
        logger.debug(f"Rejected token: {e}")
        raise AuthenticationError("Unauthorized")

    if not claims.get("sub"):
        raise AuthenticationError("Unauthorized")
    return claims
