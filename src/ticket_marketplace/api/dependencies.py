"""FastAPI dependencies: storage, settings and the two kinds of caller identity."""

import logging
import secrets

from fastapi import Header, HTTPException, Request

from ..config import Settings
from ..exceptions import AuthenticationError
from ..storage.database import DatabaseManager
from ..utils.security import validate_token
from .rate_limit import ReservationRateLimiter

logger = logging.getLogger(__name__)


def get_db(request: Request) -> DatabaseManager:
    return request.app.state.db


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_rate_limiter(request: Request) -> ReservationRateLimiter:
    return request.app.state.rate_limiter


def get_current_user_id(
    request: Request, authorization: str | None = Header(default=None)
) -> str:
    """Resolve the caller from the raw token in the Authorization header.

    The header carries the token itself, with no ``Bearer`` scheme.
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Unauthorized")

    settings = get_settings(request)
    try:
        claims = validate_token(authorization, settings.jwt_secret)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=e.message)

    user_id = str(claims["sub"])
    if get_db(request).users.get_user_by_id(user_id) is None:
        logger.warning(f"Token presented for unknown user {user_id}")
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id


def require_admin(request: Request, authorization: str | None = Header(default=None)) -> None:
    """Check the admin API key. Without a configured key every admin call is refused."""
    expected_key = get_settings(request).admin_api_key
    if not expected_key or not authorization:
        raise HTTPException(status_code=401, detail="Unauthorized")
    if not secrets.compare_digest(authorization, expected_key):
        raise HTTPException(status_code=401, detail="Unauthorized")
