"""Registration, email verification and login endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ...config import Settings
from ...exceptions import EmailNotVerifiedError, MarketplaceError
from ...storage.database import DatabaseManager
from ...utils.security import generate_token, generate_verification_code, hash_password, verify_password
from ...utils.validation import validate_password, validate_school_email
from ..dependencies import get_db, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    email: str
    password: str


class VerifyEmailRequest(BaseModel):
    email: str
    code: str


class LoginRequest(BaseModel):
    email: str
    password: str


@router.post("/register", status_code=201)
def register(
    req: RegisterRequest,
    db: DatabaseManager = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create an unverified account and issue a verification code."""
    try:
        validate_school_email(req.email, settings.school_email_domain)
        validate_password(req.password)

        verification_code = generate_verification_code()
        db.users.create_user(req.email, hash_password(req.password), verification_code)

        # No mail delivery yet; the code is logged and, in development, returned
        logger.info(f"Verification code for {req.email}: {verification_code}")

        response: dict[str, Any] = {
            "message": "Registration successful. Please check your email for verification code."
        }
        if settings.expose_verification_code:
            response["verification_code"] = verification_code
        return response

    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Error registering {req.email}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/verify-email")
def verify_email(req: VerifyEmailRequest, db: DatabaseManager = Depends(get_db)):
    """Activate an account with its verification code."""
    try:
        user = db.users.verify_email(req.email, req.code)
        return {
            "message": "Email verified successfully. Your account is now active.",
            "user_id": user.id,
        }

    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Error verifying email {req.email}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/login")
def login(
    req: LoginRequest,
    db: DatabaseManager = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Check credentials and return a session token."""
    try:
        user = db.users.get_user_by_email(req.email)
        if user is None or not user.password_hash or not verify_password(req.password, user.password_hash):
            logger.warning(f"Failed login attempt for email: {req.email}")
            raise HTTPException(status_code=401, detail="Invalid email or password")

        if not user.email_verified:
            logger.warning(f"Login attempt with unverified email: {req.email}")
            raise EmailNotVerifiedError("Email not verified")

        token = generate_token(user.id, user.email, settings.jwt_secret, settings.jwt_expiry_hours)
        logger.info(f"User logged in: {user.email} (ID: {user.id})")
        return {"token": token, "user": user.to_dict()}

    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Error logging in {req.email}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
