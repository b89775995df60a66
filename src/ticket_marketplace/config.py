"""Environment-driven settings for the client and the reference backend."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_API_URL = "http://localhost:3000"
DEFAULT_TOKEN_FILE = Path.home() / ".ticket_marketplace" / "session.json"


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to default."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Runtime configuration.

    Every field has a development default so the server and client start
    without a ``.env`` file.
    """

    api_url: str = DEFAULT_API_URL
    token_file: Path = DEFAULT_TOKEN_FILE
    database_path: Path = Path("ticket_marketplace.db")
    jwt_secret: str = "dev-secret-change-me"
    jwt_expiry_hours: int = 24
    admin_api_key: str | None = None
    school_email_domain: str = "msu.edu"
    listing_cutoff_minutes: int = 60
    transfer_deadline_hours: int = 24
    reservation_window_minutes: int = 7
    expose_verification_code: bool = True
    rate_limit_requests: int = 10
    rate_limit_window_seconds: int = 60
    cleanup_interval_seconds: int = 60
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            api_url=os.getenv("TICKET_API_URL") or DEFAULT_API_URL,
            token_file=Path(os.getenv("TICKET_TOKEN_FILE") or DEFAULT_TOKEN_FILE).expanduser(),
            database_path=Path(os.getenv("DATABASE_PATH") or "ticket_marketplace.db"),
            jwt_secret=os.getenv("JWT_SECRET") or "dev-secret-change-me",
            jwt_expiry_hours=_env_int("JWT_EXPIRY_HOURS", 24),
            admin_api_key=os.getenv("ADMIN_API_KEY") or None,
            school_email_domain=os.getenv("SCHOOL_EMAIL_DOMAIN") or "msu.edu",
            listing_cutoff_minutes=_env_int("LISTING_CUTOFF_MINUTES", 60),
            transfer_deadline_hours=_env_int("TRANSFER_DEADLINE_HOURS", 24),
            reservation_window_minutes=_env_int("RESERVATION_WINDOW_MINUTES", 7),
            expose_verification_code=_env_bool("EXPOSE_VERIFICATION_CODE", True),
            rate_limit_requests=_env_int("RATE_LIMIT_REQUESTS", 10),
            rate_limit_window_seconds=_env_int("RATE_LIMIT_WINDOW_SECONDS", 60),
            cleanup_interval_seconds=_env_int("CLEANUP_INTERVAL_SECONDS", 60),
            log_level=os.getenv("LOG_LEVEL") or "INFO",
        )


def get_settings() -> Settings:
    """Return settings read from the current environment."""
    return Settings.from_env()
