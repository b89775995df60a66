"""User account database operations."""

import sqlite3
import uuid
from pathlib import Path

from ...exceptions import ValidationError
from ...models.user import User
from ...utils.data_helpers import parse_api_date, to_db_timestamp, utc_now
from ...utils.logging_config import get_logger
from .connection import connect

logger = get_logger(__name__)


class UserManager:
    """Manages user account database operations."""

    def __init__(self, db_path: str | Path):
        """Initialize user manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            email_verified=bool(row["email_verified"]),
            password_hash=row["password_hash"],
            verification_code=row["verification_code"],
            created_at=parse_api_date(row["created_at"]),
        )

    def create_user(self, email: str, password_hash: str, verification_code: str) -> User:
        """Insert a new, unverified user.

        Raises:
            ValidationError: If the email is already registered
        """
        user_id = str(uuid.uuid4())
        now = to_db_timestamp(utc_now())

        try:
            with connect(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO users (
                        id, email, password_hash, email_verified,
                        verification_code, created_at, updated_at
                    ) VALUES (?, ?, ?, 0, ?, ?, ?)
                    """,
                    (user_id, email, password_hash, verification_code, now, now),
                )
        except sqlite3.IntegrityError:
            raise ValidationError("Email already exists")

        logger.info(f"User registered: {email} (ID: {user_id})")
        user = self.get_user_by_id(user_id)
        if user is None:
            raise ValueError(f"Failed to read back user {user_id}")
        return user

    def get_user_by_email(self, email: str) -> User | None:
        with connect(self.db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        return self._row_to_user(row) if row else None

    def get_user_by_id(self, user_id: str) -> User | None:
        with connect(self.db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return self._row_to_user(row) if row else None

    def verify_email(self, email: str, code: str) -> User:
        """Mark an email as verified if the code matches.

        Raises:
            ValidationError: If no unverified account has that email and code
        """
        with connect(self.db_path) as conn:
            cursor = conn.execute(
                """
                UPDATE users
                SET email_verified = 1, verification_code = NULL, updated_at = ?
                WHERE email = ? AND verification_code = ? AND email_verified = 0
                """,
                (to_db_timestamp(utc_now()), email, code),
            )
            if cursor.rowcount != 1:
                logger.warning(f"Invalid verification code for email: {email}")
                raise ValidationError("Invalid verification code")

        user = self.get_user_by_email(email)
        if user is None:
            raise ValueError(f"User {email} disappeared after verification")
        logger.info(f"Email verified for user: {email} (ID: {user.id})")
        return user
