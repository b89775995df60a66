"""User data model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class User:
    """A marketplace account.

    ``password_hash`` and ``verification_code`` are only populated
    server-side and never serialized.
    """

    id: str
    email: str
    email_verified: bool = False
    password_hash: str | None = None
    verification_code: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_api_data(cls, user_data: dict[str, Any]) -> "User":
        return cls(
            id=str(user_data.get("id", "")),
            email=user_data.get("email", ""),
            email_verified=bool(user_data.get("email_verified", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "email": self.email, "email_verified": self.email_verified}
