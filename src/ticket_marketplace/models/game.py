"""Game data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from ..exceptions import ValidationError
from ..utils.data_helpers import parse_api_date, to_db_timestamp, utc_now


class SportType(Enum):
    """Sports that tickets can be listed for."""

    FOOTBALL = "Football"
    BASKETBALL = "Basketball"
    HOCKEY = "Hockey"

    @classmethod
    def from_string(cls, sport_type_str: str) -> "SportType":
        """Create SportType from string, ignoring case.

        Raises:
            ValidationError: If the string names no known sport
        """
        for sport_type in cls:
            if sport_type.value.lower() == (sport_type_str or "").strip().lower():
                return sport_type
        raise ValidationError("Invalid sport type")


@dataclass
class Game:
    """Represents a scheduled game that tickets can be traded for."""

    id: str
    sport_type: SportType
    name: str
    game_time: datetime
    cutoff_time: datetime

    @classmethod
    def from_api_data(cls, game_data: dict[str, Any]) -> "Game":
        """Create Game instance from API data."""
        game_time = parse_api_date(game_data.get("game_time"))
        cutoff_time = parse_api_date(game_data.get("cutoff_time"))
        if game_time is None or cutoff_time is None:
            raise ValueError(f"Game {game_data.get('id')} is missing game_time or cutoff_time")

        return cls(
            id=str(game_data.get("id", "")),
            sport_type=SportType.from_string(game_data.get("sport_type", "")),
            name=game_data.get("name", ""),
            game_time=game_time,
            cutoff_time=cutoff_time,
        )

    def is_trading_open(self, now: datetime | None = None) -> bool:
        """Check whether listings and reservations are still allowed.

        Trading closes at the cutoff time itself, not after it.
        """
        return (now or utc_now()) < self.cutoff_time

    def to_dict(self) -> dict[str, Any]:
        """Convert Game to the JSON shape served by the API."""
        return {
            "id": self.id,
            "sport_type": self.sport_type.value,
            "name": self.name,
            "game_time": to_db_timestamp(self.game_time),
            "cutoff_time": to_db_timestamp(self.cutoff_time),
        }

    def __str__(self) -> str:
        return f"{self.game_time.strftime('%m/%d/%Y')} {self.name} [{self.sport_type.value}]"
