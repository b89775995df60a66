"""Game database operations."""

import sqlite3
import uuid
from datetime import datetime, timedelta
from pathlib import Path

from ...exceptions import NotFoundError, ValidationError
from ...models.game import Game, SportType
from ...utils.data_helpers import parse_api_date, to_db_timestamp, utc_now
from ...utils.logging_config import get_logger
from .connection import connect

logger = get_logger(__name__)


class GameManager:
    """Manages game database operations."""

    def __init__(self, db_path: str | Path):
        """Initialize game manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)

    @staticmethod
    def _row_to_game(row: sqlite3.Row) -> Game:
        game_time = parse_api_date(row["game_time"])
        cutoff_time = parse_api_date(row["cutoff_time"])
        if game_time is None or cutoff_time is None:
            raise ValueError(f"Game {row['id']} has corrupt timestamps")
        return Game(
            id=row["id"],
            sport_type=SportType(row["sport_type"]),
            name=row["name"],
            game_time=game_time,
            cutoff_time=cutoff_time,
        )

    def create_game(
        self,
        sport_type: str,
        name: str,
        game_time: datetime,
        cutoff_minutes: int,
        now: datetime | None = None,
    ) -> Game:
        """Create a game whose trading closes ``cutoff_minutes`` before it starts.

        Args:
            sport_type: Sport name, any case
            name: Display name
            game_time: Scheduled start
            cutoff_minutes: Minutes before start at which trading closes
            now: Current time, injectable for tests

        Raises:
            ValidationError: If the name is blank, the sport unknown or the time not in the future
        """
        errors = []
        if not name or not name.strip():
            errors.append("Game name cannot be empty")
        if game_time.tzinfo is None:
            errors.append("Game time must include a timezone")
        elif game_time <= (now or utc_now()):
            errors.append("Game time must be in the future")
        if errors:
            raise ValidationError("; ".join(errors))

        sport = SportType.from_string(sport_type)
        game = Game(
            id=str(uuid.uuid4()),
            sport_type=sport,
            name=name.strip(),
            game_time=game_time,
            cutoff_time=game_time - timedelta(minutes=cutoff_minutes),
        )

        with connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO games (id, sport_type, name, game_time, cutoff_time)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    game.id,
                    game.sport_type.value,
                    game.name,
                    to_db_timestamp(game.game_time),
                    to_db_timestamp(game.cutoff_time),
                ),
            )

        logger.info(f"Game created: {game.name} ({game.id}), cutoff {game.cutoff_time.isoformat()}")
        return game

    def get_game(self, game_id: str) -> Game | None:
        with connect(self.db_path) as conn:
            row = conn.execute("SELECT * FROM games WHERE id = ?", (game_id,)).fetchone()
        return self._row_to_game(row) if row else None

    def list_open_games(self, now: datetime | None = None) -> list[Game]:
        """Get games still open for trading, soonest first."""
        with connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM games WHERE cutoff_time > ? ORDER BY game_time ASC",
                (to_db_timestamp(now or utc_now()),),
            ).fetchall()

        games = [self._row_to_game(row) for row in rows]
        logger.debug(f"Listed {len(games)} upcoming games")
        return games

    def delete_game(self, game_id: str) -> None:
        """Delete a game that has no ticket listings.

        Raises:
            NotFoundError: If the game does not exist
            ValidationError: If tickets reference the game
        """
        try:
            with connect(self.db_path) as conn:
                cursor = conn.execute("DELETE FROM games WHERE id = ?", (game_id,))
                if cursor.rowcount == 0:
                    raise NotFoundError("Game not found")
        except sqlite3.IntegrityError:
            raise ValidationError("Game has ticket listings and cannot be deleted")

        logger.info(f"Game deleted: {game_id}")
