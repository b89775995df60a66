"""Database manager for SQLite storage."""

import logging
from pathlib import Path

from .utils.connection import connect
from .utils.game_utils import GameManager
from .utils.ticket_utils import TicketManager
from .utils.user_utils import UserManager

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the marketplace schema and hands out per-table managers."""

    def __init__(self, db_path: str | Path = "ticket_marketplace.db"):
        """Initialize database manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._ensure_database_exists()

        # Initialize record managers
        self.users = UserManager(self.db_path)
        self.games = GameManager(self.db_path)
        self.tickets = TicketManager(self.db_path)

    def _ensure_database_exists(self) -> None:
        """Create database and tables if they don't exist."""
        with connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE COLLATE NOCASE,
                    password_hash TEXT NOT NULL,
                    email_verified BOOLEAN NOT NULL DEFAULT FALSE,
                    verification_code TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS games (
                    id TEXT PRIMARY KEY,
                    sport_type TEXT NOT NULL
                        CHECK (sport_type IN ('Football', 'Basketball', 'Hockey')),
                    name TEXT NOT NULL,
                    game_time TEXT NOT NULL,
                    cutoff_time TEXT NOT NULL
                )
            """)

            # Tickets are never deleted; games with listings cannot be deleted either
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tickets (
                    id TEXT PRIMARY KEY,
                    seller_id TEXT NOT NULL REFERENCES users(id),
                    game_id TEXT NOT NULL REFERENCES games(id) ON DELETE RESTRICT,
                    event_name TEXT NOT NULL,
                    event_date TEXT NOT NULL,
                    level TEXT NOT NULL,
                    seat_section TEXT NOT NULL,
                    seat_row TEXT NOT NULL,
                    seat_number TEXT NOT NULL,
                    price INTEGER NOT NULL CHECK (price >= 0),
                    status TEXT NOT NULL CHECK (status IN (
                        'Unverified', 'Verifying', 'Verified', 'Reserved',
                        'Paid', 'Sold', 'Cancelled'
                    )),
                    transfer_deadline TEXT NOT NULL,
                    price_at_reservation INTEGER,
                    reserved_at TEXT,
                    reserved_by TEXT REFERENCES users(id),
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            conn.execute("CREATE INDEX IF NOT EXISTS idx_games_cutoff ON games(cutoff_time)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_tickets_seller ON tickets(seller_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_tickets_game ON tickets(game_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_tickets_status ON tickets(status)")

        logger.info(f"Database initialized at {self.db_path}")
