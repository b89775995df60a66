"""Data storage and persistence module."""

from .database import DatabaseManager
from .utils.game_utils import GameManager
from .utils.ticket_utils import TicketManager
from .utils.user_utils import UserManager

__all__ = [
    "DatabaseManager",
    "GameManager",
    "TicketManager",
    "UserManager",
]
