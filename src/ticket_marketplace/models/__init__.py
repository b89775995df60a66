"""Data models for games, tickets and users."""

from .game import Game, SportType
from .ticket import ReservationData, Ticket, TicketStatus, ensure_transition
from .user import User

__all__ = [
    "Game",
    "SportType",
    "Ticket",
    "TicketStatus",
    "ReservationData",
    "ensure_transition",
    "User",
]
