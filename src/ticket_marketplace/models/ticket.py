"""Ticket data models and the ticket status lifecycle.

A ticket moves forward along a single path::

    Unverified -> Verifying -> Verified -> Reserved -> Paid -> Sold

and can be cancelled from any state that is not already terminal. Sold and
Cancelled have no outgoing transitions.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, TypedDict

from ..exceptions import InvalidTransitionError, ValidationError
from ..utils.data_helpers import format_price, parse_api_date, to_db_timestamp


class TicketStatus(Enum):
    """Lifecycle states of a listed ticket."""

    UNVERIFIED = "Unverified"
    VERIFYING = "Verifying"
    VERIFIED = "Verified"
    RESERVED = "Reserved"
    PAID = "Paid"
    SOLD = "Sold"
    CANCELLED = "Cancelled"

    @classmethod
    def from_string(cls, status_str: str) -> "TicketStatus":
        """Create TicketStatus from string, ignoring case.

        Raises:
            ValidationError: If the string names no known status
        """
        for status in cls:
            if status.value.lower() == (status_str or "").strip().lower():
                return status
        raise ValidationError(f"Invalid ticket status: {status_str}")

    @property
    def is_terminal(self) -> bool:
        return self in (TicketStatus.SOLD, TicketStatus.CANCELLED)

    def allowed_transitions(self) -> frozenset["TicketStatus"]:
        """Statuses reachable from this one in a single step."""
        return _TRANSITIONS[self]

    def can_transition_to(self, target: "TicketStatus") -> bool:
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.UNVERIFIED: frozenset({TicketStatus.VERIFYING, TicketStatus.CANCELLED}),
    TicketStatus.VERIFYING: frozenset({TicketStatus.VERIFIED, TicketStatus.CANCELLED}),
    TicketStatus.VERIFIED: frozenset({TicketStatus.RESERVED, TicketStatus.CANCELLED}),
    TicketStatus.RESERVED: frozenset({TicketStatus.PAID, TicketStatus.CANCELLED}),
    TicketStatus.PAID: frozenset({TicketStatus.SOLD, TicketStatus.CANCELLED}),
    TicketStatus.SOLD: frozenset(),
    TicketStatus.CANCELLED: frozenset(),
}


def ensure_transition(current: TicketStatus, target: TicketStatus) -> None:
    """Raise InvalidTransitionError unless ``current -> target`` is a lifecycle edge."""
    if not current.can_transition_to(target):
        raise InvalidTransitionError(
            f"Cannot move ticket from {current.value} to {target.value}"
        )


class ReservationData(TypedDict):
    """Typed structure returned by a successful reservation."""
    ticket_id: str
    status: str
    price_at_reservation: int
    reserved_at: str


@dataclass
class Ticket:
    """Represents a seat-specific listing for one game."""

    id: str
    seller_id: str
    game_id: str
    event_name: str
    event_date: datetime
    level: str
    seat_section: str
    seat_row: str
    seat_number: str
    price: int  # cents
    status: TicketStatus
    transfer_deadline: datetime
    created_at: datetime
    price_at_reservation: int | None = None
    reserved_at: datetime | None = None
    reserved_by: str | None = None

    @classmethod
    def from_api_data(cls, ticket_data: dict[str, Any]) -> "Ticket":
        """Create Ticket instance from API data."""
        event_date = parse_api_date(ticket_data.get("event_date"))
        transfer_deadline = parse_api_date(ticket_data.get("transfer_deadline"))
        created_at = parse_api_date(ticket_data.get("created_at"))
        if event_date is None or transfer_deadline is None or created_at is None:
            raise ValueError(f"Ticket {ticket_data.get('id')} has missing timestamps")

        return cls(
            id=str(ticket_data["id"]),
            seller_id=str(ticket_data.get("seller_id", "")),
            game_id=str(ticket_data.get("game_id", "")),
            event_name=ticket_data.get("event_name", ""),
            event_date=event_date,
            level=ticket_data.get("level", ""),
            seat_section=ticket_data.get("seat_section", ""),
            seat_row=ticket_data.get("seat_row", ""),
            seat_number=ticket_data.get("seat_number", ""),
            price=int(ticket_data.get("price", 0)),
            status=TicketStatus.from_string(ticket_data.get("status", "")),
            transfer_deadline=transfer_deadline,
            created_at=created_at,
            price_at_reservation=ticket_data.get("price_at_reservation"),
        )

    def is_purchasable(self) -> bool:
        """Only verified tickets can be bought."""
        return self.status is TicketStatus.VERIFIED

    @property
    def seat_label(self) -> str:
        return f"{self.level} / Sec {self.seat_section} / Row {self.seat_row} / Seat {self.seat_number}"

    def to_dict(self) -> dict[str, Any]:
        """Convert Ticket to the JSON shape served by the API.

        ``reserved_at`` and ``reserved_by`` stay server-side.
        """
        result: dict[str, Any] = {
            "id": self.id,
            "seller_id": self.seller_id,
            "game_id": self.game_id,
            "event_name": self.event_name,
            "event_date": to_db_timestamp(self.event_date),
            "level": self.level,
            "seat_section": self.seat_section,
            "seat_row": self.seat_row,
            "seat_number": self.seat_number,
            "price": self.price,
            "status": self.status.value,
            "transfer_deadline": to_db_timestamp(self.transfer_deadline),
            "created_at": to_db_timestamp(self.created_at),
        }
        if self.price_at_reservation is not None:
            result["price_at_reservation"] = self.price_at_reservation
        return result

    def __str__(self) -> str:
        return f"{self.event_name} - {self.seat_label} - {format_price(self.price)} [{self.status.value}]"
