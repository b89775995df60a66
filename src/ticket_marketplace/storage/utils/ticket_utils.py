"""Ticket listing and lifecycle database operations.

Every status change is written as a compare-and-swap::

    UPDATE tickets SET status = :new WHERE id = :id AND status = :expected

so two writers racing on the same ticket cannot both succeed. SQLite
serializes writers, and the affected row count tells each caller whether
its swap won.
"""

import sqlite3
import uuid
from datetime import datetime, timedelta
from pathlib import Path

from ...exceptions import (
    InvalidTransitionError,
    NotFoundError,
    ReservationUnavailableError,
    TradingClosedError,
    ValidationError,
)
from ...models.game import Game
from ...models.ticket import ReservationData, Ticket, TicketStatus, ensure_transition
from ...utils.data_helpers import parse_api_date, to_db_timestamp, utc_now
from ...utils.logging_config import get_logger
from ...utils.validation import validate_price_cents, validate_seat_details
from .connection import connect

logger = get_logger(__name__)

MARKETPLACE_STATUSES = (TicketStatus.VERIFIED, TicketStatus.RESERVED)


class TicketManager:
    """Manages ticket database operations."""

    def __init__(self, db_path: str | Path):
        """Initialize ticket manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)

    @staticmethod
    def _row_to_ticket(row: sqlite3.Row) -> Ticket:
        event_date = parse_api_date(row["event_date"])
        transfer_deadline = parse_api_date(row["transfer_deadline"])
        created_at = parse_api_date(row["created_at"])
        if event_date is None or transfer_deadline is None or created_at is None:
            raise ValueError(f"Ticket {row['id']} has corrupt timestamps")

        return Ticket(
            id=row["id"],
            seller_id=row["seller_id"],
            game_id=row["game_id"],
            event_name=row["event_name"],
            event_date=event_date,
            level=row["level"],
            seat_section=row["seat_section"],
            seat_row=row["seat_row"],
            seat_number=row["seat_number"],
            price=row["price"],
            status=TicketStatus(row["status"]),
            transfer_deadline=transfer_deadline,
            created_at=created_at,
            price_at_reservation=row["price_at_reservation"],
            reserved_at=parse_api_date(row["reserved_at"]),
            reserved_by=row["reserved_by"],
        )

    def create_ticket(
        self,
        seller_id: str,
        game: Game,
        level: str,
        seat_section: str,
        seat_row: str,
        seat_number: str,
        price: int,
        transfer_deadline_hours: int = 24,
        now: datetime | None = None,
    ) -> Ticket:
        """Create an Unverified listing for a game.

        Args:
            seller_id: Listing owner
            game: Game the seat is for; its name and time are copied onto the ticket
            level: Ticket level, e.g. STUD
            seat_section: Section
            seat_row: Row
            seat_number: Seat
            price: Asking price in cents
            transfer_deadline_hours: Hours the seller has to complete the custodial transfer
            now: Current time, injectable for tests

        Raises:
            ValidationError: If seat details are blank or the price is negative
            TradingClosedError: If the game's cutoff has passed
        """
        validate_price_cents(price)
        validate_seat_details(
            level=level, seat_section=seat_section, seat_row=seat_row, seat_number=seat_number
        )

        now = now or utc_now()
        if not game.is_trading_open(now):
            raise TradingClosedError("Trading for this game has closed")

        ticket = Ticket(
            id=str(uuid.uuid4()),
            seller_id=seller_id,
            game_id=game.id,
            event_name=game.name,
            event_date=game.game_time,
            level=level.strip(),
            seat_section=seat_section.strip(),
            seat_row=seat_row.strip(),
            seat_number=seat_number.strip(),
            price=price,
            status=TicketStatus.UNVERIFIED,
            transfer_deadline=now + timedelta(hours=transfer_deadline_hours),
            created_at=now,
        )

        with connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO tickets (
                    id, seller_id, game_id, event_name, event_date,
                    level, seat_section, seat_row, seat_number, price, status,
                    transfer_deadline, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    ticket.id,
                    ticket.seller_id,
                    ticket.game_id,
                    ticket.event_name,
                    to_db_timestamp(ticket.event_date),
                    ticket.level,
                    ticket.seat_section,
                    ticket.seat_row,
                    ticket.seat_number,
                    ticket.price,
                    ticket.status.value,
                    to_db_timestamp(ticket.transfer_deadline),
                    to_db_timestamp(now),
                    to_db_timestamp(now),
                ),
            )

        logger.info(f"Ticket created: {ticket.id} for game {ticket.game_id}")
        return ticket

    def get_ticket(self, ticket_id: str) -> Ticket | None:
        with connect(self.db_path) as conn:
            row = conn.execute("SELECT * FROM tickets WHERE id = ?", (ticket_id,)).fetchone()
        return self._row_to_ticket(row) if row else None

    def _require_ticket(self, ticket_id: str) -> Ticket:
        ticket = self.get_ticket(ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket not found")
        return ticket

    def list_marketplace_tickets(self, now: datetime | None = None) -> list[Ticket]:
        """Get Verified and Reserved tickets for games still open for trading."""
        placeholders = ", ".join("?" for _ in MARKETPLACE_STATUSES)
        with connect(self.db_path) as conn:
            rows = conn.execute(
                f"""
                SELECT t.* FROM tickets t
                JOIN games g ON g.id = t.game_id
                WHERE t.status IN ({placeholders}) AND g.cutoff_time > ?
                ORDER BY t.event_date ASC, t.price ASC
                """,
                (*[status.value for status in MARKETPLACE_STATUSES], to_db_timestamp(now or utc_now())),
            ).fetchall()
        return [self._row_to_ticket(row) for row in rows]

    def list_seller_tickets(
        self, seller_id: str, status: TicketStatus | None = None
    ) -> list[Ticket]:
        """Get a seller's listings, newest first, optionally filtered by status."""
        query = "SELECT * FROM tickets WHERE seller_id = ?"
        params: list[str] = [seller_id]

        if status is not None:
            query += " AND status = ?"
            params.append(status.value)

        query += " ORDER BY created_at DESC"

        with connect(self.db_path) as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_ticket(row) for row in rows]

    def _swap_status(
        self,
        conn: sqlite3.Connection,
        ticket_id: str,
        expected: TicketStatus,
        target: TicketStatus,
        now: datetime,
    ) -> bool:
        cursor = conn.execute(
            "UPDATE tickets SET status = ?, updated_at = ? WHERE id = ? AND status = ?",
            (target.value, to_db_timestamp(now), ticket_id, expected.value),
        )
        return cursor.rowcount == 1

    def claim_ticket(self, ticket_id: str, seller_id: str, now: datetime | None = None) -> Ticket:
        """Record the seller's custodial transfer, moving Unverified to Verifying.

        Raises:
            NotFoundError: If the ticket does not exist or belongs to someone else
            InvalidTransitionError: If the ticket is not Unverified
        """
        ticket = self._require_ticket(ticket_id)
        if ticket.seller_id != seller_id:
            # Other sellers' tickets are reported as missing
            raise NotFoundError("Ticket not found")

        return self.transition_ticket(ticket_id, TicketStatus.VERIFYING, now=now)

    def transition_ticket(
        self, ticket_id: str, target: TicketStatus, now: datetime | None = None
    ) -> Ticket:
        """Move a ticket along one lifecycle edge.

        Reservation is not reachable from here; it needs a buyer and goes
        through ``reserve_ticket``.

        Raises:
            NotFoundError: If the ticket does not exist
            ValidationError: If the target is Reserved
            InvalidTransitionError: If the edge is not allowed or the ticket changed concurrently
        """
        if target is TicketStatus.RESERVED:
            raise ValidationError("Tickets can only be reserved by a buyer")

        ticket = self._require_ticket(ticket_id)
        ensure_transition(ticket.status, target)

        with connect(self.db_path) as conn:
            if not self._swap_status(conn, ticket_id, ticket.status, target, now or utc_now()):
                current = conn.execute(
                    "SELECT status FROM tickets WHERE id = ?", (ticket_id,)
                ).fetchone()
                # Someone else moved the ticket between our read and write
                ensure_transition(TicketStatus(current["status"]), target)
                raise InvalidTransitionError("Ticket changed concurrently, retry the request")

        logger.info(f"Ticket {ticket_id}: {ticket.status.value} -> {target.value}")
        return self._require_ticket(ticket_id)

    def reserve_ticket(
        self, ticket_id: str, buyer_id: str, now: datetime | None = None
    ) -> ReservationData:
        """Reserve a Verified ticket for a buyer and freeze its price.

        At most one caller can win for a given ticket: the update only
        matches while the status is still Verified.

        Args:
            ticket_id: Ticket to reserve
            buyer_id: Reserving user
            now: Current time, injectable for tests

        Returns:
            Reservation details with the locked price

        Raises:
            NotFoundError: If the ticket does not exist
            ValidationError: If the buyer is the seller
            TradingClosedError: If the game's cutoff has passed
            ReservationUnavailableError: If the ticket is not Verified
        """
        now = now or utc_now()
        ticket = self._require_ticket(ticket_id)

        if ticket.seller_id == buyer_id:
            raise ValidationError("You cannot reserve your own ticket")

        with connect(self.db_path) as conn:
            game_row = conn.execute(
                "SELECT cutoff_time FROM games WHERE id = ?", (ticket.game_id,)
            ).fetchone()
            cutoff_time = parse_api_date(game_row["cutoff_time"]) if game_row else None
            if cutoff_time is None or now >= cutoff_time:
                raise TradingClosedError("Trading for this game has closed")

            reserved_at = to_db_timestamp(now)
            cursor = conn.execute(
                """
                UPDATE tickets
                SET status = ?, reserved_by = ?, reserved_at = ?,
                    price_at_reservation = price, updated_at = ?
                WHERE id = ? AND status = ?
                """,
                (
                    TicketStatus.RESERVED.value,
                    buyer_id,
                    reserved_at,
                    reserved_at,
                    ticket_id,
                    TicketStatus.VERIFIED.value,
                ),
            )
            if cursor.rowcount != 1:
                logger.info(f"Reservation of ticket {ticket_id} by {buyer_id} rejected")
                raise ReservationUnavailableError("Ticket is not available for reservation")

            row = conn.execute(
                "SELECT price_at_reservation FROM tickets WHERE id = ?", (ticket_id,)
            ).fetchone()

        logger.info(f"Ticket {ticket_id} reserved by {buyer_id} at {row['price_at_reservation']} cents")
        return {
            "ticket_id": ticket_id,
            "status": TicketStatus.RESERVED.value,
            "price_at_reservation": row["price_at_reservation"],
            "reserved_at": reserved_at,
        }

    def cancel_expired_unverified(self, now: datetime | None = None) -> int:
        """Cancel Unverified tickets whose transfer deadline has passed.

        Returns:
            Number of tickets cancelled
        """
        timestamp = to_db_timestamp(now or utc_now())
        with connect(self.db_path) as conn:
            cursor = conn.execute(
                """
                UPDATE tickets
                SET status = ?, updated_at = ?
                WHERE status = ? AND transfer_deadline <= ?
                """,
                (
                    TicketStatus.CANCELLED.value,
                    timestamp,
                    TicketStatus.UNVERIFIED.value,
                    timestamp,
                ),
            )
            cancelled = cursor.rowcount

        if cancelled:
            logger.info(f"Expired unverified cleanup cancelled {cancelled} tickets")
        return cancelled

    def cancel_expired_reservations(
        self, window_minutes: int, now: datetime | None = None
    ) -> int:
        """Cancel reservations held longer than ``window_minutes`` without payment.

        The update only matches rows still Reserved, so a ticket an admin
        moves to Paid in the meantime is left alone.

        Returns:
            Number of tickets cancelled
        """
        now = now or utc_now()
        expires_before = to_db_timestamp(now - timedelta(minutes=window_minutes))
        with connect(self.db_path) as conn:
            cursor = conn.execute(
                """
                UPDATE tickets
                SET status = ?, updated_at = ?
                WHERE status = ? AND reserved_at <= ?
                """,
                (
                    TicketStatus.CANCELLED.value,
                    to_db_timestamp(now),
                    TicketStatus.RESERVED.value,
                    expires_before,
                ),
            )
            cancelled = cursor.rowcount

        if cancelled:
            logger.info(f"Reservation cleanup cancelled {cancelled} tickets")
        return cancelled
