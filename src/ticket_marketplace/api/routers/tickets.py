"""Ticket listing, custodial claim, verification and reservation endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ...config import Settings
from ...exceptions import MarketplaceError, NotFoundError
from ...models.ticket import TicketStatus
from ...storage.database import DatabaseManager
from ..dependencies import get_current_user_id, get_db, get_rate_limiter, get_settings, require_admin
from ..rate_limit import ReservationRateLimiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tickets", tags=["tickets"])


class CreateTicketRequest(BaseModel):
    game_id: str
    level: str
    seat_section: str
    seat_row: str
    seat_number: str
    price: int


class ClaimTicketRequest(BaseModel):
    ticket_id: str


class UpdateTicketRequest(BaseModel):
    status: str | None = None


@router.get("")
def list_tickets(db: DatabaseManager = Depends(get_db)):
    """List Verified and Reserved tickets for games still open for trading."""
    try:
        tickets = db.tickets.list_marketplace_tickets()
        return {"tickets": [ticket.to_dict() for ticket in tickets]}

    except Exception as e:
        logger.error(f"Error listing tickets: {e}")
        raise HTTPException(status_code=500, detail="Failed to list tickets")


@router.get("/my-listings")
def my_listings(
    status: str | None = None,
    user_id: str = Depends(get_current_user_id),
    db: DatabaseManager = Depends(get_db),
):
    """List the caller's tickets, optionally filtered by status (any case)."""
    try:
        status_filter = TicketStatus.from_string(status) if status else None
        tickets = db.tickets.list_seller_tickets(user_id, status_filter)
        return {"tickets": [ticket.to_dict() for ticket in tickets]}

    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Error listing tickets for seller {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to list tickets")


@router.post("", status_code=201)
def create_ticket(
    req: CreateTicketRequest,
    user_id: str = Depends(get_current_user_id),
    db: DatabaseManager = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create an Unverified listing for the caller."""
    logger.info(f"Received create ticket request for game_id: {req.game_id}")
    try:
        game = db.games.get_game(req.game_id)
        if game is None:
            raise NotFoundError("Game not found")

        ticket = db.tickets.create_ticket(
            seller_id=user_id,
            game=game,
            level=req.level,
            seat_section=req.seat_section,
            seat_row=req.seat_row,
            seat_number=req.seat_number,
            price=req.price,
            transfer_deadline_hours=settings.transfer_deadline_hours,
        )
        return ticket.to_dict()

    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to create ticket for game {req.game_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create ticket")


@router.post("/claim")
def claim_ticket(
    req: ClaimTicketRequest,
    user_id: str = Depends(get_current_user_id),
    db: DatabaseManager = Depends(get_db),
):
    """Seller reports the custodial transfer; Unverified becomes Verifying."""
    try:
        ticket = db.tickets.claim_ticket(req.ticket_id, user_id)
        return ticket.to_dict()

    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Error claiming ticket {req.ticket_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to claim ticket")


@router.patch("/{ticket_id}/verify", dependencies=[Depends(require_admin)])
def verify_ticket(
    ticket_id: str,
    req: UpdateTicketRequest | None = None,
    db: DatabaseManager = Depends(get_db),
):
    """Move a ticket to a new status (admin). Defaults to Verified."""
    try:
        requested = req.status if req and req.status else TicketStatus.VERIFIED.value
        ticket = db.tickets.transition_ticket(ticket_id, TicketStatus.from_string(requested))
        return ticket.to_dict()

    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Error updating ticket {ticket_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update ticket")


@router.post("/{ticket_id}/reserve")
def reserve_ticket(
    ticket_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DatabaseManager = Depends(get_db),
    rate_limiter: ReservationRateLimiter = Depends(get_rate_limiter),
):
    """Reserve a Verified ticket for the caller and lock its price."""
    try:
        rate_limiter.check(user_id)
        return db.tickets.reserve_ticket(ticket_id, user_id)

    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Error reserving ticket {ticket_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to reserve ticket")
