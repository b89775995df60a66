"""Seller dashboard statistics."""

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

from ..api.client import ApiError, TicketMarketplaceAPI
from ..models.ticket import TicketStatus

logger = logging.getLogger(__name__)


@dataclass
class ListingStats:
    """Counts shown on a seller's dashboard."""

    total: int = 0
    unverified: int = 0
    verified: int = 0
    sold: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def compute_listing_stats(tickets: Iterable[dict[str, Any]]) -> ListingStats:
    """Count listings by the statuses the dashboard shows.

    Args:
        tickets: Ticket dictionaries as returned by the API

    Returns:
        ListingStats with the total and per-status counts
    """
    stats = ListingStats()
    for ticket in tickets:
        stats.total += 1
        status = ticket.get("status")
        if status == TicketStatus.UNVERIFIED.value:
            stats.unverified += 1
        elif status == TicketStatus.VERIFIED.value:
            stats.verified += 1
        elif status == TicketStatus.SOLD.value:
            stats.sold += 1
    return stats


def fetch_listing_stats(api: TicketMarketplaceAPI) -> ListingStats:
    """Fetch the caller's listings and count them.

    Fetch failures leave every count at zero rather than raising.
    """
    try:
        response = api.get_my_listings()
    except ApiError as e:
        logger.warning(f"Could not load listing stats: {e}")
        return ListingStats()
    return compute_listing_stats(response.get("tickets", []))
