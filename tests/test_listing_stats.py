"""Tests for seller dashboard statistics."""

from unittest.mock import Mock

from ticket_marketplace.analysis.listing_stats import (
    ListingStats,
    compute_listing_stats,
    fetch_listing_stats,
)
from ticket_marketplace.api.client import ApiError, TicketMarketplaceAPI


def test_compute_listing_stats():
    tickets = [
        {"status": "Unverified"},
        {"status": "Unverified"},
        {"status": "Verifying"},
        {"status": "Verified"},
        {"status": "Reserved"},
        {"status": "Sold"},
        {"status": "Cancelled"},
    ]

    stats = compute_listing_stats(tickets)

    assert stats == ListingStats(total=7, unverified=2, verified=1, sold=1)
    assert stats.to_dict() == {"total": 7, "unverified": 2, "verified": 1, "sold": 1}


def test_compute_listing_stats_empty():
    assert compute_listing_stats([]) == ListingStats()


def test_fetch_listing_stats():
    api = Mock(spec=TicketMarketplaceAPI)
    api.get_my_listings.return_value = {"tickets": [{"status": "Verified"}, {"status": "Sold"}]}

    stats = fetch_listing_stats(api)

    assert stats == ListingStats(total=2, unverified=0, verified=1, sold=1)


def test_fetch_failure_gives_zero_counts():
    api = Mock(spec=TicketMarketplaceAPI)
    api.get_my_listings.side_effect = ApiError("Unauthorized", 401)

    assert fetch_listing_stats(api) == ListingStats()
