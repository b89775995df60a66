"""Aggregations over marketplace data."""

from .listing_stats import ListingStats, compute_listing_stats, fetch_listing_stats

__all__ = ["ListingStats", "compute_listing_stats", "fetch_listing_stats"]
