"""Marketplace API client and reference server."""

from .client import ApiError, TicketMarketplaceAPI
from .session import MemoryTokenStore, TokenStore

__all__ = ["ApiError", "TicketMarketplaceAPI", "MemoryTokenStore", "TokenStore"]
