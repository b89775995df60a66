"""Student Ticket Marketplace - API client, ticket lifecycle and reference backend."""

__version__ = "0.1.0"
__author__ = "Ticket Marketplace Team"
__description__ = "Buy and sell student game tickets with verified custodial transfer"

from .api.client import ApiError, TicketMarketplaceAPI

__all__ = ["ApiError", "TicketMarketplaceAPI"]
