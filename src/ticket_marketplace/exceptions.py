"""Exception types shared by the client, storage and API layers."""


class MarketplaceError(Exception):
    """Base class for marketplace errors that map onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MarketplaceError):
    """Input rejected before it reaches storage."""

    status_code = 400


class AuthenticationError(MarketplaceError):
    """Missing, invalid or expired credentials."""

    status_code = 401


class EmailNotVerifiedError(MarketplaceError):
    status_code = 403


class NotFoundError(MarketplaceError):
    status_code = 404


class InvalidTransitionError(MarketplaceError):
    """A ticket status change that the lifecycle does not allow."""

    status_code = 409


class ReservationUnavailableError(MarketplaceError):
    """The ticket could not be reserved, usually because another buyer got it first."""

    status_code = 409


class TradingClosedError(MarketplaceError):
    """The game's trading cutoff has passed."""

    status_code = 400


class RateLimitExceededError(MarketplaceError):
    status_code = 429
