"""HTTP client for the ticket marketplace API."""

import logging
from decimal import Decimal
from typing import Any, Protocol, TypedDict

import requests

from ..config import DEFAULT_API_URL, get_settings
from ..utils.data_helpers import dollars_to_cents
from ..utils.validation import (
    validate_password,
    validate_price_cents,
    validate_school_email,
    validate_seat_details,
)
from ..exceptions import ValidationError
from .session import TokenStore

logger = logging.getLogger(__name__)

FALLBACK_ERROR_MESSAGE = "Request failed"
DEFAULT_TIMEOUT = 10


class TokenStorage(Protocol):
    def load(self) -> str | None: ...

    def save(self, token: str) -> None: ...

    def clear(self) -> None: ...


class UserData(TypedDict):
    """Typed structure for a user from the API."""
    id: str
    email: str
    email_verified: bool


class LoginData(TypedDict):
    token: str
    user: UserData


class RegisterData(TypedDict, total=False):
    """Typed structure for a registration response.

    ``verification_code`` is only present when the server exposes it (development).
    """
    message: str
    verification_code: str


class ApiError(Exception):
    """A request failed or the server answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TicketMarketplaceAPI:
    """Client for the marketplace REST API.

    Every request carries the stored token verbatim as the ``Authorization``
    header value when one is present.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token_store: TokenStorage | None = None,
        session: requests.Session | None = None,
        school_email_domain: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the API client.

        Args:
            base_url: API root; defaults to ``TICKET_API_URL``
            token_store: Where the bearer token lives; defaults to the session file
            session: Optional pre-configured requests session
            school_email_domain: Institutional domain checked before registering
            timeout: Per-request timeout in seconds
        """
        settings = get_settings()
        self.base_url = (base_url or settings.api_url or DEFAULT_API_URL).rstrip("/")
        self.token_store: TokenStorage = (
            token_store if token_store is not None else TokenStore(settings.token_file)
        )
        self.session = session or requests.Session()
        self.school_email_domain = school_email_domain or settings.school_email_domain
        self.timeout = timeout

    # Token handling

    @property
    def token(self) -> str | None:
        return self.token_store.load()

    def set_token(self, token: str) -> None:
        self.token_store.save(token)

    def clear_token(self) -> None:
        self.token_store.clear()

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def _request(
        self,
        method: str,
        endpoint: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        authorization: str | None = None,
    ) -> Any:
        """Send a request and decode the JSON response.

        Args:
            method: HTTP method
            endpoint: Path below the base URL, starting with ``/``
            json: Optional JSON body
            params: Optional query parameters
            authorization: Explicit Authorization value overriding the stored token

        Returns:
            Decoded JSON body, or ``{}`` for 204 responses

        Raises:
            ApiError: On transport failure or any non-2xx status
        """
        headers = {"Content-Type": "application/json"}
        auth_value = authorization if authorization is not None else self.token
        if auth_value:
            headers["Authorization"] = auth_value

        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.request(
                method, url, json=json, params=params, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Request error for {method} {endpoint}: {e}")
            raise ApiError(FALLBACK_ERROR_MESSAGE) from e

        if not 200 <= response.status_code < 300:
            message = FALLBACK_ERROR_MESSAGE
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("error"):
                    message = str(body["error"])
            except ValueError:
                pass
            logger.warning(f"{method} {endpoint} failed with {response.status_code}: {message}")
            raise ApiError(message, response.status_code)

        if response.status_code == 204:
            return {}

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {method} {endpoint}: {e}")
            raise ApiError(FALLBACK_ERROR_MESSAGE, response.status_code) from e

    # Auth

    def register(self, email: str, password: str) -> RegisterData:
        """Create an account.

        The institutional domain and password policy are checked here first;
        the server checks them again.

        Raises:
            ValidationError: If the input fails the pre-submit checks
            ApiError: If the server rejects the registration
        """
        validate_school_email(email, self.school_email_domain)
        validate_password(password)
        return self._request("POST", "/api/auth/register", json={"email": email, "password": password})

    def verify_email(self, email: str, code: str) -> dict[str, Any]:
        return self._request("POST", "/api/auth/verify-email", json={"email": email, "code": code})

    def login(self, email: str, password: str) -> LoginData:
        """Log in and persist the returned token for later requests."""
        response: LoginData = self._request(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )
        self.set_token(response["token"])
        logger.info(f"Logged in as {response['user']['email']}")
        return response

    def logout(self) -> None:
        self.clear_token()

    # Games

    def get_games(self) -> dict[str, list[dict[str, Any]]]:
        return self._request("GET", "/api/games")

    # Tickets

    def get_tickets(self) -> dict[str, list[dict[str, Any]]]:
        return self._request("GET", "/api/tickets")

    def get_my_listings(self, status: str | None = None) -> dict[str, list[dict[str, Any]]]:
        """Get the caller's listings.

        Args:
            status: Optional status filter, sent lower-cased
        """
        params = {"status": status.lower()} if status else None
        return self._request("GET", "/api/tickets/my-listings", params=params)

    def create_ticket(
        self,
        game_id: str,
        level: str,
        seat_section: str,
        seat_row: str,
        seat_number: str,
        price: str | float | Decimal,
    ) -> dict[str, Any]:
        """List a ticket for sale.

        Args:
            game_id: Game the seat is for
            level: Ticket level (STUD, GA, RES)
            seat_section: Section
            seat_row: Row
            seat_number: Seat
            price: Asking price in dollars; sent as integer cents rounded to the nearest cent

        Raises:
            ValidationError: If seat details are blank or the price is not positive or too large
            ApiError: If the server rejects the listing
        """
        validate_seat_details(
            level=level, seat_section=seat_section, seat_row=seat_row, seat_number=seat_number
        )
        price_cents = dollars_to_cents(price)
        if price_cents <= 0:
            raise ValidationError("Price must be a positive number")
        validate_price_cents(price_cents)

        return self._request(
            "POST",
            "/api/tickets",
            json={
                "game_id": game_id,
                "level": level,
                "seat_section": seat_section,
                "seat_row": seat_row,
                "seat_number": seat_number,
                "price": price_cents,
            },
        )

    def claim_ticket(self, ticket_id: str) -> dict[str, Any]:
        """Tell the server the seat was transferred to the custodial account."""
        return self._request("POST", "/api/tickets/claim", json={"ticket_id": ticket_id})

    def reserve_ticket(self, ticket_id: str) -> dict[str, Any]:
        """Reserve a Verified ticket.

        Any failure means the ticket cannot be reserved right now, most often
        because another buyer reserved it first.
        """
        return self._request("POST", f"/api/tickets/{ticket_id}/reserve")

    # Admin

    def create_game(self, sport_type: str, name: str, game_time: str, admin_key: str) -> dict[str, Any]:
        return self._request(
            "POST",
            "/api/games",
            json={"sport_type": sport_type, "name": name, "game_time": game_time},
            authorization=admin_key,
        )

    def delete_game(self, game_id: str, admin_key: str) -> dict[str, Any]:
        return self._request("DELETE", f"/api/games/{game_id}", authorization=admin_key)

    def update_ticket_status(self, ticket_id: str, status: str, admin_key: str) -> dict[str, Any]:
        return self._request(
            "PATCH",
            f"/api/tickets/{ticket_id}/verify",
            json={"status": status},
            authorization=admin_key,
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "TicketMarketplaceAPI":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        # Parameters are required by the context manager protocol but not used
        _ = exc_type, exc_val, exc_tb
        self.close()


__all__ = ["ApiError", "TicketMarketplaceAPI"]
