"""Tests for the marketplace API client."""

import pytest
import requests
from unittest.mock import Mock

from ticket_marketplace.api.client import ApiError, TicketMarketplaceAPI
from ticket_marketplace.api.session import MemoryTokenStore
from ticket_marketplace.exceptions import ValidationError


def _response(status_code=200, body=None, json_error=False):
    response = Mock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = body if body is not None else {}
    return response


@pytest.fixture
def mock_session():
    """Create a mock requests session."""
    session = Mock(spec=requests.Session)
    session.request.return_value = _response(body={"games": []})
    return session


@pytest.fixture
def api(mock_session):
    return TicketMarketplaceAPI(
        base_url="http://api.test/",
        token_store=MemoryTokenStore(),
        session=mock_session,
        school_email_domain="msu.edu",
    )


def _sent_headers(mock_session):
    return mock_session.request.call_args.kwargs["headers"]


class TestRequests:
    def test_no_token_no_authorization_header(self, api, mock_session):
        api.get_games()

        args = mock_session.request.call_args
        assert args.args == ("GET", "http://api.test/api/games")
        assert "Authorization" not in _sent_headers(mock_session)
        assert _sent_headers(mock_session)["Content-Type"] == "application/json"

    def test_token_sent_verbatim(self, api, mock_session):
        api.set_token("abc.def.ghi")
        api.get_tickets()

        assert _sent_headers(mock_session)["Authorization"] == "abc.def.ghi"

    def test_error_message_from_body(self, api, mock_session):
        mock_session.request.return_value = _response(409, {"error": "Ticket is not available for reservation"})

        with pytest.raises(ApiError) as exc_info:
            api.reserve_ticket("t1")

        assert exc_info.value.message == "Ticket is not available for reservation"
        assert exc_info.value.status_code == 409

    def test_error_without_body_uses_fallback(self, api, mock_session):
        mock_session.request.return_value = _response(502, json_error=True)

        with pytest.raises(ApiError, match="Request failed") as exc_info:
            api.get_games()
        assert exc_info.value.status_code == 502

    def test_transport_failure(self, api, mock_session):
        mock_session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ApiError, match="Request failed") as exc_info:
            api.get_games()
        assert exc_info.value.status_code is None

    def test_no_content_returns_empty_dict(self, api, mock_session):
        mock_session.request.return_value = _response(204, json_error=True)

        assert api.delete_game("g1", admin_key="admin") == {}
        assert mock_session.request.call_args.args == ("DELETE", "http://api.test/api/games/g1")
        assert _sent_headers(mock_session)["Authorization"] == "admin"


class TestAuth:
    def test_login_stores_token(self, api, mock_session):
        mock_session.request.return_value = _response(
            body={"token": "jwt-token", "user": {"id": "u1", "email": "a@msu.edu", "email_verified": True}}
        )

        api.login("a@msu.edu", "password123")

        assert api.token == "jwt-token"
        assert api.is_authenticated
        assert mock_session.request.call_args.kwargs["json"] == {
            "email": "a@msu.edu",
            "password": "password123",
        }

    def test_login_failure_keeps_previous_token(self, api, mock_session):
        api.set_token("old-token")
        mock_session.request.return_value = _response(401, {"error": "Invalid email or password"})

        with pytest.raises(ApiError, match="Invalid email or password"):
            api.login("a@msu.edu", "wrong-password")
        assert api.token == "old-token"

    def test_logout_clears_token(self, api):
        api.set_token("jwt-token")
        api.logout()
        assert api.token is None
        assert not api.is_authenticated

    def test_register_checks_domain_before_sending(self, api, mock_session):
        with pytest.raises(ValidationError, match="msu.edu"):
            api.register("student@gmail.com", "password123")

        with pytest.raises(ValidationError, match="at least 8"):
            api.register("student@msu.edu", "short")

        mock_session.request.assert_not_called()


class TestTickets:
    def test_create_ticket_sends_cents(self, api, mock_session):
        mock_session.request.return_value = _response(201, {"id": "t1", "price": 15000})

        api.create_ticket("g1", "STUD", "GEN", "128", "28", "150.00")

        body = mock_session.request.call_args.kwargs["json"]
        assert body["price"] == 15000
        assert body["game_id"] == "g1"

    def test_create_ticket_rounds_to_cent(self, api, mock_session):
        mock_session.request.return_value = _response(201, {"id": "t1"})

        api.create_ticket("g1", "STUD", "GEN", "128", "28", "19.995")

        assert mock_session.request.call_args.kwargs["json"]["price"] == 2000

    def test_create_ticket_rejects_bad_input(self, api, mock_session):
        with pytest.raises(ValidationError, match="positive"):
            api.create_ticket("g1", "STUD", "GEN", "128", "28", "0")
        with pytest.raises(ValidationError, match="seat_row"):
            api.create_ticket("g1", "STUD", "GEN", "  ", "28", "10")

        mock_session.request.assert_not_called()

    def test_my_listings_status_lower_cased(self, api, mock_session):
        mock_session.request.return_value = _response(body={"tickets": []})

        api.get_my_listings("Verified")
        assert mock_session.request.call_args.kwargs["params"] == {"status": "verified"}

        api.get_my_listings()
        assert mock_session.request.call_args.kwargs["params"] is None

    def test_claim_and_reserve_endpoints(self, api, mock_session):
        api.claim_ticket("t1")
        assert mock_session.request.call_args.args == ("POST", "http://api.test/api/tickets/claim")
        assert mock_session.request.call_args.kwargs["json"] == {"ticket_id": "t1"}

        api.reserve_ticket("t1")
        assert mock_session.request.call_args.args == ("POST", "http://api.test/api/tickets/t1/reserve")


def test_context_manager_closes_session(mock_session):
    with TicketMarketplaceAPI(
        base_url="http://api.test", token_store=MemoryTokenStore(), session=mock_session
    ):
        pass
    mock_session.close.assert_called_once()


def test_create_ticket_rejects_oversized_price(api, mock_session):
    with pytest.raises(ValidationError):
        api.create_ticket("g1", "STUD", "GEN", "128", "28", "1e30")
    with pytest.raises(ValidationError, match="Price must be <="):
        api.create_ticket("g1", "STUD", "GEN", "128", "28", "1e20")

    mock_session.request.assert_not_called()


def test_token_stores_exported_from_session_module_only():
    from ticket_marketplace import api as api_package
    from ticket_marketplace.api import client

    assert client.__all__ == ["ApiError", "TicketMarketplaceAPI"]
    assert not hasattr(client, "MemoryTokenStore")
    assert api_package.MemoryTokenStore is MemoryTokenStore
