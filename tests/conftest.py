"""Shared fixtures for storage and API tests."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from ticket_marketplace.api.server import create_app
from ticket_marketplace.config import Settings
from ticket_marketplace.models.ticket import TicketStatus
from ticket_marketplace.storage.database import DatabaseManager
from ticket_marketplace.utils.data_helpers import utc_now

ADMIN_KEY = "test-admin-key"


@pytest.fixture
def db_manager(tmp_path):
    """Create a database manager backed by a temporary file."""
    return DatabaseManager(tmp_path / "test_marketplace.db")


@pytest.fixture
def seller(db_manager):
    return db_manager.users.create_user("seller@msu.edu", "not-a-real-hash", "111111")


@pytest.fixture
def buyer(db_manager):
    return db_manager.users.create_user("buyer@msu.edu", "not-a-real-hash", "222222")


@pytest.fixture
def open_game(db_manager):
    """A basketball game a week out, trading closes an hour before tip-off."""
    return db_manager.games.create_game(
        "Basketball", "MSU vs Michigan", utc_now() + timedelta(days=7), cutoff_minutes=60
    )


@pytest.fixture
def verified_ticket(db_manager, seller, open_game):
    """A 150.00 listing that has been transferred and verified."""
    ticket = db_manager.tickets.create_ticket(
        seller_id=seller.id,
        game=open_game,
        level="STUD",
        seat_section="GEN",
        seat_row="128",
        seat_number="28",
        price=15000,
    )
    db_manager.tickets.claim_ticket(ticket.id, seller.id)
    return db_manager.tickets.transition_ticket(ticket.id, TicketStatus.VERIFIED)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_path=tmp_path / "api_marketplace.db",
        token_file=tmp_path / "session.json",
        jwt_secret="test-secret",
        admin_api_key=ADMIN_KEY,
        rate_limit_requests=100,
    )


@pytest.fixture
def client(settings):
    """Create a test client for an app with its own database."""
    app = create_app(settings, DatabaseManager(settings.database_path), run_cleanup=False)
    return TestClient(app)
