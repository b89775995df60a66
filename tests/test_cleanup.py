"""Tests for the background cleanup loop."""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest

from ticket_marketplace.storage.database import DatabaseManager
from ticket_marketplace.tasks.cleanup import cleanup_loop


def test_loop_survives_failed_pass():
    """A pass that raises is logged and the loop keeps ticking."""
    db_manager = Mock(spec=DatabaseManager)
    db_manager.tickets = Mock()
    db_manager.tickets.cancel_expired_unverified.side_effect = [ValueError("corrupt timestamp"), 0]
    db_manager.tickets.cancel_expired_reservations.return_value = 0

    # Second sleep stops the loop
    sleep = AsyncMock(side_effect=[None, asyncio.CancelledError()])
    with patch("ticket_marketplace.tasks.cleanup.asyncio.sleep", sleep):
        with pytest.raises(asyncio.CancelledError):
            asyncio.run(cleanup_loop(db_manager, interval_seconds=5, reservation_window_minutes=7))

    assert db_manager.tickets.cancel_expired_unverified.call_count == 2
    db_manager.tickets.cancel_expired_reservations.assert_called_once_with(7, None)
    sleep.assert_awaited_with(5)
