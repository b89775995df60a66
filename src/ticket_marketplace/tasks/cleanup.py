"""Periodic timeouts for listings that stalled in the lifecycle."""

import asyncio
import logging
from datetime import datetime

from ..storage.database import DatabaseManager

logger = logging.getLogger(__name__)


def run_cleanup_pass(
    db_manager: DatabaseManager,
    reservation_window_minutes: int,
    now: datetime | None = None,
) -> dict[str, int]:
    """Cancel Unverified tickets past their transfer deadline and stale reservations.

    Args:
        db_manager: Storage to clean
        reservation_window_minutes: How long a reservation may stay unpaid
        now: Current time, injectable for tests

    Returns:
        Number of tickets cancelled by each pass
    """
    return {
        "expired_unverified": db_manager.tickets.cancel_expired_unverified(now),
        "expired_reservations": db_manager.tickets.cancel_expired_reservations(
            reservation_window_minutes, now
        ),
    }


async def cleanup_loop(
    db_manager: DatabaseManager, interval_seconds: int, reservation_window_minutes: int
) -> None:
    """Run cleanup passes in a worker thread until cancelled.

    A failed pass is logged and retried on the next tick.
    """
    logger.info(f"Listing cleanup started, interval {interval_seconds}s")
    while True:
        try:
            await asyncio.to_thread(run_cleanup_pass, db_manager, reservation_window_minutes)
        except Exception as e:
            logger.error(f"Listing cleanup pass failed: {e}")
        await asyncio.sleep(interval_seconds)
