"""Tests for the ticket status lifecycle."""

import pytest

from ticket_marketplace.exceptions import InvalidTransitionError, ValidationError
from ticket_marketplace.models.ticket import TicketStatus, ensure_transition

FORWARD_PATH = [
    TicketStatus.UNVERIFIED,
    TicketStatus.VERIFYING,
    TicketStatus.VERIFIED,
    TicketStatus.RESERVED,
    TicketStatus.PAID,
    TicketStatus.SOLD,
]


def test_status_from_string():
    """Test TicketStatus parsing ignores case."""
    assert TicketStatus.from_string("Verified") == TicketStatus.VERIFIED
    assert TicketStatus.from_string("reserved") == TicketStatus.RESERVED
    assert TicketStatus.from_string("CANCELLED") == TicketStatus.CANCELLED

    with pytest.raises(ValidationError):
        TicketStatus.from_string("Listed")


def test_forward_path_is_allowed():
    """Each status can move to the next one on the path."""
    for current, following in zip(FORWARD_PATH, FORWARD_PATH[1:]):
        assert current.can_transition_to(following)
        ensure_transition(current, following)


def test_only_path_edges_and_cancellation_are_allowed():
    """No skipping ahead, no moving backwards."""
    for current in TicketStatus:
        for target in TicketStatus:
            allowed = current.can_transition_to(target)
            if current.is_terminal:
                assert not allowed
            elif target == TicketStatus.CANCELLED:
                assert allowed
            elif current in FORWARD_PATH and target in FORWARD_PATH:
                assert allowed == (FORWARD_PATH.index(target) == FORWARD_PATH.index(current) + 1)
            else:
                assert not allowed


def test_terminal_statuses_have_no_exits():
    assert TicketStatus.SOLD.is_terminal
    assert TicketStatus.CANCELLED.is_terminal
    assert TicketStatus.SOLD.allowed_transitions() == frozenset()
    assert TicketStatus.CANCELLED.allowed_transitions() == frozenset()

    with pytest.raises(InvalidTransitionError):
        ensure_transition(TicketStatus.CANCELLED, TicketStatus.VERIFIED)


def test_reservation_requires_verified():
    """Only a Verified ticket can become Reserved."""
    for status in TicketStatus:
        assert status.can_transition_to(TicketStatus.RESERVED) == (status == TicketStatus.VERIFIED)

    with pytest.raises(InvalidTransitionError, match="Unverified to Reserved"):
        ensure_transition(TicketStatus.UNVERIFIED, TicketStatus.RESERVED)
