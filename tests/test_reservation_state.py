"""Unit tests for reservation state transitions and seat-derived trip status."""

import pytest

from carpool.domain.enums import ReservationStatus, TripStatus
from carpool.domain.errors import Conflict, InvalidStateTransition
from carpool.domain.rules import status_for_seats, transition


class TestReservationStateMachine:
    # ── Valid transitions ─────────────────────────────────────────

    def test_pending_to_confirmed(self):
        assert (
            transition(ReservationStatus.PENDING, ReservationStatus.CONFIRMED)
            == ReservationStatus.CONFIRMED
        )

    def test_pending_to_rejected(self):
        assert (
            transition(ReservationStatus.PENDING, ReservationStatus.REJECTED)
            == ReservationStatus.REJECTED
        )

    @pytest.mark.parametrize(
        "target",
        [
            ReservationStatus.COMPLETED,
            ReservationStatus.CANCELED,
            ReservationStatus.NOT_ATTENDED,
        ],
    )
    def test_confirmed_onwards(self, target):
        assert transition(ReservationStatus.CONFIRMED, target) == target

    def test_accepts_raw_string_status(self):
        assert transition("pending", ReservationStatus.CONFIRMED) == ReservationStatus.CONFIRMED

    # ── Invalid transitions ───────────────────────────────────────

    def test_confirmed_cannot_be_confirmed_again(self):
        with pytest.raises(InvalidStateTransition):
            transition(ReservationStatus.CONFIRMED, ReservationStatus.CONFIRMED)

    def test_rejected_is_terminal(self):
        with pytest.raises(InvalidStateTransition):
            transition(ReservationStatus.REJECTED, ReservationStatus.CONFIRMED)

    def test_pending_cannot_complete(self):
        with pytest.raises(InvalidStateTransition):
            transition(ReservationStatus.PENDING, ReservationStatus.COMPLETED)

    def test_completed_is_terminal(self):
        with pytest.raises(InvalidStateTransition):
            transition(ReservationStatus.COMPLETED, ReservationStatus.CANCELED)

    def test_invalid_transition_is_a_conflict(self):
        with pytest.raises(Conflict):
            transition(ReservationStatus.REJECTED, ReservationStatus.REJECTED)


class TestTripStatusFromSeats:
    def test_last_seat_makes_trip_full(self):
        assert status_for_seats(0, TripStatus.PUBLISHED) == TripStatus.FULL

    def test_seats_left_keep_status(self):
        assert status_for_seats(2, TripStatus.PUBLISHED) == TripStatus.PUBLISHED

    def test_negative_seats_rejected(self):
        with pytest.raises(ValueError):
            status_for_seats(-1, TripStatus.PUBLISHED)
