"""
Pure business rules used by the workflows.

Nothing here touches the database, so every rule is unit-testable in
isolation.

* Place names       -- at least 5 characters, must not start with a digit.
* Seat accounting   -- ``status_for_seats`` derives the trip status from
  its remaining seat count.
* State machine     -- ``transition`` enforces ``RESERVATION_TRANSITIONS``.
* Calendar days     -- ``utc_day_bounds`` turns a literal ``YYYY-MM-DD``
  into an inclusive UTC range without going through local time.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from typing import Iterable, Optional

from .enums import RESERVATION_TRANSITIONS, ReservationStatus, TripStatus
from .errors import InvalidStateTransition, ValidationError

MIN_PLACE_LENGTH = 5
MIN_SCORE = 1
MAX_SCORE = 5

_DAY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_valid_place(value: object) -> bool:
    if not isinstance(value, str):
        return False
    value = value.strip()
    return len(value) >= MIN_PLACE_LENGTH and not value[0].isdigit()


def is_positive_int(value: object) -> bool:
    # bool is an int subclass; True must not count as one seat
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def is_valid_score(value: object) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and MIN_SCORE <= value <= MAX_SCORE
    )


def utc_day_bounds(day: str) -> tuple[datetime, datetime]:
    """Return ``[00:00:00.000, 23:59:59.999]`` UTC for a ``YYYY-MM-DD`` string."""
    match = _DAY_RE.match(day.strip()) if isinstance(day, str) else None
    if not match:
        raise ValidationError("date debe ser una fecha válida (YYYY-MM-DD)")
    try:
        parsed = date(*(int(part) for part in match.groups()))
    except ValueError:
        raise ValidationError("date debe ser una fecha válida (YYYY-MM-DD)")

    start = datetime.combine(parsed, time(0, 0, 0, 0), tzinfo=timezone.utc)
    end = datetime.combine(parsed, time(23, 59, 59, 999000), tzinfo=timezone.utc)
    return start, end


def parse_trip_status(value: Optional[str]) -> Optional[TripStatus]:
    if value is None:
        return None
    try:
        return TripStatus(value)
    except ValueError:
        raise ValidationError(f"status inválido: {value}")


def status_for_seats(available_seats: int, current_status: TripStatus) -> TripStatus:
    """Trip status once the seat count changed: ``FULL`` exactly at zero."""
    if available_seats < 0:
        raise ValueError("available_seats cannot be negative")
    return TripStatus.FULL if available_seats == 0 else current_status


def transition(
    current: ReservationStatus, new_status: ReservationStatus
) -> ReservationStatus:
    """Return *new_status* if the move is legal, else raise."""
    current = ReservationStatus(current)
    allowed = RESERVATION_TRANSITIONS.get(current, set())
    if new_status not in allowed:
        raise InvalidStateTransition(
            f"Cannot transition from {current.value} to {new_status.value}"
        )
    return new_status


def average_score(scores: Iterable[int]) -> float:
    scores = list(scores)
    if not scores:
        return 0
    return sum(scores) / len(scores)
