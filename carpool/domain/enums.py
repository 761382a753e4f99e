"""Domain enumerations and state-transition rules."""

import enum


class TripStatus(str, enum.Enum):
    PUBLISHED = "published"
    FULL = "full"
    CANCELED = "canceled"
    COMPLETED = "completed"


class ReservationStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    CANCELED = "canceled"
    NOT_ATTENDED = "not_attended"
    COMPLETED = "completed"


# State machine: maps current status -> set of valid next statuses.
# Only PENDING -> CONFIRMED | REJECTED is driven by a workflow operation.
RESERVATION_TRANSITIONS: dict[ReservationStatus, set[ReservationStatus]] = {
    ReservationStatus.PENDING: {
        ReservationStatus.CONFIRMED,
        ReservationStatus.REJECTED,
    },
    ReservationStatus.CONFIRMED: {
        ReservationStatus.COMPLETED,
        ReservationStatus.CANCELED,
        ReservationStatus.NOT_ATTENDED,
    },
    ReservationStatus.REJECTED: set(),
    ReservationStatus.CANCELED: set(),
    ReservationStatus.NOT_ATTENDED: set(),
    ReservationStatus.COMPLETED: set(),
}

# Reservations that entitle a passenger to rate the trip
RATEABLE_STATUSES = frozenset(
    {ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED}
)


class TripRole(str, enum.Enum):
    PASSENGER = "passenger"
    DRIVER = "driver"
