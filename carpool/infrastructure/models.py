"""
SQLAlchemy ORM models  (maps to PostgreSQL).

Tables
------
* ``users``          -- registered accounts (drivers and passengers alike)
* ``trips``          -- published trips with their seat counters
* ``reservations``   -- one seat request per (trip, passenger)
* ``califications``  -- one post-trip rating per (trip, author)
* ``messages``       -- append-only per-trip chat between two users

Relations are plain foreign-key id columns; there are no ORM
``relationship()`` links, so entities are resolved through repository
lookups only.

Constraints
-----------
* **UNIQUE** ``(trip_id, passenger_id)`` on reservations and
  ``(trip_id, author_id)`` on califications back the duplicate checks.
* **CHECK** ``0 <= available_seats <= total_seats`` keeps seat accounting
  honest even if a writer bypasses the workflows.

Server-side timestamps are fetched back on flush (``eager_defaults``) so
freshly written rows serialise without a lazy load.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)

from .database import Base
from carpool.domain.enums import ReservationStatus, TripStatus


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class UserModel(Base):
    __tablename__ = "users"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    profile_picture = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class TripModel(Base):
    __tablename__ = "trips"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    driver_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    origin = Column(String(255), nullable=False)
    destination = Column(String(255), nullable=False)
    departure_time = Column(DateTime(timezone=True), nullable=False)
    price_per_seat = Column(Integer, nullable=False)
    total_seats = Column(Integer, nullable=False)
    available_seats = Column(Integer, nullable=False)
    status = Column(
        Enum(TripStatus, name="tripstatus", values_callable=_enum_values),
        default=TripStatus.PUBLISHED,
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("total_seats > 0", name="ck_trips_total_seats_positive"),
        CheckConstraint("price_per_seat > 0", name="ck_trips_price_positive"),
        CheckConstraint(
            "available_seats >= 0 AND available_seats <= total_seats",
            name="ck_trips_available_seats_range",
        ),
        Index("idx_trips_driver", "driver_id"),
        Index("idx_trips_status_departure", "status", "departure_time"),
    )


class ReservationModel(Base):
    __tablename__ = "reservations"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False)
    passenger_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(
        Enum(
            ReservationStatus,
            name="reservationstatus",
            values_callable=_enum_values,
        ),
        default=ReservationStatus.PENDING,
        nullable=False,
    )

    # Legacy per-reservation rating, superseded by ``califications``
    rating = Column(Integer, nullable=True)
    comment = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint(
            "trip_id", "passenger_id", name="uq_reservations_trip_passenger"
        ),
        CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 5)",
            name="ck_reservations_rating_range",
        ),
        Index("idx_reservations_trip", "trip_id"),
        Index("idx_reservations_passenger", "passenger_id"),
        Index("idx_reservations_status", "status"),
    )


class CalificationModel(Base):
    __tablename__ = "califications"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    receiver_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    score = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("trip_id", "author_id", name="uq_califications_trip_author"),
        CheckConstraint(
            "score >= 1 AND score <= 5", name="ck_califications_score_range"
        ),
        Index("idx_califications_receiver", "receiver_id"),
    )


class MessageModel(Base):
    __tablename__ = "messages"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    receiver_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    read = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_messages_trip_pair", "trip_id", "sender_id", "receiver_id"),
    )
