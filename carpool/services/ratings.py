"""
Rating Workflow
===============

A passenger rates the driver of a trip once, after it departed.  The
explicit duplicate lookup is an early exit; the
``uq_califications_trip_author`` constraint is what actually guarantees a
single rating per (trip, passenger).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import IntegrityError

from carpool.domain.enums import RATEABLE_STATUSES
from carpool.domain.errors import Conflict, Forbidden, NotFound, ValidationError
from carpool.domain.rules import average_score, ensure_utc, is_valid_score, utcnow
from carpool.infrastructure.models import CalificationModel, TripModel, UserModel
from carpool.infrastructure.repositories import (
    CalificationRepository,
    ReservationRepository,
    TripRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

ALREADY_RATED = "Ya calificaste este viaje"


@dataclass
class RatingView:
    calification: CalificationModel
    author: Optional[UserModel]
    trip: Optional[TripModel]


@dataclass
class RatingSummary:
    average: float
    total: int
    ratings: list[RatingView] = field(default_factory=list)


class RatingService:
    def __init__(
        self,
        califications: CalificationRepository,
        reservations: ReservationRepository,
        trips: TripRepository,
        users: UserRepository,
    ):
        self.califications = califications
        self.reservations = reservations
        self.trips = trips
        self.users = users

    async def rate(
        self,
        passenger_id: int,
        reservation_id: int,
        score: int,
        comment: str | None = None,
    ) -> CalificationModel:
        if not is_valid_score(score):
            raise ValidationError("La calificación debe estar entre 1 y 5")

        reservation = await self.reservations.get_by_id(reservation_id)
        if reservation is None:
            raise NotFound("Reserva no encontrada")
        trip = await self.trips.get_by_id(reservation.trip_id)
        if trip is None:
            raise NotFound("La reserva no tiene viaje asociado")

        if reservation.passenger_id != passenger_id:
            raise Forbidden("No tienes permiso para calificar este viaje")
        if ensure_utc(trip.departure_time) > utcnow():
            raise Conflict("Solo puedes calificar viajes que ya ocurrieron")
        if reservation.status not in RATEABLE_STATUSES:
            raise Conflict("Solo puedes calificar viajes con reserva confirmada")
        if await self.califications.get_by_trip_and_author(trip.id, passenger_id):
            raise Conflict(ALREADY_RATED)

        try:
            calification = await self.califications.create(
                trip_id=trip.id,
                author_id=passenger_id,
                receiver_id=trip.driver_id,
                score=score,
                comment=comment,
            )
        except IntegrityError:
            raise Conflict(ALREADY_RATED)

        logger.info(
            "User %d rated driver %d with %d on trip %d",
            passenger_id, trip.driver_id, score, trip.id,
        )
        return calification

    async def get_user_ratings(self, user_id: int) -> RatingSummary:
        rows = await self.califications.list_for_receiver(user_id)
        authors = await self.users.get_many(c.author_id for c in rows)
        trips = await self.trips.get_many(c.trip_id for c in rows)
        return RatingSummary(
            average=average_score(c.score for c in rows),
            total=len(rows),
            ratings=[
                RatingView(
                    calification=c,
                    author=authors.get(c.author_id),
                    trip=trips.get(c.trip_id),
                )
                for c in rows
            ],
        )
