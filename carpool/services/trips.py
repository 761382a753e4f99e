"""
Trip Capacity Manager
=====================

Publishes trips and answers trip searches.  Seat accounting itself is
never exposed here: the only writer of ``available_seats`` after creation
is ``ReservationService.accept`` through ``TripRepository.take_seat``.

Validation order for ``create_trip``
------------------------------------
1. origin / destination  (>= 5 chars, no leading digit)
2. price_per_seat        (positive integer)
3. total_seats           (positive integer)
4. available_seats       (defaults to total_seats, within [0, total_seats])
5. departure_time        (strictly in the future)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from carpool.domain.enums import TripStatus
from carpool.domain.errors import ValidationError
from carpool.domain.rules import (
    ensure_utc,
    is_positive_int,
    is_valid_place,
    parse_trip_status,
    utc_day_bounds,
    utcnow,
)
from carpool.infrastructure.models import TripModel, UserModel
from carpool.infrastructure.repositories import TripRepository, UserRepository

logger = logging.getLogger(__name__)


@dataclass
class TripView:
    trip: TripModel
    driver: Optional[UserModel]


class TripService:
    def __init__(self, trips: TripRepository, users: UserRepository):
        self.trips = trips
        self.users = users

    async def create_trip(
        self,
        driver_id: int,
        origin: str,
        destination: str,
        departure_time: datetime,
        price_per_seat: int,
        total_seats: int,
        available_seats: int | None = None,
    ) -> TripModel:
        if not is_valid_place(origin) or not is_valid_place(destination):
            raise ValidationError(
                "origin y destination deben tener al menos 5 caracteres "
                "y no pueden comenzar con un número"
            )
        if not is_positive_int(price_per_seat):
            raise ValidationError("price_per_seat debe ser un entero mayor a cero")
        if not is_positive_int(total_seats):
            raise ValidationError("total_seats debe ser mayor a cero")

        seats = total_seats if available_seats is None else available_seats
        if (
            not isinstance(seats, int)
            or isinstance(seats, bool)
            or seats < 0
            or seats > total_seats
        ):
            raise ValidationError("available_seats debe estar entre 0 y total_seats")

        if not isinstance(departure_time, datetime):
            raise ValidationError("departure_time debe ser una fecha válida")
        departure = ensure_utc(departure_time)
        if departure <= utcnow():
            raise ValidationError("departure_time debe ser una fecha futura")

        trip = await self.trips.create(
            TripModel(
                driver_id=driver_id,
                origin=origin.strip(),
                destination=destination.strip(),
                departure_time=departure,
                price_per_seat=price_per_seat,
                total_seats=total_seats,
                available_seats=seats,
                status=TripStatus.PUBLISHED,
            )
        )
        logger.info(
            "Trip %d published by user %d (%d/%d seats)",
            trip.id, driver_id, seats, total_seats,
        )
        return trip

    async def list_trips(
        self,
        origin: str | None = None,
        destination: str | None = None,
        date: str | None = None,
        status: str | None = None,
    ) -> list[TripView]:
        trip_status = parse_trip_status(status) or TripStatus.PUBLISHED
        start = end = None
        if date:
            start, end = utc_day_bounds(date)

        trips = await self.trips.search(
            status=trip_status,
            origin=origin,
            destination=destination,
            departs_from=start,
            departs_until=end,
        )
        drivers = await self.users.get_many(t.driver_id for t in trips)
        return [TripView(trip=t, driver=drivers.get(t.driver_id)) for t in trips]

    async def list_my_trips(
        self, driver_id: int, status: str | None = None
    ) -> list[TripModel]:
        return await self.trips.list_by_driver(driver_id, parse_trip_status(status))
