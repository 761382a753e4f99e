"""
Reservation Workflow
====================

State machine per reservation (see ``RESERVATION_TRANSITIONS``)::

    PENDING -> CONFIRMED | REJECTED
    CONFIRMED -> COMPLETED | CANCELED | NOT_ATTENDED

A reservation request does not hold a seat.  Seats are taken only when the
driver accepts, so several passengers may be pending on the last seat and
only the first accepted one gets it.

Concurrency safety
------------------
``accept`` locks the reservation and trip rows (``SELECT ... FOR UPDATE``)
and then writes through two compare-and-set updates:

* ``available_seats = available_seats - 1 WHERE available_seats > 0``
* ``status = 'confirmed' WHERE status = 'pending'``

Both run in the caller's unit of work.  If either loses, a ``Conflict`` is
raised and the unit of work rolls the pair back, so no reader ever sees a
confirmed reservation without its seat (or the reverse).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from carpool.domain.enums import (
    RATEABLE_STATUSES,
    ReservationStatus,
    TripRole,
    TripStatus,
)
from carpool.domain.errors import Conflict, Forbidden, InvalidStateTransition, NotFound
from carpool.domain.rules import ensure_utc, status_for_seats, transition, utcnow
from carpool.infrastructure.models import ReservationModel, TripModel, UserModel
from carpool.infrastructure.repositories import (
    ReservationRepository,
    TripRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

NO_SEATS = "No hay asientos disponibles para este viaje"
ALREADY_HANDLED = "La reserva ya fue gestionada"


@dataclass
class ReservationView:
    reservation: ReservationModel
    passenger: Optional[UserModel]


@dataclass
class TripEntry:
    """One row of a user's trip agenda.

    ``id`` is the reservation id for passenger entries and the trip id for
    driver entries.
    """

    id: int
    role: TripRole
    status: str
    trip: TripModel
    driver: Optional[UserModel]

    @property
    def departure(self) -> datetime:
        return ensure_utc(self.trip.departure_time)


class ReservationService:
    def __init__(
        self,
        reservations: ReservationRepository,
        trips: TripRepository,
        users: UserRepository,
    ):
        self.reservations = reservations
        self.trips = trips
        self.users = users

    # ── Passenger side ────────────────────────────────────────────────

    async def reserve(self, passenger_id: int, trip_id: int) -> ReservationModel:
        trip = await self.trips.get_by_id(trip_id)
        if trip is None:
            raise NotFound("Viaje no encontrado")
        if trip.driver_id == passenger_id:
            raise Forbidden("No puedes reservar tu propio viaje")
        if trip.available_seats <= 0:
            raise Conflict(NO_SEATS)
        if await self.reservations.get_by_trip_and_passenger(trip_id, passenger_id):
            raise Conflict("Ya tienes una reserva para este viaje")

        try:
            reservation = await self.reservations.create(
                trip_id=trip_id, passenger_id=passenger_id
            )
        except IntegrityError:
            # Lost the race against a concurrent request by the same passenger
            raise Conflict("Ya tienes una reserva para este viaje")

        logger.info(
            "Reservation %d requested by user %d on trip %d",
            reservation.id, passenger_id, trip_id,
        )
        return reservation

    # ── Driver side ───────────────────────────────────────────────────

    async def _load_owned_pending(
        self, driver_id: int, reservation_id: int, new_status: ReservationStatus
    ) -> tuple[ReservationModel, TripModel]:
        reservation = await self.reservations.get_for_update(reservation_id)
        if reservation is None:
            raise NotFound("Reserva no encontrada")
        trip = await self.trips.get_for_update(reservation.trip_id)
        if trip is None:
            raise NotFound("Reserva no tiene viaje asociado")
        if trip.driver_id != driver_id:
            raise Forbidden("No tienes permisos para gestionar esta reserva")
        try:
            transition(reservation.status, new_status)
        except InvalidStateTransition:
            raise Conflict(ALREADY_HANDLED)
        return reservation, trip

    async def accept(self, driver_id: int, reservation_id: int) -> ReservationModel:
        reservation, trip = await self._load_owned_pending(
            driver_id, reservation_id, ReservationStatus.CONFIRMED
        )
        if ensure_utc(trip.departure_time) <= utcnow():
            raise Conflict("No se pueden aceptar reservas de un viaje que ya ocurrió")
        if trip.available_seats <= 0:
            raise Conflict(NO_SEATS)

        if not await self.trips.take_seat(trip.id):
            raise Conflict(NO_SEATS)
        if not await self.reservations.compare_and_set_status(
            reservation.id, ReservationStatus.PENDING, ReservationStatus.CONFIRMED
        ):
            raise Conflict(ALREADY_HANDLED)

        await self.trips.session.refresh(trip)
        await self.reservations.session.refresh(reservation)
        trip.status = status_for_seats(trip.available_seats, trip.status)
        await self.trips.session.flush()

        logger.info(
            "Reservation %d confirmed on trip %d (%d seats left)",
            reservation.id, trip.id, trip.available_seats,
        )
        return reservation

    async def reject(self, driver_id: int, reservation_id: int) -> ReservationModel:
        reservation, _trip = await self._load_owned_pending(
            driver_id, reservation_id, ReservationStatus.REJECTED
        )
        if not await self.reservations.compare_and_set_status(
            reservation.id, ReservationStatus.PENDING, ReservationStatus.REJECTED
        ):
            raise Conflict(ALREADY_HANDLED)

        await self.reservations.session.refresh(reservation)
        logger.info("Reservation %d rejected", reservation.id)
        return reservation

    async def list_for_trip(self, driver_id: int, trip_id: int) -> list[ReservationView]:
        trip = await self.trips.get_by_id(trip_id)
        if trip is None:
            raise NotFound("Viaje no encontrado")
        if trip.driver_id != driver_id:
            raise Forbidden("No tienes permisos para ver las reservas de este viaje")

        reservations = await self.reservations.list_for_trip(trip_id)
        passengers = await self.users.get_many(r.passenger_id for r in reservations)
        return [
            ReservationView(reservation=r, passenger=passengers.get(r.passenger_id))
            for r in reservations
        ]

    # ── Agenda ────────────────────────────────────────────────────────

    async def list_my_upcoming(self, user_id: int) -> list[TripEntry]:
        now = utcnow()
        as_passenger = await self.reservations.list_for_passenger(
            user_id, [ReservationStatus.CONFIRMED], departs_after=now
        )
        as_driver = await self.trips.list_driven_with_confirmed(
            user_id, departs_after=now
        )
        entries = await self._entries(as_passenger, as_driver)
        return sorted(entries, key=lambda e: e.departure)

    async def list_my_past(self, user_id: int) -> list[TripEntry]:
        now = utcnow()
        as_passenger = await self.reservations.list_for_passenger(
            user_id, RATEABLE_STATUSES, departs_before=now
        )
        as_driver = await self.trips.list_driven_with_confirmed(
            user_id, departs_before=now
        )
        entries = await self._entries(as_passenger, as_driver)
        return sorted(entries, key=lambda e: e.departure, reverse=True)

    async def _entries(
        self,
        as_passenger: list[tuple[ReservationModel, TripModel]],
        as_driver: list[TripModel],
    ) -> list[TripEntry]:
        driver_ids = {t.driver_id for _, t in as_passenger}
        driver_ids.update(t.driver_id for t in as_driver)
        drivers = await self.users.get_many(driver_ids)

        entries: list[TripEntry] = [
            TripEntry(
                id=r.id,
                role=TripRole.PASSENGER,
                status=ReservationStatus(r.status).value,
                trip=t,
                driver=drivers.get(t.driver_id),
            )
            for r, t in as_passenger
        ]
        seen: set[int] = set()
        for t in as_driver:
            if t.id in seen:
                continue
            seen.add(t.id)
            entries.append(
                TripEntry(
                    id=t.id,
                    role=TripRole.DRIVER,
                    status=TripStatus(t.status).value,
                    trip=t,
                    driver=drivers.get(t.driver_id),
                )
            )
        return entries
