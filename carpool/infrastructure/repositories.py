"""
Repository Pattern -- abstracts DB access so the workflows stay DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Writes that guard an invariant
(seat decrement, reservation status change) are single conditional
``UPDATE`` statements: the caller learns from the row count whether the
compare-and-set won.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import and_, exists, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    CalificationModel,
    MessageModel,
    ReservationModel,
    TripModel,
    UserModel,
)
from carpool.domain.enums import ReservationStatus, TripStatus


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, *, name: str, email: str, password_hash: str) -> UserModel:
        user = UserModel(name=name, email=email, password=password_hash)
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: int) -> Optional[UserModel]:
        return await self.session.get(UserModel, user_id)

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        return result.scalar_one_or_none()

    async def get_many(self, user_ids: Iterable[int]) -> dict[int, UserModel]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.session.execute(
            select(UserModel).where(UserModel.id.in_(ids))
        )
        return {user.id: user for user in result.scalars().all()}


class TripRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, trip: TripModel) -> TripModel:
        self.session.add(trip)
        await self.session.flush()
        return trip

    async def get_by_id(self, trip_id: int) -> Optional[TripModel]:
        return await self.session.get(TripModel, trip_id)

    async def get_for_update(self, trip_id: int) -> Optional[TripModel]:
        """SELECT ... FOR UPDATE so concurrent accepts on a trip serialise."""
        result = await self.session.execute(
            select(TripModel)
            .where(TripModel.id == trip_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_many(self, trip_ids: Iterable[int]) -> dict[int, TripModel]:
        ids = set(trip_ids)
        if not ids:
            return {}
        result = await self.session.execute(
            select(TripModel).where(TripModel.id.in_(ids))
        )
        return {trip.id: trip for trip in result.scalars().all()}

    async def search(
        self,
        *,
        status: TripStatus,
        origin: str | None = None,
        destination: str | None = None,
        departs_from: datetime | None = None,
        departs_until: datetime | None = None,
    ) -> list[TripModel]:
        query = select(TripModel).where(TripModel.status == status)
        if origin:
            query = query.where(
                TripModel.origin.icontains(origin, autoescape=True)
            )
        if destination:
            query = query.where(
                TripModel.destination.icontains(destination, autoescape=True)
            )
        if departs_from is not None and departs_until is not None:
            query = query.where(
                TripModel.departure_time.between(departs_from, departs_until)
            )
        result = await self.session.execute(
            query.order_by(TripModel.departure_time, TripModel.id)
        )
        return list(result.scalars().all())

    async def list_by_driver(
        self, driver_id: int, status: TripStatus | None = None
    ) -> list[TripModel]:
        query = select(TripModel).where(TripModel.driver_id == driver_id)
        if status is not None:
            query = query.where(TripModel.status == status)
        result = await self.session.execute(
            query.order_by(TripModel.departure_time.desc(), TripModel.id.desc())
        )
        return list(result.scalars().all())

    async def list_driven_with_confirmed(
        self,
        driver_id: int,
        *,
        departs_after: datetime | None = None,
        departs_before: datetime | None = None,
    ) -> list[TripModel]:
        """Trips of *driver_id* holding at least one confirmed reservation.

        ``departs_after`` is inclusive, ``departs_before`` exclusive.
        """
        has_confirmed = exists().where(
            ReservationModel.trip_id == TripModel.id,
            ReservationModel.status == ReservationStatus.CONFIRMED,
        )
        query = select(TripModel).where(TripModel.driver_id == driver_id, has_confirmed)
        if departs_after is not None:
            query = query.where(TripModel.departure_time >= departs_after)
        if departs_before is not None:
            query = query.where(TripModel.departure_time < departs_before)
        result = await self.session.execute(query.order_by(TripModel.departure_time))
        return list(result.scalars().all())

    async def take_seat(self, trip_id: int) -> bool:
        """Atomically decrement ``available_seats`` if one is left.

        Returns ``False`` when the trip had no seat to give, in which case
        nothing was written.
        """
        result = await self.session.execute(
            update(TripModel)
            .where(TripModel.id == trip_id, TripModel.available_seats > 0)
            .values(available_seats=TripModel.available_seats - 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class ReservationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, *, trip_id: int, passenger_id: int) -> ReservationModel:
        reservation = ReservationModel(
            trip_id=trip_id,
            passenger_id=passenger_id,
            status=ReservationStatus.PENDING,
        )
        self.session.add(reservation)
        await self.session.flush()
        return reservation

    async def get_by_id(self, reservation_id: int) -> Optional[ReservationModel]:
        return await self.session.get(ReservationModel, reservation_id)

    async def get_for_update(self, reservation_id: int) -> Optional[ReservationModel]:
        result = await self.session.execute(
            select(ReservationModel)
            .where(ReservationModel.id == reservation_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_trip_and_passenger(
        self, trip_id: int, passenger_id: int
    ) -> Optional[ReservationModel]:
        result = await self.session.execute(
            select(ReservationModel).where(
                ReservationModel.trip_id == trip_id,
                ReservationModel.passenger_id == passenger_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_trip(self, trip_id: int) -> list[ReservationModel]:
        result = await self.session.execute(
            select(ReservationModel)
            .where(ReservationModel.trip_id == trip_id)
            .order_by(ReservationModel.created_at, ReservationModel.id)
        )
        return list(result.scalars().all())

    async def list_for_passenger(
        self,
        passenger_id: int,
        statuses: Iterable[ReservationStatus],
        *,
        departs_after: datetime | None = None,
        departs_before: datetime | None = None,
    ) -> list[tuple[ReservationModel, TripModel]]:
        """Passenger reservations joined with their trip, by departure.

        ``departs_after`` is inclusive, ``departs_before`` exclusive.
        """
        query = (
            select(ReservationModel, TripModel)
            .join(TripModel, TripModel.id == ReservationModel.trip_id)
            .where(
                ReservationModel.passenger_id == passenger_id,
                ReservationModel.status.in_(list(statuses)),
            )
        )
        if departs_after is not None:
            query = query.where(TripModel.departure_time >= departs_after)
        if departs_before is not None:
            query = query.where(TripModel.departure_time < departs_before)
        result = await self.session.execute(query.order_by(TripModel.departure_time))
        return [(row[0], row[1]) for row in result.all()]

    async def compare_and_set_status(
        self,
        reservation_id: int,
        expected: ReservationStatus,
        new_status: ReservationStatus,
    ) -> bool:
        """``UPDATE ... SET status = new WHERE status = expected``."""
        result = await self.session.execute(
            update(ReservationModel)
            .where(
                ReservationModel.id == reservation_id,
                ReservationModel.status == expected,
            )
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class CalificationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        *,
        trip_id: int,
        author_id: int,
        receiver_id: int,
        score: int,
        comment: str | None = None,
    ) -> CalificationModel:
        calification = CalificationModel(
            trip_id=trip_id,
            author_id=author_id,
            receiver_id=receiver_id,
            score=score,
            comment=comment,
        )
        self.session.add(calification)
        await self.session.flush()
        return calification

    async def get_by_trip_and_author(
        self, trip_id: int, author_id: int
    ) -> Optional[CalificationModel]:
        result = await self.session.execute(
            select(CalificationModel).where(
                CalificationModel.trip_id == trip_id,
                CalificationModel.author_id == author_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_receiver(self, receiver_id: int) -> list[CalificationModel]:
        result = await self.session.execute(
            select(CalificationModel)
            .where(CalificationModel.receiver_id == receiver_id)
            .order_by(CalificationModel.created_at.desc(), CalificationModel.id.desc())
        )
        return list(result.scalars().all())


class MessageRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self, *, trip_id: int, sender_id: int, receiver_id: int, content: str
    ) -> MessageModel:
        message = MessageModel(
            trip_id=trip_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            read=False,
        )
        self.session.add(message)
        await self.session.flush()
        return message

    async def list_between(
        self, trip_id: int, user_a: int, user_b: int
    ) -> list[MessageModel]:
        result = await self.session.execute(
            select(MessageModel)
            .where(
                MessageModel.trip_id == trip_id,
                or_(
                    and_(
                        MessageModel.sender_id == user_a,
                        MessageModel.receiver_id == user_b,
                    ),
                    and_(
                        MessageModel.sender_id == user_b,
                        MessageModel.receiver_id == user_a,
                    ),
                ),
            )
            .order_by(MessageModel.created_at, MessageModel.id)
        )
        return list(result.scalars().all())
