"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production models are used as-is; SQLite simply
ignores ``FOR UPDATE``, which the concurrency tests account for by
exercising the compare-and-set updates directly.
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from carpool.domain.enums import ReservationStatus, TripStatus
from carpool.infrastructure.database import Base
from carpool.infrastructure.models import (
    CalificationModel,
    ReservationModel,
    TripModel,
    UserModel,
)


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


def hours_from_now(hours: float) -> datetime:
    return datetime.now(timezone.utc) + timedelta(hours=hours)


class Factory:
    """Inserts entities directly, bypassing the workflows' validation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._seq = 0

    async def user(self, name: Optional[str] = None) -> UserModel:
        self._seq += 1
        user = UserModel(
            name=name or f"User {self._seq}",
            email=f"user{self._seq}@example.com",
            password="not-a-real-hash",
        )
        self.session.add(user)
        await self.session.flush()
        return user

    async def trip(
        self,
        driver: UserModel,
        *,
        departure: Optional[datetime] = None,
        total_seats: int = 3,
        available_seats: Optional[int] = None,
        origin: str = "Bogotá Centro",
        destination: str = "Medellín Terminal",
        status: TripStatus = TripStatus.PUBLISHED,
    ) -> TripModel:
        trip = TripModel(
            driver_id=driver.id,
            origin=origin,
            destination=destination,
            departure_time=departure or hours_from_now(48),
            price_per_seat=50000,
            total_seats=total_seats,
            available_seats=(
                total_seats if available_seats is None else available_seats
            ),
            status=status,
        )
        self.session.add(trip)
        await self.session.flush()
        return trip

    async def reservation(
        self,
        trip: TripModel,
        passenger: UserModel,
        status: ReservationStatus = ReservationStatus.PENDING,
    ) -> ReservationModel:
        reservation = ReservationModel(
            trip_id=trip.id, passenger_id=passenger.id, status=status
        )
        self.session.add(reservation)
        await self.session.flush()
        return reservation

    async def calification(
        self, trip: TripModel, author: UserModel, score: int, comment: str = None
    ) -> CalificationModel:
        calification = CalificationModel(
            trip_id=trip.id,
            author_id=author.id,
            receiver_id=trip.driver_id,
            score=score,
            comment=comment,
        )
        self.session.add(calification)
        await self.session.flush()
        return calification


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def test_engine():
    engine = create_async_engine(TEST_DB_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def factory(db_session) -> Factory:
    return Factory(db_session)
