"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 6 sample users (password for all: ``password123``)
  - 6 sample trips (upcoming, one already full, two in the past)
  - reservations in every driven status (pending, confirmed, rejected)
  - 2 califications on past trips
  - a short conversation on one trip
"""

import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import text

from carpool.domain.enums import ReservationStatus, TripStatus
from carpool.infrastructure.database import async_session_factory, engine
from carpool.infrastructure.models import (
    CalificationModel,
    MessageModel,
    ReservationModel,
    TripModel,
    UserModel,
)
from carpool.infrastructure.security import hash_password

SEED_PASSWORD = "password123"

USERS = [
    {"name": "Santiago Rojas", "email": "santiago@example.com"},
    {"name": "Valentina Díaz", "email": "valentina@example.com"},
    {"name": "Mateo Herrera", "email": "mateo@example.com"},
    {"name": "Camila Torres", "email": "camila@example.com"},
    {"name": "Lucía Romero", "email": "lucia@example.com"},
    {"name": "Diego Castro", "email": "diego@example.com"},
]

# (driver index, origin, destination, departure offset in hours, price, seats)
TRIPS = [
    (0, "Bogotá Centro", "Medellín Terminal", 48, 60000, 3),
    (0, "Bogotá Norte", "Tunja Plaza", 72, 25000, 1),
    (1, "Medellín Poblado", "Cartagena Bocagrande", 96, 120000, 4),
    (2, "Cali Centro", "Popayán Centro", 30, 30000, 2),
    (1, "Bucaramanga", "Barrancabermeja", -72, 35000, 3),
    (2, "Pereira Centro", "Manizales Centro", -24, 20000, 2),
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM users"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Users ─────────────────────────────────────────────────────
        password_hash = hash_password(SEED_PASSWORD)
        users = []
        for u in USERS:
            m = UserModel(name=u["name"], email=u["email"], password=password_hash)
            session.add(m)
            users.append(m)
        await session.flush()
        print(f"  Created {len(users)} users")

        # ── Trips ─────────────────────────────────────────────────────
        now = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)
        trips = []
        for driver, origin, destination, hours, price, seats in TRIPS:
            m = TripModel(
                driver_id=users[driver].id,
                origin=origin,
                destination=destination,
                departure_time=now + timedelta(hours=hours),
                price_per_seat=price,
                total_seats=seats,
                available_seats=seats,
                status=TripStatus.PUBLISHED,
            )
            session.add(m)
            trips.append(m)
        await session.flush()
        print(f"  Created {len(trips)} trips")

        # ── Reservations ──────────────────────────────────────────────
        # (trip index, passenger index, status)
        reservations_data = [
            (0, 3, ReservationStatus.CONFIRMED),
            (0, 4, ReservationStatus.PENDING),
            (0, 5, ReservationStatus.REJECTED),
            (1, 4, ReservationStatus.CONFIRMED),  # fills the only seat
            (2, 3, ReservationStatus.PENDING),
            (3, 5, ReservationStatus.PENDING),
            (4, 3, ReservationStatus.CONFIRMED),
            (4, 4, ReservationStatus.CONFIRMED),
            (5, 5, ReservationStatus.CONFIRMED),
        ]
        for trip_idx, passenger_idx, status in reservations_data:
            trip = trips[trip_idx]
            session.add(
                ReservationModel(
                    trip_id=trip.id,
                    passenger_id=users[passenger_idx].id,
                    status=status,
                )
            )
            if status == ReservationStatus.CONFIRMED:
                trip.available_seats -= 1
                if trip.available_seats == 0:
                    trip.status = TripStatus.FULL
        await session.flush()
        print(f"  Created {len(reservations_data)} reservations")

        # ── Califications (past trips only) ──────────────────────────
        session.add_all(
            [
                CalificationModel(
                    trip_id=trips[4].id,
                    author_id=users[3].id,
                    receiver_id=trips[4].driver_id,
                    score=5,
                    comment="Muy puntual y amable",
                ),
                CalificationModel(
                    trip_id=trips[4].id,
                    author_id=users[4].id,
                    receiver_id=trips[4].driver_id,
                    score=4,
                    comment=None,
                ),
            ]
        )
        await session.flush()
        print("  Created 2 califications")

        # ── Messages ──────────────────────────────────────────────────
        conversation = [
            (4, 0, "Hola, ¿dónde es el punto de encuentro?"),
            (0, 4, "En la entrada principal del centro comercial."),
            (4, 0, "Perfecto, gracias."),
        ]
        for sender, receiver, content in conversation:
            session.add(
                MessageModel(
                    trip_id=trips[0].id,
                    sender_id=users[sender].id,
                    receiver_id=users[receiver].id,
                    content=content,
                )
            )
        await session.flush()
        print(f"  Created {len(conversation)} messages")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
