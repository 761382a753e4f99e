"""Initial schema: users, trips, reservations, califications, messages.

Revision ID: 001
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None

TRIP_STATUSES = ("published", "full", "canceled", "completed")
RESERVATION_STATUSES = (
    "pending",
    "confirmed",
    "rejected",
    "canceled",
    "not_attended",
    "completed",
)


def _timestamps(with_updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        )
    ]
    if with_updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
            )
        )
    return columns


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(100), unique=True, nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("profile_picture", sa.String(500), nullable=True),
        *_timestamps(),
    )

    # ── trips ─────────────────────────────────────────────────────────
    op.create_table(
        "trips",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "driver_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("origin", sa.String(255), nullable=False),
        sa.Column("destination", sa.String(255), nullable=False),
        sa.Column("departure_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("price_per_seat", sa.Integer, nullable=False),
        sa.Column("total_seats", sa.Integer, nullable=False),
        sa.Column("available_seats", sa.Integer, nullable=False),
        sa.Column(
            "status",
            sa.Enum(*TRIP_STATUSES, name="tripstatus"),
            default="published",
            nullable=False,
        ),
        *_timestamps(),
        sa.CheckConstraint("total_seats > 0", name="ck_trips_total_seats_positive"),
        sa.CheckConstraint("price_per_seat > 0", name="ck_trips_price_positive"),
        sa.CheckConstraint(
            "available_seats >= 0 AND available_seats <= total_seats",
            name="ck_trips_available_seats_range",
        ),
    )
    op.create_index("idx_trips_driver", "trips", ["driver_id"])
    op.create_index(
        "idx_trips_status_departure", "trips", ["status", "departure_time"]
    )

    # ── reservations ──────────────────────────────────────────────────
    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("trip_id", sa.Integer, sa.ForeignKey("trips.id"), nullable=False),
        sa.Column(
            "passenger_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column(
            "status",
            sa.Enum(*RESERVATION_STATUSES, name="reservationstatus"),
            default="pending",
            nullable=False,
        ),
        sa.Column("rating", sa.Integer, nullable=True),
        sa.Column("comment", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "trip_id", "passenger_id", name="uq_reservations_trip_passenger"
        ),
        sa.CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 5)",
            name="ck_reservations_rating_range",
        ),
    )
    op.create_index("idx_reservations_trip", "reservations", ["trip_id"])
    op.create_index("idx_reservations_passenger", "reservations", ["passenger_id"])
    op.create_index("idx_reservations_status", "reservations", ["status"])

    # ── califications ─────────────────────────────────────────────────
    op.create_table(
        "califications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("trip_id", sa.Integer, sa.ForeignKey("trips.id"), nullable=False),
        sa.Column("author_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "receiver_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("score", sa.Integer, nullable=False),
        sa.Column("comment", sa.Text, nullable=True),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint(
            "trip_id", "author_id", name="uq_califications_trip_author"
        ),
        sa.CheckConstraint(
            "score >= 1 AND score <= 5", name="ck_califications_score_range"
        ),
    )
    op.create_index("idx_califications_receiver", "califications", ["receiver_id"])

    # ── messages ──────────────────────────────────────────────────────
    op.create_table(
        "messages",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("trip_id", sa.Integer, sa.ForeignKey("trips.id"), nullable=False),
        sa.Column("sender_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "receiver_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("read", sa.Boolean, default=False, nullable=False),
        *_timestamps(with_updated=False),
    )
    op.create_index(
        "idx_messages_trip_pair",
        "messages",
        ["trip_id", "sender_id", "receiver_id"],
    )


def downgrade() -> None:
    op.drop_table("messages")
    op.drop_table("califications")
    op.drop_table("reservations")
    op.drop_table("trips")
    op.drop_table("users")
    op.execute("DROP TYPE IF EXISTS reservationstatus")
    op.execute("DROP TYPE IF EXISTS tripstatus")
