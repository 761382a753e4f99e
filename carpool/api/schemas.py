"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, EmailStr, Field

from carpool.domain.enums import ReservationStatus, TripStatus

T = TypeVar("T")


# ── Envelope ──────────────────────────────────────────────────────────


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


# ── Requests ──────────────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    name: str = Field(..., max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: str
    password: str


class TripCreateRequest(BaseModel):
    origin: str
    destination: str
    departure_time: datetime
    price_per_seat: int
    total_seats: int
    available_seats: Optional[int] = Field(
        None, description="Defaults to total_seats when omitted."
    )


class RateRequest(BaseModel):
    rating: int = Field(..., description="Score between 1 and 5.")
    comment: Optional[str] = None


class MessageCreateRequest(BaseModel):
    trip_id: int = Field(..., alias="tripId")
    receiver_id: int = Field(..., alias="receiverId")
    content: str

    model_config = {"populate_by_name": True}


# ── Responses ─────────────────────────────────────────────────────────


class UserPublic(BaseModel):
    id: int
    name: str
    email: str
    profile_picture: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserSummary(BaseModel):
    id: int
    name: str
    email: Optional[str] = None

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    id: int
    name: str
    email: str
    token: str


class TripResponse(BaseModel):
    id: int
    driver_id: int
    origin: str
    destination: str
    departure_time: datetime
    price_per_seat: int
    total_seats: int
    available_seats: int
    status: TripStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TripDetailResponse(TripResponse):
    driver: Optional[UserPublic] = None


class ReservationResponse(BaseModel):
    id: int
    trip_id: int
    passenger_id: int
    status: ReservationStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ReservationWithPassenger(ReservationResponse):
    passenger: Optional[UserSummary] = None


class TripEntryResponse(BaseModel):
    id: int
    role: str
    status: str
    trip: TripDetailResponse


class TripBrief(BaseModel):
    origin: str
    destination: str
    departure_time: datetime

    model_config = {"from_attributes": True}


class RatingResponse(BaseModel):
    id: int
    trip_id: int
    author_id: int
    receiver_id: int
    score: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    author: Optional[UserSummary] = None
    trip: Optional[TripBrief] = None


class RatingSummaryResponse(BaseModel):
    average: float
    total: int
    ratings: list[RatingResponse] = []


class MessageResponse(BaseModel):
    id: int
    trip_id: int
    sender_id: int
    receiver_id: int
    content: str
    read: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    status: str = "ok"


# ── Builders for composite views ──────────────────────────────────────


def trip_detail(trip, driver) -> TripDetailResponse:
    return TripDetailResponse(
        **TripResponse.model_validate(trip).model_dump(),
        driver=UserPublic.model_validate(driver) if driver else None,
    )


def reservation_with_passenger(view) -> ReservationWithPassenger:
    return ReservationWithPassenger(
        **ReservationResponse.model_validate(view.reservation).model_dump(),
        passenger=UserSummary.model_validate(view.passenger) if view.passenger else None,
    )


def trip_entry(entry) -> TripEntryResponse:
    return TripEntryResponse(
        id=entry.id,
        role=entry.role.value,
        status=entry.status,
        trip=trip_detail(entry.trip, entry.driver),
    )


def rating_row(view) -> RatingResponse:
    c = view.calification
    return RatingResponse(
        id=c.id,
        trip_id=c.trip_id,
        author_id=c.author_id,
        receiver_id=c.receiver_id,
        score=c.score,
        comment=c.comment,
        created_at=c.created_at,
        author=UserSummary(id=view.author.id, name=view.author.name) if view.author else None,
        trip=TripBrief.model_validate(view.trip) if view.trip else None,
    )
