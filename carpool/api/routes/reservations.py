"""
Reservation endpoints
=====================

PATCH /api/reservations/{id}/accept  -- driver confirms a pending request
PATCH /api/reservations/{id}/reject  -- driver rejects a pending request
PATCH /api/reservations/{id}/rate    -- passenger rates the trip afterwards
GET   /api/reservations/my-upcoming  -- caller's upcoming trips (both roles)
GET   /api/reservations/my-past      -- caller's past trips (both roles)
GET   /api/reservations/trip/{id}    -- reservations of an owned trip
"""

from fastapi import APIRouter, Depends, Request

from carpool.api.dependencies import (
    get_current_user_id,
    get_rating_service,
    get_reservation_service,
)
from carpool.api.middleware import limiter
from carpool.api.schemas import (
    ApiResponse,
    RateRequest,
    ReservationResponse,
    ReservationWithPassenger,
    TripEntryResponse,
    reservation_with_passenger,
    trip_entry,
)
from carpool.config import settings
from carpool.services.ratings import RatingService
from carpool.services.reservations import ReservationService

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.patch(
    "/{reservation_id}/accept",
    response_model=ApiResponse[ReservationResponse],
    summary="Accept a reservation",
    description=(
        "Only the trip's driver, only PENDING reservations, only before "
        "departure and only while a seat is left.  Takes one seat; the trip "
        "becomes FULL when none remain."
    ),
)
@limiter.limit(settings.rate_limit)
async def accept_reservation(
    request: Request,
    reservation_id: int,
    user_id: int = Depends(get_current_user_id),
    service: ReservationService = Depends(get_reservation_service),
):
    reservation = await service.accept(user_id, reservation_id)
    return ApiResponse(
        message="Reserva aceptada correctamente",
        data=ReservationResponse.model_validate(reservation),
    )


@router.patch(
    "/{reservation_id}/reject",
    response_model=ApiResponse[ReservationResponse],
    summary="Reject a reservation",
)
@limiter.limit(settings.rate_limit)
async def reject_reservation(
    request: Request,
    reservation_id: int,
    user_id: int = Depends(get_current_user_id),
    service: ReservationService = Depends(get_reservation_service),
):
    reservation = await service.reject(user_id, reservation_id)
    return ApiResponse(
        message="Reserva rechazada correctamente",
        data=ReservationResponse.model_validate(reservation),
    )


@router.patch(
    "/{reservation_id}/rate",
    response_model=ApiResponse[None],
    summary="Rate a past trip",
)
@limiter.limit(settings.rate_limit)
async def rate_reservation(
    request: Request,
    reservation_id: int,
    body: RateRequest,
    user_id: int = Depends(get_current_user_id),
    service: RatingService = Depends(get_rating_service),
):
    await service.rate(user_id, reservation_id, body.rating, body.comment)
    return ApiResponse(message="Calificación registrada correctamente")


@router.get(
    "/my-upcoming",
    response_model=ApiResponse[list[TripEntryResponse]],
    summary="Upcoming trips as passenger or driver",
)
@limiter.limit(settings.rate_limit)
async def list_my_upcoming(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    service: ReservationService = Depends(get_reservation_service),
):
    entries = await service.list_my_upcoming(user_id)
    return ApiResponse(data=[trip_entry(e) for e in entries])


@router.get(
    "/my-past",
    response_model=ApiResponse[list[TripEntryResponse]],
    summary="Past trips as passenger or driver, latest first",
)
@limiter.limit(settings.rate_limit)
async def list_my_past(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    service: ReservationService = Depends(get_reservation_service),
):
    entries = await service.list_my_past(user_id)
    return ApiResponse(data=[trip_entry(e) for e in entries])


@router.get(
    "/trip/{trip_id}",
    response_model=ApiResponse[list[ReservationWithPassenger]],
    summary="Reservations of a trip owned by the caller",
)
@limiter.limit(settings.rate_limit)
async def list_reservations_for_trip(
    request: Request,
    trip_id: int,
    user_id: int = Depends(get_current_user_id),
    service: ReservationService = Depends(get_reservation_service),
):
    views = await service.list_for_trip(user_id, trip_id)
    return ApiResponse(data=[reservation_with_passenger(v) for v in views])
