"""
Trip endpoints
==============

GET  /api/trips                      -- search published trips
POST /api/trips                      -- publish a trip (201)
GET  /api/trips/my-trips             -- trips driven by the caller
POST /api/trips/{trip_id}/reservations  -- request a seat (201)
GET  /api/trips/{trip_id}/reservations  -- reservations of an owned trip
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from carpool.api.dependencies import (
    get_current_user_id,
    get_reservation_service,
    get_trip_service,
)
from carpool.api.middleware import limiter
from carpool.api.schemas import (
    ApiResponse,
    ReservationResponse,
    ReservationWithPassenger,
    TripCreateRequest,
    TripDetailResponse,
    TripResponse,
    reservation_with_passenger,
    trip_detail,
)
from carpool.config import settings
from carpool.services.reservations import ReservationService
from carpool.services.trips import TripService

router = APIRouter(prefix="/trips", tags=["trips"])


@router.get(
    "",
    response_model=ApiResponse[list[TripDetailResponse]],
    summary="Search trips",
    description=(
        "Case-insensitive substring match on origin / destination, "
        "``date`` as YYYY-MM-DD (UTC day), ``status`` defaults to published."
    ),
)
@limiter.limit(settings.rate_limit)
async def list_trips(
    request: Request,
    origin: Optional[str] = Query(None),
    destination: Optional[str] = Query(None),
    date: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    service: TripService = Depends(get_trip_service),
):
    views = await service.list_trips(
        origin=origin, destination=destination, date=date, status=status
    )
    return ApiResponse(data=[trip_detail(v.trip, v.driver) for v in views])


@router.post(
    "",
    status_code=201,
    response_model=ApiResponse[TripResponse],
    summary="Publish a trip",
)
@limiter.limit(settings.rate_limit)
async def create_trip(
    request: Request,
    body: TripCreateRequest,
    user_id: int = Depends(get_current_user_id),
    service: TripService = Depends(get_trip_service),
):
    trip = await service.create_trip(
        driver_id=user_id,
        origin=body.origin,
        destination=body.destination,
        departure_time=body.departure_time,
        price_per_seat=body.price_per_seat,
        total_seats=body.total_seats,
        available_seats=body.available_seats,
    )
    return ApiResponse(
        message="Viaje publicado exitosamente", data=TripResponse.model_validate(trip)
    )


@router.get(
    "/my-trips",
    response_model=ApiResponse[list[TripResponse]],
    summary="Trips published by the caller, latest departure first",
)
@limiter.limit(settings.rate_limit)
async def list_my_trips(
    request: Request,
    status: Optional[str] = Query(None),
    user_id: int = Depends(get_current_user_id),
    service: TripService = Depends(get_trip_service),
):
    trips = await service.list_my_trips(user_id, status)
    return ApiResponse(data=[TripResponse.model_validate(t) for t in trips])


@router.post(
    "/{trip_id}/reservations",
    status_code=201,
    response_model=ApiResponse[ReservationResponse],
    summary="Request a seat on a trip",
    description="Creates a PENDING reservation; the seat is only taken on accept.",
)
@limiter.limit(settings.rate_limit)
async def reserve_trip(
    request: Request,
    trip_id: int,
    user_id: int = Depends(get_current_user_id),
    service: ReservationService = Depends(get_reservation_service),
):
    reservation = await service.reserve(user_id, trip_id)
    return ApiResponse(
        message="Reserva creada correctamente",
        data=ReservationResponse.model_validate(reservation),
    )


@router.get(
    "/{trip_id}/reservations",
    response_model=ApiResponse[list[ReservationWithPassenger]],
    summary="Reservations of a trip owned by the caller",
)
@limiter.limit(settings.rate_limit)
async def list_trip_reservations(
    request: Request,
    trip_id: int,
    user_id: int = Depends(get_current_user_id),
    service: ReservationService = Depends(get_reservation_service),
):
    views = await service.list_for_trip(user_id, trip_id)
    return ApiResponse(data=[reservation_with_passenger(v) for v in views])
