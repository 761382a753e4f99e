"""
User endpoints
==============

GET /api/users/{user_id}          -- public profile
GET /api/users/{user_id}/ratings  -- ratings received as a driver
GET /api/health                   -- simple health check
"""

from fastapi import APIRouter, Depends, Request

from carpool.api.dependencies import get_rating_service, get_user_service
from carpool.api.middleware import limiter
from carpool.api.schemas import (
    ApiResponse,
    HealthResponse,
    RatingSummaryResponse,
    UserPublic,
    rating_row,
)
from carpool.config import settings
from carpool.services.ratings import RatingService
from carpool.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])
health_router = APIRouter(tags=["health"])


@router.get("/{user_id}", response_model=ApiResponse[UserPublic], summary="Public profile")
@limiter.limit(settings.rate_limit)
async def get_user(
    request: Request,
    user_id: int,
    service: UserService = Depends(get_user_service),
):
    user = await service.get_user(user_id)
    return ApiResponse(data=UserPublic.model_validate(user))


@router.get(
    "/{user_id}/ratings",
    response_model=ApiResponse[RatingSummaryResponse],
    summary="Ratings received by a user",
)
@limiter.limit(settings.rate_limit)
async def get_user_ratings(
    request: Request,
    user_id: int,
    service: RatingService = Depends(get_rating_service),
):
    summary = await service.get_user_ratings(user_id)
    return ApiResponse(
        data=RatingSummaryResponse(
            average=summary.average,
            total=summary.total,
            ratings=[rating_row(r) for r in summary.ratings],
        )
    )


@health_router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
