"""
Auth endpoints
==============

POST /api/auth/register         -- create an account, returns a token (201)
POST /api/auth/login            -- exchange credentials for a token
GET  /api/auth/profile          -- the caller's own profile
POST /api/auth/profile-picture  -- upload / replace the caller's picture
"""

from fastapi import APIRouter, Depends, File, Request, UploadFile

from carpool.api.dependencies import (
    get_current_user_id,
    get_picture_storage,
    get_user_service,
)
from carpool.api.middleware import limiter
from carpool.api.schemas import (
    ApiResponse,
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)
from carpool.config import settings
from carpool.infrastructure.storage import ProfilePictureStorage
from carpool.services.users import AuthResult, UserService

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_payload(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        id=result.user.id,
        name=result.user.name,
        email=result.user.email,
        token=result.token,
    )


@router.post(
    "/register",
    status_code=201,
    response_model=ApiResponse[AuthResponse],
    summary="Register a new user",
)
@limiter.limit(settings.rate_limit)
async def register(
    request: Request,
    body: RegisterRequest,
    service: UserService = Depends(get_user_service),
):
    result = await service.register(body.name, body.email, body.password)
    return ApiResponse(
        message="Usuario registrado exitosamente", data=_auth_payload(result)
    )


@router.post("/login", response_model=ApiResponse[AuthResponse], summary="Log in")
@limiter.limit(settings.rate_limit)
async def login(
    request: Request,
    body: LoginRequest,
    service: UserService = Depends(get_user_service),
):
    result = await service.login(body.email, body.password)
    return ApiResponse(message="Login exitoso", data=_auth_payload(result))


@router.get(
    "/profile",
    response_model=ApiResponse[UserPublic],
    summary="Authenticated user's profile",
)
@limiter.limit(settings.rate_limit)
async def get_profile(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
):
    user = await service.get_user(user_id)
    return ApiResponse(data=UserPublic.model_validate(user))


@router.post(
    "/profile-picture",
    response_model=ApiResponse[UserPublic],
    summary="Upload a profile picture",
    description="JPEG, PNG, GIF or WEBP up to 5 MB; served under /uploads.",
)
@limiter.limit(settings.rate_limit)
async def upload_profile_picture(
    request: Request,
    file: UploadFile = File(...),
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
    storage: ProfilePictureStorage = Depends(get_picture_storage),
):
    # One byte past the limit is enough for the size check to refuse it
    data = await file.read(storage.max_bytes + 1)
    user = await service.upload_profile_picture(
        user_id, storage, file.filename, file.content_type, data
    )
    return ApiResponse(
        message="Foto de perfil actualizada", data=UserPublic.model_validate(user)
    )
