"""FastAPI dependency injection helpers."""

import logging

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.config import settings
from carpool.domain.errors import Unauthenticated, Unexpected
from carpool.infrastructure.database import async_session_factory
from carpool.infrastructure.repositories import (
    CalificationRepository,
    MessageRepository,
    ReservationRepository,
    TripRepository,
    UserRepository,
)
from carpool.infrastructure.security import decode_access_token
from carpool.infrastructure.storage import ProfilePictureStorage
from carpool.services.messages import MessageService
from carpool.services.ratings import RatingService
from carpool.services.reservations import ReservationService
from carpool.services.trips import TripService
from carpool.services.users import UserService

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error.

    Services depend on it with ``scope="function"`` so the commit runs when
    the endpoint returns, before the response is sent.  Storage failures
    surface as ``Unexpected`` so the client only sees a stable message.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.exception("Database error, transaction rolled back")
            raise Unexpected("Error al acceder a la base de datos") from exc
        except Exception:
            await session.rollback()
            raise


async def get_current_user_id(token: str | None = Depends(oauth2_scheme)) -> int:
    if not token:
        raise Unauthenticated("No se proporcionó token de autenticación")
    return decode_access_token(token)


# ── Workflow components (one per request, bound to its session) ───────

# Closed when the endpoint returns, before the response goes out
_unit_of_work = Depends(get_db, scope="function")


def get_trip_service(db: AsyncSession = _unit_of_work) -> TripService:
    return TripService(TripRepository(db), UserRepository(db))


def get_reservation_service(db: AsyncSession = _unit_of_work) -> ReservationService:
    return ReservationService(
        ReservationRepository(db), TripRepository(db), UserRepository(db)
    )


def get_rating_service(db: AsyncSession = _unit_of_work) -> RatingService:
    return RatingService(
        CalificationRepository(db),
        ReservationRepository(db),
        TripRepository(db),
        UserRepository(db),
    )


def get_message_service(db: AsyncSession = _unit_of_work) -> MessageService:
    return MessageService(MessageRepository(db), TripRepository(db), UserRepository(db))


def get_user_service(db: AsyncSession = _unit_of_work) -> UserService:
    return UserService(UserRepository(db))


def get_picture_storage() -> ProfilePictureStorage:
    return ProfilePictureStorage(settings.upload_dir, settings.max_upload_bytes)
