"""
FastAPI application factory.

* Registers routes for auth, trips, reservations, messages and users.
* Disposes the database engine via lifespan events.
* Applies rate limiting, CORS and the response-envelope error handlers.
* Serves uploaded profile pictures under ``/uploads``.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from carpool.api.errors import register_error_handlers
from carpool.api.middleware import limiter
from carpool.api.routes import auth, messages, reservations, trips, users
from carpool.config import settings
from carpool.infrastructure.database import dispose_engine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release pooled DB connections on shutdown."""
    logger.info("Carpool API starting")
    yield
    await dispose_engine()
    logger.info("Carpool API stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Carpool API",
        description=(
            "Drivers publish trips, passengers request seats, drivers accept "
            "or reject them, and passengers rate the driver after the trip."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Profile pictures
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")

    # Routers
    for router in (
        auth.router,
        trips.router,
        reservations.router,
        messages.router,
        users.router,
        users.health_router,
    ):
        app.include_router(router, prefix="/api")

    return app
