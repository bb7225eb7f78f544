"""
FastAPI Application Entry Point.

This is the main application file for the Parcel Tracker Backend.
"""

from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from parcel_tracker.app.core.config import settings
from parcel_tracker.app.api.v1.router import router as api_v1_router
from parcel_tracker.app.db.session import engine, Base
from parcel_tracker.app.core.observability import ObservabilityMiddleware, configure_logging
from parcel_tracker.app.core.redis_client import close_redis, get_redis
from parcel_tracker.app.core.responses import success_response
from parcel_tracker.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from parcel_tracker.app.models.user import User
from parcel_tracker.app.models.carrier import Carrier
from parcel_tracker.app.models.parcel import Parcel
from parcel_tracker.app.models.status_history import StatusHistory
from parcel_tracker.app.models.notification import Notification
from parcel_tracker.app.models.audit_log import AuditLog

logger = logging.getLogger("parcel_tracker")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Configures logging and creates database tables on startup.
    2. Closes the Redis connection pool on shutdown.
    """
    configure_logging(settings.log_level)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await close_redis()

# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Parcel tracking backend: admin console and customer dashboard API",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check(redis=Depends(get_redis)):
    """
    Health check endpoint.

    Reports Redis reachability alongside the app status.

    Returns:
        Envelope with status and application information
    """
    try:
        redis_ok = bool(await redis.ping())
    except Exception:
        logger.warning("Redis ping failed", exc_info=True)
        redis_ok = False

    return success_response({
        "status": "healthy",
        "appName": settings.app_name,
        "version": settings.api_version,
        "redis": "up" if redis_ok else "down",
    })


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to Parcel Tracker Backend API",
        "docs": "/docs",
        "health": "/health",
    }
