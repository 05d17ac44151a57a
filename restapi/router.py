"""Application configuration and router setup."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import fastapi
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware import cors
from fastapi.responses import JSONResponse

from tracker.core import config, init_db
from tracker.core.database import DatabaseManager
from tracker.core.errors import AppError
from tracker.core.security import PasswordHasher, SessionCookie, TokenService
from restapi.endpoints import health_check, auth, transaction

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc!r}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error"},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Rejected payload on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Invalid request payload"},
    )


def create_app(
    settings: Optional[config.Settings] = None,
    db_manager: Optional[DatabaseManager] = None,
) -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or config.get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL, format=LOG_FORMAT)

    # Fails here, not on the first request, when JWT_SECRET is missing
    tokens = TokenService.from_settings(settings)
    db_manager = db_manager or DatabaseManager(settings=settings)

    @asynccontextmanager
    async def lifespan(app: fastapi.FastAPI):
        if settings.CREATE_TABLES:
            await db_manager.create_tables()
            logger.info("Database tables verified/created.")
        yield
        await db_manager.dispose()

    app = fastapi.FastAPI(
        title=settings.SERVICE_NAME,
        description="Personal income and outcome tracking with monthly summaries",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.tokens = tokens
    app.state.hasher = PasswordHasher()
    app.state.session_cookie = SessionCookie.from_settings(settings)

    # Initialize database
    init_db.init_db(app, db_manager)

    # Add CORS middleware
    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include routers
    app.include_router(health_check.router)
    app.include_router(auth.router)
    app.include_router(transaction.router)

    return app
