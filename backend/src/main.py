"""
FastAPI application entry point for the Eventcal backend.

This module initializes the FastAPI application with:
- CORS middleware for the browser client
- Rate limiting for login and registration (slowapi)
- Exception handlers for consistent error responses
- Logging configuration
- REST routers under /api and the presence WebSocket under /ws

Environment Variables:
    EVENTCAL_DB_URL: Database connection URL
    EVENTCAL_ENV: Environment (production/development, default: development)
    EVENTCAL_LOG_LEVEL: Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL, default: INFO)
    JWT_SECRET_KEY: Secret for signing login tokens
"""

from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from backend.src.config.settings import get_settings
from backend.src.utils.logging_config import init_logging, get_logger


APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup checks the JWT configuration; shutdown releases pooled
    database connections.
    """
    logger = get_logger("api")
    logger.info("Starting Eventcal backend application")

    settings = get_settings()
    if not settings.jwt_configured:
        logger.warning(
            "JWT_SECRET_KEY is not set; using the development signing secret"
        )

    logger.info("Eventcal backend started successfully")

    yield

    from backend.src.db.database import dispose_engine
    dispose_engine()
    logger.info("Shutting down Eventcal backend application")


# Initialize logging before creating app
init_logging()

app = FastAPI(
    title="Eventcal API",
    description="Backend API for Eventcal: events, recurring series, "
                "participation and invitations, contact lists and a "
                "calendar view with expanded occurrences.",
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers


@app.exception_handler(ValidationError)
async def validation_exception_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    """Handle pydantic validation errors raised outside request parsing."""
    logger = get_logger("api")
    logger.warning(
        "Validation error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": exc.errors(include_url=False),
        }
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "message": "Request validation failed",
            "details": exc.errors(include_url=False, include_context=False),
        }
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """
    Handle SQLAlchemy database errors.

    Returns:
        JSON response with a generic database error message
    """
    logger = get_logger("db")
    logger.error(
        "Database error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
        }
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Database Error",
            "message": "An error occurred while accessing the database. "
                      "Please try again later.",
        }
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """
    Handle all other unhandled exceptions.

    The stack trace is logged; the client only gets a generic message.
    """
    logger = get_logger("api")
    logger.error(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error": str(exc),
        },
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred. Please try again later.",
        }
    )


# Health check endpoint


@app.get("/health", tags=["Health"])
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        Health status and application information
    """
    return {
        "status": "healthy",
        "service": "eventcal-backend",
        "version": APP_VERSION,
    }


# API routers
from backend.src.api import auth, users, events, series, calendar, contacts, presence
from backend.src.api.admin import users_router, events_router, delete_requests_router

app.state.limiter = auth.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(events.router, prefix="/api")
app.include_router(series.router, prefix="/api")
app.include_router(calendar.router, prefix="/api")
app.include_router(contacts.router, prefix="/api")

app.include_router(users_router, prefix="/api/admin")
app.include_router(events_router, prefix="/api/admin")
app.include_router(delete_requests_router, prefix="/api/admin")

app.include_router(presence.router)


# Root endpoint


@app.get("/", tags=["Root"])
async def root() -> Dict[str, str]:
    """
    Root endpoint with API information.

    Returns:
        API metadata and documentation links
    """
    return {
        "message": "Eventcal API",
        "version": APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "openapi": "/openapi.json",
    }
