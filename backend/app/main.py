"""
Bookstore Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).

Application Layout:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware: Request ID → Logging → GZip → CORS      │
    │                                                      │
    │  Routes:                                             │
    │    POST /userRegister        POST /userRegisterwithfile
    │    POST /login               GET  /user/{user_id}    │
    │    GET  /health                                      │
    │                                                      │
    │  Exception Handlers → ResponseMessage envelope       │
    │    Validation/Auth → 400 FAILED   NotFound → 404     │
    │    Database / unexpected → 500 FAILURE               │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config check → (SQLite only) create tables
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app import models  # noqa: F401  (registers tables on Base.metadata)
from app.config import settings
from app.database import Base, dispose_engine, engine
from app.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, users
from app.schemas.user import ResponseMessage

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("python_multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Bookstore backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: health checks still report the problem
        logger.error("Configuration error: %s", str(e))

    if settings.is_sqlite:
        # Local SQLite runs have no migration step; PostgreSQL uses Alembic
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("SQLite schema ensured")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Bookstore backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _failure_prefix(request: Request) -> str:
    return users.FAILURE_MESSAGES.get(request.url.path, "Request Failed")


def _envelope(message: ResponseMessage) -> JSONResponse:
    # Transport status is always 200; the envelope carries the outcome
    return JSONResponse(status_code=200, content=message.to_wire())


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to ResponseMessage envelopes.

    Handler table:
        ValidationError         → 400 FAILED   (message as raised)
        AuthenticationError     → 400 FAILED   "Invalid Email and Password"
        RequestValidationError  → 400 FAILED   "Invalid request payload"
        NotFoundError           → 404 FAILED
        DatabaseError           → 500 FAILURE  "<route failure text>: <detail>"
        Exception (fallback)    → 500 FAILURE  "<route failure text>: <exception type>"
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return _envelope(ResponseMessage.failed(exc.message))

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        rid = request_id_var.get("")
        # Reason stays in the log; the response is the same for every cause
        logger.warning("[%s] Login rejected (%s)", rid, exc.context.get("reason", "unknown"))
        return _envelope(ResponseMessage.failed(exc.message))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Malformed request to %s: %d error(s)", rid, request.url.path, len(exc.errors()))
        return _envelope(ResponseMessage.failed("Invalid request payload"))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _envelope(ResponseMessage.failed(exc.message, status_code=404))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        detail = exc.detail or exc.message
        return _envelope(ResponseMessage.failure(f"{_failure_prefix(request)}: {detail}"))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _envelope(ResponseMessage.failure(f"{_failure_prefix(request)}: {type(exc).__name__}"))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers."""
    app = FastAPI(
        title="Online Bookstore API",
        description="User registration, login and registration attachments for the online bookstore.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(health.router)

    return app


app = create_app()
