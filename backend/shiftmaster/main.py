"""
ShiftMaster Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn shiftmaster.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │ Req ID   │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌──────────┐ ┌───────────────────────┐│
    │  │ GET /    │ │ /health  │ │ /api/dashboard/stats  ││
    │  └──────────┘ └──────────┘ └───────────────────────┘│
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ InvalidInput→400 │ Unknown→404 │ Query→500   │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging → connect to the database (with retries;
              failure aborts startup) → log ready.
    Shutdown: dispose the database engine.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shiftmaster import __version__
from shiftmaster.config import settings
from shiftmaster.database import connect_to_database, dispose_engine
from shiftmaster.exceptions import (
    AggregateQueryFailedError,
    InvalidInputError,
    MissingAggregateError,
)
from shiftmaster.middleware.logging import RequestLoggingMiddleware
from shiftmaster.middleware.request_id import RequestIDMiddleware, request_id_var
from shiftmaster.routes import dashboard, health

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2024-06-12T09:00:00 [INFO] shiftmaster.access: GET /api/... 200 12.3ms
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that log every operation at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("ShiftMaster API %s starting (environment=%s)", __version__, settings.environment)
    logger.info(
        "Reporting: timezone=%s week_start_day=%d hours_per_shift=%s",
        settings.report_timezone,
        settings.week_start_day,
        settings.hours_per_shift,
    )

    try:
        await connect_to_database()
    except Exception as e:
        logger.critical("Failed to connect to the database: %s", str(e))
        raise

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("ShiftMaster API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, error: str, message: str, details: dict | None = None) -> JSONResponse:
    content = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        InvalidInputError          → 400 Bad Request
        HTTPException (Starlette)  → its own status (404 for unknown routes)
        AggregateQueryFailedError  → 500, generic message
        MissingAggregateError      → 500, generic message, logged with traceback
        Exception (fallback)       → 500, generic message (DatabaseError included)

    Response bodies never include reporting windows, filters, SQL or
    tracebacks; those are logged server-side with the request ID.
    """

    @app.exception_handler(InvalidInputError)
    async def handle_invalid_input(request: Request, exc: InvalidInputError):
        logger.warning("[%s] Invalid input: %s", request_id_var.get(""), exc.message)
        details = {"field": exc.field} if exc.field else None
        return _error(400, "invalid_input", exc.message, details)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _error(404, "not_found", "Not found")
        return _error(exc.status_code, "http_error", str(exc.detail))

    @app.exception_handler(AggregateQueryFailedError)
    async def handle_aggregate_failure(request: Request, exc: AggregateQueryFailedError):
        logger.error(
            "[%s] Dashboard aggregate '%s' failed (timeout=%s): %r",
            request_id_var.get(""),
            exc.query_name,
            exc.timed_out,
            exc.cause,
        )
        return _error(500, "internal_server_error", "Dashboard statistics are temporarily unavailable.")

    @app.exception_handler(MissingAggregateError)
    async def handle_missing_aggregate(request: Request, exc: MissingAggregateError):
        logger.error(
            "[%s] Dashboard wiring defect: %s",
            request_id_var.get(""),
            exc.message,
            exc_info=exc,
        )
        return _error(500, "internal_server_error", "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=exc,
        )
        return _error(500, "internal_server_error", "Internal server error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="ShiftMaster API",
        description="REST API gateway for the ShiftMaster workforce-scheduling application.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added executes first: RequestID → Logging → GZip → CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentialed responses with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(dashboard.router)

    return app


app = create_app()
