# charity_cms/middleware/middleware.py
"""
Middleware components for the charity CMS backend.

This module contains middleware for security headers, request logging
and CORS handling, plus the lifespan event handler for service
initialization and cleanup.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import basicConfig, getLogger
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from rich.logging import RichHandler
from rich.traceback import install
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from charity_cms.configs import file_logger, settings
from charity_cms.db import close_db, init_db
from charity_cms.utils.helpers import get_summary, host

REQUEST_ID_HEADER = "X-Request-ID"

# --- Logging Configuration ---
basicConfig(
    level=settings.LOG_LEVEL,
    format="%(message)s",
    datefmt="%X",
    handlers=[RichHandler(rich_tracebacks=True)],
)
logger = file_logger(getLogger(__name__))

install()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Manage application startup and shutdown events with service initialization."""
    logger.info(f"Starting {app.title}...")
    logger.info(f"{app.description}")

    try:
        if settings.LOG_TO_FILE:
            logger.info(f"Logging to file enabled: {settings.LOG_FILE}")

        settings.images_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Image storage at {settings.images_dir.resolve()}")

        if settings.AUTO_CREATE_TABLES:
            await init_db()

        logger.info("Services initialized successfully")
        logger.info("Services:")
        logger.info("  - Backend API: http://localhost:8000")
        logger.info("  - API Documentation: http://localhost:8000/docs")
        logger.info("  - Health Check: http://localhost:8000/health")

    except Exception:
        logger.exception("Failed to initialize services")
        raise

    yield

    logger.info(f"Shutting down {app.title}...")

    try:
        await close_db()
        logger.info("Services cleaned up successfully")

    except Exception:
        logger.exception("Error during service cleanup")


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware for the application."""
    allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    if frontend_url := settings.PRODUCTION_FRONTEND_URL:
        allowed_origins.append(frontend_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request summary and timing information, tagged with a request id."""

        start_time = perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        summary = get_summary(request)

        route_info = summary or f"{request.method} {request.url.path}"
        logger.info(f"[{request_id}] Request: {route_info}, from ip: {host(request)}")

        response = await call_next(request)
        duration = perf_counter() - start_time
        response.headers[REQUEST_ID_HEADER] = request_id

        logger.info(
            f"[{request_id}] Response: {response.status_code} for {request.method} "
            f"{request.url.path} in {duration:.2f}s",
        )

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Add security headers to all responses."""

        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response
