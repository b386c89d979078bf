# charity_cms/main.py

"""Charity CMS Backend - posts, slugs, search and featured images for a nonprofit site."""

from logging import getLogger

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse, Response
from slowapi.errors import RateLimitExceeded
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from charity_cms.configs import file_logger, settings
from charity_cms.db import ping_db
from charity_cms.errors import (
    AuthenticationError,
    BaseAppError,
    DatabaseError,
    ForbiddenError,
    UploadError,
    ValidationError,
    app_validation_exception_handler,
    auth_exception_handler,
    create_exception_handler,
    create_unhandled_exception_handler,
    database_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from charity_cms.managers import limiter, rate_limit_exceeded_handler
from charity_cms.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from charity_cms.routes import posts_router
from charity_cms.schemas import HealthCheckResponse
from charity_cms.schemas.health import ServicesStatus
from charity_cms.utils.helpers import today_str

logger = file_logger(getLogger(__name__))

app = FastAPI(
    title=settings.APP_NAME,
    description="Content publishing API for a nonprofit website",
    version="1.0.0",
    lifespan=lifespan,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")


routes = [
    posts_router,
]

_ = [app.include_router(router) for router in routes]

errors = [
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (RequestValidationError, validation_exception_handler),
    (ValidationError, app_validation_exception_handler),
    (AuthenticationError, auth_exception_handler),
    (ForbiddenError, auth_exception_handler),
    (DatabaseError, database_exception_handler),
    (UploadError, upload_exception_handler),
    (BaseAppError, create_exception_handler(logger)),
    (Exception, create_unhandled_exception_handler(logger)),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "version": "1.0.0",
                        "status": "ok",
                        "timestamp": "2025-01-01 10:00:00",
                        "services": {"database": "connected", "image_storage": "available"},
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> HealthCheckResponse:
    """
    Health check endpoint.

    Parameters
    ----------
    request : Request
        Current request context.

    Returns
    -------
    HealthCheckResponse
        `ok` when the database answers and the image directory exists,
        `degraded` otherwise.
    """
    database_ok = await ping_db()
    storage_ok = settings.images_dir.is_dir()

    return HealthCheckResponse(
        version=app.version,
        status="ok" if database_ok and storage_ok else "degraded",
        timestamp=today_str(),
        services=ServicesStatus(
            database="connected" if database_ok else "unavailable",
            image_storage="available" if storage_ok else "unavailable",
        ),
    )


@app.get(
    "/",
    tags=["🏠 Root"],
    summary="Root access",
    response_model=dict[str, str],
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Welcome to Charity CMS Backend"},
                },
            },
        },
        429: {
            "description": "Rate limit exceeded",
            "content": {"application/json": {"example": {"detail": "Too Many Requests"}}},
        },
    },
    operation_id="root_access",
)
@limiter.limit("5/minute")
async def root(request: Request, response: Response) -> ORJSONResponse:
    """
    Root endpoint.

    Notes
    -----
    Rate limited to 5 requests per minute.
    """
    return ORJSONResponse(content={"message": f"Welcome to {settings.APP_NAME}"})
