from collections.abc import Awaitable, Callable
from logging import Logger
from typing import ClassVar

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from charity_cms.configs import settings
from charity_cms.configs.settings import DEFAULT_ERROR_MESSAGE
from charity_cms.utils.helpers import host


class BaseAppError(Exception):
    """Base exception class for application errors."""

    kind: ClassVar[str] = "server_error"

    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


def error_content(exc: Exception) -> dict[str, object]:
    """
    Build the JSON body for an application error.

    Args:
        exc: Raised exception, usually a `BaseAppError`.

    Returns:
        `kind`, `detail` and any extra public attributes of the exception.
    """
    content: dict[str, object] = {
        "kind": getattr(exc, "kind", BaseAppError.kind),
        "detail": getattr(exc, "detail", "Internal Server Error"),
    }
    content.update(
        {
            k: v
            for k, v in exc.__dict__.items()
            if k not in ("status_code", "detail") and not k.startswith("_")
        },
    )
    if settings.DEBUG and exc.__cause__ is not None:
        content["debug"] = repr(exc.__cause__)
    return content


def create_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        status_code = getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)
        content = error_content(exc)

        logger.warning(
            f"{content['detail']} for ip: {host(request)} for endpoint {request.url.path}",
        )

        return ORJSONResponse(content=content, status_code=status_code)

    return handler


def create_unhandled_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """Create the last-resort handler for exceptions no other handler claims."""

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception(
            f"Unhandled error for ip: {host(request)} for endpoint {request.url.path}",
            exc_info=exc,
        )
        content: dict[str, object] = {
            "kind": BaseAppError.kind,
            "detail": DEFAULT_ERROR_MESSAGE,
        }
        if settings.DEBUG:
            content["debug"] = repr(exc)
        return ORJSONResponse(content=content, status_code=HTTP_500_INTERNAL_SERVER_ERROR)

    return handler
