"""Custom validation error handling for FastAPI."""

from logging import getLogger
from typing import Any, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_400_BAD_REQUEST

from charity_cms.configs import file_logger
from charity_cms.errors.base import BaseAppError, create_exception_handler
from charity_cms.utils.helpers import host

logger = file_logger(getLogger(__name__))


class ValidationError(BaseAppError):
    """Custom validation error class."""

    kind = "validation_error"

    def __init__(
        self,
        detail: str = "Validation Error",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)
        self.errors = errors or []


class NoFieldsToUpdateError(ValidationError):
    """Raised when a partial update carries no recognised field."""

    kind = "no_fields_to_update"

    def __init__(self, detail: str = "No fields to update") -> None:
        super().__init__(detail=detail)


def format_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """
    Flatten pydantic errors into `field` / `message` / `type` entries.

    Args:
        exc: The request validation error raised by FastAPI.

    Returns:
        One dict per failing field.
    """
    formatted_errors = []
    for error in exc.errors():
        loc = error.get("loc", [])
        # Skip the leading location marker such as 'body' or 'query'
        formatted_error: dict[str, Any] = {
            "field": ".".join(str(part) for part in loc[1:]) or ".".join(map(str, loc)),
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "validation_error"),
        }
        if "ctx" in error:
            formatted_error["context"] = {
                key: str(value) if isinstance(value, Exception) else value
                for key, value in error["ctx"].items()
            }
        formatted_errors.append(formatted_error)
    return formatted_errors


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle Pydantic validation errors with cleaner response format.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with formatted validation errors and a 400 status.
    """
    formatted_errors = format_validation_errors(cast(RequestValidationError, exc))

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {formatted_errors}",
    )

    return ORJSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={
            "kind": ValidationError.kind,
            "detail": "Validation failed",
            "errors": formatted_errors,
        },
    )


app_validation_exception_handler = create_exception_handler(logger)
