from logging import getLogger

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from charity_cms.configs import file_logger
from charity_cms.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class AuthenticationError(BaseAppError):
    """Raised when the bearer token is missing, expired or malformed."""

    kind = "unauthorized"

    def __init__(self, detail: str = "Could not validate credentials") -> None:
        super().__init__(detail=detail, status_code=HTTP_401_UNAUTHORIZED)


class ForbiddenError(BaseAppError):
    """Raised when an authenticated caller lacks the required role."""

    kind = "forbidden"

    def __init__(self, detail: str = "Not enough permissions") -> None:
        super().__init__(detail=detail, status_code=HTTP_403_FORBIDDEN)


auth_exception_handler = create_exception_handler(logger)
