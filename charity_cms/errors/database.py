"""
Database error classes and store-error translation.

Driver exceptions never leave the repository layer: `translate_store_error`
maps them onto the application taxonomy so clients only ever see a stable
`kind` and a generic message.
"""

from logging import getLogger

from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from charity_cms.configs import file_logger
from charity_cms.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))

UNIQUE_MARKERS = ("unique", "duplicate")
FOREIGN_KEY_MARKERS = ("foreign key", "foreign_key", "violates foreign")


class DatabaseError(BaseAppError):
    """Base exception for database errors."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DatabaseConnectionError(DatabaseError):
    """Exception raised when the database cannot be reached."""

    kind = "store_unavailable"

    def __init__(
        self,
        detail: str = "The content store is temporarily unavailable. Please try again later.",
    ) -> None:
        super().__init__(detail, HTTP_503_SERVICE_UNAVAILABLE)


class DuplicateEntryError(DatabaseError):
    """Exception raised when attempting to create a duplicate entry."""

    kind = "conflict"

    def __init__(
        self,
        detail: str = "A record with this value already exists",
    ) -> None:
        super().__init__(detail, HTTP_409_CONFLICT)


class InvalidReferenceError(DatabaseError):
    """Exception raised when a write points at a row that does not exist."""

    kind = "validation_error"

    def __init__(
        self,
        detail: str = "The record references a value that does not exist",
    ) -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST)


class RecordNotFoundError(DatabaseError):
    """Exception raised when a record is not found."""

    kind = "not_found"

    def __init__(
        self,
        detail: str = "Record not found",
    ) -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


def _is_disconnect(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, DisconnectionError | PoolTimeoutError | OperationalError | InterfaceError):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


def translate_store_error(exc: Exception) -> DatabaseError:
    """
    Map a driver or SQLAlchemy exception onto the application taxonomy.

    Args:
        exc: Exception raised while talking to the store.

    Returns:
        The `DatabaseError` subclass the caller should raise in its place.
    """
    if isinstance(exc, DatabaseError):
        return exc

    if isinstance(exc, IntegrityError):
        message = str(exc.orig).lower()
        if any(marker in message for marker in UNIQUE_MARKERS):
            return DuplicateEntryError()
        if any(marker in message for marker in FOREIGN_KEY_MARKERS):
            return InvalidReferenceError()
        logger.error(f"Unclassified integrity error: {exc.orig}")
        return DatabaseError()

    if isinstance(exc, SQLAlchemyError) and _is_disconnect(exc):
        logger.error(f"Content store unavailable: {exc}")
        return DatabaseConnectionError()

    if isinstance(exc, OSError | TimeoutError):
        logger.error(f"Content store unreachable: {exc}")
        return DatabaseConnectionError()

    logger.error(f"Unexpected store error: {exc!r}")
    return DatabaseError()


database_exception_handler = create_exception_handler(logger)
