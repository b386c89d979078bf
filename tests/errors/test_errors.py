# tests/errors/test_errors.py
"""Tests for the error taxonomy and its handlers."""

from unittest.mock import MagicMock

import orjson
import pytest
from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    ProgrammingError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from charity_cms.errors import (
    AuthenticationError,
    BaseAppError,
    DatabaseConnectionError,
    DatabaseError,
    DuplicateEntryError,
    ForbiddenError,
    ImageTooLargeError,
    InvalidReferenceError,
    NoFieldsToUpdateError,
    RecordNotFoundError,
    UnsupportedImageTypeError,
    ValidationError,
    create_exception_handler,
    create_unhandled_exception_handler,
    translate_store_error,
)


def integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO posts ...", {}, Exception(message))


@pytest.fixture
def request_mock() -> MagicMock:
    """Create a mock request."""
    request = MagicMock()
    request.client.host = "192.168.1.1"
    request.url.path = "/posts"
    return request


class TestBaseAppError:
    """Tests for BaseAppError exception."""

    def test_default_values(self) -> None:
        """Test default initialization values."""
        error = BaseAppError()
        assert error.detail == "Internal Server Error"
        assert error.status_code == 500
        assert error.kind == "server_error"

    def test_str_representation(self) -> None:
        """Test string representation returns detail."""
        assert str(BaseAppError(detail="Test error")) == "Test error"


class TestTaxonomy:
    """Tests for status codes and kinds of each error."""

    @pytest.mark.parametrize(
        ("error", "status_code", "kind"),
        [
            (ValidationError(), 400, "validation_error"),
            (NoFieldsToUpdateError(), 400, "no_fields_to_update"),
            (InvalidReferenceError(), 400, "validation_error"),
            (AuthenticationError(), 401, "unauthorized"),
            (ForbiddenError(), 403, "forbidden"),
            (RecordNotFoundError(), 404, "not_found"),
            (DuplicateEntryError(), 409, "conflict"),
            (ImageTooLargeError(), 413, "payload_too_large"),
            (UnsupportedImageTypeError("text/plain"), 415, "unsupported_media_type"),
            (DatabaseConnectionError(), 503, "store_unavailable"),
            (DatabaseError(), 500, "server_error"),
        ],
    )
    def test_status_and_kind(self, error: BaseAppError, status_code: int, kind: str) -> None:
        """Test that each error carries its HTTP status and kind."""
        assert error.status_code == status_code
        assert error.kind == kind

    def test_image_too_large_mentions_limit(self) -> None:
        """Test that the size limit appears in the message."""
        assert "10MB" in ImageTooLargeError(max_size_mb=10).detail

    def test_unsupported_type_lists_allowed_types(self) -> None:
        """Test that allowed types appear in the message."""
        error = UnsupportedImageTypeError("text/plain", ["image/png"])
        assert "image/png" in error.detail
        assert error.content_type == "text/plain"


class TestTranslateStoreError:
    """Tests for mapping driver errors onto the taxonomy."""

    def test_unique_violation(self) -> None:
        """Test that a unique violation becomes a conflict."""
        error = translate_store_error(
            integrity_error('duplicate key value violates unique constraint "ix_posts_slug"'),
        )
        assert isinstance(error, DuplicateEntryError)

    def test_foreign_key_violation(self) -> None:
        """Test that a dangling reference becomes a validation error."""
        error = translate_store_error(
            integrity_error('insert on table "posts" violates foreign key constraint'),
        )
        assert isinstance(error, InvalidReferenceError)

    def test_other_integrity_error(self) -> None:
        """Test that an unclassified integrity error is a generic database error."""
        error = translate_store_error(integrity_error("null value in column violates not-null"))
        assert type(error) is DatabaseError

    @pytest.mark.parametrize(
        "exc",
        [
            OperationalError("SELECT 1", {}, Exception("connection refused")),
            InterfaceError("SELECT 1", {}, Exception("connection is closed")),
            PoolTimeoutError("QueuePool limit reached"),
            ConnectionRefusedError("refused"),
            TimeoutError("timed out"),
        ],
    )
    def test_unavailable_store(self, exc: Exception) -> None:
        """Test that connectivity failures become store_unavailable."""
        assert isinstance(translate_store_error(exc), DatabaseConnectionError)

    def test_invalidated_connection(self) -> None:
        """Test that an invalidated DBAPI connection counts as unavailable."""
        exc = DBAPIError("SELECT 1", {}, Exception("gone"), connection_invalidated=True)
        assert isinstance(translate_store_error(exc), DatabaseConnectionError)

    def test_unexpected_error(self) -> None:
        """Test that anything else is a generic database error."""
        exc = ProgrammingError("SELEC 1", {}, Exception("syntax error"))
        assert type(translate_store_error(exc)) is DatabaseError

    def test_already_translated(self) -> None:
        """Test that application errors pass through unchanged."""
        original = RecordNotFoundError()
        assert translate_store_error(original) is original


class TestExceptionHandlers:
    """Tests for the response bodies produced by handlers."""

    async def test_handler_body(self, request_mock: MagicMock) -> None:
        """Test that the body carries kind and detail only."""
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(request_mock, DuplicateEntryError())

        assert response.status_code == 409
        assert orjson.loads(response.body) == {
            "kind": "conflict",
            "detail": "A record with this value already exists",
        }
        logger.warning.assert_called_once_with(
            "A record with this value already exists for ip: 192.168.1.1 for endpoint /posts",
        )

    async def test_handler_includes_public_attributes(self, request_mock: MagicMock) -> None:
        """Test that extra attributes such as field errors are exposed."""
        handler = create_exception_handler(MagicMock())
        error = ValidationError("Bad", errors=[{"field": "title", "message": "required"}])

        response = await handler(request_mock, error)

        body = orjson.loads(response.body)
        assert body["errors"] == [{"field": "title", "message": "required"}]

    async def test_handler_hides_driver_details(self, request_mock: MagicMock) -> None:
        """Test that the underlying driver error is not leaked."""
        handler = create_exception_handler(MagicMock())
        cause = OperationalError("SELECT 1", {}, Exception("password authentication failed"))
        try:
            raise translate_store_error(cause) from cause
        except DatabaseError as e:
            response = await handler(request_mock, e)

        assert response.status_code == 503
        assert b"password" not in response.body

    async def test_unhandled_handler(self, request_mock: MagicMock) -> None:
        """Test that unknown exceptions become a generic 500."""
        logger = MagicMock()
        handler = create_unhandled_exception_handler(logger)

        response = await handler(request_mock, RuntimeError("secret internals"))

        assert response.status_code == 500
        body = orjson.loads(response.body)
        assert body["kind"] == "server_error"
        assert "secret" not in body["detail"]
        logger.exception.assert_called_once()
