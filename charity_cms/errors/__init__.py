from charity_cms.errors.auth import AuthenticationError, ForbiddenError, auth_exception_handler
from charity_cms.errors.base import (
    BaseAppError,
    create_exception_handler,
    create_unhandled_exception_handler,
    error_content,
)
from charity_cms.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DuplicateEntryError,
    InvalidReferenceError,
    RecordNotFoundError,
    database_exception_handler,
    translate_store_error,
)
from charity_cms.errors.upload import (
    ImageNotFoundError,
    ImageTooLargeError,
    InvalidImageError,
    NoFileProvidedError,
    StorageError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from charity_cms.errors.validation import (
    NoFieldsToUpdateError,
    ValidationError,
    app_validation_exception_handler,
    validation_exception_handler,
)

__all__ = [
    "AuthenticationError",
    "BaseAppError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DuplicateEntryError",
    "ForbiddenError",
    "ImageNotFoundError",
    "ImageTooLargeError",
    "InvalidImageError",
    "InvalidReferenceError",
    "NoFieldsToUpdateError",
    "NoFileProvidedError",
    "RecordNotFoundError",
    "StorageError",
    "UnsupportedImageTypeError",
    "UploadError",
    "ValidationError",
    "app_validation_exception_handler",
    "auth_exception_handler",
    "create_exception_handler",
    "create_unhandled_exception_handler",
    "database_exception_handler",
    "error_content",
    "translate_store_error",
    "upload_exception_handler",
    "validation_exception_handler",
]
