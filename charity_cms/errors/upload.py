"""
Upload-related error classes.

This module defines custom exceptions for image upload operations,
including content-type, size and decoding checks and storage errors.
"""

from logging import getLogger

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from charity_cms.configs import file_logger
from charity_cms.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class UploadError(BaseAppError):
    """Base exception for upload-related errors."""

    def __init__(
        self,
        detail: str = "We couldn't upload your file. Please try again.",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail=detail, status_code=status_code)


class NoFileProvidedError(UploadError):
    """Exception raised when the multipart body has no image part."""

    kind = "validation_error"

    def __init__(self, detail: str = "No file uploaded") -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)


class ImageTooLargeError(UploadError):
    """Exception raised when uploaded image exceeds size limit."""

    kind = "payload_too_large"

    def __init__(
        self,
        max_size_mb: int = 10,
        actual_size_mb: float | None = None,
    ) -> None:
        detail = f"Your image is too large. Please use an image smaller than {max_size_mb}MB."
        if actual_size_mb is not None:
            detail += f" Your file is at least {actual_size_mb:.1f}MB."
        super().__init__(detail=detail, status_code=HTTP_413_REQUEST_ENTITY_TOO_LARGE)
        self.max_size_mb = max_size_mb
        self.actual_size_mb = actual_size_mb


class UnsupportedImageTypeError(UploadError):
    """Exception raised when uploaded image type is not supported."""

    kind = "unsupported_media_type"

    def __init__(
        self,
        content_type: str | None,
        allowed_types: list[str] | None = None,
    ) -> None:
        allowed = allowed_types or ["image/jpeg", "image/png", "image/webp", "image/gif"]
        detail = f"Only image files are allowed. Supported types: {', '.join(allowed)}."
        super().__init__(detail=detail, status_code=HTTP_415_UNSUPPORTED_MEDIA_TYPE)
        self.content_type = content_type
        self.allowed_types = allowed


class InvalidImageError(UploadError):
    """Exception raised when uploaded file is not a valid image."""

    kind = "validation_error"

    def __init__(
        self,
        detail: str = "This file doesn't appear to be a valid image. Please try a different file.",
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)


class ImageNotFoundError(UploadError):
    """Exception raised when a stored image does not exist."""

    kind = "not_found"

    def __init__(self, detail: str = "Image not found") -> None:
        super().__init__(detail=detail, status_code=HTTP_404_NOT_FOUND)


class StorageError(UploadError):
    """Exception raised when the image storage backend fails."""

    def __init__(
        self,
        detail: str = "We couldn't save your image right now. Please try again later.",
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_500_INTERNAL_SERVER_ERROR)


upload_exception_handler = create_exception_handler(logger)
