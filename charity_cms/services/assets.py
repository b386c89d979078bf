"""
Image asset lifecycle.

Featured images uploaded through the API live in local storage and are
referenced from posts by a path such as `/posts/images/<filename>`. This
module accepts uploads and keeps stored files in step with the posts that
reference them: a file is removed once the last post pointing at it is
deleted or re-pointed. External URLs are never touched.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from io import BytesIO
from logging import getLogger
from mimetypes import guess_type
from pathlib import PurePosixPath
from time import time
from urllib.parse import urlsplit
from uuid import uuid4

from fastapi import UploadFile
from PIL import Image

from charity_cms.configs import file_logger, settings
from charity_cms.errors import (
    ImageNotFoundError,
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
)
from charity_cms.services.storage import StorageService, get_storage_service

logger = file_logger(getLogger(__name__))

IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}

ReferenceCheck = Callable[[Sequence[str]], Awaitable[bool]]


@dataclass(frozen=True)
class UploadedImage:
    """A stored upload and the reference posts should use for it."""

    url: str
    filename: str
    original_name: str | None
    size: int


def _media_type(content_type: str | None) -> str:
    return (content_type or "").split(";")[0].strip().lower()


class ImageAssetManager:
    """
    Accepts image uploads and reconciles stored files with post references.

    Args:
        storage: Backend holding the image files.
        is_referenced: Async callable telling whether any post still points
            at one of the given references. Without it a file is removed as
            soon as the post that referenced it lets go.
    """

    def __init__(
        self,
        storage: StorageService | None = None,
        is_referenced: ReferenceCheck | None = None,
    ) -> None:
        self.storage = storage or get_storage_service()
        self.is_referenced = is_referenced

        self.url_prefix = settings.IMAGE_URL_PREFIX
        self.local_prefixes = settings.local_image_prefixes
        self.image_max_size_bytes = settings.max_image_bytes
        self.image_allowed_types = settings.MEDIA_IMAGE_ALLOWED_TYPES

    # --- references ---

    def is_local(self, ref: str | None) -> bool:
        """Return True if `ref` points at a file this manager owns."""
        return self.filename_for(ref) is not None

    def filename_for(self, ref: str | None) -> str | None:
        """Extract the stored file name from a local reference, else None."""
        if not ref:
            return None
        parts = urlsplit(ref)
        if parts.scheme or parts.netloc:
            return None
        for prefix in self.local_prefixes:
            if parts.path.startswith(prefix):
                name = parts.path.removeprefix(prefix)
                return name if self.is_safe_filename(name) else None
        return None

    def references_for(self, filename: str) -> list[str]:
        """All reference spellings that resolve to `filename`."""
        return [f"{prefix}{filename}" for prefix in self.local_prefixes]

    @staticmethod
    def is_safe_filename(name: str) -> bool:
        if not name or name in (".", "..") or "\\" in name:
            return False
        return PurePosixPath(name).name == name

    # --- uploads ---

    def _validate_image_type(self, content_type: str | None) -> str:
        media_type = _media_type(content_type)
        if media_type not in self.image_allowed_types:
            raise UnsupportedImageTypeError(
                content_type=content_type or "unknown",
                allowed_types=self.image_allowed_types,
            )
        return media_type

    def _validate_image_size(self, file_data: bytes) -> None:
        actual_size = len(file_data)
        if actual_size > self.image_max_size_bytes:
            raise ImageTooLargeError(
                max_size_mb=settings.MEDIA_IMAGE_MAX_SIZE_MB,
                actual_size_mb=actual_size / (1024 * 1024),
            )

    def _validate_image_content(self, file_data: bytes) -> None:
        try:
            with Image.open(BytesIO(file_data)) as img:
                img.verify()
        except Exception as e:
            mssg = "This file doesn't appear to be a valid image. Please try a different file."
            raise InvalidImageError(mssg) from e

    def _new_filename(self, media_type: str) -> str:
        extension = IMAGE_EXTENSIONS.get(media_type, "")
        return f"{uuid4()}-{int(time() * 1000)}{extension}"

    async def accept_upload(self, file: UploadFile) -> UploadedImage:
        """
        Validate and store an uploaded image.

        Checks run in order (type, size, decodability) and all of them run
        before anything is written.

        Args:
            file: Multipart upload.

        Returns:
            UploadedImage: Reference and metadata of the stored file.

        Raises:
            UnsupportedImageTypeError: Content type is not an allowed image type.
            ImageTooLargeError: File exceeds the configured size limit.
            InvalidImageError: Bytes do not decode as an image.
            StorageError: The backend could not write the file.
        """
        media_type = self._validate_image_type(file.content_type)
        # Read at most one byte past the limit so oversized bodies are not buffered whole
        file_data = await file.read(self.image_max_size_bytes + 1)
        self._validate_image_size(file_data)
        self._validate_image_content(file_data)

        filename = self._new_filename(media_type)
        try:
            await self.storage.save(filename, file_data)
        except OSError as e:
            logger.exception(f"Failed to store image {filename}")
            raise StorageError from e

        return UploadedImage(
            url=f"{self.url_prefix}{filename}",
            filename=filename,
            original_name=file.filename,
            size=len(file_data),
        )

    # --- lifecycle ---

    async def reconcile(self, old_ref: str | None, new_ref: str | None) -> bool:
        """
        Remove the file behind `old_ref` if nothing references it any more.

        Call after the post change has been committed.

        Returns:
            bool: True if a file was removed.
        """
        if old_ref == new_ref:
            return False
        filename = self.filename_for(old_ref)
        if filename is None or filename == self.filename_for(new_ref):
            return False

        if self.is_referenced is not None and await self.is_referenced(
            self.references_for(filename),
        ):
            logger.info(f"Image {filename} still referenced, keeping it")
            return False

        try:
            removed = await self.storage.remove(filename)
        except OSError:
            # The post change is already committed; the orphan is left for manual cleanup
            logger.exception(f"Failed to remove orphaned image {filename}")
            return False

        if not removed:
            logger.info(f"Image {filename} was already gone")
        return removed

    # --- direct access ---

    async def read_image(self, filename: str) -> tuple[bytes, str]:
        """
        Return a stored image and its media type.

        Raises:
            ImageNotFoundError: Unknown or unsafe file name.
        """
        if not self.is_safe_filename(filename):
            raise ImageNotFoundError
        data = await self.storage.read(filename)
        if data is None:
            raise ImageNotFoundError
        media_type, _ = guess_type(filename)
        return data, media_type or "application/octet-stream"

    async def delete_image(self, filename: str) -> None:
        """
        Delete a stored image regardless of references.

        Raises:
            ImageNotFoundError: Unknown or unsafe file name.
        """
        if not self.is_safe_filename(filename) or not await self.storage.remove(filename):
            raise ImageNotFoundError
