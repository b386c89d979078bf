"""
Storage services package.

This package provides the storage backend for post image uploads.
"""

from charity_cms.configs.settings import settings
from charity_cms.services.storage.base import StorageService
from charity_cms.services.storage.local import LocalStorage


def get_storage_service() -> StorageService:
    """
    Get the configured storage service.

    Returns:
        StorageService: Local storage rooted at `UPLOADS_DIR/images`
    """
    return LocalStorage(settings.images_dir)


__all__ = [
    "LocalStorage",
    "StorageService",
    "get_storage_service",
]
