from charity_cms.services.assets import ImageAssetManager, UploadedImage
from charity_cms.services.post_update import PostChanges, build_update, title_changed
from charity_cms.services.posts import PostService
from charity_cms.services.slug import base_slug, derive_slug, next_slug
from charity_cms.services.storage import LocalStorage, StorageService, get_storage_service

__all__ = [
    "ImageAssetManager",
    "LocalStorage",
    "PostChanges",
    "PostService",
    "StorageService",
    "UploadedImage",
    "base_slug",
    "build_update",
    "derive_slug",
    "get_storage_service",
    "next_slug",
    "title_changed",
]
