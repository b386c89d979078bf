from charity_cms.schemas.auth import CurrentUser, Role
from charity_cms.schemas.health import HealthCheckResponse
from charity_cms.schemas.post import (
    AuthorSummary,
    ImageUploadResponse,
    MessageResponse,
    Pagination,
    PostCreate,
    PostListItem,
    PostListResponse,
    PostResponse,
    PostStatus,
    PostUpdate,
)

__all__ = [
    "AuthorSummary",
    "CurrentUser",
    "HealthCheckResponse",
    "ImageUploadResponse",
    "MessageResponse",
    "Pagination",
    "PostCreate",
    "PostListItem",
    "PostListResponse",
    "PostResponse",
    "PostStatus",
    "PostUpdate",
    "Role",
]
