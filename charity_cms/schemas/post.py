"""
Post schemas for the charity CMS.

Request models validate and normalise incoming post payloads; response
models shape stored posts for the public site and the admin dashboard.
JSON field names are camelCase, Python attributes snake_case.
"""

from datetime import datetime
from math import ceil
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from charity_cms.configs.settings import MAX_TAG_LENGTH, MAX_TAGS_COUNT, MAX_TITLE_LENGTH
from charity_cms.models import AuthorDB, PostDB

PostStatus = Literal["draft", "published"]

# Fields a partial update may not clear
REQUIRED_ON_UPDATE = ("title", "content", "status")


def _dedupe_tags(tags: list[str]) -> list[str]:
    seen: dict[str, None] = {}
    for tag in tags:
        if cleaned := tag.strip():
            seen.setdefault(cleaned, None)
    return list(seen)


class PostCreate(BaseModel):
    """Post creation payload (author and slug are assigned by the server)."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: str = Field(
        ...,
        min_length=1,
        max_length=MAX_TITLE_LENGTH,
        description="Post title",
        examples=["Spring Food Drive Results"],
    )
    content: str = Field(
        ...,
        min_length=1,
        description="Post body",
        examples=["Thanks to 120 volunteers we collected four tonnes of food..."],
    )
    excerpt: str | None = Field(default=None, description="Short teaser for listings")
    featured_image: str | None = Field(
        default=None,
        alias="featuredImage",
        description="External URL or a path returned by the image upload endpoint",
    )
    tags: list[str] = Field(
        default_factory=list,
        max_length=MAX_TAGS_COUNT,
        description="Post tags",
        examples=[["events", "food-drive"]],
    )
    status: PostStatus = Field(default="draft", description="Post status")
    meta_description: str | None = Field(
        default=None,
        alias="metaDescription",
        description="SEO meta description",
    )

    @field_validator("excerpt", "featured_image", "meta_description")
    @classmethod
    def empty_to_none(cls, value: str | None) -> str | None:
        return value or None

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("tags")
    @classmethod
    def normalise_tags(cls, value: list[str]) -> list[str]:
        tags = _dedupe_tags(value)
        if any(len(tag) > MAX_TAG_LENGTH for tag in tags):
            mssg = f"Tags must be at most {MAX_TAG_LENGTH} characters"
            raise ValueError(mssg)
        return tags


class PostUpdate(PostCreate):
    """
    Partial update payload.

    Every field is optional. Which fields the caller actually sent is read
    from `model_fields_set`, so an omitted field and an explicit `null` are
    different things: the former leaves the column alone, the latter clears
    it (optional columns only).
    """

    title: str | None = Field(  # type: ignore[assignment]
        default=None,
        min_length=1,
        max_length=MAX_TITLE_LENGTH,
        description="Post title",
    )
    content: str | None = Field(  # type: ignore[assignment]
        default=None,
        min_length=1,
        description="Post body",
    )
    tags: list[str] | None = Field(  # type: ignore[assignment]
        default=None,
        max_length=MAX_TAGS_COUNT,
        description="Post tags; null clears them",
    )
    status: PostStatus | None = Field(  # type: ignore[assignment]
        default=None,
        description="Post status",
    )

    @model_validator(mode="after")
    def reject_cleared_required(self) -> Self:
        """Title, content and status may be changed but never cleared."""
        for name in REQUIRED_ON_UPDATE:
            if name in self.model_fields_set and getattr(self, name) is None:
                mssg = f"{name} cannot be empty"
                raise ValueError(mssg)
        return self

    def present_fields(self) -> dict[str, object]:
        """Return only the fields the caller sent, keyed by column name."""
        return self.model_dump(include=self.model_fields_set)


class AuthorSummary(BaseModel):
    """Author attribution embedded in a full post response."""

    name: str
    email: str


class PostBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    title: str
    slug: str
    excerpt: str | None = None
    featured_image: str | None = Field(default=None, alias="featuredImage")
    tags: list[str] = Field(default_factory=list)
    status: PostStatus
    meta_description: str | None = Field(default=None, alias="metaDescription")
    author_id: int | None = Field(default=None, alias="authorId")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class PostResponse(PostBase):
    """Full post, as returned by get/create/update."""

    content: str
    author: AuthorSummary | None = None

    @classmethod
    def from_row(cls, post: PostDB, author: AuthorDB | None) -> Self:
        response = cls.model_validate(post)
        if author is not None:
            response.author = AuthorSummary(name=author.display_name, email=author.email)
        return response


class PostListItem(PostBase):
    """Listing entry: no body, author reduced to a display name."""

    author: str | None = None

    @classmethod
    def from_row(cls, post: PostDB, author: AuthorDB | None) -> Self:
        item = cls.model_validate(post)
        item.author = author.display_name if author is not None else None
        return item


class Pagination(BaseModel):
    """Pagination metadata for list responses."""

    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    total: int
    limit: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> Self:
        return cls(
            current_page=page,
            total_pages=ceil(total / limit) if limit else 0,
            total=total,
            limit=limit,
        )


class PostListResponse(BaseModel):
    items: list[PostListItem]
    pagination: Pagination


class ImageUploadResponse(BaseModel):
    """Result of a successful image upload."""

    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(description="Reference to store in `featuredImage`")
    filename: str
    original_name: str | None = Field(default=None, alias="originalName")
    size: int = Field(description="Size in bytes")


class MessageResponse(BaseModel):
    message: str
