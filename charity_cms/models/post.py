"""Post database model using SQLModel."""

from datetime import datetime
from typing import cast

from pydantic import ConfigDict
from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from charity_cms.configs.settings import MAX_SLUG_LENGTH, MAX_TITLE_LENGTH
from charity_cms.utils.helpers import utcnow

POST_STATUSES = ("draft", "published")


class PostDB(SQLModel, table=True):
    """
    Post database model for PostgreSQL.

    The `slug` column carries the unique constraint that arbitrates
    concurrent slug derivation. `author_id` is nulled rather than cascaded
    when the author row goes away, so posts outlive their authors.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    __table_args__ = (Index("ix_posts_status_created", "status", "created_at"),)

    id: int | None = Field(
        default=None,
        primary_key=True,
        description="Post ID",
    )

    author_id: int | None = Field(
        default=None,
        sa_column=Column(
            "author_id",
            Integer,
            ForeignKey("authors.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
        description="Author ID (foreign key to authors.id)",
    )

    title: str = Field(
        sa_column=Column(String(MAX_TITLE_LENGTH), nullable=False),
        description="Post title",
    )
    slug: str = Field(
        sa_column=Column(String(MAX_SLUG_LENGTH), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique)",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Post body",
    )

    excerpt: str | None = Field(
        default=None,
        sa_column=Column(Text),
        description="Short teaser shown in listings",
    )
    meta_description: str | None = Field(
        default=None,
        sa_column=Column(Text),
        description="SEO meta description",
    )
    featured_image: str | None = Field(
        default=None,
        sa_column=Column(Text),
        description="External URL or local image path",
    )

    status: str = Field(
        default="draft",
        sa_column=Column(String(20), nullable=False, index=True, server_default="draft"),
        description="Post status (draft, published)",
    )
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, server_default="[]"),
        description="Post tags",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "author_id": 1,
                "title": "Spring Food Drive Results",
                "slug": "spring-food-drive-results",
                "content": "Thanks to 120 volunteers...",
                "excerpt": "We collected 4 tonnes of food.",
                "featured_image": "/posts/images/3f2b...-1714000000000.jpg",
                "status": "published",
                "tags": ["events", "food-drive"],
            },
        },
    )
