"""Author database model using SQLModel."""

from datetime import datetime
from typing import cast

from pydantic import ConfigDict
from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from charity_cms.utils.helpers import utcnow


class AuthorDB(SQLModel, table=True):
    """
    Author database model.

    Authors are the site's user accounts as far as the content subsystem is
    concerned: posts reference them for attribution and admins are authors
    whose `role` is `admin`. Account management lives elsewhere.
    """

    __tablename__ = cast("declared_attr[str]", "authors")

    id: int | None = Field(
        default=None,
        primary_key=True,
        description="Author ID",
    )
    first_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="First name",
    )
    last_name: str = Field(
        default="",
        sa_column=Column(String(100), nullable=False, server_default=""),
        description="Last name",
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="Email address (unique)",
    )
    role: str = Field(
        default="user",
        sa_column=Column(String(20), nullable=False, server_default="user"),
        description="Role (user, admin)",
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "first_name": "Amara",
                "last_name": "Okafor",
                "email": "amara@example.org",
                "role": "admin",
            },
        },
    )

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
