"""Build the minimal set of column changes for a partial post update."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from charity_cms.errors import NoFieldsToUpdateError
from charity_cms.models import PostDB
from charity_cms.schemas import PostUpdate
from charity_cms.services.slug import base_slug, next_slug
from charity_cms.utils.helpers import utcnow


@dataclass(frozen=True)
class PostChanges:
    """Column values to write; `slug` is set only when the title changed."""

    fields: dict[str, Any] = field(default_factory=dict)
    slug: str | None = None

    def values(self) -> dict[str, Any]:
        values = dict(self.fields)
        if self.slug is not None:
            values["slug"] = self.slug
        return values


def title_changed(current: PostDB, patch: PostUpdate) -> bool:
    return "title" in patch.model_fields_set and patch.title != current.title


def build_update(
    current: PostDB,
    patch: PostUpdate,
    existing_slugs: Iterable[str] = (),
) -> PostChanges:
    """
    Turn a patch into column changes.

    Args:
        current: Post as currently stored.
        patch: Validated partial update; only fields the caller sent count.
        existing_slugs: Slugs sharing the new title's base, excluding the
            post itself. Consulted only when the title changed.

    Returns:
        The changes, always including `updated_at`.

    Raises:
        NoFieldsToUpdateError: If the patch carries no field.
        ValidationError: If a changed title yields no usable slug.
    """
    fields = patch.present_fields()
    if not fields:
        raise NoFieldsToUpdateError

    if "tags" in fields and fields["tags"] is None:
        fields["tags"] = []

    slug = None
    if title_changed(current, patch):
        slug = next_slug(base_slug(fields["title"]), existing_slugs)

    fields["updated_at"] = utcnow()
    return PostChanges(fields=fields, slug=slug)
