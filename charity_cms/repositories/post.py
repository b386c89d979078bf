"""Post repository for database operations."""

from collections.abc import Sequence
from logging import getLogger
from typing import Any, TypeAlias

from sqlalchemy import ColumnElement, Select, desc, or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from charity_cms.configs import file_logger
from charity_cms.errors.database import translate_store_error
from charity_cms.models import AuthorDB, PostDB
from charity_cms.repositories.base import BaseRepository

logger = file_logger(getLogger(__name__))

PostRow: TypeAlias = tuple[PostDB, AuthorDB | None]


def post_filters(status: str | None = None, search: str = "") -> list[ColumnElement[bool]]:
    """
    Build the WHERE conditions shared by the listing and its count.

    Args:
        status: Restrict to this status; None means any status.
        search: Case-insensitive substring matched against title, content
            or excerpt. LIKE wildcards in the term are matched literally.

    Returns:
        list[ColumnElement[bool]]: Conditions to AND together.
    """
    conditions: list[ColumnElement[bool]] = []
    if status:
        conditions.append(PostDB.status == status)
    if term := search.strip():
        conditions.append(
            or_(
                PostDB.title.icontains(term, autoescape=True),
                PostDB.content.icontains(term, autoescape=True),
                PostDB.excerpt.icontains(term, autoescape=True),
            ),
        )
    return conditions


class PostRepository(BaseRepository[PostDB]):
    """
    Repository for Post database operations.

    Reads return `(post, author)` rows so responses can carry the author's
    name without a second query. Writes run inside savepoints and leave the
    commit to the caller.
    """

    model = PostDB

    @staticmethod
    def _with_author() -> Select[tuple[PostDB, AuthorDB | None]]:
        return (
            select(PostDB, AuthorDB)
            .outerjoin(AuthorDB, PostDB.author_id == AuthorDB.id)
            .execution_options(populate_existing=True)
        )

    async def get_with_author(self, post_id: int) -> PostRow | None:
        """
        Get a post of any status together with its author.

        Args:
            post_id: Post ID

        Returns:
            PostRow | None: `(post, author)` if found, None otherwise
        """
        result = await self._execute(self._with_author().where(PostDB.id == post_id))
        row = result.one_or_none()
        return (row[0], row[1]) if row else None

    async def get_published_by_slug(self, slug: str) -> PostRow | None:
        """
        Get a published post by slug; drafts are treated as absent.

        Args:
            slug: Post slug

        Returns:
            PostRow | None: `(post, author)` if a published post has this slug
        """
        statement = self._with_author().where(
            PostDB.slug == slug,
            PostDB.status == "published",
        )
        result = await self._execute(statement)
        row = result.one_or_none()
        return (row[0], row[1]) if row else None

    async def slugs_with_prefix(self, base: str, exclude_id: int | None = None) -> list[str]:
        """
        Return every slug starting with `base`.

        Args:
            base: Base slug to look up (LIKE wildcards are escaped)
            exclude_id: Post to leave out, used when re-deriving on update

        Returns:
            list[str]: Candidate slugs; the deriver narrows them further
        """
        statement = select(PostDB.slug).where(PostDB.slug.startswith(base, autoescape=True))
        if exclude_id is not None:
            statement = statement.where(PostDB.id != exclude_id)
        result = await self._execute(statement)
        return list(result.scalars().all())

    async def list_posts(
        self,
        status: str | None,
        search: str,
        page: int,
        limit: int,
    ) -> tuple[list[PostRow], int]:
        """
        List posts newest first with the total matching count.

        Args:
            status: Status filter, None for all
            search: Search term, empty for none
            page: 1-based page number
            limit: Page size

        Returns:
            tuple[list[PostRow], int]: Rows of the requested page and the
            number of posts matching the filters across all pages
        """
        conditions = post_filters(status, search)
        statement = (
            self._with_author()
            .where(*conditions)
            .order_by(desc(PostDB.created_at), desc(PostDB.id))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self._execute(statement)
        rows = [(post, author) for post, author in result.all()]
        total = await self.count(*conditions)
        return rows, total

    async def insert(self, post: PostDB) -> PostDB:
        """
        Insert a new post.

        Raises:
            DuplicateEntryError: If the slug is already taken
            InvalidReferenceError: If the author does not exist
        """
        created = await self._add_and_refresh(post)
        logger.info(f"Inserted post {created.id} with slug '{created.slug}'")
        return created

    async def update_fields(self, post_id: int, values: dict[str, Any]) -> bool:
        """
        Write `values` to a post inside a savepoint.

        Args:
            post_id: Post ID
            values: Column values to set

        Returns:
            bool: True if a row was updated

        Raises:
            DuplicateEntryError: If a new slug is already taken
        """
        statement = (
            update(PostDB)
            .where(PostDB.id == post_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(statement)
        except (SQLAlchemyError, OSError) as e:
            raise translate_store_error(e) from e
        return bool(result.rowcount)

    async def image_in_use(self, refs: Sequence[str]) -> bool:
        """Return True if any post's featured image is one of `refs`."""
        return await self._values_in_use("featured_image", refs)
