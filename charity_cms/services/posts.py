"""
Post service.

Orchestrates the post operations exposed over HTTP: slug derivation with
optimistic retry, partial updates, paginated listing and the ordering
between committing a change and cleaning up the image it released.
"""

from logging import getLogger

from charity_cms.configs import file_logger, settings
from charity_cms.decorators import with_retry
from charity_cms.errors import DuplicateEntryError, RecordNotFoundError
from charity_cms.models import PostDB
from charity_cms.repositories import PostRepository
from charity_cms.schemas import (
    Pagination,
    PostCreate,
    PostListItem,
    PostListResponse,
    PostResponse,
    PostStatus,
    PostUpdate,
)
from charity_cms.services.assets import ImageAssetManager
from charity_cms.services.post_update import build_update, title_changed
from charity_cms.services.slug import base_slug, lookup_prefix, next_slug

logger = file_logger(getLogger(__name__))

POST_NOT_FOUND = "Post not found"

retry_on_slug_conflict = with_retry(
    max_retries=settings.SLUG_MAX_RETRIES,
    exec_retry=(DuplicateEntryError,),
)


class PostService:
    """
    Post operations on top of a repository and an image asset manager.

    Both collaborators share the request's database session; the service
    commits before reconciling images so a failed write never deletes a
    file that is still referenced.
    """

    def __init__(self, repo: PostRepository, assets: ImageAssetManager) -> None:
        self.repo = repo
        self.assets = assets

    # --- reads ---

    async def list_posts(
        self,
        *,
        status: PostStatus | None,
        search: str = "",
        page: int = 1,
        limit: int = 10,
    ) -> PostListResponse:
        """
        List posts newest first.

        Args:
            status: Status filter; None lists every status (admin only).
            search: Case-insensitive term matched in title, content or excerpt.
            page: 1-based page number.
            limit: Page size.

        Returns:
            PostListResponse: The page's items and pagination metadata. A
            page past the end has no items but still reports the total.
        """
        rows, total = await self.repo.list_posts(status, search, page, limit)
        return PostListResponse(
            items=[PostListItem.from_row(post, author) for post, author in rows],
            pagination=Pagination.build(page, limit, total),
        )

    async def get_published(self, slug: str) -> PostResponse:
        """Get a published post by slug; drafts raise `RecordNotFoundError`."""
        row = await self.repo.get_published_by_slug(slug)
        if row is None:
            raise RecordNotFoundError(POST_NOT_FOUND)
        return PostResponse.from_row(*row)

    async def get_admin(self, post_id: int) -> PostResponse:
        """Get a post of any status by id."""
        row = await self.repo.get_with_author(post_id)
        if row is None:
            raise RecordNotFoundError(POST_NOT_FOUND)
        return PostResponse.from_row(*row)

    # --- writes ---

    @retry_on_slug_conflict
    async def _insert(self, payload: PostCreate, author_id: int | None) -> PostDB:
        base = base_slug(payload.title)
        slug = next_slug(base, await self.repo.slugs_with_prefix(lookup_prefix(base)))
        post = PostDB(
            title=payload.title,
            slug=slug,
            content=payload.content,
            excerpt=payload.excerpt,
            meta_description=payload.meta_description,
            featured_image=payload.featured_image,
            tags=payload.tags,
            status=payload.status,
            author_id=author_id,
        )
        return await self.repo.insert(post)

    async def create(self, payload: PostCreate, author_id: int | None) -> PostResponse:
        """
        Create a post with a freshly derived unique slug.

        Args:
            payload: Validated creation payload.
            author_id: Id of the authenticated author.

        Returns:
            PostResponse: The stored post with its author.

        Raises:
            ValidationError: If the title yields no usable slug.
            DuplicateEntryError: If slug conflicts persist after retrying.
        """
        post = await self._insert(payload, author_id)
        await self.repo.commit()
        logger.info(f"Created post {post.id} '{post.slug}'")
        return await self.get_admin(post.id)

    @retry_on_slug_conflict
    async def _apply_update(self, current: PostDB, patch: PostUpdate) -> None:
        existing: list[str] = []
        if title_changed(current, patch) and patch.title is not None:
            existing = await self.repo.slugs_with_prefix(
                lookup_prefix(base_slug(patch.title)),
                exclude_id=current.id,
            )
        changes = build_update(current, patch, existing)
        if not await self.repo.update_fields(current.id, changes.values()):
            raise RecordNotFoundError(POST_NOT_FOUND)

    async def update(self, post_id: int, patch: PostUpdate) -> PostResponse:
        """
        Apply a partial update.

        The slug is re-derived only when the title actually changes. If the
        featured image was replaced or cleared, the old local file is removed
        once no post references it.

        Raises:
            RecordNotFoundError: If the post does not exist.
            NoFieldsToUpdateError: If the patch carries no field.
            DuplicateEntryError: If slug conflicts persist after retrying.
        """
        current = await self.repo.get_or_raise(post_id)
        old_image = current.featured_image

        await self._apply_update(current, patch)
        await self.repo.commit()

        row = await self.repo.get_with_author(post_id)
        if row is None:
            raise RecordNotFoundError(POST_NOT_FOUND)
        post, author = row

        await self.assets.reconcile(old_image, post.featured_image)
        logger.info(f"Updated post {post_id} fields {sorted(patch.model_fields_set)}")
        return PostResponse.from_row(post, author)

    async def delete(self, post_id: int) -> None:
        """
        Delete a post, then release its featured image.

        Raises:
            RecordNotFoundError: If the post does not exist.
        """
        post = await self.repo.delete(post_id)
        if post is None:
            raise RecordNotFoundError(POST_NOT_FOUND)
        await self.repo.commit()
        logger.info(f"Deleted post {post_id} '{post.slug}'")

        await self.assets.reconcile(post.featured_image, None)
