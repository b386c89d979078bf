# tests/services/test_post_service.py
"""Tests for the post service."""

from unittest.mock import MagicMock

import pytest

from charity_cms.configs import settings
from charity_cms.configs.settings import MAX_SLUG_LENGTH, MAX_TITLE_LENGTH
from charity_cms.errors import DuplicateEntryError, NoFieldsToUpdateError, RecordNotFoundError
from charity_cms.models import AuthorDB
from charity_cms.schemas import PostCreate, PostUpdate
from charity_cms.services import ImageAssetManager, PostService
from tests.fakes import InMemoryStorage, make_post


@pytest.fixture
def assets(memory_storage: InMemoryStorage, mock_post_repo: MagicMock) -> ImageAssetManager:
    """Create an asset manager wired to the mock repository."""
    return ImageAssetManager(memory_storage, is_referenced=mock_post_repo.image_in_use)


@pytest.fixture
def service(mock_post_repo: MagicMock, assets: ImageAssetManager) -> PostService:
    """Create a post service over the mocks."""
    return PostService(mock_post_repo, assets)


def inserted_slugs(repo: MagicMock) -> list[str]:
    return [call.args[0].slug for call in repo.insert.await_args_list]


class TestCreatePost:
    """Tests for PostService.create."""

    async def test_create_derives_slug(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
        sample_author: AuthorDB,
    ) -> None:
        """Test that a new post gets the plain slug and is committed."""
        stored = make_post(status="draft")
        mock_post_repo.insert.return_value = stored
        mock_post_repo.get_with_author.return_value = (stored, sample_author)

        result = await service.create(
            PostCreate(title="Hello, World!", content="First post"),
            author_id=1,
        )

        assert inserted_slugs(mock_post_repo) == ["hello-world"]
        mock_post_repo.slugs_with_prefix.assert_awaited_once_with("hello-world")
        mock_post_repo.commit.assert_awaited_once()
        assert result.slug == "hello-world"
        assert result.author is not None
        assert result.author.name == "Amara Okafor"

    async def test_create_with_taken_slug_gets_suffix(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
        sample_author: AuthorDB,
    ) -> None:
        """Test that a colliding title yields the next free suffix."""
        stored = make_post(id=2, slug="hello-world-1")
        mock_post_repo.slugs_with_prefix.return_value = ["hello-world", "hello-world-tour"]
        mock_post_repo.insert.return_value = stored
        mock_post_repo.get_with_author.return_value = (stored, sample_author)

        await service.create(PostCreate(title="Hello World", content="Again"), author_id=1)

        assert inserted_slugs(mock_post_repo) == ["hello-world-1"]

    async def test_create_with_full_length_title_fits_slug_column(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
        sample_author: AuthorDB,
    ) -> None:
        """Test that a repeated maximum length title yields a storable slug."""
        title = "a" * MAX_TITLE_LENGTH
        stored = make_post(id=2, title=title, slug="a" * (MAX_SLUG_LENGTH - 2) + "-1")
        mock_post_repo.slugs_with_prefix.return_value = [title]
        mock_post_repo.insert.return_value = stored
        mock_post_repo.get_with_author.return_value = (stored, sample_author)

        await service.create(PostCreate(title=title, content="Again"), author_id=1)

        (slug,) = inserted_slugs(mock_post_repo)
        assert len(slug) <= MAX_SLUG_LENGTH
        assert slug.endswith("-1")
        (prefix,) = mock_post_repo.slugs_with_prefix.await_args.args
        assert slug.startswith(prefix)
        assert title.startswith(prefix)

    async def test_create_retries_on_slug_conflict(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
        sample_author: AuthorDB,
    ) -> None:
        """Test that losing a slug race re-derives from fresh data."""
        stored = make_post(slug="hello-world-1")
        mock_post_repo.slugs_with_prefix.side_effect = [[], ["hello-world"]]
        mock_post_repo.insert.side_effect = [DuplicateEntryError(), stored]
        mock_post_repo.get_with_author.return_value = (stored, sample_author)

        result = await service.create(
            PostCreate(title="Hello World", content="Body"),
            author_id=1,
        )

        assert inserted_slugs(mock_post_repo) == ["hello-world", "hello-world-1"]
        assert result.slug == "hello-world-1"

    async def test_create_gives_up_after_max_retries(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
    ) -> None:
        """Test that persistent conflicts surface as DuplicateEntryError."""
        mock_post_repo.insert.side_effect = DuplicateEntryError()

        with pytest.raises(DuplicateEntryError):
            await service.create(PostCreate(title="Busy", content="Body"), author_id=1)

        assert mock_post_repo.insert.await_count == settings.SLUG_MAX_RETRIES
        mock_post_repo.commit.assert_not_awaited()


class TestUpdatePost:
    """Tests for PostService.update."""

    async def test_unchanged_title_keeps_slug(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
        sample_author: AuthorDB,
    ) -> None:
        """Test that re-sending the same title does not query or change the slug."""
        current = make_post(title="A", slug="a")
        mock_post_repo.get_or_raise.return_value = current
        mock_post_repo.get_with_author.return_value = (current, sample_author)

        await service.update(1, PostUpdate.model_validate({"title": "A"}))

        mock_post_repo.slugs_with_prefix.assert_not_awaited()
        values = mock_post_repo.update_fields.await_args.args[1]
        assert "slug" not in values

    async def test_new_title_rederives_slug_excluding_self(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
        sample_author: AuthorDB,
    ) -> None:
        """Test that a new title looks up taken slugs without the post itself."""
        current = make_post(title="A", slug="a")
        mock_post_repo.get_or_raise.return_value = current
        mock_post_repo.slugs_with_prefix.return_value = ["b"]
        mock_post_repo.get_with_author.return_value = (
            make_post(title="B", slug="b-1"),
            sample_author,
        )

        result = await service.update(1, PostUpdate.model_validate({"title": "B"}))

        mock_post_repo.slugs_with_prefix.assert_awaited_once_with("b", exclude_id=1)
        assert mock_post_repo.update_fields.await_args.args[1]["slug"] == "b-1"
        assert result.slug == "b-1"

    async def test_empty_patch(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
    ) -> None:
        """Test that an empty patch fails before anything is written."""
        mock_post_repo.get_or_raise.return_value = make_post()

        with pytest.raises(NoFieldsToUpdateError):
            await service.update(1, PostUpdate())

        mock_post_repo.update_fields.assert_not_awaited()
        mock_post_repo.commit.assert_not_awaited()

    async def test_missing_post(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
    ) -> None:
        """Test that updating an unknown id is not found."""
        mock_post_repo.get_or_raise.side_effect = RecordNotFoundError("Post not found")

        with pytest.raises(RecordNotFoundError):
            await service.update(99, PostUpdate.model_validate({"status": "draft"}))

    async def test_row_vanished_during_update(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
    ) -> None:
        """Test that a concurrent delete surfaces as not found."""
        mock_post_repo.get_or_raise.return_value = make_post()
        mock_post_repo.update_fields.return_value = False

        with pytest.raises(RecordNotFoundError):
            await service.update(1, PostUpdate.model_validate({"status": "draft"}))

    async def test_replacing_image_removes_old_file_after_commit(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
        memory_storage: InMemoryStorage,
        sample_author: AuthorDB,
    ) -> None:
        """Test that the old file goes only once the new reference is committed."""
        memory_storage.files.update({"old.jpg": b"old", "new.jpg": b"new"})
        mock_post_repo.get_or_raise.return_value = make_post(featured_image="/posts/images/old.jpg")
        mock_post_repo.get_with_author.return_value = (
            make_post(featured_image="/posts/images/new.jpg"),
            sample_author,
        )

        files_at_commit: list[set[str]] = []

        async def record_commit() -> None:
            files_at_commit.append(set(memory_storage.files))

        mock_post_repo.commit.side_effect = record_commit

        await service.update(
            1,
            PostUpdate.model_validate({"featuredImage": "/posts/images/new.jpg"}),
        )

        assert files_at_commit == [{"old.jpg", "new.jpg"}]
        assert memory_storage.files == {"new.jpg": b"new"}

    async def test_failed_commit_keeps_old_file(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
        memory_storage: InMemoryStorage,
    ) -> None:
        """Test that no file is removed when the write does not commit."""
        memory_storage.files["old.jpg"] = b"old"
        mock_post_repo.get_or_raise.return_value = make_post(featured_image="/posts/images/old.jpg")
        mock_post_repo.commit.side_effect = DuplicateEntryError()

        with pytest.raises(DuplicateEntryError):
            await service.update(1, PostUpdate.model_validate({"featuredImage": None}))

        assert memory_storage.files == {"old.jpg": b"old"}


class TestDeletePost:
    """Tests for PostService.delete."""

    async def test_delete_removes_local_image(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
        memory_storage: InMemoryStorage,
    ) -> None:
        """Test that deleting a post releases its locally stored image."""
        memory_storage.files["abc.jpg"] = b"img"
        mock_post_repo.delete.return_value = make_post(featured_image="/images/abc.jpg")

        await service.delete(1)

        mock_post_repo.commit.assert_awaited_once()
        assert memory_storage.removed == ["abc.jpg"]

    async def test_second_delete_is_not_found(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
        memory_storage: InMemoryStorage,
    ) -> None:
        """Test that deleting the same id twice fails cleanly the second time."""
        memory_storage.files["abc.jpg"] = b"img"
        mock_post_repo.delete.side_effect = [make_post(featured_image="/images/abc.jpg"), None]

        await service.delete(1)
        with pytest.raises(RecordNotFoundError):
            await service.delete(1)

        assert memory_storage.removed == ["abc.jpg"]

    async def test_delete_keeps_external_image(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
        memory_storage: InMemoryStorage,
    ) -> None:
        """Test that an external featured image is never touched."""
        memory_storage.files["abc.jpg"] = b"img"
        mock_post_repo.delete.return_value = make_post(
            featured_image="https://cdn.example.org/images/abc.jpg",
        )

        await service.delete(1)

        assert memory_storage.files == {"abc.jpg": b"img"}
        mock_post_repo.image_in_use.assert_not_awaited()

    async def test_delete_keeps_image_shared_with_other_post(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
        memory_storage: InMemoryStorage,
    ) -> None:
        """Test that a file another post still uses is kept."""
        memory_storage.files["abc.jpg"] = b"img"
        mock_post_repo.delete.return_value = make_post(featured_image="/posts/images/abc.jpg")
        mock_post_repo.image_in_use.return_value = True

        await service.delete(1)

        assert memory_storage.files == {"abc.jpg": b"img"}


class TestReadPosts:
    """Tests for listing and single-post reads."""

    async def test_list_reports_pagination(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
        sample_author: AuthorDB,
    ) -> None:
        """Test that items and pagination metadata are assembled."""
        mock_post_repo.list_posts.return_value = ([(make_post(), sample_author)], 25)

        result = await service.list_posts(status="published", search="food", page=2, limit=10)

        mock_post_repo.list_posts.assert_awaited_once_with("published", "food", 2, 10)
        assert result.items[0].author == "Amara Okafor"
        assert result.pagination.current_page == 2
        assert result.pagination.total_pages == 3
        assert result.pagination.total == 25

    async def test_page_past_end_is_empty(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
    ) -> None:
        """Test that a page beyond the last has no items but keeps the total."""
        mock_post_repo.list_posts.return_value = ([], 25)

        result = await service.list_posts(status=None, page=9, limit=10)

        assert result.items == []
        assert result.pagination.total == 25
        assert result.pagination.total_pages == 3

    async def test_get_published_missing(self, service: PostService) -> None:
        """Test that an unknown or draft slug is not found."""
        with pytest.raises(RecordNotFoundError) as exc_info:
            await service.get_published("draft-post")
        assert exc_info.value.detail == "Post not found"

    async def test_get_admin_without_author(
        self,
        service: PostService,
        mock_post_repo: MagicMock,
    ) -> None:
        """Test that a post whose author is gone still loads."""
        mock_post_repo.get_with_author.return_value = (make_post(author_id=None), None)

        result = await service.get_admin(1)

        assert result.author is None
        assert result.author_id is None
