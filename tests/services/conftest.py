# tests/services/conftest.py
"""Pytest fixtures for services tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from charity_cms.models import AuthorDB
from charity_cms.repositories import PostRepository


@pytest.fixture
def sample_author() -> AuthorDB:
    """Create an author for post rows."""
    return AuthorDB(
        id=1,
        first_name="Amara",
        last_name="Okafor",
        email="amara@example.org",
        role="admin",
    )


@pytest.fixture
def mock_post_repo() -> MagicMock:
    """Create a mock post repository with async methods."""
    repo = MagicMock(spec=PostRepository)
    repo.slugs_with_prefix = AsyncMock(return_value=[])
    repo.insert = AsyncMock()
    repo.commit = AsyncMock()
    repo.get_with_author = AsyncMock(return_value=None)
    repo.get_published_by_slug = AsyncMock(return_value=None)
    repo.get_or_raise = AsyncMock()
    repo.update_fields = AsyncMock(return_value=True)
    repo.delete = AsyncMock(return_value=None)
    repo.list_posts = AsyncMock(return_value=([], 0))
    repo.image_in_use = AsyncMock(return_value=False)
    return repo
