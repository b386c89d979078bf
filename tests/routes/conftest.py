# tests/routes/conftest.py
"""Pytest fixtures for route tests."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from charity_cms.dependencies import get_asset_manager, get_post_service
from charity_cms.main import app
from charity_cms.managers import create_access_token
from charity_cms.schemas import AuthorSummary, PostResponse
from charity_cms.services import ImageAssetManager, PostService
from tests.fakes import InMemoryStorage


@pytest.fixture
def admin_access_token() -> str:
    """Create an admin access token for testing."""
    return create_access_token(user_id=1, role="admin", expires_delta=timedelta(minutes=30))


@pytest.fixture
def user_access_token() -> str:
    """Create a non-admin access token for testing."""
    return create_access_token(user_id=2, role="user", expires_delta=timedelta(minutes=30))


@pytest.fixture
def admin_auth_headers(admin_access_token: str) -> dict[str, str]:
    """Create auth headers with an admin access token."""
    return {"Authorization": f"Bearer {admin_access_token}"}


@pytest.fixture
def auth_headers(user_access_token: str) -> dict[str, str]:
    """Create auth headers with a regular user's access token."""
    return {"Authorization": f"Bearer {user_access_token}"}


@pytest.fixture
def sample_post_response() -> PostResponse:
    """Create the response a service call would produce."""
    now = datetime(2025, 4, 25, 10, 0, tzinfo=UTC)
    return PostResponse(
        id=1,
        title="Hello, World!",
        slug="hello-world",
        content="First post",
        status="published",
        tags=["news"],
        author_id=1,
        author=AuthorSummary(name="Amara Okafor", email="amara@example.org"),
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def mock_post_service() -> MagicMock:
    """Create a mock post service."""
    service = MagicMock(spec=PostService)
    service.list_posts = AsyncMock()
    service.get_published = AsyncMock()
    service.get_admin = AsyncMock()
    service.create = AsyncMock()
    service.update = AsyncMock()
    service.delete = AsyncMock(return_value=None)
    return service


@pytest.fixture
def route_assets(memory_storage: InMemoryStorage) -> ImageAssetManager:
    """Create an asset manager over in-memory storage."""
    return ImageAssetManager(memory_storage)


@pytest.fixture
async def client(
    mock_post_service: MagicMock,
    route_assets: ImageAssetManager,
) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client with the service layer replaced."""
    app.dependency_overrides[get_post_service] = lambda: mock_post_service
    app.dependency_overrides[get_asset_manager] = lambda: route_assets
    app.state.limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    app.state.limiter.enabled = True
    app.dependency_overrides.clear()
