# tests/main/conftest.py
"""Pytest fixtures for application-level tests."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from charity_cms.main import app
from charity_cms.managers import limiter


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing."""
    limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    limiter.enabled = True
