import contextlib
from collections.abc import AsyncIterator, Callable

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app


@contextlib.asynccontextmanager
async def _client_with_overrides(overrides: dict[Callable, Callable] | None = None) -> AsyncIterator[AsyncClient]:
    app.dependency_overrides.update(overrides or {})
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client_factory():
    """Build a test client with FastAPI dependency overrides applied."""
    return _client_with_overrides


@pytest.fixture
async def client():
    """Create a test client."""
    async with _client_with_overrides() as ac:
        yield ac
