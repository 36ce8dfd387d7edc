"""Shared test fixtures."""

# ruff: noqa: E402  -- settings need JWT_SECRET before the app is imported
import os

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.op_cache.ttl_cache import TTLCache


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    """Fresh cache per test, driven by the fake clock."""
    return TTLCache(default_ttl=120, clock=clock)


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    app.state.cache.clear()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
