"""API-level fixtures.

The database session and repositories are replaced with mocks, so these
tests run the full middleware/routing/exception-handler stack without a
running PostgreSQL.
"""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from src.main import app
from src.op_common.database import get_db_session
from src.op_gateway.auth.dependencies import get_current_member
from src.op_gateway.auth.jwt_handler import create_session_token
from tests.factories import make_member


@pytest.fixture
def mock_db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture(autouse=True)
def override_db(mock_db: AsyncMock) -> None:
    async def _session() -> AsyncGenerator[AsyncMock, None]:
        yield mock_db

    app.dependency_overrides[get_db_session] = _session


@pytest.fixture
def auth_client(client: AsyncClient) -> AsyncClient:
    """Client carrying a valid session cookie; the member lookup is stubbed."""
    member = make_member()
    app.dependency_overrides[get_current_member] = lambda: member
    client.cookies.set("auth-token", create_session_token(member.id, member.email))
    return client
