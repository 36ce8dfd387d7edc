"""Unit tests for AuthService (mocked repository)."""

from unittest.mock import AsyncMock

import pytest

from src.op_common.errors import InvalidCredentialsError
from src.op_gateway.auth.jwt_handler import create_session_token, decode_session_token
from src.op_gateway.auth.password import hash_password, verify_password
from src.op_gateway.auth.service import AuthService
from src.op_team.domain.models import MemberCredentials
from tests.factories import make_member


@pytest.fixture
def repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(repo: AsyncMock) -> AuthService:
    return AuthService(repo=repo)


class TestLogin:
    async def test_success_returns_member_and_token(self, service, repo, mock_db) -> None:
        repo.get_credentials_by_email.return_value = MemberCredentials(
            member=make_member(), password_hash=hash_password("Secret123")
        )

        member, token = await service.login("  Ana@OpOne.com ", "Secret123", mock_db)

        assert member.id == "member-1"
        assert decode_session_token(token)["sub"] == "member-1"
        repo.get_credentials_by_email.assert_awaited_once_with(mock_db, "ana@opone.com")
        repo.touch_last_access.assert_awaited_once_with(mock_db, "member-1")
        mock_db.commit.assert_awaited_once()

    async def test_unknown_email_raises(self, service, repo, mock_db) -> None:
        repo.get_credentials_by_email.return_value = None
        with pytest.raises(InvalidCredentialsError):
            await service.login("nobody@opone.com", "Secret123", mock_db)

    async def test_member_without_hash_raises(self, service, repo, mock_db) -> None:
        repo.get_credentials_by_email.return_value = MemberCredentials(
            member=make_member(), password_hash=None
        )
        with pytest.raises(InvalidCredentialsError):
            await service.login("ana@opone.com", "Secret123", mock_db)

    async def test_wrong_password_raises(self, service, repo, mock_db) -> None:
        repo.get_credentials_by_email.return_value = MemberCredentials(
            member=make_member(), password_hash=hash_password("Secret123")
        )
        with pytest.raises(InvalidCredentialsError):
            await service.login("ana@opone.com", "wrong", mock_db)
        repo.touch_last_access.assert_not_awaited()


class TestVerifyToken:
    async def test_valid_token_returns_member(self, service, repo, mock_db) -> None:
        repo.get_active_by_id.return_value = make_member()
        token = create_session_token("member-1", "ana@opone.com")

        member = await service.verify_token(token, mock_db)

        assert member is not None
        repo.get_active_by_id.assert_awaited_once_with(mock_db, "member-1")

    async def test_garbage_token_returns_none(self, service, repo, mock_db) -> None:
        assert await service.verify_token("garbage", mock_db) is None
        repo.get_active_by_id.assert_not_awaited()

    async def test_inactive_member_returns_none(self, service, repo, mock_db) -> None:
        repo.get_active_by_id.return_value = None
        token = create_session_token("member-1", "ana@opone.com")
        assert await service.verify_token(token, mock_db) is None


class TestChangePassword:
    async def test_stores_new_hash_and_commits(self, service, repo, mock_db) -> None:
        repo.update_password.return_value = True

        assert await service.change_password("member-1", "NewSecret1", mock_db) is True

        _, member_id, stored_hash = repo.update_password.await_args.args
        assert member_id == "member-1"
        assert verify_password("NewSecret1", stored_hash)
        mock_db.commit.assert_awaited_once()

    async def test_failure_rolls_back(self, service, repo, mock_db) -> None:
        repo.update_password.side_effect = RuntimeError("db gone")
        with pytest.raises(RuntimeError):
            await service.change_password("member-1", "NewSecret1", mock_db)
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()
