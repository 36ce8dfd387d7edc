"""API tests for the auth routes and the session cookie."""

from unittest.mock import AsyncMock, patch

from httpx import AsyncClient

from src.op_common.errors import InvalidCredentialsError
from src.op_gateway.api import router as auth_router
from src.op_gateway.auth import dependencies as auth_dependencies
from src.op_gateway.auth.jwt_handler import create_session_token
from tests.factories import make_member


class TestLogin:
    async def test_login_sets_session_cookie(self, client: AsyncClient) -> None:
        member = make_member()
        login = AsyncMock(return_value=(member, create_session_token(member.id, member.email)))

        with patch.object(auth_router._service, "login", login):
            resp = await client.post(
                "/api/auth/login", json={"email": "ana@opone.com", "password": "Secret123"}
            )

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Login successful"
        assert body["user"]["id"] == "member-1"
        assert "data" not in body
        cookie = resp.headers["set-cookie"]
        assert cookie.startswith("auth-token=")
        assert "HttpOnly" in cookie
        assert "samesite=lax" in cookie.lower()
        assert "Max-Age=28800" in cookie

    async def test_bad_credentials_are_401(self, client: AsyncClient) -> None:
        login = AsyncMock(side_effect=InvalidCredentialsError())

        with patch.object(auth_router._service, "login", login):
            resp = await client.post(
                "/api/auth/login", json={"email": "ana@opone.com", "password": "nope"}
            )

        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "Incorrect email or password"}
        assert "set-cookie" not in resp.headers

    async def test_malformed_body_is_400(self, client: AsyncClient) -> None:
        resp = await client.post("/api/auth/login", json={"email": "not-an-email"})
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "Invalid data"}


class TestSession:
    async def test_me_without_cookie(self, client: AsyncClient) -> None:
        resp = await client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json()["message"] == "Token not found"

    async def test_me_with_invalid_token(self, client: AsyncClient) -> None:
        client.cookies.set("auth-token", "garbage")
        resp = await client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid token"

    async def test_me_with_valid_session(self, client: AsyncClient) -> None:
        verify = AsyncMock(return_value=make_member())
        client.cookies.set("auth-token", create_session_token("member-1", "ana@opone.com"))

        with patch.object(auth_dependencies._service, "verify_token", verify):
            resp = await client.get("/api/auth/me")

        assert resp.status_code == 200
        assert resp.json()["user"]["email"] == "ana@opone.com"

    async def test_logout_expires_cookie(self, client: AsyncClient) -> None:
        resp = await client.post("/api/auth/logout")
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Logout successful"}
        assert "Max-Age=0" in resp.headers["set-cookie"]

    async def test_request_id_header(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.json()["status"] == "ok"
        assert resp.headers["X-Request-ID"].startswith("req_")


class TestChangePassword:
    async def test_short_password_rejected(self, auth_client: AsyncClient) -> None:
        resp = await auth_client.post("/api/auth/change-password", json={"new_password": "short"})
        assert resp.status_code == 400

    async def test_success(self, auth_client: AsyncClient) -> None:
        change = AsyncMock(return_value=True)
        with patch.object(auth_router._service, "change_password", change):
            resp = await auth_client.post(
                "/api/auth/change-password", json={"new_password": "NewSecret123"}
            )
        assert resp.status_code == 200
        assert change.await_args.args[:2] == ("member-1", "NewSecret123")
