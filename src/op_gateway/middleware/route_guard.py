"""Session route guard for page routes.

Rules (API routes, static assets and docs are skipped):
  - /login: pass, unless a valid session exists → redirect /dashboard
  - protected path without cookie → redirect /login
  - protected path with an invalid/expired token → redirect /login and
    delete the cookie
  - otherwise pass

Only the token itself (signature + exp) is checked here; member lookups
happen in the get_current_member dependency of the API routes.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from config.settings import settings
from src.op_common.errors import AppError
from src.op_gateway.auth.jwt_handler import decode_session_token

PUBLIC_ROUTES = frozenset({"/login"})
LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"

_SKIPPED_PREFIXES = (
    "/api",
    "/_next/static",
    "/_next/image",
    "/favicon.ico",
    "/static",
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
)


def _is_skipped(path: str) -> bool:
    return any(path == p or path.startswith(p + "/") for p in _SKIPPED_PREFIXES)


def _has_valid_session(token: str | None) -> bool:
    if not token:
        return False
    try:
        decode_session_token(token)
    except AppError:
        return False
    return True


class RouteGuardMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if _is_skipped(path):
            return await call_next(request)

        token = request.cookies.get(settings.SESSION_COOKIE_NAME)

        if path in PUBLIC_ROUTES:
            if _has_valid_session(token):
                return RedirectResponse(HOME_PATH, status_code=307)
            return await call_next(request)

        if not token:
            return RedirectResponse(LOGIN_PATH, status_code=307)

        if not _has_valid_session(token):
            response = RedirectResponse(LOGIN_PATH, status_code=307)
            response.delete_cookie(settings.SESSION_COOKIE_NAME)
            return response

        return await call_next(request)
