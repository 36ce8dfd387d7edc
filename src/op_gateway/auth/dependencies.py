"""FastAPI dependency: get_current_member.

Usage in any protected router:
    from src.op_gateway.auth.dependencies import get_current_member

    @router.get("/protected")
    async def protected(member: TeamMember = Depends(get_current_member)):
        ...
"""

from typing import Annotated

from fastapi import Cookie, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.op_common.database import get_db_session
from src.op_common.errors import InvalidSessionError, SessionMissingError
from src.op_gateway.auth.service import AuthService
from src.op_team.domain.models import TeamMember

_service = AuthService()


async def get_session_token(
    token: Annotated[str | None, Cookie(alias=settings.SESSION_COOKIE_NAME)] = None,
) -> str:
    if not token:
        raise SessionMissingError()
    return token


async def get_current_member(
    token: Annotated[str, Depends(get_session_token)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> TeamMember:
    """Resolve the session cookie to an active TeamMember.

    Raises 401 (SessionMissingError) without a cookie and 401
    (InvalidSessionError) for a bad/expired token or inactive member.
    """
    member = await _service.verify_token(token, db)
    if member is None:
        raise InvalidSessionError()
    return member
