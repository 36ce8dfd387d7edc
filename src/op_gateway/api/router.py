"""Auth API router: login, logout, me, change-password.

The session lives in the httpOnly ``auth-token`` cookie set on login.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.op_common.database import get_db_session
from src.op_common.errors import InternalError
from src.op_common.response import ApiResponse, success_response
from src.op_gateway.auth.dependencies import get_current_member
from src.op_gateway.auth.schemas import AuthUser, ChangePasswordRequest, LoginRequest
from src.op_gateway.auth.service import AuthService
from src.op_gateway.session.cookies import clear_session_cookie, set_session_cookie
from src.op_team.domain.models import TeamMember

router = APIRouter(prefix="/auth", tags=["auth"])
_service = AuthService()


@router.post("/login", summary="Team member login")
async def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    member, token = await _service.login(body.email, body.password, db)
    set_session_cookie(response, token)
    return success_response(
        user=AuthUser.from_domain(member).model_dump(),
        message="Login successful",
    )


@router.post("/logout", summary="Clear the session cookie")
async def logout(response: Response) -> ApiResponse:
    clear_session_cookie(response)
    return success_response(message="Logout successful")


@router.get("/me", summary="Current session user")
async def me(
    current_member: Annotated[TeamMember, Depends(get_current_member)],
) -> ApiResponse:
    return success_response(user=AuthUser.from_domain(current_member).model_dump())


@router.post("/change-password", summary="Set a new password")
async def change_password(
    body: ChangePasswordRequest,
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    updated = await _service.change_password(current_member.id, body.new_password, db)
    if not updated:
        raise InternalError("Could not change password")
    return success_response(message="Password changed")
