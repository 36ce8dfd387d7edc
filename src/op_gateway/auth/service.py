"""Auth service: login, token verification, password change.

All DB operations use the injected AsyncSession. Writes are committed here
because each operation is a single statement.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.op_common.errors import AppError, InvalidCredentialsError
from src.op_gateway.auth.jwt_handler import create_session_token, decode_session_token
from src.op_gateway.auth.password import hash_password, verify_password
from src.op_team.domain.models import TeamMember
from src.op_team.domain.repository import TeamMemberRepositoryProtocol
from src.op_team.infrastructure.persistence import TeamMemberRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Holds no per-request state; one instance serves every request."""

    def __init__(self, repo: TeamMemberRepositoryProtocol | None = None) -> None:
        self._repo: TeamMemberRepositoryProtocol = repo or TeamMemberRepository()

    async def login(
        self, email: str, password: str, db: AsyncSession
    ) -> tuple[TeamMember, str]:
        """Authenticate by email and return (member, session_token).

        Unknown email, missing hash and wrong password all raise
        InvalidCredentialsError so callers cannot enumerate accounts.
        """
        creds = await self._repo.get_credentials_by_email(db, email.strip().lower())
        if creds is None or not creds.password_hash:
            raise InvalidCredentialsError()
        if not verify_password(password, creds.password_hash):
            raise InvalidCredentialsError()

        member = creds.member
        await self._repo.touch_last_access(db, member.id)
        await db.commit()

        logger.info("Login: member=%s", member.id)
        return member, create_session_token(member.id, member.email)

    async def verify_token(self, token: str, db: AsyncSession) -> TeamMember | None:
        """Return the active member behind *token*, or None."""
        try:
            payload = decode_session_token(token)
        except AppError:
            return None
        return await self._repo.get_active_by_id(db, payload["sub"])

    async def change_password(
        self, member_id: str, new_password: str, db: AsyncSession
    ) -> bool:
        try:
            updated = await self._repo.update_password(db, member_id, hash_password(new_password))
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return updated
