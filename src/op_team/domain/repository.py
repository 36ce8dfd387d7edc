"""Repository Protocol: dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.op_team.domain.models import MemberCredentials, TeamMember


class TeamMemberRepositoryProtocol(Protocol):
    async def get_credentials_by_email(
        self, db: AsyncSession, email: str
    ) -> MemberCredentials | None: ...

    async def get_active_by_id(
        self, db: AsyncSession, member_id: str
    ) -> TeamMember | None: ...

    async def list_active(self, db: AsyncSession) -> list[TeamMember]: ...

    async def touch_last_access(self, db: AsyncSession, member_id: str) -> None: ...

    async def update_password(
        self, db: AsyncSession, member_id: str, password_hash: str
    ) -> bool: ...
