"""TeamMemberRepository: concrete implementation of TeamMemberRepositoryProtocol.

Reads go through the ORM mapping; callers own commit/rollback.
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.op_common.datetime_utils import utc_now
from src.op_team.domain.models import MemberCredentials, TeamMember
from src.op_team.infrastructure.db_models import TeamMemberModel


def _to_domain(row: TeamMemberModel) -> TeamMember:
    return TeamMember(
        id=str(row.id),
        full_name=row.full_name,
        email=row.email,
        primary_specialization=row.primary_specialization,
        seniority_level=row.seniority_level,
        profile_photo_url=row.profile_photo_url,
        first_login=row.first_login,
        is_active=row.is_active,
    )


class TeamMemberRepository:
    async def get_credentials_by_email(
        self, db: AsyncSession, email: str
    ) -> MemberCredentials | None:
        result = await db.execute(
            select(TeamMemberModel).where(
                TeamMemberModel.email == email,
                TeamMemberModel.is_active.is_(True),
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return MemberCredentials(member=_to_domain(row), password_hash=row.password_hash)

    async def get_active_by_id(
        self, db: AsyncSession, member_id: str
    ) -> TeamMember | None:
        result = await db.execute(
            select(TeamMemberModel).where(
                TeamMemberModel.id == member_id,
                TeamMemberModel.is_active.is_(True),
            )
        )
        row = result.scalar_one_or_none()
        return _to_domain(row) if row else None

    async def list_active(self, db: AsyncSession) -> list[TeamMember]:
        result = await db.execute(
            select(TeamMemberModel)
            .where(TeamMemberModel.is_active.is_(True))
            .order_by(TeamMemberModel.full_name)
        )
        return [_to_domain(row) for row in result.scalars().all()]

    async def touch_last_access(self, db: AsyncSession, member_id: str) -> None:
        await db.execute(
            update(TeamMemberModel)
            .where(TeamMemberModel.id == member_id)
            .values(last_access=utc_now())
        )

    async def update_password(
        self, db: AsyncSession, member_id: str, password_hash: str
    ) -> bool:
        result = await db.execute(
            update(TeamMemberModel)
            .where(TeamMemberModel.id == member_id)
            .values(password_hash=password_hash, first_login=False)
        )
        return bool(result.rowcount)
