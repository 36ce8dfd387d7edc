"""TeamApplicationService: cached listing of active team members."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.op_cache.cache_aside import cached_query, make_cache_key
from src.op_cache.ttl_cache import TTLCache
from src.op_team.application.schemas import TeamMemberItem
from src.op_team.domain.repository import TeamMemberRepositoryProtocol
from src.op_team.infrastructure.persistence import TeamMemberRepository

TEAM_MEMBERS_PREFIX = "team_members"


class TeamApplicationService:
    def __init__(
        self,
        cache: TTLCache,
        repo: TeamMemberRepositoryProtocol | None = None,
    ) -> None:
        self._cache = cache
        self._repo: TeamMemberRepositoryProtocol = repo or TeamMemberRepository()

    async def list_active_members(self, db: AsyncSession) -> list[TeamMemberItem]:
        async def fetch() -> list[TeamMemberItem]:
            members = await self._repo.list_active(db)
            return [TeamMemberItem.from_domain(m) for m in members]

        return await cached_query(self._cache, make_cache_key(TEAM_MEMBERS_PREFIX), fetch)
