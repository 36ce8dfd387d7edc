"""op_team REST endpoints.

GET /team-members      active members ordered by name
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.op_cache.dependencies import get_cache
from src.op_cache.ttl_cache import TTLCache
from src.op_common.database import get_db_session
from src.op_common.response import ApiResponse, success_response
from src.op_gateway.auth.dependencies import get_current_member
from src.op_team.application.service import TeamApplicationService
from src.op_team.domain.models import TeamMember

router = APIRouter(prefix="/team-members", tags=["team"])


def get_team_service(
    cache: Annotated[TTLCache, Depends(get_cache)],
) -> TeamApplicationService:
    return TeamApplicationService(cache)


@router.get("")
async def list_team_members(
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[TeamApplicationService, Depends(get_team_service)],
) -> ApiResponse:
    members = await service.list_active_members(db)
    return success_response([m.model_dump() for m in members])
