"""Cache diagnostics endpoints.

GET    /cache/stats          entry counts (valid / expired)
DELETE /cache?pattern=...    manual invalidation
"""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from src.op_cache.dependencies import get_cache
from src.op_cache.ttl_cache import TTLCache
from src.op_common.response import ApiResponse, success_response
from src.op_gateway.auth.dependencies import get_current_member
from src.op_team.domain.models import TeamMember

router = APIRouter(prefix="/cache", tags=["cache"])


@router.get("/stats")
async def cache_stats(
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    cache: Annotated[TTLCache, Depends(get_cache)],
) -> ApiResponse:
    return success_response(asdict(cache.stats()))


@router.delete("")
async def clear_cache(
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    cache: Annotated[TTLCache, Depends(get_cache)],
    pattern: str | None = Query(None, description="Substring to match; omit to clear all"),
) -> ApiResponse:
    removed = cache.clear(pattern)
    return success_response({"removed": removed}, message="Cache cleared")
