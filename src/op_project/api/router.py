"""op_project REST endpoints.

GET   /projects                  filtered list (cached)
GET   /projects/search           full-text search (cached briefly)
GET   /projects/batch?ids=       lightweight rows for many ids (uncached)
GET   /projects/{project_id}     details + metrics + health score (cached)
PATCH /projects/{project_id}     update fields, invalidates project caches
GET   /dashboard/metrics         dashboard figures (cached)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.op_cache.dependencies import get_cache
from src.op_cache.ttl_cache import TTLCache
from src.op_common.database import get_db_session
from src.op_common.response import ApiResponse, success_response
from src.op_gateway.auth.dependencies import get_current_member
from src.op_project.application.schemas import ProjectBriefItem, ProjectUpdateRequest
from src.op_project.application.service import ProjectQueryService
from src.op_project.domain.models import ProjectFilters
from src.op_team.domain.models import TeamMember

router = APIRouter(tags=["projects"])


def get_project_service(
    cache: Annotated[TTLCache, Depends(get_cache)],
) -> ProjectQueryService:
    return ProjectQueryService(cache)


@router.get("/projects")
async def list_projects(
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[ProjectQueryService, Depends(get_project_service)],
    status: Annotated[list[str], Query()] = [],  # noqa: B006
    health: Annotated[list[str], Query()] = [],  # noqa: B006
    search: str | None = Query(None),
    limit: int | None = Query(None, ge=1, le=200),
    offset: int | None = Query(None, ge=0),
) -> ApiResponse:
    filters = ProjectFilters(
        status=status, health=health, search=search, limit=limit, offset=offset
    )
    items = await service.list_projects(db, filters)
    return success_response([item.model_dump() for item in items])


@router.get("/projects/search")
async def search_projects(
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[ProjectQueryService, Depends(get_project_service)],
    q: str = Query("", description="Search term"),
    limit: int = Query(20, ge=1, le=100),
) -> ApiResponse:
    items = await service.search_projects(db, q, limit)
    return success_response([item.model_dump() for item in items])


@router.get("/projects/batch")
async def batch_projects(
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[ProjectQueryService, Depends(get_project_service)],
    ids: Annotated[list[str], Query()] = [],  # noqa: B006
) -> ApiResponse:
    briefs = await service.batch_load_projects(db, ids)
    return success_response([ProjectBriefItem.from_domain(b).model_dump() for b in briefs])


@router.get("/projects/{project_id}")
async def get_project(
    project_id: str,
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[ProjectQueryService, Depends(get_project_service)],
) -> ApiResponse:
    details = await service.get_project_details(db, project_id)
    return success_response(details.model_dump())


@router.patch("/projects/{project_id}")
async def update_project(
    project_id: str,
    body: ProjectUpdateRequest,
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[ProjectQueryService, Depends(get_project_service)],
) -> ApiResponse:
    changes = body.model_dump(exclude_unset=True)
    details = await service.update_project(db, project_id, changes)
    return success_response(details.model_dump(), message="Project updated")


@router.get("/dashboard/metrics")
async def dashboard_metrics(
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[ProjectQueryService, Depends(get_project_service)],
) -> ApiResponse:
    metrics = await service.get_dashboard_metrics(db)
    return success_response(metrics.model_dump())
