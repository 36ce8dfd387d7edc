"""ProjectQueryService: cache-aside reads and invalidating writes for projects.

Key spaces (all in the shared TTLCache):
  projects_{filters json}     list pages            PROJECT_LIST_TTL_SECONDS
  project_details_{id}        one project           PROJECT_DETAILS_TTL_SECONDS
  search_{term}_{limit}       search results        PROJECT_SEARCH_TTL_SECONDS
  dashboard_metrics           dashboard figures     DASHBOARD_METRICS_TTL_SECONDS

Every write calls invalidate_project_cache() before returning.
"""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.op_cache.cache_aside import MISSING, cached_query, invalidate, make_cache_key
from src.op_cache.ttl_cache import TTLCache
from src.op_common.errors import ProjectNotFoundError
from src.op_project.application.schemas import (
    DashboardMetricsResponse,
    ProjectDetailResponse,
    ProjectListItem,
    ProjectSearchItem,
)
from src.op_project.domain.health import aggregate_dashboard_metrics, calculate_health_score
from src.op_project.domain.models import ProjectBrief, ProjectDetails, ProjectFilters, ProjectMetrics
from src.op_project.domain.repository import ProjectRepositoryProtocol
from src.op_project.infrastructure.persistence import ProjectRepository

logger = logging.getLogger(__name__)

PROJECTS_PREFIX = "projects"
DETAILS_PREFIX = "project_details"
SEARCH_PREFIX = "search"
DASHBOARD_KEY = "dashboard_metrics"

BATCH_SIZE = 10


def _chunks(items: list[str], size: int) -> list[list[str]]:
    return [items[i:i + size] for i in range(0, len(items), size)]


class ProjectQueryService:
    def __init__(
        self,
        cache: TTLCache,
        repo: ProjectRepositoryProtocol | None = None,
    ) -> None:
        self._cache = cache
        self._repo: ProjectRepositoryProtocol = repo or ProjectRepository()

    async def list_projects(
        self, db: AsyncSession, filters: ProjectFilters | None = None
    ) -> list[ProjectListItem]:
        filters = filters or ProjectFilters()

        async def fetch() -> list[ProjectListItem]:
            projects = await self._repo.list_projects(db, filters)
            logger.debug("Loaded %d projects from store", len(projects))
            return [ProjectListItem.from_domain(p) for p in projects]

        return await cached_query(
            self._cache,
            make_cache_key(PROJECTS_PREFIX, filters.as_key()),
            fetch,
            settings.PROJECT_LIST_TTL_SECONDS,
        )

    async def get_project_details(
        self, db: AsyncSession, project_id: str
    ) -> ProjectDetailResponse:
        async def fetch() -> ProjectDetailResponse:
            project = await self._repo.get_project(db, project_id)
            if project is None:
                raise ProjectNotFoundError(project_id)
            technologies = await self._repo.list_technologies(db, project_id)
            metrics = await self._load_metrics(db, project_id)
            details = ProjectDetails(
                project=project,
                technologies=technologies,
                metrics=metrics or ProjectMetrics(),
                health_score=calculate_health_score(project, metrics),
            )
            return ProjectDetailResponse.from_details(details)

        return await cached_query(
            self._cache,
            f"{DETAILS_PREFIX}_{project_id}",
            fetch,
            settings.PROJECT_DETAILS_TTL_SECONDS,
        )

    async def _load_metrics(self, db: AsyncSession, project_id: str) -> ProjectMetrics | None:
        try:
            return await self._repo.get_project_metrics(db, project_id)
        except SQLAlchemyError as exc:
            logger.warning("Project metrics unavailable for %s: %s", project_id, exc)
            await db.rollback()
            return None

    async def get_dashboard_metrics(self, db: AsyncSession) -> DashboardMetricsResponse:
        cached = self._cache.get(DASHBOARD_KEY, MISSING)
        if cached is not MISSING:
            return cached  # type: ignore[no-any-return]

        try:
            metrics = await self._repo.get_dashboard_metrics(db)
        except SQLAlchemyError as exc:
            # Fallback figures are computed from rows and are not cached.
            logger.warning("Dashboard metrics function failed, aggregating rows: %s", exc)
            await db.rollback()
            projects = await self._repo.list_active_projects(db)
            return DashboardMetricsResponse.from_domain(aggregate_dashboard_metrics(projects))

        response = DashboardMetricsResponse.from_domain(metrics)
        self._cache.set(DASHBOARD_KEY, response, settings.DASHBOARD_METRICS_TTL_SECONDS)
        return response

    async def search_projects(
        self, db: AsyncSession, term: str, limit: int = 20
    ) -> list[ProjectSearchItem]:
        if not term.strip():
            return []

        key = f"{SEARCH_PREFIX}_{term}_{limit}"
        cached = self._cache.get(key, MISSING)
        if cached is not MISSING:
            return cached  # type: ignore[no-any-return]

        try:
            hits = await self._repo.search_projects(db, term, limit)
        except SQLAlchemyError as exc:
            logger.warning("Search function unavailable, using ILIKE fallback: %s", exc)
            await db.rollback()
            hits = await self._repo.search_projects_fallback(db, term, limit)
            return [ProjectSearchItem.from_domain(h) for h in hits]

        items = [ProjectSearchItem.from_domain(h) for h in hits]
        self._cache.set(key, items, settings.PROJECT_SEARCH_TTL_SECONDS)
        return items

    async def batch_load_projects(
        self, db: AsyncSession, project_ids: list[str]
    ) -> list[ProjectBrief]:
        """Load lightweight rows for many ids, BATCH_SIZE ids per query."""
        loaded: list[ProjectBrief] = []
        for batch in _chunks(project_ids, BATCH_SIZE):
            loaded.extend(await self._repo.get_projects_by_ids(db, batch))
        return loaded

    async def update_project(
        self, db: AsyncSession, project_id: str, changes: dict[str, Any]
    ) -> ProjectDetailResponse:
        try:
            updated = await self._repo.update_project(db, project_id, changes)
            if not updated:
                raise ProjectNotFoundError(project_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        self.invalidate_project_cache(project_id)
        logger.info("Project updated: %s fields=%s", project_id, sorted(changes))
        return await self.get_project_details(db, project_id)

    def invalidate_project_cache(self, project_id: str | None = None) -> int:
        """Drop cached project data.

        With an id: every key containing the id, plus list/search/dashboard
        pages (they may include the project without naming it). Without an
        id: every project key space.
        """
        broad = (f"{PROJECTS_PREFIX}_", f"{SEARCH_PREFIX}_", "dashboard_")
        if project_id:
            removed = invalidate(self._cache, project_id, *broad)
        else:
            removed = invalidate(self._cache, "project_", *broad)
        logger.debug("Project cache invalidated (%s): %d keys", project_id or "all", removed)
        return removed
