"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.op_project.domain.models import (
    DashboardMetrics,
    ProjectBrief,
    ProjectFilters,
    ProjectMetrics,
    ProjectSearchHit,
    ProjectSummary,
)


class ProjectRepositoryProtocol(Protocol):
    async def list_projects(
        self, db: AsyncSession, filters: ProjectFilters
    ) -> list[ProjectSummary]: ...

    async def get_project(
        self, db: AsyncSession, project_id: str
    ) -> ProjectSummary | None: ...

    async def list_technologies(self, db: AsyncSession, project_id: str) -> list[str]: ...

    async def get_project_metrics(
        self, db: AsyncSession, project_id: str
    ) -> ProjectMetrics | None: ...

    async def get_dashboard_metrics(self, db: AsyncSession) -> DashboardMetrics: ...

    async def list_active_projects(self, db: AsyncSession) -> list[ProjectSummary]: ...

    async def search_projects(
        self, db: AsyncSession, term: str, limit: int
    ) -> list[ProjectSearchHit]: ...

    async def search_projects_fallback(
        self, db: AsyncSession, term: str, limit: int
    ) -> list[ProjectSearchHit]: ...

    async def get_projects_by_ids(
        self, db: AsyncSession, project_ids: list[str]
    ) -> list[ProjectBrief]: ...

    async def update_project(
        self, db: AsyncSession, project_id: str, changes: dict[str, Any]
    ) -> bool: ...
