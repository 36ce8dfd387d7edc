"""ProjectRepository: concrete implementation of ProjectRepositoryProtocol.

All queries use raw text() SQL against the hosted database.
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
Stored functions (get_project_metrics, get_dashboard_metrics,
search_projects_optimized) are called as table functions.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.op_project.domain.models import (
    DashboardMetrics,
    ProjectBrief,
    ProjectFilters,
    ProjectMetrics,
    ProjectSearchHit,
    ProjectSummary,
)

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_SUMMARY_COLUMNS = """
    p.id, p.name, p.description, p.project_type, p.status, p.health,
    p.progress_percentage, p.total_budget, p.used_budget,
    p.start_date, p.estimated_end_date, p.risk_level, p.next_milestone,
    c.id AS client_id, c.company_name AS client_name,
    m.id AS manager_id, m.full_name AS manager_name,
    (SELECT COUNT(*) FROM project_team_members ptm WHERE ptm.project_id = p.id)
        AS team_count
"""

_SUMMARY_FROM = """
    FROM projects p
    JOIN clients c ON c.id = p.client_id
    LEFT JOIN team_members m ON m.id = p.manager_id
"""

_LIST_PROJECTS_SQL = text(f"""
    SELECT {_SUMMARY_COLUMNS}
    {_SUMMARY_FROM}
    WHERE p.is_active = TRUE
      AND (CAST(:statuses AS TEXT[]) IS NULL OR p.status = ANY(CAST(:statuses AS TEXT[])))
      AND (CAST(:healths AS TEXT[]) IS NULL OR p.health = ANY(CAST(:healths AS TEXT[])))
      AND (CAST(:search AS TEXT) IS NULL OR p.name ILIKE CAST(:search AS TEXT))
    ORDER BY p.updated_at DESC
    LIMIT :limit OFFSET :offset
""")

_GET_PROJECT_SQL = text(f"""
    SELECT {_SUMMARY_COLUMNS}
    {_SUMMARY_FROM}
    WHERE p.id = :project_id
""")

_LIST_ACTIVE_SQL = text(f"""
    SELECT {_SUMMARY_COLUMNS}
    {_SUMMARY_FROM}
    WHERE p.is_active = TRUE
""")

_TECHNOLOGIES_SQL = text("""
    SELECT name FROM project_technologies
    WHERE project_id = :project_id
    ORDER BY name
""")

_PROJECT_METRICS_SQL = text("""
    SELECT total_milestones, completed_milestones,
           total_deliverables, approved_deliverables, active_risks
    FROM get_project_metrics(:project_id)
""")

_DASHBOARD_METRICS_SQL = text("""
    SELECT active_projects, critical_projects, total_budget, avg_progress
    FROM get_dashboard_metrics()
""")

_SEARCH_SQL = text("""
    SELECT id, name, description, client_name
    FROM search_projects_optimized(:search_term, :limit_results)
""")

_SEARCH_FALLBACK_SQL = text("""
    SELECT p.id, p.name, p.description, c.company_name AS client_name
    FROM projects p
    LEFT JOIN clients c ON c.id = p.client_id
    WHERE p.is_active = TRUE
      AND (p.name ILIKE :pattern OR p.description ILIKE :pattern)
    LIMIT :limit
""")

_BY_IDS_SQL = text("""
    SELECT id, name, status, health, progress_percentage
    FROM projects
    WHERE id = ANY(CAST(:ids AS TEXT[]))
""")

# Columns a PATCH may touch; anything else is ignored.
UPDATABLE_COLUMNS = frozenset({
    "name",
    "description",
    "status",
    "health",
    "progress_percentage",
    "total_budget",
    "used_budget",
    "estimated_end_date",
    "risk_level",
    "next_milestone",
})

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_summary(row: Any) -> ProjectSummary:
    return ProjectSummary(
        id=str(row.id),
        name=row.name,
        description=row.description,
        project_type=row.project_type,
        status=row.status,
        health=row.health,
        progress_percentage=row.progress_percentage or 0,
        total_budget=float(row.total_budget or 0),
        used_budget=float(row.used_budget or 0),
        start_date=row.start_date,
        estimated_end_date=row.estimated_end_date,
        risk_level=row.risk_level,
        next_milestone=row.next_milestone,
        client_id=str(row.client_id) if row.client_id else None,
        client_name=row.client_name,
        manager_id=str(row.manager_id) if row.manager_id else None,
        manager_name=row.manager_name,
        team_count=row.team_count or 0,
    )


def _row_to_hit(row: Any) -> ProjectSearchHit:
    return ProjectSearchHit(
        id=str(row.id),
        name=row.name,
        description=row.description,
        client_name=row.client_name,
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ProjectRepository:
    async def list_projects(
        self, db: AsyncSession, filters: ProjectFilters
    ) -> list[ProjectSummary]:
        limit = filters.limit
        if filters.offset and not limit:
            limit = 20
        result = await db.execute(
            _LIST_PROJECTS_SQL,
            {
                "statuses": filters.status or None,
                "healths": filters.health or None,
                "search": f"%{_escape_like(filters.search)}%" if filters.search else None,
                "limit": limit,
                "offset": filters.offset or 0,
            },
        )
        return [_row_to_summary(row) for row in result.fetchall()]

    async def get_project(
        self, db: AsyncSession, project_id: str
    ) -> ProjectSummary | None:
        result = await db.execute(_GET_PROJECT_SQL, {"project_id": project_id})
        row = result.fetchone()
        return _row_to_summary(row) if row else None

    async def list_technologies(self, db: AsyncSession, project_id: str) -> list[str]:
        result = await db.execute(_TECHNOLOGIES_SQL, {"project_id": project_id})
        return [row.name for row in result.fetchall()]

    async def get_project_metrics(
        self, db: AsyncSession, project_id: str
    ) -> ProjectMetrics | None:
        result = await db.execute(_PROJECT_METRICS_SQL, {"project_id": project_id})
        row = result.fetchone()
        if row is None:
            return None
        return ProjectMetrics(
            total_milestones=row.total_milestones or 0,
            completed_milestones=row.completed_milestones or 0,
            total_deliverables=row.total_deliverables or 0,
            approved_deliverables=row.approved_deliverables or 0,
            active_risks=row.active_risks or 0,
        )

    async def get_dashboard_metrics(self, db: AsyncSession) -> DashboardMetrics:
        result = await db.execute(_DASHBOARD_METRICS_SQL)
        row = result.fetchone()
        if row is None:
            return DashboardMetrics(active=0, critical=0, total_budget=0, avg_progress=0)
        return DashboardMetrics(
            active=row.active_projects or 0,
            critical=row.critical_projects or 0,
            total_budget=float(row.total_budget or 0),
            avg_progress=round(row.avg_progress or 0),
        )

    async def list_active_projects(self, db: AsyncSession) -> list[ProjectSummary]:
        result = await db.execute(_LIST_ACTIVE_SQL)
        return [_row_to_summary(row) for row in result.fetchall()]

    async def search_projects(
        self, db: AsyncSession, term: str, limit: int
    ) -> list[ProjectSearchHit]:
        result = await db.execute(
            _SEARCH_SQL, {"search_term": term, "limit_results": limit}
        )
        return [_row_to_hit(row) for row in result.fetchall()]

    async def search_projects_fallback(
        self, db: AsyncSession, term: str, limit: int
    ) -> list[ProjectSearchHit]:
        result = await db.execute(
            _SEARCH_FALLBACK_SQL,
            {"pattern": f"%{_escape_like(term)}%", "limit": limit},
        )
        return [_row_to_hit(row) for row in result.fetchall()]

    async def get_projects_by_ids(
        self, db: AsyncSession, project_ids: list[str]
    ) -> list[ProjectBrief]:
        result = await db.execute(_BY_IDS_SQL, {"ids": project_ids})
        return [
            ProjectBrief(
                id=str(row.id),
                name=row.name,
                status=row.status,
                health=row.health,
                progress_percentage=row.progress_percentage or 0,
            )
            for row in result.fetchall()
        ]

    async def update_project(
        self, db: AsyncSession, project_id: str, changes: dict[str, Any]
    ) -> bool:
        columns = sorted(k for k in changes if k in UPDATABLE_COLUMNS)
        if not columns:
            return await self.get_project(db, project_id) is not None
        assignments = ", ".join(f"{col} = :{col}" for col in columns)
        stmt = text(
            f"UPDATE projects SET {assignments}, updated_at = NOW() WHERE id = :project_id"
        )
        params = {col: changes[col] for col in columns}
        params["project_id"] = project_id
        result = await db.execute(stmt, params)
        return bool(result.rowcount)  # type: ignore[attr-defined]
