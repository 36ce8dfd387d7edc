"""Domain models for op_project: dataclasses plus derived figures."""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any

from src.op_common.datetime_utils import days_until


@dataclass
class ProjectFilters:
    status: list[str] = field(default_factory=list)
    health: list[str] = field(default_factory=list)
    search: str | None = None
    limit: int | None = None
    offset: int | None = None

    def as_key(self) -> dict[str, Any]:
        """Filter identity used in cache keys (unset fields dropped)."""
        return {k: v for k, v in asdict(self).items() if v not in (None, [])}


@dataclass
class ProjectSummary:
    id: str
    name: str
    description: str | None
    project_type: str | None
    status: str
    health: str | None
    progress_percentage: int
    total_budget: float
    used_budget: float
    start_date: date | None
    estimated_end_date: date | None
    risk_level: str | None
    next_milestone: str | None
    client_id: str | None
    client_name: str | None
    manager_id: str | None
    manager_name: str | None
    team_count: int = 0

    @property
    def budget_utilization(self) -> int:
        """Used budget as a rounded percentage; 0 when there is no budget."""
        if self.total_budget <= 0:
            return 0
        return round(self.used_budget / self.total_budget * 100)

    def days_remaining(self, now: datetime | None = None) -> int | None:
        return days_until(self.estimated_end_date, now)


@dataclass
class ProjectMetrics:
    total_milestones: int = 0
    completed_milestones: int = 0
    total_deliverables: int = 0
    approved_deliverables: int = 0
    active_risks: int = 0


@dataclass
class ProjectDetails:
    project: ProjectSummary
    technologies: list[str]
    metrics: ProjectMetrics
    health_score: int


@dataclass
class DashboardMetrics:
    active: int
    critical: int
    total_budget: float
    avg_progress: int


@dataclass
class ProjectSearchHit:
    id: str
    name: str
    description: str | None
    client_name: str | None


@dataclass
class ProjectBrief:
    id: str
    name: str
    status: str
    health: str | None
    progress_percentage: int
