"""Pydantic schemas for op_project API requests and responses."""

from dataclasses import asdict
from datetime import date

from pydantic import BaseModel, Field

from src.op_project.domain.models import (
    DashboardMetrics,
    ProjectBrief,
    ProjectDetails,
    ProjectSearchHit,
    ProjectSummary,
)


class ProjectListItem(BaseModel):
    id: str
    name: str
    description: str | None
    project_type: str | None
    status: str
    health: str | None
    progress_percentage: int
    total_budget: float
    used_budget: float
    start_date: str | None
    estimated_end_date: str | None
    risk_level: str | None
    next_milestone: str | None
    client_id: str | None
    client_name: str | None
    manager_id: str | None
    manager_name: str | None
    team_count: int
    budget_utilization: int
    days_remaining: int | None

    @classmethod
    def from_domain(cls, p: ProjectSummary) -> "ProjectListItem":
        return cls(
            id=p.id,
            name=p.name,
            description=p.description,
            project_type=p.project_type,
            status=p.status,
            health=p.health,
            progress_percentage=p.progress_percentage,
            total_budget=p.total_budget,
            used_budget=p.used_budget,
            start_date=p.start_date.isoformat() if p.start_date else None,
            estimated_end_date=(
                p.estimated_end_date.isoformat() if p.estimated_end_date else None
            ),
            risk_level=p.risk_level,
            next_milestone=p.next_milestone,
            client_id=p.client_id,
            client_name=p.client_name,
            manager_id=p.manager_id,
            manager_name=p.manager_name,
            team_count=p.team_count,
            budget_utilization=p.budget_utilization,
            days_remaining=p.days_remaining(),
        )


class ProjectMetricsOut(BaseModel):
    total_milestones: int
    completed_milestones: int
    total_deliverables: int
    approved_deliverables: int
    active_risks: int


class ProjectDetailResponse(ProjectListItem):
    technologies: list[str]
    metrics: ProjectMetricsOut
    health_score: int

    @classmethod
    def from_details(cls, d: ProjectDetails) -> "ProjectDetailResponse":
        base = ProjectListItem.from_domain(d.project).model_dump()
        return cls(
            **base,
            technologies=d.technologies,
            metrics=ProjectMetricsOut(**asdict(d.metrics)),
            health_score=d.health_score,
        )


class DashboardMetricsResponse(BaseModel):
    active: int
    critical: int
    total_budget: float
    avg_progress: int

    @classmethod
    def from_domain(cls, m: DashboardMetrics) -> "DashboardMetricsResponse":
        return cls(**asdict(m))


class ProjectSearchItem(BaseModel):
    id: str
    name: str
    description: str | None
    client_name: str | None

    @classmethod
    def from_domain(cls, h: ProjectSearchHit) -> "ProjectSearchItem":
        return cls(**asdict(h))


class ProjectUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    status: str | None = None
    health: str | None = None
    progress_percentage: int | None = Field(None, ge=0, le=100)
    total_budget: float | None = Field(None, ge=0)
    used_budget: float | None = Field(None, ge=0)
    estimated_end_date: date | None = None
    risk_level: str | None = None
    next_milestone: str | None = None


class ProjectBriefItem(BaseModel):
    id: str
    name: str
    status: str
    health: str | None
    progress_percentage: int

    @classmethod
    def from_domain(cls, b: ProjectBrief) -> "ProjectBriefItem":
        return cls(**asdict(b))
