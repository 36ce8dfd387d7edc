"""Project health score and dashboard fallback aggregation.

Score starts at 100 and loses points for:
  - schedule: past estimated end −30, fewer than 7 days left −15
  - budget:   utilization > 100% −25, > 90% −10
  - risks:    −5 per active risk, capped at −20
  - progress: under 50% while "Executando" −15
Never below 0.
"""

from datetime import datetime

from src.op_common.enums import ProjectHealth, ProjectStatus
from src.op_project.domain.models import DashboardMetrics, ProjectMetrics, ProjectSummary


def calculate_health_score(
    project: ProjectSummary,
    metrics: ProjectMetrics | None,
    now: datetime | None = None,
) -> int:
    score = 100

    days_remaining = project.days_remaining(now)
    if days_remaining is not None:
        if days_remaining < 0:
            score -= 30
        elif days_remaining < 7:
            score -= 15

    if project.total_budget > 0:
        utilization = project.used_budget / project.total_budget * 100
        if utilization > 100:
            score -= 25
        elif utilization > 90:
            score -= 10

    if metrics is not None and metrics.active_risks > 0:
        score -= min(metrics.active_risks * 5, 20)

    if project.progress_percentage < 50 and project.status == ProjectStatus.EXECUTANDO.value:
        score -= 15

    return max(score, 0)


def aggregate_dashboard_metrics(projects: list[ProjectSummary]) -> DashboardMetrics:
    """Dashboard figures computed from active project rows."""
    if not projects:
        return DashboardMetrics(active=0, critical=0, total_budget=0, avg_progress=0)
    return DashboardMetrics(
        active=sum(1 for p in projects if p.status == ProjectStatus.EXECUTANDO.value),
        critical=sum(1 for p in projects if p.health == ProjectHealth.CRITICO.value),
        total_budget=sum(p.total_budget or 0 for p in projects),
        avg_progress=round(sum(p.progress_percentage or 0 for p in projects) / len(projects)),
    )
