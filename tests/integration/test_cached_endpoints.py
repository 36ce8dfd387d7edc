"""Cached read endpoints and the cache diagnostics API."""

from unittest.mock import AsyncMock

from httpx import AsyncClient

from src.main import app
from src.op_project.api.router import get_project_service
from src.op_project.application.service import ProjectQueryService
from src.op_project.domain.models import DashboardMetrics, ProjectBrief
from src.op_team.api.router import get_team_service
from src.op_team.application.service import TeamApplicationService
from tests.factories import make_member, make_project


def _stub_team_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.list_active.return_value = [make_member(), make_member(id="member-2", full_name="Bruno")]
    app.dependency_overrides[get_team_service] = lambda: TeamApplicationService(
        app.state.cache, repo=repo
    )
    return repo


class TestTeamMembers:
    async def test_requires_session(self, client: AsyncClient) -> None:
        resp = await client.get("/api/team-members")
        assert resp.status_code == 401

    async def test_list_is_cached(self, auth_client: AsyncClient) -> None:
        repo = _stub_team_repo()

        first = await auth_client.get("/api/team-members")
        second = await auth_client.get("/api/team-members")

        assert first.status_code == 200
        assert set(first.json()) == {"success", "data"}
        assert [m["id"] for m in first.json()["data"]] == ["member-1", "member-2"]
        assert second.json() == first.json()
        repo.list_active.assert_awaited_once()


class TestProjects:
    async def test_update_invalidates_dashboard(self, auth_client: AsyncClient) -> None:
        repo = AsyncMock()
        repo.get_dashboard_metrics.return_value = DashboardMetrics(
            active=1, critical=0, total_budget=1000.0, avg_progress=80
        )
        repo.update_project.return_value = True
        repo.get_project.return_value = make_project()
        repo.list_technologies.return_value = []
        repo.get_project_metrics.return_value = None
        app.dependency_overrides[get_project_service] = lambda: ProjectQueryService(
            app.state.cache, repo=repo
        )

        await auth_client.get("/api/dashboard/metrics")
        await auth_client.get("/api/dashboard/metrics")
        assert repo.get_dashboard_metrics.await_count == 1

        resp = await auth_client.patch("/api/projects/p-1", json={"progress_percentage": 90})
        assert resp.status_code == 200
        assert resp.json()["data"]["id"] == "p-1"

        await auth_client.get("/api/dashboard/metrics")
        assert repo.get_dashboard_metrics.await_count == 2

    async def test_batch_route_loads_in_chunks(self, auth_client: AsyncClient) -> None:
        repo = AsyncMock()
        repo.get_projects_by_ids.side_effect = lambda db, ids: [
            ProjectBrief(id=i, name=i, status="Executando", health=None, progress_percentage=0)
            for i in ids
        ]
        app.dependency_overrides[get_project_service] = lambda: ProjectQueryService(
            app.state.cache, repo=repo
        )
        ids = [f"p-{i}" for i in range(12)]

        resp = await auth_client.get("/api/projects/batch", params={"ids": ids})

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert [p["id"] for p in data] == ids
        assert data[0]["health"] is None
        assert repo.get_projects_by_ids.await_count == 2

    async def test_unknown_project_is_404(self, auth_client: AsyncClient) -> None:
        repo = AsyncMock()
        repo.get_project.return_value = None
        app.dependency_overrides[get_project_service] = lambda: ProjectQueryService(
            app.state.cache, repo=repo
        )

        resp = await auth_client.get("/api/projects/ghost")

        assert resp.status_code == 404
        assert resp.json()["success"] is False


class TestCacheApi:
    async def test_stats_reflect_entries(self, auth_client: AsyncClient) -> None:
        app.state.cache.set("projects_{}", [])
        app.state.cache.set("dashboard_metrics", {})

        resp = await auth_client.get("/api/cache/stats")

        data = resp.json()["data"]
        assert data["total"] == 2
        assert data["valid"] == 2
        assert data["expired"] == 0

    async def test_delete_by_pattern(self, auth_client: AsyncClient) -> None:
        app.state.cache.set("projects_{}", [])
        app.state.cache.set("projects_{\"limit\":5}", [])
        app.state.cache.set("dashboard_metrics", {})

        resp = await auth_client.delete("/api/cache", params={"pattern": "projects_"})

        assert resp.json()["data"] == {"removed": 2}
        assert len(app.state.cache) == 1

    async def test_delete_all(self, auth_client: AsyncClient) -> None:
        app.state.cache.set("a", 1)
        app.state.cache.set("b", 2)
        resp = await auth_client.delete("/api/cache")
        assert resp.json()["data"] == {"removed": 2}

    async def test_requires_session(self, client: AsyncClient) -> None:
        assert (await client.get("/api/cache/stats")).status_code == 401
