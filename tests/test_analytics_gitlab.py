"""Tests for GitLab analytics (analytics/gitlab.py)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import httpx
import pytest

from project_finder.analytics.gitlab import GitLabAnalytics
from project_finder.errors import SourceError
from project_finder.models import CanonicalProject, CiStatus

PROJECT = "https://gitlab.com/api/v4/projects/group%2Fsub%2Fproject"


def _client(routes: dict[str, httpx.Response]) -> AsyncMock:
    async def fake_get(url, params=None, headers=None, timeout=None):
        return routes.get(url, httpx.Response(404))

    client = AsyncMock(spec=httpx.AsyncClient)
    client.get = AsyncMock(side_effect=fake_get)
    return client


def _project() -> CanonicalProject:
    return CanonicalProject(
        name="group/sub/project",
        url="https://gitlab.com/group/sub/project/-/tree/main",
        platform="GitLab",
    )


def _routes() -> dict[str, httpx.Response]:
    yesterday = (datetime.now(tz=UTC) - timedelta(days=1)).isoformat()
    return {
        PROJECT: httpx.Response(
            200,
            json={
                "star_count": 42,
                "forks_count": 7,
                "open_issues_count": 5,
                "readme_url": "https://gitlab.com/group/sub/project/-/blob/main/README.md",
                "license": {"key": "mit"},
                "default_branch": "main",
                "last_activity_at": "2026-01-01T00:00:00Z",
            },
        ),
        f"{PROJECT}/repository/commits": httpx.Response(
            200,
            json=[{"committed_date": yesterday}, {"committed_date": yesterday}],
        ),
        f"{PROJECT}/repository/contributors": httpx.Response(
            200,
            json=[{"name": "x", "commits": 5}, {"name": "y", "commits": 50}],
        ),
        f"{PROJECT}/languages": httpx.Response(200, json={"Go": 80.04, "Shell": 19.96}),
        f"{PROJECT}/merge_requests": httpx.Response(200, json=[{"iid": 1}, {"iid": 2}, {"iid": 3}]),
        f"{PROJECT}/pipelines": httpx.Response(200, json=[{"status": "failed"}]),
    }


class TestGitLabAnalytics:
    async def test_full_analytics(self):
        result = await GitLabAnalytics(_client(_routes())).fetch(_project())

        assert result.stars == 42
        assert result.forks == 7
        assert result.open_issues == 5
        assert result.pull_requests == 3
        assert result.contributors == 2
        assert result.top_contributors[0].name == "y"
        assert result.weekly_activity[-1].commits == 2
        assert result.monthly_commits == 2
        assert result.total_commits == 55
        assert result.language_distribution == {"Go": 80.0, "Shell": 20.0}
        assert result.community_profile.has_readme is True
        assert result.community_profile.has_license is True
        assert result.ci_status is CiStatus.FAILING

    async def test_sends_private_token(self):
        client = _client(_routes())
        await GitLabAnalytics(client, token="glpat-x").fetch(_project())
        assert client.get.call_args_list[0].kwargs["headers"] == {"PRIVATE-TOKEN": "glpat-x"}

    async def test_secondary_failures_leave_defaults(self):
        routes = {PROJECT: _routes()[PROJECT]}
        result = await GitLabAnalytics(_client(routes)).fetch(_project())

        assert result.stars == 42
        assert result.pull_requests == 0
        assert result.total_commits == 0
        assert result.last_commit == "2026-01-01T00:00:00Z"
        assert result.ci_status is CiStatus.UNKNOWN

    async def test_project_failure_raises(self):
        routes = {PROJECT: httpx.Response(500)}
        with pytest.raises(SourceError) as exc_info:
            await GitLabAnalytics(_client(routes)).fetch(_project())
        assert exc_info.value.platform == "GitLab"
