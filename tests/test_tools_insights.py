"""Tests for the project_insights MCP tool (tools/insights.py)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from project_finder.analytics.activity import zero_weeks
from project_finder.errors import AnalyticsError
from project_finder.models import CiStatus, ProjectAnalytics, WeeklyActivity
from project_finder.server import AppContext
from project_finder.tools.insights import analytics_to_dict, project_insights


def _make_ctx(analytics: ProjectAnalytics | BaseException) -> MagicMock:
    ctx = MagicMock()
    ctx.info = AsyncMock()
    ctx.error = AsyncMock()

    app = MagicMock(spec=AppContext)
    app.analytics = MagicMock()
    if isinstance(analytics, BaseException):
        app.analytics.get_analytics = AsyncMock(side_effect=analytics)
    else:
        app.analytics.get_analytics = AsyncMock(return_value=analytics)
    ctx.request_context.lifespan_context = app
    return ctx


def _rising() -> ProjectAnalytics:
    weeks = tuple(WeeklyActivity(date=f"w{i}", commits=2 if i < 6 else 6) for i in range(12))
    return ProjectAnalytics(stars=10, weekly_activity=weeks, ci_status=CiStatus.PASSING)


class TestAnalyticsToDict:
    def test_serializable_shape(self):
        data = analytics_to_dict(_rising())
        assert data["ci_status"] == "passing"
        assert data["weekly_activity"][0] == {"date": "w0", "commits": 2}
        assert data["community_profile"]["has_readme"] is False


class TestProjectInsights:
    async def test_success(self):
        ctx = _make_ctx(_rising())

        result = await project_insights("https://github.com/a/b", "GitHub", ctx, name="a/b")

        assert result["success"] is True
        assert result["name"] == "a/b"
        assert result["platform"] == "GitHub"
        assert result["trend"] == "up"
        assert result["trend_change_percent"] == 200.0
        assert 0 <= result["trend_confidence"] <= 1
        assert 0 <= result["health_score"] <= 100
        assert len(result["analytics"]["weekly_activity"]) == 12

        project = ctx.request_context.lifespan_context.analytics.get_analytics.await_args.args[0]
        assert project.url == "https://github.com/a/b"
        assert project.platform == "GitHub"

    async def test_name_defaults_to_url(self):
        placeholder = ProjectAnalytics(weekly_activity=zero_weeks(), is_placeholder=True)
        ctx = _make_ctx(placeholder)
        result = await project_insights("https://crates.io/crates/serde", "Crates.io", ctx)
        assert result["name"] == "https://crates.io/crates/serde"
        assert result["analytics"]["is_placeholder"] is True
        assert result["trend"] == "stable"

    async def test_analytics_error(self):
        ctx = _make_ctx(AnalyticsError("Could not load analytics for a/b from GitHub: Timeout"))
        result = await project_insights("https://github.com/a/b", "GitHub", ctx)
        assert result["success"] is False
        assert "Could not load analytics" in result["error"]

    async def test_unexpected_error(self):
        ctx = _make_ctx(ValueError("bad"))
        result = await project_insights("https://github.com/a/b", "GitHub", ctx)
        assert result == {"success": False, "error": "Internal error: ValueError"}
        ctx.error.assert_awaited_once()
