"""project_insights tool -- analytics, health score, and trend for one project."""

from __future__ import annotations

from dataclasses import asdict

from mcp.server.fastmcp import Context

from project_finder.analytics.health import health_score
from project_finder.analytics.trend import trend
from project_finder.errors import ProjectFinderError
from project_finder.models import CanonicalProject, ProjectAnalytics
from project_finder.tools._helpers import get_context


def analytics_to_dict(analytics: ProjectAnalytics) -> dict[str, object]:
    data = asdict(analytics)
    data["ci_status"] = analytics.ci_status.value
    return data


async def project_insights(
    url: str,
    platform: str,
    ctx: Context,
    name: str = "",
) -> dict[str, object]:
    """Load activity analytics, a 0-100 health score, and a trend for a project.

    GitHub, GitLab, and Codeberg projects get live data. Projects from other
    platforms get zeroed analytics with "is_placeholder": true.

    Args:
        url: Project URL as returned by discover_projects.
        platform: Platform label as returned by discover_projects
            (e.g. "GitHub", "GitLab", "Codeberg", "NPM").
        name: Optional display name.

    Returns:
        Dict with success, analytics (12 weekly activity points, oldest
        first), health_score, trend ("up" | "down" | "stable"),
        trend_confidence (0..1), and trend_change_percent.
    """
    try:
        app = get_context(ctx)
        project = CanonicalProject(name=name or url, url=url, platform=platform)
        analytics = await app.analytics.get_analytics(project)
        result = trend(analytics)
        return {
            "success": True,
            "name": project.name,
            "url": url,
            "platform": platform,
            "analytics": analytics_to_dict(analytics),
            "health_score": health_score(analytics),
            "trend": result.trend.value,
            "trend_confidence": round(result.confidence, 3),
            "trend_change_percent": round(result.change_percent, 1),
        }
    except ProjectFinderError as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in project_insights: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}
