"""compare_projects tool -- side-by-side view of two discovered projects."""

from __future__ import annotations

import asyncio

from mcp.server.fastmcp import Context

from project_finder.analytics.compare import compare_projects as compare
from project_finder.analytics.health import health_score
from project_finder.analytics.trend import trend
from project_finder.errors import ProjectFinderError
from project_finder.models import CanonicalProject, ProjectAnalytics
from project_finder.tools._helpers import get_context


async def compare_projects(
    first: dict[str, object],
    second: dict[str, object],
    ctx: Context,
    include_analytics: bool = True,
) -> dict[str, object]:
    """Compare two projects: shared tags, community size, and recent activity.

    Args:
        first: A project object exactly as returned by discover_projects.
        second: Another project object from discover_projects.
        include_analytics: Also load analytics for both projects (default
            True) to compare commits, health scores, and trends.

    Returns:
        Dict with success, common_tags, only_first, only_second, community
        and activity figures as [first, second] pairs, and, when analytics
        are included, health_scores and trends pairs.
    """
    try:
        app = get_context(ctx)
        a = CanonicalProject.from_dict(first)
        b = CanonicalProject.from_dict(second)
        if not a.url or not b.url:
            return {"success": False, "error": "Both projects need a 'url'."}

        analytics: tuple[ProjectAnalytics | None, ProjectAnalytics | None] = (None, None)
        if include_analytics:
            analytics = tuple(
                await asyncio.gather(
                    app.analytics.get_analytics(a),
                    app.analytics.get_analytics(b),
                )
            )

        comparison = compare(a, b, *analytics)
        result: dict[str, object] = {
            "success": True,
            "first": comparison.first,
            "second": comparison.second,
            "common_tags": list(comparison.common_tags),
            "only_first": list(comparison.only_first),
            "only_second": list(comparison.only_second),
            "community": {k: list(v) for k, v in comparison.community.items()},
            "activity": {k: list(v) for k, v in comparison.activity.items()},
        }
        if analytics[0] is not None and analytics[1] is not None:
            result["health_scores"] = [health_score(analytics[0]), health_score(analytics[1])]
            result["trends"] = [trend(analytics[0]).trend.value, trend(analytics[1]).trend.value]
        return result
    except ProjectFinderError as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in compare_projects: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}
