"""discover_projects tool -- search every enabled source at once."""

from __future__ import annotations

from mcp.server.fastmcp import Context

from project_finder.discovery.relevance import relevance_score
from project_finder.errors import ProjectFinderError
from project_finder.models import Preference
from project_finder.query import translate
from project_finder.tools._helpers import get_context, parse_characteristics


async def discover_projects(
    ctx: Context,
    languages: str = "",
    topics: str = "",
    characteristics: list[str] | None = None,
    limit: int = 50,
    strict_match: bool = False,
) -> dict[str, object]:
    """Find open-source projects matching languages, topics, and characteristics.

    Queries all enabled code hosts and package registries concurrently.
    A failing source does not fail the search: its error is reported in
    "partial_errors" and the other sources' results are returned.

    Args:
        languages: Comma-separated programming languages (e.g. "rust, go").
            The first one steers language-specific registries.
        topics: Comma-separated topics (e.g. "cli, parser").
        characteristics: Characteristic ids such as "beginner-friendly",
            "actively-maintained" (sort by recency), or "large-community"
            (sort by popularity).
        limit: Maximum number of projects to return (default 50).
        strict_match: Keep only projects whose language, tags, or description
            match the request (falling back to language-or-topic matches when
            nothing matches everything), and add a 0-100 "relevance_score" to
            each project.

    Returns:
        Dict with success, total (before the limit), projects (ranked by
        stars or downloads, then recency), and partial_errors.
    """
    try:
        app = get_context(ctx)
        preference = Preference.parse(
            languages=languages,
            topics=topics,
            characteristics=parse_characteristics(characteristics),
        )
        result = await app.discovery.discover(preference, strict=strict_match)
        records = result.records[: max(limit, 0)]
        projects = [record.to_dict() for record in records]
        if strict_match:
            params = translate(preference)
            for record, data in zip(records, projects, strict=True):
                data["relevance_score"] = relevance_score(record, params)
        return {
            "success": True,
            "total": len(result.records),
            "projects": projects,
            "partial_errors": list(result.partial_errors),
        }
    except ProjectFinderError as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in discover_projects: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}
