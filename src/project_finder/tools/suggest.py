"""suggest_projects tool -- AI-generated project ideas."""

from __future__ import annotations

from mcp.server.fastmcp import Context

from project_finder.errors import ProjectFinderError
from project_finder.models import Preference
from project_finder.query import translate, validate
from project_finder.tools._helpers import get_context, parse_characteristics


async def suggest_projects(
    ctx: Context,
    languages: str = "",
    topics: str = "",
    characteristics: list[str] | None = None,
) -> dict[str, object]:
    """Ask an AI model to suggest projects for the same preferences as discover_projects.

    Suggestions come with platform "AI Suggestion", zero statistics, and a
    "difficulty:<level>" tag. They are not checked against any registry, so
    verify the URLs before recommending them. Requires GEMINI_API_KEY.

    Args:
        languages: Comma-separated programming languages.
        topics: Comma-separated topics.
        characteristics: Characteristic ids (see discover_projects).

    Returns:
        Dict with success and projects.
    """
    try:
        app = get_context(ctx)
        preference = Preference.parse(
            languages=languages,
            topics=topics,
            characteristics=parse_characteristics(characteristics),
        )
        validate(translate(preference))
        projects = await app.suggester.suggest(preference)
        return {"success": True, "projects": [p.to_dict() for p in projects]}
    except ProjectFinderError as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in suggest_projects: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}
