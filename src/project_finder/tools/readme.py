"""project_readme tool -- fetch a discovered repository's README."""

from __future__ import annotations

from mcp.server.fastmcp import Context

from project_finder.tools._helpers import get_context

# Max chars of README to return (enough for LLM context)
_MAX_README_CHARS = 10_000


async def project_readme(
    url: str,
    ctx: Context,
) -> dict[str, object]:
    """Fetch the README of a GitHub, GitLab, or Codeberg project.

    Use this when the user wants to know what a discovered project is
    about beyond its one-line description.

    Args:
        url: Repository URL as returned by discover_projects
            (e.g. "https://github.com/BurntSushi/ripgrep").

    Returns:
        Dict with success, url, readme (markdown, first 10000 chars), and
        truncated (whether the README was longer than that).
    """
    try:
        app = get_context(ctx)
        readme = await app.readme.fetch_readme(url)
        if readme is None:
            return {
                "success": False,
                "error": (
                    f"Could not fetch README from {url}. "
                    "Check that the URL is a GitHub, GitLab, or Codeberg repository."
                ),
            }
        return {
            "success": True,
            "url": url,
            "readme": readme[:_MAX_README_CHARS],
            "truncated": len(readme) > _MAX_README_CHARS,
        }
    except Exception as exc:
        await ctx.error(f"Unexpected error in project_readme: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}
