"""list_sources tool -- show every known source and whether it is enabled."""

from __future__ import annotations

from mcp.server.fastmcp import Context

from project_finder.sources.catalog import DEFAULT_SOURCE_IDS, SOURCES
from project_finder.tools._helpers import get_context


async def list_sources(ctx: Context) -> list[dict[str, object]]:
    """List the code hosts and registries project-finder knows about.

    Returns:
        One entry per source in search order, with id, label, kind,
        implemented, enabled, and api_url. Enable a different set with the
        PROJECT_FINDER_SOURCES environment variable (comma-separated ids).
    """
    app = get_context(ctx)
    enabled = set(app.settings.sources if app.settings.sources is not None else DEFAULT_SOURCE_IDS)
    return [
        {
            "id": info.id,
            "label": info.label,
            "kind": info.kind.value,
            "implemented": info.implemented,
            "enabled": info.id in enabled,
            "api_url": info.api_url,
        }
        for info in SOURCES
    ]
