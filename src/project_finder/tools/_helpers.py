"""Helpers for extracting AppContext from FastMCP Context."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import Context

if TYPE_CHECKING:
    from project_finder.server import AppContext


def get_context(ctx: Context) -> AppContext:
    """Extract AppContext from FastMCP's lifespan context.

    Raises TypeError if the lifespan context is not an AppContext instance.
    """
    from project_finder.server import AppContext

    app = ctx.request_context.lifespan_context
    if not isinstance(app, AppContext):
        msg = (
            f"Expected AppContext in lifespan_context, got {type(app).__name__}. "
            "Is the server configured with app_lifespan?"
        )
        raise TypeError(msg)
    return app


def parse_characteristics(characteristics: list[str] | str | None) -> tuple[str, ...]:
    """Accept a list of ids or one comma-separated string."""
    if not characteristics:
        return ()
    if isinstance(characteristics, str):
        return tuple(part.strip() for part in characteristics.split(",") if part.strip())
    return tuple(characteristics)
