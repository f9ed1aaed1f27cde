"""Tests for the list_sources MCP tool (tools/sources.py)."""

from __future__ import annotations

from unittest.mock import MagicMock

from project_finder.server import AppContext
from project_finder.settings import Settings
from project_finder.tools.sources import list_sources


def _make_ctx(settings: Settings) -> MagicMock:
    ctx = MagicMock()
    app = MagicMock(spec=AppContext)
    app.settings = settings
    ctx.request_context.lifespan_context = app
    return ctx


class TestListSources:
    async def test_defaults(self):
        entries = await list_sources(_make_ctx(Settings()))

        assert len(entries) == 15
        by_id = {e["id"]: e for e in entries}
        assert by_id["github"]["enabled"] is True
        assert by_id["github"]["kind"] == "code_hosting"
        assert by_id["pypi"]["implemented"] is False
        assert by_id["pypi"]["enabled"] is False
        assert by_id["f-droid"]["kind"] == "mobile_open_source"

    async def test_configured_sources(self):
        entries = await list_sources(_make_ctx(Settings(sources=("npm", "pypi"))))
        enabled = [e["id"] for e in entries if e["enabled"]]
        assert enabled == ["npm", "pypi"]
