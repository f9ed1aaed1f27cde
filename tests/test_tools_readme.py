"""Tests for the project_readme MCP tool (tools/readme.py)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from project_finder.server import AppContext
from project_finder.tools.readme import project_readme


def _make_ctx(readme: str | None | BaseException) -> MagicMock:
    ctx = MagicMock()
    ctx.info = AsyncMock()
    ctx.error = AsyncMock()

    app = MagicMock(spec=AppContext)
    app.readme = MagicMock()
    if isinstance(readme, BaseException):
        app.readme.fetch_readme = AsyncMock(side_effect=readme)
    else:
        app.readme.fetch_readme = AsyncMock(return_value=readme)
    ctx.request_context.lifespan_context = app
    return ctx


class TestProjectReadme:
    async def test_success(self):
        ctx = _make_ctx("# bat\n\nA cat clone with wings.")

        result = await project_readme("https://github.com/sharkdp/bat", ctx)

        assert result == {
            "success": True,
            "url": "https://github.com/sharkdp/bat",
            "readme": "# bat\n\nA cat clone with wings.",
            "truncated": False,
        }

    async def test_long_readme_is_truncated(self):
        ctx = _make_ctx("x" * 12_000)
        result = await project_readme("https://github.com/a/b", ctx)
        assert len(result["readme"]) == 10_000
        assert result["truncated"] is True

    async def test_missing_readme(self):
        ctx = _make_ctx(None)
        result = await project_readme("https://www.npmjs.com/package/express", ctx)
        assert result["success"] is False
        assert "Could not fetch README" in result["error"]

    async def test_unexpected_error(self):
        ctx = _make_ctx(RuntimeError("boom"))
        result = await project_readme("https://github.com/a/b", ctx)
        assert result == {"success": False, "error": "Internal error: RuntimeError"}
        ctx.error.assert_awaited_once()
