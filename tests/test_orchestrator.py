"""Tests for the concurrent source fan-out (discovery/orchestrator.py)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from project_finder.discovery.orchestrator import gather_outcomes
from project_finder.errors import SourceError
from project_finder.models import (
    CanonicalProject,
    FetchFailure,
    FetchSuccess,
    QueryParams,
    SourceInfo,
    SourceKind,
)

# ── Helpers ───────────────────────────────────────────────────────


def _adapter(label: str, result: list[CanonicalProject] | BaseException) -> MagicMock:
    adapter = MagicMock()
    adapter.info = SourceInfo(id=label.lower(), label=label, kind=SourceKind.CODE_HOSTING)
    if isinstance(result, BaseException):
        adapter.fetch = AsyncMock(side_effect=result)
    else:
        adapter.fetch = AsyncMock(return_value=result)
    return adapter


def _project(url: str, platform: str = "GitHub") -> CanonicalProject:
    return CanonicalProject(name=url.rsplit("/", 1)[-1], url=url, platform=platform)


_PARAMS = QueryParams(languages=("rust",))


class TestGatherOutcomes:
    async def test_success_outcomes_in_declaration_order(self):
        a = _adapter("GitHub", [_project("https://github.com/a/a")])
        b = _adapter("GitLab", [])

        outcomes = await gather_outcomes([a, b], _PARAMS)

        assert outcomes == [
            FetchSuccess("GitHub", (_project("https://github.com/a/a"),)),
            FetchSuccess("GitLab", ()),
        ]
        a.fetch.assert_awaited_once_with(_PARAMS)

    async def test_source_error_becomes_failure_with_status(self):
        a = _adapter("GitHub", SourceError("GitHub", "API request failed: Forbidden", 403))
        [outcome] = await gather_outcomes([a], _PARAMS)
        assert outcome == FetchFailure("GitHub", "API request failed: Forbidden", 403)

    async def test_unexpected_exception_becomes_failure(self):
        a = _adapter("NPM", KeyError("objects"))
        b = _adapter("Codeberg", RuntimeError())
        first, second = await gather_outcomes([a, b], _PARAMS)
        assert first == FetchFailure("NPM", "'objects'")
        assert second == FetchFailure("Codeberg", "RuntimeError")

    async def test_one_failure_does_not_affect_others(self):
        good = _adapter("GitHub", [_project("https://github.com/a/a")])
        bad = _adapter("GitLab", SourceError("GitLab", "Request timeout"))
        also_good = _adapter("Codeberg", [_project("https://codeberg.org/b/b", "Codeberg")])

        outcomes = await gather_outcomes([good, bad, also_good], _PARAMS)

        assert [type(o) for o in outcomes] == [FetchSuccess, FetchFailure, FetchSuccess]

    async def test_runs_adapters_concurrently(self):
        started: list[str] = []
        release = asyncio.Event()

        async def slow_fetch(label: str) -> list[CanonicalProject]:
            started.append(label)
            await release.wait()
            return []

        async def fetch_github(params: QueryParams) -> list[CanonicalProject]:
            return await slow_fetch("GitHub")

        async def fetch_gitlab(params: QueryParams) -> list[CanonicalProject]:
            return await slow_fetch("GitLab")

        a = _adapter("GitHub", [])
        b = _adapter("GitLab", [])
        a.fetch = fetch_github
        b.fetch = fetch_gitlab

        task = asyncio.create_task(gather_outcomes([a, b], _PARAMS))
        for _ in range(5):
            await asyncio.sleep(0)
        assert started == ["GitHub", "GitLab"]
        release.set()
        assert len(await task) == 2

    async def test_cancellation_propagates(self):
        a = _adapter("GitHub", asyncio.CancelledError())
        with pytest.raises(asyncio.CancelledError):
            await gather_outcomes([a], _PARAMS)

    async def test_no_adapters(self):
        assert await gather_outcomes([], _PARAMS) == []
