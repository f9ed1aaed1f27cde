"""Tests for the GitLab search adapter (sources/gitlab.py)."""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx
import pytest

from project_finder.errors import SourceError
from project_finder.models import Preference
from project_finder.query import translate
from project_finder.sources.gitlab import GitLabSource, gitlab_language


def _source(payload: object, status: int = 200, token: str = "") -> GitLabSource:
    client = AsyncMock(spec=httpx.AsyncClient)
    client.get = AsyncMock(return_value=httpx.Response(status, json=payload))
    return GitLabSource(client, token=token)


class TestGitLabLanguage:
    @pytest.mark.parametrize(
        ("given", "expected"),
        [("c#", "csharp"), ("c++", "cpp"), ("python", "python"), (None, None)],
    )
    def test_aliases(self, given, expected):
        assert gitlab_language(given) == expected


class TestBuildParams:
    def test_language_and_search(self):
        params = translate(Preference.parse(languages="C#", topics="game"))
        q = _source([]).build_params(params)
        assert q["with_programming_language"] == "csharp"
        assert q["search"] == "game"
        assert q["visibility"] == "public"
        assert "order_by" not in q

    def test_recent_orders_by_activity(self):
        params = translate(
            Preference.parse(languages="go", characteristics=["actively-maintained"])
        )
        q = _source([]).build_params(params)
        assert q["order_by"] == "last_activity_at"
        assert q["sort"] == "desc"

    def test_popular_orders_by_stars(self):
        params = translate(Preference.parse(languages="go", characteristics=["large-community"]))
        assert _source([]).build_params(params)["order_by"] == "star_count"


class TestFetch:
    async def test_maps_projects(self):
        payload = [
            {
                "path_with_namespace": "inkscape/inkscape",
                "web_url": "https://gitlab.com/inkscape/inkscape",
                "description": "Vector graphics editor",
                "topics": ["graphics", "cpp"],
                "star_count": 3000,
                "forks_count": 900,
                "open_issues_count": 1200,
                "namespace": {"name": "Inkscape"},
                "last_activity_at": "2026-02-01T00:00:00Z",
            }
        ]
        [project] = await _source(payload).fetch(translate(Preference.parse(topics="graphics")))
        assert project.name == "inkscape/inkscape"
        assert project.platform == "GitLab"
        assert project.language == "Cpp"
        assert project.stars == 3000
        assert project.open_issues == 1200
        assert project.owner == "Inkscape"
        assert project.updated_at == "2026-02-01T00:00:00Z"

    async def test_requested_language_wins(self):
        payload = [{"web_url": "https://gitlab.com/a/b", "topics": ["python"]}]
        [project] = await _source(payload).fetch(translate(Preference.parse(languages="rust")))
        assert project.language == "Rust"

    async def test_open_issues_from_statistics(self):
        payload = [{"web_url": "https://gitlab.com/a/b", "statistics": {"open_issues_count": 4}}]
        [project] = await _source(payload).fetch(translate(Preference.parse(topics="x")))
        assert project.open_issues == 4

    async def test_private_token_header(self):
        source = _source([], token="glpat-1")
        await source.fetch(translate(Preference.parse(topics="x")))
        assert source.http.get.call_args.kwargs["headers"] == {"PRIVATE-TOKEN": "glpat-1"}

    async def test_object_payload_is_malformed(self):
        with pytest.raises(SourceError, match="Malformed response"):
            await _source({"error": "x"}).fetch(translate(Preference.parse(topics="x")))
