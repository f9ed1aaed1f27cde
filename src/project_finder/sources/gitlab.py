"""GitLab project search.

API docs: https://docs.gitlab.com/ee/api/projects.html#list-all-projects
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from project_finder.models import CanonicalProject, QueryParams, SortHint, SourceInfo, SourceKind
from project_finder.sources.base import (
    MAX_RESULTS,
    REQUEST_TIMEOUT,
    as_int,
    get_json,
    malformed,
    unique_tags,
)

_PROJECTS_URL = "https://gitlab.com/api/v4/projects"

INFO = SourceInfo(
    id="gitlab",
    label="GitLab",
    kind=SourceKind.CODE_HOSTING,
    api_url=_PROJECTS_URL,
)

# GitLab spells some languages differently from what users type.
_LANGUAGE_ALIASES: dict[str, str] = {"c#": "csharp", "c++": "cpp"}

_COMMON_LANGUAGES: frozenset[str] = frozenset(
    {
        "python",
        "javascript",
        "java",
        "csharp",
        "cpp",
        "typescript",
        "go",
        "rust",
        "php",
        "ruby",
        "swift",
        "kotlin",
    }
)


def gitlab_language(language: str | None) -> str | None:
    if not language:
        return None
    return _LANGUAGE_ALIASES.get(language, language)


@dataclass
class GitLabSource:
    """Search public GitLab.com projects."""

    http: httpx.AsyncClient
    token: str = ""
    max_results: int = MAX_RESULTS
    timeout: float = REQUEST_TIMEOUT
    info: SourceInfo = INFO

    def build_params(self, params: QueryParams) -> dict[str, object]:
        query: dict[str, object] = {"per_page": self.max_results, "visibility": "public"}
        language = gitlab_language(params.primary_language)
        if language:
            query["with_programming_language"] = language

        search = params.text.strip()
        if search:
            query["search"] = search

        if params.sort is SortHint.RECENT:
            query["order_by"] = "last_activity_at"
        elif params.sort is SortHint.POPULAR or not (search or language):
            query["order_by"] = "star_count"
        if "order_by" in query:
            query["sort"] = "desc"
        return query

    def _headers(self) -> dict[str, str]:
        if self.token:
            return {"PRIVATE-TOKEN": self.token}
        return {}

    async def fetch(self, params: QueryParams) -> list[CanonicalProject]:
        data = await get_json(
            self.http,
            self.info.label,
            _PROJECTS_URL,
            params=self.build_params(params),
            headers=self._headers(),
            timeout=self.timeout,
        )
        if not isinstance(data, list):
            raise malformed(self.info.label, "a list of projects")
        language = gitlab_language(params.primary_language)
        items = [item for item in data if isinstance(item, dict)]
        return [self._parse_item(item, language) for item in items[: self.max_results]]

    def _parse_item(self, item: dict, requested_language: str | None) -> CanonicalProject:
        topics = item.get("topics") or item.get("tag_list") or []
        language = requested_language
        if language is None:
            lowered = [t.lower() for t in topics if isinstance(t, str)]
            language = next((t for t in lowered if t in _COMMON_LANGUAGES), None)

        namespace = item.get("namespace") or {}
        open_issues = item.get("open_issues_count")
        if open_issues is None:
            open_issues = (item.get("statistics") or {}).get("open_issues_count")

        return CanonicalProject(
            name=item.get("path_with_namespace") or item.get("name", ""),
            url=item.get("web_url", ""),
            platform=self.info.label,
            description=item.get("description") or "",
            language=language.capitalize() if language else None,
            tags=unique_tags(topics, language),
            stars=as_int(item.get("star_count")),
            forks=as_int(item.get("forks_count")),
            open_issues=as_int(open_issues),
            owner=namespace.get("name") if isinstance(namespace, dict) else None,
            updated_at=item.get("last_activity_at"),
        )
