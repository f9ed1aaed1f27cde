"""GitHub repository search.

API docs: https://docs.github.com/en/rest/search/search#search-repositories
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from project_finder.models import (
    CanonicalProject,
    Characteristic,
    QueryParams,
    SortHint,
    SourceInfo,
    SourceKind,
)
from project_finder.sources.base import (
    MAX_RESULTS,
    REQUEST_TIMEOUT,
    as_int,
    get_json,
    malformed,
    unique_tags,
)

_SEARCH_URL = "https://api.github.com/search/repositories"
_DEFAULT_QUERY = "stars:>1"

INFO = SourceInfo(
    id="github",
    label="GitHub",
    kind=SourceKind.CODE_HOSTING,
    api_url=_SEARCH_URL,
)


def _quote(term: str) -> str:
    return '"' + term.replace('"', '\\"') + '"'


@dataclass
class GitHubSource:
    """Search GitHub repositories with qualifier syntax (``language:``, ``topic:``)."""

    http: httpx.AsyncClient
    token: str = ""
    max_results: int = MAX_RESULTS
    timeout: float = REQUEST_TIMEOUT
    info: SourceInfo = INFO

    def build_params(self, params: QueryParams) -> dict[str, object]:
        parts: list[str] = [f"language:{_quote(lang)}" for lang in params.languages]
        parts.extend(f"topic:{_quote(topic)}" for topic in params.topics)
        if params.wants(Characteristic.GOOD_FIRST_ISSUES):
            parts.append("good-first-issues:>0")
        for keyword in params.keywords:
            if keyword != Characteristic.GOOD_FIRST_ISSUES.label:
                parts.append(_quote(keyword.lower()))

        query = " ".join(parts).strip() or _DEFAULT_QUERY
        sort = "updated" if params.sort is SortHint.RECENT else "stars"
        return {"q": query, "per_page": self.max_results, "sort": sort, "order": "desc"}

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def fetch(self, params: QueryParams) -> list[CanonicalProject]:
        data = await get_json(
            self.http,
            self.info.label,
            _SEARCH_URL,
            params=self.build_params(params),
            headers=self._headers(),
            timeout=self.timeout,
        )
        if not isinstance(data, dict) or not isinstance(data.get("items", []), list):
            raise malformed(self.info.label, "an object with an 'items' list")
        items = [item for item in data.get("items", []) if isinstance(item, dict)]
        return [self._parse_item(item) for item in items[: self.max_results]]

    def _parse_item(self, item: dict) -> CanonicalProject:
        language = item.get("language") or None
        owner = item.get("owner") or {}
        return CanonicalProject(
            name=item.get("full_name") or item.get("name", ""),
            url=item.get("html_url", ""),
            platform=self.info.label,
            description=item.get("description") or "",
            language=language,
            tags=unique_tags(item.get("topics") or [], language),
            stars=as_int(item.get("stargazers_count")),
            forks=as_int(item.get("forks_count")),
            watchers=as_int(item.get("watchers_count")),
            open_issues=as_int(item.get("open_issues_count")),
            owner=owner.get("login") if isinstance(owner, dict) else None,
            updated_at=item.get("pushed_at") or item.get("updated_at"),
        )
