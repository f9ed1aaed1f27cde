"""Codeberg (Gitea/Forgejo) repository search.

API docs: https://codeberg.org/api/swagger#/repository/repoSearch
"""

from __future__ import annotations

import logging
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

logger = logging.getLogger(__name__)

_SEARCH_URL = "https://codeberg.org/api/v1/repos/search"

INFO = SourceInfo(
    id="codeberg",
    label="Codeberg",
    kind=SourceKind.CODE_HOSTING,
    api_url=_SEARCH_URL,
)

# Users asking for these want small projects, so empty repos are kept.
_KEEP_UNPOPULAR: frozenset[Characteristic] = frozenset(
    {
        Characteristic.NEEDS_CONTRIBUTORS,
        Characteristic.BEGINNER_FRIENDLY,
        Characteristic.GOOD_FIRST_ISSUES,
    }
)


@dataclass
class CodebergSource:
    """Search Codeberg repositories.

    Codeberg hosts many empty mirrors and experiments; unless the user is
    looking for small projects, repositories with neither stars nor forks
    are dropped.
    """

    http: httpx.AsyncClient
    max_results: int = MAX_RESULTS
    timeout: float = REQUEST_TIMEOUT
    info: SourceInfo = INFO

    def build_params(self, params: QueryParams) -> dict[str, object]:
        query: dict[str, object] = {"limit": self.max_results}
        if params.primary_language:
            query["language"] = params.primary_language
        if params.text:
            query["q"] = params.text

        if params.sort is SortHint.POPULAR:
            query["sort"] = "stars"
            query["order"] = "desc"
        elif params.sort is SortHint.RECENT or not ("q" in query or "language" in query):
            query["sort"] = "updated"
            query["order"] = "desc"
        return query

    async def fetch(self, params: QueryParams) -> list[CanonicalProject]:
        data = await get_json(
            self.http,
            self.info.label,
            _SEARCH_URL,
            params=self.build_params(params),
            timeout=self.timeout,
        )
        # Older Gitea versions return a bare list instead of {"ok": ..., "data": [...]}.
        items = data.get("data") if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise malformed(self.info.label, "an object with a 'data' list")

        projects = [self._parse_item(item) for item in items if isinstance(item, dict)]

        if not (params.characteristics & _KEEP_UNPOPULAR):
            before = len(projects)
            projects = [p for p in projects if (p.stars or 0) > 0 or (p.forks or 0) > 0]
            if len(projects) < before:
                logger.debug(
                    "Codeberg: filtered out %d repositories with no stars and no forks",
                    before - len(projects),
                )
        return projects[: self.max_results]

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
            stars=as_int(item.get("stars_count")),
            forks=as_int(item.get("forks_count")),
            watchers=as_int(item.get("watchers_count")),
            open_issues=as_int(item.get("open_issues_count")),
            owner=owner.get("login") if isinstance(owner, dict) else None,
            updated_at=item.get("updated_at"),
        )
