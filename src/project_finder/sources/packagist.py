"""Packagist (PHP) package search with per-package monthly downloads.

API docs: https://packagist.org/apidoc
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace

import httpx

from project_finder.errors import SourceError
from project_finder.models import (
    CanonicalProject,
    Characteristic,
    QueryParams,
    SourceInfo,
    SourceKind,
)
from project_finder.ratelimit import TokenBucket
from project_finder.sources.base import (
    MAX_RESULTS,
    REQUEST_TIMEOUT,
    as_int,
    get_json,
    malformed,
)

logger = logging.getLogger(__name__)

_SEARCH_URL = "https://packagist.org/search.json"
_STATS_URL = "https://packagist.org/packages/{name}/stats.json"
_DEFAULT_QUERY = "library"

INFO = SourceInfo(
    id="packagist",
    label="Packagist",
    kind=SourceKind.PACKAGE_REGISTRY,
    api_url=_SEARCH_URL,
)


@dataclass
class PackagistSource:
    """Search Packagist. Only runs when the primary language is PHP or unset."""

    http: httpx.AsyncClient
    limiter: TokenBucket
    max_results: int = MAX_RESULTS
    timeout: float = REQUEST_TIMEOUT
    info: SourceInfo = INFO

    def applies_to(self, params: QueryParams) -> bool:
        return params.primary_language in (None, "php")

    def build_params(self, params: QueryParams) -> dict[str, object]:
        query = params.text.strip()
        if not query:
            query = "php" if "php" in params.languages else _DEFAULT_QUERY
        return {"q": query, "per_page": self.max_results}

    async def fetch(self, params: QueryParams) -> list[CanonicalProject]:
        if not self.applies_to(params):
            return []

        data = await get_json(
            self.http,
            self.info.label,
            _SEARCH_URL,
            params=self.build_params(params),
            timeout=self.timeout,
        )
        if not isinstance(data, dict) or not isinstance(data.get("results", []), list):
            raise malformed(self.info.label, "an object with a 'results' list")

        items = [item for item in data.get("results", []) if isinstance(item, dict)]
        projects = [self._parse_item(item) for item in items[: self.max_results]]
        projects = list(await asyncio.gather(*(self._with_stats(p) for p in projects)))

        if params.wants(Characteristic.LARGE_COMMUNITY):
            projects.sort(key=lambda p: p.stars or 0, reverse=True)
        return projects

    async def _with_stats(self, project: CanonicalProject) -> CanonicalProject:
        if not project.name:
            return project
        await self.limiter.acquire()
        try:
            data = await get_json(
                self.http,
                self.info.label,
                _STATS_URL.format(name=project.name),
                timeout=self.timeout,
            )
        except SourceError as exc:
            logger.warning("Packagist: stats unavailable for %s: %s", project.name, exc)
            return project

        downloads = data.get("downloads") if isinstance(data, dict) else None
        if not isinstance(downloads, dict):
            return project
        return replace(project, monthly_downloads=as_int(downloads.get("monthly")))

    def _parse_item(self, item: dict) -> CanonicalProject:
        name = item.get("name", "")
        return CanonicalProject(
            name=name,
            url=item.get("url") or f"https://packagist.org/packages/{name}",
            platform=self.info.label,
            description=item.get("description") or "",
            language="PHP",
            tags=tuple(k for k in item.get("keywords") or [] if isinstance(k, str)),
            stars=as_int(item.get("favers")) or 0,
            downloads=as_int(item.get("downloads")) or 0,
            owner=name.split("/")[0] if "/" in name else None,
        )
