"""npm registry search with per-package download counts.

API docs:
- Search: https://github.com/npm/registry/blob/main/docs/REGISTRY-API.md#get-v1search
- Downloads: https://github.com/npm/registry/blob/main/docs/download-counts.md
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from urllib.parse import quote as urlquote

import httpx

from project_finder.errors import SourceError
from project_finder.models import (
    CanonicalProject,
    Characteristic,
    QueryParams,
    SortHint,
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

_SEARCH_URL = "https://registry.npmjs.org/-/v1/search"
_DOWNLOADS_URL = "https://api.npmjs.org/downloads/point"
_DEFAULT_QUERY = "popular"

INFO = SourceInfo(
    id="npm",
    label="NPM",
    kind=SourceKind.PACKAGE_REGISTRY,
    api_url=_SEARCH_URL,
)


@dataclass
class NpmSource:
    """Search npm, then look up monthly and yearly downloads per package.

    Each package takes one token from the shared ``limiter`` before its
    two download lookups run. A failed lookup leaves that one figure unknown.
    """

    http: httpx.AsyncClient
    limiter: TokenBucket
    max_results: int = MAX_RESULTS
    timeout: float = REQUEST_TIMEOUT
    info: SourceInfo = INFO

    def build_params(self, params: QueryParams) -> dict[str, object]:
        text = " ".join((*params.topics, *params.keywords, *params.languages)).strip()
        return {
            "text": text or _DEFAULT_QUERY,
            "size": self.max_results,
            "popularity": 2.0 if params.wants(Characteristic.LARGE_COMMUNITY) else 1.0,
            "quality": 1.5 if params.wants(Characteristic.GOOD_DOCUMENTATION) else 1.0,
            "maintenance": 1.5 if params.sort is SortHint.RECENT else 1.0,
        }

    async def fetch(self, params: QueryParams) -> list[CanonicalProject]:
        data = await get_json(
            self.http,
            self.info.label,
            _SEARCH_URL,
            params=self.build_params(params),
            timeout=self.timeout,
        )
        if not isinstance(data, dict) or not isinstance(data.get("objects", []), list):
            raise malformed(self.info.label, "an object with an 'objects' list")

        packages = [
            obj["package"]
            for obj in data.get("objects", [])
            if isinstance(obj, dict) and isinstance(obj.get("package"), dict)
        ]
        projects = [self._parse_package(pkg) for pkg in packages[: self.max_results]]
        if not projects:
            return []

        projects = list(await asyncio.gather(*(self._with_downloads(p) for p in projects)))
        if params.wants(Characteristic.LARGE_COMMUNITY):
            projects.sort(
                key=lambda p: p.downloads or p.monthly_downloads or 0,
                reverse=True,
            )
        return projects

    async def _with_downloads(self, project: CanonicalProject) -> CanonicalProject:
        await self.limiter.acquire()
        monthly, yearly = await asyncio.gather(
            self._downloads(project.name, "last-month"),
            self._downloads(project.name, "last-year"),
        )
        return replace(project, monthly_downloads=monthly, downloads=yearly)

    async def _downloads(self, package: str, period: str) -> int | None:
        url = f"{_DOWNLOADS_URL}/{period}/{urlquote(package, safe='@')}"
        try:
            data = await get_json(self.http, self.info.label, url, timeout=self.timeout)
        except SourceError as exc:
            logger.warning("NPM: %s downloads unavailable for %s: %s", period, package, exc)
            return None
        if not isinstance(data, dict):
            return None
        return as_int(data.get("downloads"))

    def _parse_package(self, pkg: dict) -> CanonicalProject:
        keywords = [k for k in pkg.get("keywords") or [] if isinstance(k, str)]
        lowered = {k.lower() for k in keywords}
        language = "TypeScript" if "typescript" in lowered else "JavaScript"
        links = pkg.get("links") or {}
        publisher = pkg.get("publisher") or {}
        name = pkg.get("name", "")
        return CanonicalProject(
            name=name,
            url=links.get("npm") or f"https://www.npmjs.com/package/{name}",
            platform=self.info.label,
            description=pkg.get("description") or "",
            language=language,
            tags=tuple(dict.fromkeys(keywords)),
            owner=publisher.get("username") if isinstance(publisher, dict) else None,
            version=pkg.get("version"),
            updated_at=pkg.get("date"),
        )
