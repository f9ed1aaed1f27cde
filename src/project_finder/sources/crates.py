"""crates.io (Rust) crate search.

API docs: https://crates.io/data-access
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
)

_CRATES_URL = "https://crates.io/api/v1/crates"
_DEFAULT_QUERY = "crate"

INFO = SourceInfo(
    id="crates-io",
    label="Crates.io",
    kind=SourceKind.PACKAGE_REGISTRY,
    api_url=_CRATES_URL,
)

# crates.io asks API clients to identify themselves.
_USER_AGENT = "project-finder (https://github.com/project-finder/project-finder)"


@dataclass
class CratesIoSource:
    http: httpx.AsyncClient
    max_results: int = MAX_RESULTS
    timeout: float = REQUEST_TIMEOUT
    info: SourceInfo = INFO

    def applies_to(self, params: QueryParams) -> bool:
        return params.primary_language in (None, "rust")

    def build_params(self, params: QueryParams) -> dict[str, object]:
        query = params.text.strip()
        if not query:
            query = "rust" if "rust" in params.languages else _DEFAULT_QUERY

        if params.sort is SortHint.RECENT:
            sort = "recent-updates"
        elif params.sort is SortHint.POPULAR:
            sort = "downloads"
        else:
            sort = "relevance"
        return {"q": query, "per_page": self.max_results, "sort": sort}

    async def fetch(self, params: QueryParams) -> list[CanonicalProject]:
        if not self.applies_to(params):
            return []

        data = await get_json(
            self.http,
            self.info.label,
            _CRATES_URL,
            params=self.build_params(params),
            headers={"User-Agent": _USER_AGENT},
            timeout=self.timeout,
        )
        if not isinstance(data, dict) or not isinstance(data.get("crates", []), list):
            raise malformed(self.info.label, "an object with a 'crates' list")

        items = [item for item in data.get("crates", []) if isinstance(item, dict)]
        return [self._parse_item(item) for item in items[: self.max_results]]

    def _parse_item(self, item: dict) -> CanonicalProject:
        name = item.get("name", "")
        url = item.get("repository") or item.get("homepage") or f"https://crates.io/crates/{name}"
        return CanonicalProject(
            name=name,
            url=url,
            platform=self.info.label,
            description=(item.get("description") or "").strip(),
            language="Rust",
            tags=tuple(k for k in item.get("keywords") or [] if isinstance(k, str)),
            downloads=as_int(item.get("downloads")) or 0,
            recent_downloads=as_int(item.get("recent_downloads")),
            version=item.get("max_stable_version") or item.get("max_version"),
            updated_at=item.get("updated_at"),
        )
