"""NuGet (.NET) package search.

API docs: https://learn.microsoft.com/en-us/nuget/api/search-query-service-resource
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from project_finder.models import (
    CanonicalProject,
    Characteristic,
    QueryParams,
    SourceInfo,
    SourceKind,
)
from project_finder.sources.base import (
    MAX_RESULTS,
    REQUEST_TIMEOUT,
    as_int,
    get_json,
    malformed,
)

_QUERY_URL = "https://api.nuget.org/v3/query"
_DEFAULT_QUERY = "library"

INFO = SourceInfo(
    id="nuget",
    label="NuGet",
    kind=SourceKind.PACKAGE_REGISTRY,
    api_url=_QUERY_URL,
)

DOTNET_LANGUAGES: frozenset[str] = frozenset({"c#", "f#", "vb.net", ".net", "csharp", "vb"})


def _is_dotnet(language: str) -> bool:
    return "".join(language.split()) in DOTNET_LANGUAGES


@dataclass
class NuGetSource:
    http: httpx.AsyncClient
    max_results: int = MAX_RESULTS
    timeout: float = REQUEST_TIMEOUT
    info: SourceInfo = INFO

    def applies_to(self, params: QueryParams) -> bool:
        language = params.primary_language
        return language is None or _is_dotnet(language)

    def build_params(self, params: QueryParams) -> dict[str, object]:
        query = params.text.strip()
        if not query:
            wants_dotnet = any(_is_dotnet(lang) for lang in params.languages)
            query = "package" if wants_dotnet else _DEFAULT_QUERY
        return {"q": query, "take": self.max_results, "prerelease": "false"}

    async def fetch(self, params: QueryParams) -> list[CanonicalProject]:
        if not self.applies_to(params):
            return []

        data = await get_json(
            self.http,
            self.info.label,
            _QUERY_URL,
            params=self.build_params(params),
            timeout=self.timeout,
        )
        if not isinstance(data, dict) or not isinstance(data.get("data", []), list):
            raise malformed(self.info.label, "an object with a 'data' list")

        items = [item for item in data.get("data", []) if isinstance(item, dict)]
        projects = [self._parse_item(item) for item in items[: self.max_results]]
        if params.wants(Characteristic.LARGE_COMMUNITY):
            projects.sort(key=lambda p: p.downloads or 0, reverse=True)
        return projects

    def _parse_item(self, item: dict) -> CanonicalProject:
        package_id = item.get("id", "")
        authors = item.get("authors")
        if isinstance(authors, list):
            owner = ", ".join(a for a in authors if isinstance(a, str)) or None
        else:
            owner = authors if isinstance(authors, str) and authors else None
        return CanonicalProject(
            name=package_id,
            url=item.get("projectUrl") or f"https://www.nuget.org/packages/{package_id}/",
            platform=self.info.label,
            description=item.get("description") or "",
            language="C#",
            tags=tuple(t for t in item.get("tags") or [] if isinstance(t, str)),
            downloads=as_int(item.get("totalDownloads")) or 0,
            owner=owner,
            version=item.get("version"),
        )
