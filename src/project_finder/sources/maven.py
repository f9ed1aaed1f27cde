"""Maven Central artifact search (Solr endpoint).

API docs: https://central.sonatype.org/search/rest-api-guide/
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

import httpx

from project_finder.models import CanonicalProject, QueryParams, SourceInfo, SourceKind
from project_finder.sources.base import (
    MAX_RESULTS,
    REQUEST_TIMEOUT,
    as_int,
    get_json,
    malformed,
)

_SEARCH_URL = "https://search.maven.org/solrsearch/select"
_DEFAULT_QUERY = "library"

INFO = SourceInfo(
    id="maven-central",
    label="Maven Central",
    kind=SourceKind.PACKAGE_REGISTRY,
    api_url=_SEARCH_URL,
)

JVM_LANGUAGES: frozenset[str] = frozenset({"java", "kotlin", "scala", "groovy", "clojure"})


def _iso_from_millis(value: object) -> str | None:
    millis = as_int(value)
    if millis is None or millis <= 0:
        return None
    return datetime.fromtimestamp(millis / 1000, tz=UTC).isoformat().replace("+00:00", "Z")


@dataclass
class MavenCentralSource:
    """Search Maven Central. Skipped when a non-JVM language is requested."""

    http: httpx.AsyncClient
    max_results: int = MAX_RESULTS
    timeout: float = REQUEST_TIMEOUT
    info: SourceInfo = INFO

    def applies_to(self, params: QueryParams) -> bool:
        return params.primary_language is None or params.primary_language in JVM_LANGUAGES

    def build_params(self, params: QueryParams) -> dict[str, object]:
        query = params.text.strip() or params.primary_language or _DEFAULT_QUERY
        return {"q": query, "rows": self.max_results, "wt": "json"}

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
        response = data.get("response") if isinstance(data, dict) else None
        docs = response.get("docs", []) if isinstance(response, dict) else None
        if not isinstance(docs, list):
            raise malformed(self.info.label, "an object with a 'response.docs' list")

        language = (params.primary_language or "java").capitalize()
        items = [doc for doc in docs if isinstance(doc, dict)]
        return [self._parse_doc(doc, language) for doc in items[: self.max_results]]

    def _parse_doc(self, doc: dict, language: str) -> CanonicalProject:
        group = doc.get("g", "")
        artifact = doc.get("a", "")
        return CanonicalProject(
            name=f"{group}:{artifact}",
            url=f"https://central.sonatype.com/artifact/{group}/{artifact}",
            platform=self.info.label,
            language=language,
            tags=tuple(t for t in doc.get("text") or [] if isinstance(t, str))[:10],
            owner=group or None,
            version=doc.get("latestVersion") or doc.get("v"),
            updated_at=_iso_from_millis(doc.get("timestamp")),
        )
