"""Port: source adapter, plus the HTTP helpers every adapter shares."""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from project_finder.errors import SourceError
from project_finder.models import CanonicalProject, QueryParams, SourceInfo

REQUEST_TIMEOUT = 10.0
MAX_RESULTS = 50


class SourceAdapterPort(Protocol):
    """Port for one external registry.

    ``fetch`` returns normalized records or raises ``SourceError``; it never
    returns a partially filled result.
    """

    info: SourceInfo

    async def fetch(self, params: QueryParams) -> list[CanonicalProject]:
        """Search the source and map every item into a CanonicalProject."""
        ...


async def get_json(
    http: httpx.AsyncClient,
    platform: str,
    url: str,
    *,
    params: dict[str, object] | None = None,
    headers: dict[str, str] | None = None,
    timeout: float = REQUEST_TIMEOUT,
) -> Any:
    """Execute one GET and decode its JSON body.

    Raises:
        SourceError: On timeout, network failure, non-2xx status, or an
            undecodable body. The error carries ``platform`` and, for HTTP
            failures, the status code.
    """
    try:
        response = await http.get(url, params=params, headers=headers, timeout=timeout)
    except httpx.TimeoutException as exc:
        raise SourceError(platform, "Request timeout") from exc
    except httpx.HTTPError as exc:
        raise SourceError(platform, f"Network error: {exc}") from exc

    if response.status_code < 200 or response.status_code >= 300:
        reason = response.reason_phrase or str(response.status_code)
        raise SourceError(platform, f"API request failed: {reason}", response.status_code)

    try:
        return response.json()
    except ValueError as exc:
        raise SourceError(platform, f"Malformed response: {exc}") from exc


def malformed(platform: str, expected: str) -> SourceError:
    return SourceError(platform, f"Malformed response: expected {expected}")


def as_int(value: object) -> int | None:
    """Coerce a JSON number to int, keeping ``None`` for missing or non-numeric values."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def unique_tags(*groups: object) -> tuple[str, ...]:
    """Flatten tag groups into a de-duplicated tuple, skipping blanks."""
    tags: list[str] = []
    for group in groups:
        items = group if isinstance(group, list | tuple) else [group]
        for item in items:
            if isinstance(item, str) and item and item not in tags:
                tags.append(item)
    return tuple(tags)
