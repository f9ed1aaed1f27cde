"""Port: per-platform analytics fetcher, plus helpers the fetchers share."""

from __future__ import annotations

import logging
import re
from typing import Any, Protocol

import httpx

from project_finder.errors import AnalyticsError, SourceError
from project_finder.models import CanonicalProject, ProjectAnalytics
from project_finder.sources.base import REQUEST_TIMEOUT, get_json

logger = logging.getLogger(__name__)

TOP_CONTRIBUTORS = 5


class AnalyticsFetcherPort(Protocol):
    """Port for loading activity and community data from one code host.

    ``platform`` is the display label discovery records carry for that host.
    ``fetch`` raises ``SourceError`` when the repository itself cannot be
    loaded; secondary lookups that fail leave their fields at defaults.
    """

    platform: str

    async def fetch(self, project: CanonicalProject) -> ProjectAnalytics:
        """Load analytics for a project hosted on this platform."""
        ...


async def optional_json(
    http: httpx.AsyncClient,
    platform: str,
    url: str,
    *,
    params: dict[str, object] | None = None,
    headers: dict[str, str] | None = None,
    timeout: float = REQUEST_TIMEOUT,
) -> Any | None:
    """Like ``get_json`` but returns None instead of raising ``SourceError``."""
    try:
        return await get_json(http, platform, url, params=params, headers=headers, timeout=timeout)
    except SourceError as exc:
        logger.warning("%s: analytics lookup %s failed: %s", platform, url, exc.message)
        return None


def repo_path(url: str, host: str, *, nested: bool = False) -> str:
    """Extract ``owner/repo`` (or the full group path when ``nested``) from a project URL.

    Raises:
        AnalyticsError: If the URL does not point at a repository on ``host``.
    """
    pattern = rf"https?://(?:www\.)?{re.escape(host)}/(.+?)(?:\.git)?/?$"
    match = re.match(pattern, url.strip(), re.IGNORECASE)
    if match:
        parts = [p for p in match.group(1).split("/") if p]
        if not nested:
            parts = parts[:2]
        elif "-" in parts:
            parts = parts[: parts.index("-")]
        if len(parts) >= 2:
            return "/".join(parts)
    raise AnalyticsError(f"'{url}' is not a {host} repository URL.")


def language_percentages(byte_counts: object) -> dict[str, float]:
    """Convert ``{language: bytes}`` into ``{language: percent}`` rounded to 0.1."""
    if not isinstance(byte_counts, dict):
        return {}
    numeric = {
        str(lang): float(count)
        for lang, count in byte_counts.items()
        if isinstance(count, int | float) and not isinstance(count, bool) and count > 0
    }
    total = sum(numeric.values())
    if total <= 0:
        return {}
    return {lang: round(count * 100 / total, 1) for lang, count in numeric.items()}


def dict_items(data: object) -> list[dict]:
    """The dict elements of a JSON list; empty for anything else."""
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, dict)]


def mean_hours(durations: list[float]) -> float | None:
    if not durations:
        return None
    return round(sum(durations) / len(durations) / 3600, 1)
