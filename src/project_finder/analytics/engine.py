"""Analytics engine: per-platform dispatch with a per-instance cache."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from project_finder.analytics.activity import zero_weeks
from project_finder.analytics.base import AnalyticsFetcherPort
from project_finder.errors import AnalyticsError, SourceError
from project_finder.models import CanonicalProject, ProjectAnalytics

logger = logging.getLogger(__name__)


def placeholder_analytics(project: CanonicalProject) -> ProjectAnalytics:
    """Zeroed analytics for platforms without an analytics API."""
    return ProjectAnalytics(
        weekly_activity=zero_weeks(),
        platform_specific={"platform": project.platform},
        is_placeholder=True,
    )


@dataclass
class AnalyticsEngine:
    """Loads analytics for discovered projects.

    Results are cached per project URL for the lifetime of the engine.
    Failures are not cached, so a later call retries.
    """

    fetchers: Sequence[AnalyticsFetcherPort]
    _cache: dict[str, ProjectAnalytics] = field(default_factory=dict, init=False, repr=False)

    def supports(self, platform: str) -> bool:
        return self._fetcher_for(platform) is not None

    def _fetcher_for(self, platform: str) -> AnalyticsFetcherPort | None:
        wanted = platform.strip().lower()
        for fetcher in self.fetchers:
            if fetcher.platform.lower() == wanted:
                return fetcher
        return None

    async def get_analytics(self, project: CanonicalProject) -> ProjectAnalytics:
        """Return analytics for ``project``, fetching on the first request.

        Raises:
            AnalyticsError: If the platform is supported but its API call failed.
        """
        key = project.dedup_key
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        fetcher = self._fetcher_for(project.platform)
        if fetcher is None:
            logger.info("No analytics for platform %s; using placeholder", project.platform)
            analytics = placeholder_analytics(project)
        else:
            try:
                analytics = await fetcher.fetch(project)
            except SourceError as exc:
                raise AnalyticsError(
                    f"Could not load analytics for {project.name} from {exc.platform}: "
                    f"{exc.message}"
                ) from exc

        self._cache[key] = analytics
        return analytics

    def clear(self) -> None:
        self._cache.clear()
