"""Discovery pipeline: translate, fan out, deduplicate, rank."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from project_finder.discovery.dedup import deduplicate
from project_finder.discovery.orchestrator import gather_outcomes
from project_finder.discovery.ranking import rank
from project_finder.discovery.relevance import filter_relevant
from project_finder.models import (
    CanonicalProject,
    DiscoveryResult,
    FetchFailure,
    FetchSuccess,
    Preference,
)
from project_finder.query import translate, validate
from project_finder.sources.base import SourceAdapterPort

logger = logging.getLogger(__name__)


@dataclass
class DiscoveryService:
    """Runs one discovery over a fixed, ordered set of source adapters.

    Args:
        adapters: Enabled adapters in catalog declaration order. The order
            decides which record survives deduplication.
    """

    adapters: Sequence[SourceAdapterPort]

    async def discover(self, preference: Preference, *, strict: bool = False) -> DiscoveryResult:
        """Search every source and return ranked unique records plus partial errors.

        With ``strict``, ranked records are narrowed to those matching the
        preference (see ``filter_relevant``), keeping their ranked order.

        Raises:
            InvalidPreferenceError: If the preference names no language,
                topic, or characteristic. No request is made in that case.
        """
        params = translate(preference)
        validate(params)

        outcomes = await gather_outcomes(self.adapters, params)

        records: list[CanonicalProject] = []
        errors: list[str] = []
        for outcome in outcomes:
            if isinstance(outcome, FetchSuccess):
                records.extend(outcome.records)
            elif isinstance(outcome, FetchFailure):
                errors.append(outcome.describe())

        unique = deduplicate(records)
        ranked = rank(unique)
        if strict:
            ranked = filter_relevant(ranked, params)
        logger.info(
            "Discovery finished: %d records (%d before dedup), %d failed sources",
            len(ranked),
            len(records),
            len(errors),
        )
        return DiscoveryResult(records=tuple(ranked), partial_errors=tuple(errors))
