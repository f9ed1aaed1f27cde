"""Concurrent fan-out over source adapters with per-source failure capture."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from project_finder.errors import SourceError
from project_finder.models import FetchFailure, FetchOutcome, FetchSuccess, QueryParams
from project_finder.sources.base import SourceAdapterPort

logger = logging.getLogger(__name__)


async def _settle(adapter: SourceAdapterPort, params: QueryParams) -> FetchOutcome:
    """Run one adapter and turn its result or failure into a value."""
    platform = adapter.info.label
    try:
        records = await adapter.fetch(params)
    except SourceError as exc:
        logger.warning("%s search failed: %s", platform, exc.message)
        return FetchFailure(platform, exc.message, exc.status_code)
    except Exception as exc:
        logger.warning("%s search failed unexpectedly: %r", platform, exc)
        return FetchFailure(platform, str(exc) or type(exc).__name__)

    logger.info("%s returned %d projects", platform, len(records))
    return FetchSuccess(platform, tuple(records))


async def gather_outcomes(
    adapters: Sequence[SourceAdapterPort],
    params: QueryParams,
) -> list[FetchOutcome]:
    """Query every adapter concurrently and wait for all of them.

    Returns:
        One outcome per adapter, in the order the adapters were given.
        Source failures never propagate; cancellation does.
    """
    if not adapters:
        return []
    return list(await asyncio.gather(*(_settle(adapter, params) for adapter in adapters)))
