"""Deterministic ordering of discovered projects."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from project_finder.models import CanonicalProject


def popularity(record: CanonicalProject) -> float:
    """Stars when known, otherwise downloads scaled down by 100, otherwise 0."""
    if record.stars is not None:
        return float(record.stars)
    if record.downloads is not None:
        return record.downloads / 100
    return 0.0


def updated_epoch(record: CanonicalProject) -> float:
    """Seconds since the epoch for ``updated_at``; 0 when missing or unparseable."""
    if not record.updated_at:
        return 0.0
    try:
        dt = datetime.fromisoformat(record.updated_at.replace("Z", "+00:00"))
    except ValueError:
        return 0.0
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.timestamp()


def rank(records: Iterable[CanonicalProject]) -> list[CanonicalProject]:
    """Sort by popularity, then recency, both descending.

    The sort is stable, so records that tie on both keys keep their input order.
    """
    return sorted(records, key=lambda r: (popularity(r), updated_epoch(r)), reverse=True)
