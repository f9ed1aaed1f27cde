"""Collapse records that point at the same project URL."""

from __future__ import annotations

from collections.abc import Iterable

from project_finder.models import CanonicalProject


def deduplicate(records: Iterable[CanonicalProject]) -> list[CanonicalProject]:
    """Keep the first record for each case-insensitive URL, in first-seen order.

    No field merging: a later duplicate is dropped even when it carries
    statistics the first one lacks.
    """
    seen: set[str] = set()
    unique: list[CanonicalProject] = []
    for record in records:
        key = record.dedup_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique
