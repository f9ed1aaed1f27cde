"""Relevance scoring and the optional strict-match filter for discovery results."""

from __future__ import annotations

import time
from collections.abc import Sequence

from project_finder.discovery.ranking import updated_epoch
from project_finder.models import CanonicalProject, QueryParams

_MONTH_SECONDS = 30 * 24 * 60 * 60

LANGUAGE_POINTS = 30
TOPIC_POINTS = 10
MAX_SCORE = 100

# (max age in months, points), checked in order
_ACTIVITY_POINTS = ((1, 20), (3, 15), (6, 10), (12, 5))
# (min stars, points), checked in order
_POPULARITY_POINTS = ((1000, 20), (500, 15), (100, 10), (50, 5))


def _tags(record: CanonicalProject) -> set[str]:
    return {tag.lower() for tag in record.tags}


def matches_language(record: CanonicalProject, params: QueryParams) -> bool:
    if not params.languages:
        return True
    return bool(record.language) and record.language.lower() in params.languages


def matches_topic(record: CanonicalProject, params: QueryParams) -> bool:
    """Any topic appears as a tag or inside the description."""
    if not params.topics:
        return True
    tags = _tags(record)
    description = record.description.lower()
    return any(topic in tags or topic in description for topic in params.topics)


def matches_characteristics(record: CanonicalProject, params: QueryParams) -> bool:
    """At least one wanted characteristic's label appears inside some tag."""
    if not params.characteristics:
        return True
    tags = _tags(record)
    labels = [c.label.lower() for c in params.characteristics]
    return any(label in tag for label in labels for tag in tags)


def relevance_score(
    record: CanonicalProject,
    params: QueryParams,
    now: float | None = None,
) -> int:
    """Score 0-100 from language match, topic tags, recent activity, and stars."""
    score = 0
    if params.languages and record.language and record.language.lower() in params.languages:
        score += LANGUAGE_POINTS

    tags = _tags(record)
    score += TOPIC_POINTS * sum(1 for topic in params.topics if topic in tags)

    updated = updated_epoch(record)
    if updated:
        months = ((now if now is not None else time.time()) - updated) / _MONTH_SECONDS
        for limit, points in _ACTIVITY_POINTS:
            if months <= limit:
                score += points
                break

    if record.stars:
        for minimum, points in _POPULARITY_POINTS:
            if record.stars >= minimum:
                score += points
                break

    return min(MAX_SCORE, score)


def filter_relevant(
    records: Sequence[CanonicalProject],
    params: QueryParams,
) -> list[CanonicalProject]:
    """Keep records matching language, topic, and characteristics.

    When nothing passes all three, fall back to records matching the
    language or a topic. Input order is preserved.
    """
    strict = [
        r
        for r in records
        if matches_language(r, params)
        and matches_topic(r, params)
        and matches_characteristics(r, params)
    ]
    if strict:
        return strict
    return [r for r in records if matches_language(r, params) or matches_topic(r, params)]
