"""Translate a user Preference into source-independent query parameters."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from project_finder.errors import InvalidPreferenceError
from project_finder.models import Characteristic, Preference, QueryParams, SortHint

logger = logging.getLogger(__name__)

_MAX_TERM_LENGTH = 100

# Characteristics that steer ordering instead of adding search keywords.
# Listed in precedence order: the first one present wins.
_SORT_HINTS: dict[Characteristic, SortHint] = {
    Characteristic.ACTIVELY_MAINTAINED: SortHint.RECENT,
    Characteristic.LARGE_COMMUNITY: SortHint.POPULAR,
}


def split_terms(values: Iterable[str]) -> tuple[str, ...]:
    """Comma-split, trim, and lower-case terms, dropping empties and repeats."""
    terms: list[str] = []
    seen: set[str] = set()
    for value in values:
        for raw in value.split(","):
            term = raw.strip().lower()
            if not term or len(term) > _MAX_TERM_LENGTH or term in seen:
                continue
            seen.add(term)
            terms.append(term)
    return tuple(terms)


def _parse_characteristics(ids: Iterable[str]) -> list[Characteristic]:
    result: list[Characteristic] = []
    for raw in ids:
        key = raw.strip().lower()
        if not key:
            continue
        try:
            characteristic = Characteristic(key)
        except ValueError:
            logger.debug("Ignoring unknown characteristic '%s'", raw)
            continue
        if characteristic not in result:
            result.append(characteristic)
    return result


def translate(preference: Preference) -> QueryParams:
    """Convert a Preference into a QueryParams bag.

    Pure function: no I/O, no errors. Sort-hint characteristics become
    ``sort``; every other recognized characteristic contributes its label
    as a free-text keyword.
    """
    characteristics = _parse_characteristics(preference.characteristics)

    sort: SortHint | None = None
    for characteristic, hint in _SORT_HINTS.items():
        if characteristic in characteristics:
            sort = hint
            break

    keywords = tuple(c.label for c in characteristics if c not in _SORT_HINTS)

    return QueryParams(
        languages=split_terms(preference.languages),
        topics=split_terms(preference.topics),
        keywords=keywords,
        characteristics=frozenset(characteristics),
        sort=sort,
    )


def validate(params: QueryParams) -> None:
    """Reject a query with no languages, topics, or characteristics."""
    if params.is_empty:
        raise InvalidPreferenceError(
            "Please provide at least one programming language, topic, "
            "or characteristic to search for."
        )
