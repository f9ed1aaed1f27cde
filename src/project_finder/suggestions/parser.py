"""Strict extraction of suggested projects from free-form model output."""

from __future__ import annotations

import json
import logging
import re

from project_finder.errors import SuggestionError
from project_finder.models import CanonicalProject

logger = logging.getLogger(__name__)

PLATFORM = "AI Suggestion"

_ARRAY_RE = re.compile(r"\[\s*\{.*\}\s*,?\s*\]", re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


def _extract_array(text: str) -> list:
    match = _ARRAY_RE.search(text)
    candidate = match.group(0) if match else text.strip()
    candidate = _TRAILING_COMMA_RE.sub(r"\1", candidate)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise SuggestionError(f"AI response is not valid JSON: {exc.msg}") from exc
    if not isinstance(data, list):
        raise SuggestionError("AI response is not a JSON array.")
    return data


def _to_project(item: dict) -> CanonicalProject:
    tags = [t for t in item.get("tags") or [] if isinstance(t, str)]
    difficulty = item.get("conceptual_difficulty") or item.get("difficulty")
    if isinstance(difficulty, str) and difficulty.strip():
        tags.append(f"difficulty:{difficulty.strip().lower()}")
    language = item.get("language")
    description = item.get("description")
    return CanonicalProject(
        name=item["name"].strip(),
        url=item["url"].strip(),
        platform=PLATFORM,
        description=description if isinstance(description, str) else "",
        language=language if isinstance(language, str) and language else None,
        tags=tuple(dict.fromkeys(tags)),
        stars=0,
        forks=0,
        watchers=0,
        open_issues=0,
        closed_issues=0,
        downloads=0,
        monthly_downloads=0,
        recent_downloads=0,
    )


def parse_suggestions(text: str) -> list[CanonicalProject]:
    """Parse the model's reply into canonical records.

    Tolerates markdown fences, surrounding prose, and trailing commas. Items
    without a string ``name`` and ``url`` are skipped.

    Raises:
        SuggestionError: If no JSON array is found or no item is usable.
    """
    projects: list[CanonicalProject] = []
    for item in _extract_array(text):
        if (
            not isinstance(item, dict)
            or not isinstance(item.get("name"), str)
            or not isinstance(item.get("url"), str)
            or not item["name"].strip()
            or not item["url"].strip()
        ):
            logger.debug("Skipping malformed suggestion: %r", item)
            continue
        projects.append(_to_project(item))

    if not projects:
        raise SuggestionError("AI response contained no usable project suggestions.")
    return projects
