"""Composite 0-100 health score for a project's analytics."""

from __future__ import annotations

import math
from datetime import UTC, datetime

from project_finder.analytics.activity import parse_timestamp
from project_finder.models import CiStatus, ProjectAnalytics

ACTIVITY_WEIGHT = 0.3
COMMUNITY_WEIGHT = 0.3
QUALITY_WEIGHT = 0.2
MAINTENANCE_WEIGHT = 0.2

_PART = 25.0


def activity_score(analytics: ProjectAnalytics) -> float:
    score = 0.0
    if analytics.commit_frequency > 0:
        score += _PART
    if analytics.total_commits > 100:
        score += _PART
    if any(week.commits > 0 for week in analytics.weekly_activity):
        score += _PART
    if analytics.monthly_commits > 0:
        score += _PART
    return min(score, 100.0)


def community_score(analytics: ProjectAnalytics) -> float:
    stars = analytics.stars or 0
    forks = analytics.forks or 0
    score = (
        min(stars / 40, _PART)
        + min(forks / 10, _PART)
        + min(float(analytics.contributors), _PART)
        + analytics.community_profile.health_percentage / 4
    )
    return min(score, 100.0)


def quality_score(analytics: ProjectAnalytics) -> float:
    score = min(analytics.code_quality_score / 4, _PART) + min(analytics.test_coverage / 4, _PART)
    if analytics.ci_status is CiStatus.PASSING:
        score += _PART
    if analytics.community_profile.has_readme:
        score += _PART
    return min(score, 100.0)


def maintenance_score(analytics: ProjectAnalytics, now: datetime | None = None) -> float:
    """Recency of the last commit, plus bonuses for fast issue and PR turnaround."""
    score = 0.0
    last_commit = parse_timestamp(analytics.last_commit)
    if last_commit is not None:
        now = now or datetime.now(tz=UTC)
        age_days = (now - last_commit).total_seconds() / 86400
        if age_days < 30:
            score += 60
        elif age_days < 90:
            score += 40
        else:
            score += 20

    if analytics.issue_response_hours is not None and analytics.issue_response_hours < 24:
        score += 20
    if analytics.pr_merge_hours is not None and analytics.pr_merge_hours < 72:
        score += 20
    return min(score, 100.0)


def health_score(analytics: ProjectAnalytics, now: datetime | None = None) -> int:
    """Weighted sum of the four sub-scores, clamped to [0, 100] and rounded half up."""
    raw = (
        ACTIVITY_WEIGHT * activity_score(analytics)
        + COMMUNITY_WEIGHT * community_score(analytics)
        + QUALITY_WEIGHT * quality_score(analytics)
        + MAINTENANCE_WEIGHT * maintenance_score(analytics, now)
    )
    clamped = max(0.0, min(100.0, raw))
    return int(math.floor(clamped + 0.5))
