"""Up/down/stable classification of recent versus older weekly activity."""

from __future__ import annotations

import statistics
from collections.abc import Sequence
from fractions import Fraction

from project_finder.models import ProjectAnalytics, Trend, TrendResult

THRESHOLD_PERCENT = Fraction(10)


def _mean(values: Sequence[int]) -> Fraction:
    if not values:
        return Fraction(0)
    return Fraction(sum(values), len(values))


def classify(commits: Sequence[int]) -> TrendResult:
    """Compare the mean of the recent half of ``commits`` with the older half.

    The change is computed exactly, so a rise of precisely 10% stays
    ``stable``; ``up`` and ``down`` need a strictly larger move.
    """
    middle = len(commits) // 2
    older, recent = commits[:middle], commits[middle:]
    older_mean = _mean(older)
    recent_mean = _mean(recent)

    change = (recent_mean - older_mean) / max(older_mean, Fraction(1)) * 100
    if change > THRESHOLD_PERCENT:
        trend = Trend.UP
    elif change < -THRESHOLD_PERCENT:
        trend = Trend.DOWN
    else:
        trend = Trend.STABLE

    spread = max(
        statistics.pstdev(older) if older else 0.0,
        statistics.pstdev(recent) if recent else 0.0,
    )
    confidence = 1 - spread / (float(_mean(commits)) + 1)
    confidence = max(0.0, min(1.0, confidence))

    return TrendResult(trend=trend, confidence=confidence, change_percent=float(change))


def trend(analytics: ProjectAnalytics) -> TrendResult:
    return classify([week.commits for week in analytics.weekly_activity])
