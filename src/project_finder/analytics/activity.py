"""Fixed-length weekly commit series: always 12 weeks, oldest first, zero-filled."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta

from project_finder.models import WeeklyActivity

WEEKS = 12
_WEEK = timedelta(days=7)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) into an aware datetime."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def window_start(now: datetime | None = None) -> datetime:
    """Start of the trailing 12-week window ending at ``now``."""
    now = now or datetime.now(tz=UTC)
    return now - WEEKS * _WEEK


def zero_weeks(now: datetime | None = None) -> tuple[WeeklyActivity, ...]:
    """Twelve empty weeks covering the trailing window."""
    start = window_start(now)
    return tuple(
        WeeklyActivity(date=(start + i * _WEEK).date().isoformat(), commits=0)
        for i in range(WEEKS)
    )


def bucket_commits(
    timestamps: Iterable[str | None],
    now: datetime | None = None,
) -> tuple[WeeklyActivity, ...]:
    """Count commit timestamps per week over the trailing window.

    Timestamps outside the window or unparseable ones are ignored.
    """
    now = now or datetime.now(tz=UTC)
    start = window_start(now)
    counts = [0] * WEEKS
    for raw in timestamps:
        dt = parse_timestamp(raw)
        if dt is None or dt < start or dt > now:
            continue
        index = min(int((dt - start) / _WEEK), WEEKS - 1)
        counts[index] += 1
    return tuple(
        WeeklyActivity(date=(start + i * _WEEK).date().isoformat(), commits=counts[i])
        for i in range(WEEKS)
    )


def normalize_weeks(
    points: Sequence[WeeklyActivity],
    now: datetime | None = None,
) -> tuple[WeeklyActivity, ...]:
    """Keep the last 12 points and pad the front with zero weeks when short."""
    if not points:
        return zero_weeks(now)
    recent = list(points[-WEEKS:])
    first = parse_timestamp(recent[0].date)
    while len(recent) < WEEKS:
        if first is None:
            label = ""
        else:
            first -= _WEEK
            label = first.date().isoformat()
        recent.insert(0, WeeklyActivity(date=label, commits=0))
    return tuple(recent)


def commit_frequency(weeks: Sequence[WeeklyActivity]) -> float:
    """Mean commits per week."""
    if not weeks:
        return 0.0
    return sum(w.commits for w in weeks) / len(weeks)


def monthly_commits(weeks: Sequence[WeeklyActivity]) -> int:
    """Commits in the last four weeks of the series."""
    return sum(w.commits for w in weeks[-4:])


def total_commits(weeks: Sequence[WeeklyActivity]) -> int:
    return sum(w.commits for w in weeks)
