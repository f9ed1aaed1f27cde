"""Tests for weekly activity series (analytics/activity.py)."""

from __future__ import annotations

from datetime import UTC, datetime

from project_finder.analytics.activity import (
    WEEKS,
    bucket_commits,
    commit_frequency,
    monthly_commits,
    normalize_weeks,
    parse_timestamp,
    total_commits,
    window_start,
    zero_weeks,
)
from project_finder.models import WeeklyActivity

NOW = datetime(2026, 3, 29, tzinfo=UTC)


def _weeks(*commits: int) -> tuple[WeeklyActivity, ...]:
    return tuple(WeeklyActivity(date=f"w{i}", commits=c) for i, c in enumerate(commits))


class TestParseTimestamp:
    def test_z_suffix(self):
        assert parse_timestamp("2026-01-02T03:04:05Z") == datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)

    def test_naive_is_utc(self):
        assert parse_timestamp("2026-01-02").tzinfo is UTC

    def test_invalid(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None
        assert parse_timestamp("yesterday") is None


class TestZeroWeeks:
    def test_twelve_zero_points(self):
        weeks = zero_weeks(NOW)
        assert len(weeks) == WEEKS
        assert all(w.commits == 0 for w in weeks)
        assert weeks[0].date == "2026-01-04"
        assert window_start(NOW) == datetime(2026, 1, 4, tzinfo=UTC)


class TestBucketCommits:
    def test_counts_per_week(self):
        weeks = bucket_commits(
            [
                "2026-01-04T12:00:00Z",
                "2026-03-28T09:00:00Z",
                "2026-03-27T09:00:00Z",
                "2025-12-01T00:00:00Z",  # before the window
                "2026-04-01T00:00:00Z",  # after now
                "garbage",
                None,
            ],
            NOW,
        )
        assert len(weeks) == WEEKS
        assert weeks[0].commits == 1
        assert weeks[-1].commits == 2
        assert total_commits(weeks) == 3
        assert weeks[-1].date == "2026-03-22"

    def test_no_timestamps(self):
        assert bucket_commits([], NOW) == zero_weeks(NOW)


class TestNormalizeWeeks:
    def test_pads_front_with_earlier_weeks(self):
        points = [
            WeeklyActivity("2026-03-08", 1),
            WeeklyActivity("2026-03-15", 2),
            WeeklyActivity("2026-03-22", 3),
        ]
        weeks = normalize_weeks(points, NOW)
        assert len(weeks) == WEEKS
        assert weeks[0] == WeeklyActivity("2026-01-04", 0)
        assert [w.commits for w in weeks[-3:]] == [1, 2, 3]

    def test_keeps_last_twelve(self):
        points = [WeeklyActivity(f"2026-01-{i + 1:02d}", i) for i in range(20)]
        weeks = normalize_weeks(points, NOW)
        assert [w.commits for w in weeks] == list(range(8, 20))

    def test_empty_is_zero_filled(self):
        assert normalize_weeks([], NOW) == zero_weeks(NOW)


class TestSummaries:
    def test_frequency_monthly_total(self):
        weeks = _weeks(0, 0, 0, 0, 0, 0, 0, 0, 1, 2, 3, 6)
        assert commit_frequency(weeks) == 1.0
        assert monthly_commits(weeks) == 12
        assert total_commits(weeks) == 12

    def test_empty(self):
        assert commit_frequency(()) == 0.0
        assert monthly_commits(()) == 0
