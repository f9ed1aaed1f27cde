"""Tests for trend classification (analytics/trend.py)."""

from __future__ import annotations

import pytest

from project_finder.analytics.activity import zero_weeks
from project_finder.analytics.trend import classify, trend
from project_finder.models import ProjectAnalytics, Trend


class TestClassify:
    def test_exactly_ten_percent_is_stable(self):
        result = classify([10] * 6 + [11] * 6)
        assert result.trend is Trend.STABLE
        assert result.change_percent == pytest.approx(10.0)

    def test_eleven_percent_is_up(self):
        result = classify([100] * 6 + [111] * 6)
        assert result.trend is Trend.UP
        assert result.change_percent == pytest.approx(11.0)

    def test_drop_is_down(self):
        result = classify([10] * 6 + [8] * 6)
        assert result.trend is Trend.DOWN
        assert result.change_percent == pytest.approx(-20.0)

    def test_exactly_minus_ten_percent_is_stable(self):
        assert classify([10] * 6 + [9] * 6).trend is Trend.STABLE

    def test_flat_series_has_full_confidence(self):
        result = classify([5] * 12)
        assert result.trend is Trend.STABLE
        assert result.confidence == 1.0

    def test_all_zero_is_stable_with_full_confidence(self):
        result = classify([0] * 12)
        assert result.trend is Trend.STABLE
        assert result.confidence == 1.0

    def test_rise_from_nothing_is_up(self):
        assert classify([0] * 6 + [1] * 6).trend is Trend.UP

    def test_noisy_series_lowers_confidence(self):
        result = classify([0, 20, 0, 20, 0, 20, 0, 20, 0, 20, 0, 20])
        assert 0.0 <= result.confidence < 0.5

    def test_empty(self):
        result = classify([])
        assert result.trend is Trend.STABLE
        assert result.confidence == 1.0


class TestTrendFromAnalytics:
    def test_uses_weekly_activity(self):
        assert trend(ProjectAnalytics(weekly_activity=zero_weeks())).trend is Trend.STABLE
