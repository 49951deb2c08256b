"""
Unit Tests for Core Utilities.
"""

from datetime import datetime, timedelta, timezone

from fairpass.backend.core.utils import percent, percent_change, round_half_up, to_naive_utc, utc_now


class TestUtcNow:
    def test_is_naive(self):
        """Should return a naive datetime."""
        assert utc_now().tzinfo is None


class TestToNaiveUtc:
    def test_converts_aware_values(self):
        """Should shift an aware datetime to UTC and drop the zone."""
        istanbul = timezone(timedelta(hours=3))
        value = datetime(2026, 3, 15, 10, 0, tzinfo=istanbul)

        assert to_naive_utc(value) == datetime(2026, 3, 15, 7, 0)

    def test_passes_naive_and_none_through(self):
        naive = datetime(2026, 3, 15, 10, 0)
        assert to_naive_utc(naive) is naive
        assert to_naive_utc(None) is None


class TestPercent:
    def test_rounds(self):
        assert percent(1, 3) == 33
        assert percent(2, 3) == 67

    def test_halves_round_up(self):
        """Should round 1 of 8 (12.5%) up to 13."""
        assert percent(1, 8) == 13
        assert percent(3, 8) == 38

    def test_empty_whole_is_zero(self):
        assert percent(5, 0) == 0
        assert percent(5, None) == 0


class TestPercentChange:
    def test_relative_change(self):
        assert percent_change(150, 100) == 50
        assert percent_change(50, 100) == -50

    def test_negative_half_rounds_toward_positive(self):
        assert percent_change(5, 8) == -37

    def test_zero_baseline(self):
        """Should count any move off zero as 100 and no move as 0."""
        assert percent_change(7, 0) == 100
        assert percent_change(0, 0) == 0


class TestRoundHalfUp:
    def test_halves(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(-2.5) == -2

    def test_other_values(self):
        assert round_half_up(2.49) == 2
        assert round_half_up(7.0) == 7
