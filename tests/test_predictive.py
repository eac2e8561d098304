"""Predictive engine tests — smoothing forecasts, intervals, regression."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ecomatch.exceptions import InputValidationError
from ecomatch.schemas.predictive_schema import TrendParameters
from ecomatch.services.predictive_engine import (
    confidence_interval,
    confidence_interval_from_sample,
    exponential_smoothing,
    linear_regression,
    z_for_confidence,
)


# ---------------------------------------------------------------------------
# Exponential smoothing
# ---------------------------------------------------------------------------

class TestSimpleSmoothing:
    def test_insufficient_data(self):
        """Two months of history is not enough to forecast."""
        r = exponential_smoothing([10, 20])
        assert r.insufficient_data is True
        assert r.method == "none"
        assert r.forecast == []
        assert "2 data point" in r.message

    def test_recursion(self):
        r = exponential_smoothing([10, 20, 30], alpha=0.5)
        assert r.method == "simple"
        assert r.smoothed == [10.0, 10.0, 15.0]
        assert r.forecasts == [22.5, 22.5, 22.5]
        assert r.last_forecast == 22.5
        assert r.mae == 8.33
        assert r.formula == "F(t+1) = 0.5 × A(t) + 0.5 × F(t)"

    def test_constant_series_has_zero_width_band(self):
        r = exponential_smoothing([100, 100, 100, 100], alpha=0.3)
        for p in r.forecast:
            assert p.lower_bound == p.predicted_value == p.upper_bound == 100.0

    def test_auto_alpha_stable(self):
        assert exponential_smoothing([100, 101, 100, 102]).alpha == 0.3

    def test_auto_alpha_volatile(self):
        assert exponential_smoothing([10, 50, 10, 50]).alpha == 0.7

    def test_band_widens_with_horizon(self):
        r = exponential_smoothing([10, 12, 11, 13, 12], alpha=0.3)
        widths = [p.upper_bound - p.lower_bound for p in r.forecast]
        assert widths[0] < widths[1] < widths[2]
        for p in r.forecast:
            assert p.lower_bound <= p.predicted_value <= p.upper_bound
            assert p.confidence_level == 0.95

    def test_lower_bound_floored_for_non_negative_data(self):
        r = exponential_smoothing([1, 10, 1, 10, 1], alpha=0.5)
        assert r.forecast[0].lower_bound == 0.0

    def test_invalid_alpha(self):
        with pytest.raises(InputValidationError):
            exponential_smoothing([1, 2, 3], alpha=1.5)


class TestHoltSmoothing:
    def test_linear_series_is_extrapolated(self):
        r = exponential_smoothing([10, 20, 30, 40, 50], alpha=0.5, trend=TrendParameters(beta=0.5))
        assert r.method == "holt"
        assert r.forecasts == [60.0, 70.0, 80.0]
        assert r.mae == 0.0

    def test_declining_forecast_floored_at_zero(self):
        """A falling trend on non-negative data never forecasts below zero."""
        r = exponential_smoothing([50, 40, 30, 20, 10], alpha=0.5, trend=TrendParameters(beta=0.5))
        assert r.forecasts == [0.0, 0.0, 0.0]


class TestHoltWinters:
    SEASONAL = [10, 20, 30, 40, 12, 22, 32, 42]

    def test_seasonal_forecast(self):
        r = exponential_smoothing(
            self.SEASONAL, alpha=0.5, trend=TrendParameters(season_length=4), steps_ahead=4
        )
        assert r.method == "holt_winters"
        assert r.beta == 0.1 and r.gamma == 0.1
        assert len(r.forecast) == 4
        # the seasonal shape carries into the forecast
        assert r.forecasts[0] < r.forecasts[3]
        for p in r.forecast:
            assert 0 <= p.lower_bound <= p.predicted_value <= p.upper_bound

    def test_needs_two_seasons(self):
        r = exponential_smoothing([10, 20, 30, 40, 12, 22], trend=TrendParameters(season_length=4))
        assert r.insufficient_data is True
        assert r.season_length == 4

    def test_non_positive_value_rejected(self):
        with pytest.raises(InputValidationError):
            exponential_smoothing([10, 0, 30, 40, 12, 22, 32, 42], trend=TrendParameters(season_length=4))

    def test_sharp_drop_between_seasons_still_forecasts(self):
        """A season-over-season collapse keeps the level positive and the bounds ordered."""
        r = exponential_smoothing(
            [100, 100, 100, 10, 10, 10], alpha=0.3, trend=TrendParameters(season_length=3)
        )
        assert r.method == "holt_winters"
        assert len(r.forecast) == 3
        for p in r.forecast:
            assert 0 <= p.lower_bound <= p.predicted_value <= p.upper_bound



# ---------------------------------------------------------------------------
# Confidence intervals
# ---------------------------------------------------------------------------

class TestConfidenceInterval:
    def test_default_z(self):
        r = confidence_interval(100, 10)
        assert r.bounds == (80.4, 119.6)
        assert r.formula == "CI = 100 ± 1.96 × 10 = [80.4, 119.6]"

    def test_negative_std_rejected(self):
        with pytest.raises(InputValidationError):
            confidence_interval(100, -1)

    def test_z_lookup(self):
        assert z_for_confidence(0.95) == 1.96
        assert z_for_confidence(0.99) == 2.576
        assert z_for_confidence(0.5) == pytest.approx(0.6745, abs=1e-4)

    def test_small_sample_is_widened(self):
        r = confidence_interval_from_sample([10, 12, 14])
        assert r.mean == 12.0
        assert r.std_dev == 2.0
        assert r.z_score == 2.12
        assert (r.lower, r.upper) == (9.55, 14.45)
        assert r.is_reliable is False

    def test_sample_insufficient(self):
        r = confidence_interval_from_sample([1, 2])
        assert r.insufficient_data is True
        assert r.lower is None


# ---------------------------------------------------------------------------
# Linear regression
# ---------------------------------------------------------------------------

class TestLinearRegression:
    def test_perfect_fit(self):
        r = linear_regression([10, 20, 30, 40])
        assert r.slope == 10.0
        assert r.intercept == 10.0
        assert r.r_squared == 1.0
        assert r.predictions == [50.0, 60.0, 70.0]
        assert r.trend_direction == "worsening"
        assert r.is_reliable is True
        assert r.formula == "ŷ = 10 + 10x (R²=1)"

    def test_predictions_floored_at_zero(self):
        r = linear_regression([40, 30, 20, 10])
        assert r.trend_direction == "improving"
        assert r.predictions == [0.0, 0.0, 0.0]

    def test_explicit_pairs(self):
        r = linear_regression([(1, 2), (2, 4), (3, 6)])
        assert r.slope == 2.0
        assert r.intercept == 0.0
        assert r.predictions == [8.0, 10.0, 12.0]

    def test_flat_series(self):
        r = linear_regression([5, 5, 5])
        assert r.slope == 0.0
        assert r.r_squared == 0.0
        assert r.trend_direction == "stable"

    def test_insufficient_data(self):
        r = linear_regression([1, 2])
        assert r.insufficient_data is True
        assert r.slope is None
