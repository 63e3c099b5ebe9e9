"""Tests for the keyword trend analyzer."""

from datetime import date, timedelta

import pytest

from keyword_engine.exceptions import InsufficientDataError, InvalidInputError
from keyword_engine.models import TrendDataPoint, TrendOptions
from keyword_engine.models.trend import SeasonalPeriod, TrendDirection, VolatilityLevel
from keyword_engine.modules.keyword_research.trend_analyzer import (
    analyze_trend,
    calculate_volatility,
    clean_series,
    z_score,
)


class TestOverallTrend:
    """Direction, confidence and change over the smoothed series."""

    def test_linear_rise(self, linear_series):
        trend = analyze_trend("seo tools", linear_series).overall_trend
        assert trend.direction == TrendDirection.RISING
        assert trend.confidence > 0.95
        assert trend.slope > 0
        # smoothed edges: 115 -> 1275
        assert trend.change_percent == pytest.approx(1008.7)

    def test_linear_fall(self, make_series):
        series = make_series(120, lambda i, _: 100 + 10 * (119 - i))
        result = analyze_trend("fax machines", series)
        assert result.overall_trend.direction == TrendDirection.FALLING
        assert "Declining trend - may indicate decreasing interest" in result.insights.risks

    def test_constant_series_is_stable(self, make_series):
        series = make_series(60, lambda i, _: 500)
        trend = analyze_trend("paper clips", series).overall_trend
        assert trend.direction == TrendDirection.STABLE
        assert trend.slope == 0.0
        assert trend.r_squared == 0.0
        assert trend.change_percent == 0.0

    def test_all_zero_series_is_stable(self, make_series):
        series = make_series(60, lambda i, _: 0)
        trend = analyze_trend("discontinued gadget", series).overall_trend
        assert trend.direction == TrendDirection.STABLE
        assert trend.strength == 0.0
        assert trend.change_percent == 0.0

    def test_time_range(self, linear_series):
        time_range = analyze_trend("seo tools", linear_series).time_range
        assert time_range.start == date(2023, 1, 1)
        assert time_range.end == date(2023, 4, 30)
        assert time_range.data_points == 120


class TestForecast:
    """Linear projection with confidence band."""

    def test_exact_line_projection(self, linear_series):
        forecast = analyze_trend("seo tools", linear_series).forecast
        assert forecast.next_month.horizon_days == 30
        assert forecast.next_month.predicted == 1450
        assert forecast.next_month.range.min == forecast.next_month.range.max == 1450
        assert forecast.next_month.confidence == 0.9
        assert forecast.next_quarter.predicted == 1750
        assert forecast.next_year.predicted == 3125

    def test_horizon_limits_projections(self, linear_series):
        options = TrendOptions(forecast_horizon=90)
        forecast = analyze_trend("seo tools", linear_series, options).forecast
        assert forecast.next_month.predicted == 1450
        assert forecast.next_quarter.predicted == 1750
        assert forecast.next_year is None
        assert forecast.to_dict()["next_year"] is None

    def test_horizon_shorter_than_a_month(self, linear_series):
        options = TrendOptions(forecast_horizon=7)
        result = analyze_trend("seo tools", linear_series, options)
        assert result.forecast.next_month is None
        assert result.forecast.next_quarter is None
        assert "Reliable short-term forecast - good for immediate planning" not in result.insights.opportunities

    def test_seasonal_forecast_is_non_negative(self, seasonal_series):
        forecast = analyze_trend("christmas gifts", seasonal_series).forecast
        for point in (forecast.next_month, forecast.next_quarter, forecast.next_year):
            assert point.predicted >= 0
            assert 0 <= point.range.min <= point.predicted <= point.range.max
            assert 0.1 <= point.confidence <= 0.9

    @pytest.mark.parametrize("level,expected", [(0.9, 1.64), (0.95, 1.96), (0.99, 2.58)])
    def test_z_score(self, level, expected):
        assert z_score(level) == expected


class TestSeasonality:
    """Monthly, quarterly and yearly pattern detection."""

    def test_no_seasonality_on_short_series(self, linear_series):
        seasonality = analyze_trend("seo tools", linear_series).seasonality
        assert seasonality.has_seasonality is False
        assert seasonality.patterns == ()
        assert seasonality.predictability == 0.0

    def test_december_peak(self, seasonal_series):
        seasonality = analyze_trend("christmas gifts", seasonal_series).seasonality
        assert seasonality.has_seasonality is True
        periods = [p.period for p in seasonality.patterns]
        assert periods == [SeasonalPeriod.MONTHLY, SeasonalPeriod.QUARTERLY]

        monthly = seasonality.patterns[0]
        assert len(monthly.peaks) == 3
        assert monthly.peaks[0].period == "December"
        assert monthly.valleys[0].period == "June"
        assert monthly.peaks[0].confidence == 1.0

        quarterly = seasonality.patterns[1]
        assert quarterly.peaks[0].period == "Q4"
        assert len(quarterly.peaks) == 2

    def test_threshold_controls_detection(self, seasonal_series):
        options = TrendOptions(seasonality_threshold=0.9)
        seasonality = analyze_trend("christmas gifts", seasonal_series, options).seasonality
        assert seasonality.has_seasonality is False


class TestVolatilityAndMomentum:
    """Rolling return volatility and relative momentum."""

    def test_linear_series_is_calm(self, linear_series):
        result = analyze_trend("seo tools", linear_series)
        assert result.volatility.level == VolatilityLevel.LOW
        assert result.volatility.risk_factor == result.volatility.score
        assert result.momentum.current == 1.0
        assert "Low volatility - stable and predictable keyword" in result.insights.opportunities

    def test_short_series_uses_single_window(self):
        volatility = calculate_volatility([100, 200, 100], 30)
        assert volatility.score == 1.0
        assert volatility.level == VolatilityLevel.EXTREME

    def test_zero_volumes_do_not_divide_by_zero(self):
        volatility = calculate_volatility([0, 0, 0, 0], 2)
        assert volatility.score == 0.0

    def test_momentum_bounds(self, seasonal_series):
        momentum = analyze_trend("christmas gifts", seasonal_series).momentum
        for value in (momentum.current, momentum.short_term, momentum.medium_term, momentum.long_term):
            assert -1.0 <= value <= 1.0


class TestCorrelations:
    """Pearson correlations against time and the optional metrics."""

    def test_time_and_interest(self, linear_series):
        correlations = analyze_trend("seo tools", linear_series).correlations
        by_factor = {c.factor: c for c in correlations}
        assert set(by_factor) == {"Time", "Interest"}
        assert by_factor["Time"].correlation == 1.0
        assert by_factor["Time"].significance == 1.0
        assert by_factor["Interest"].correlation == 1.0

    def test_cpc_included_when_every_point_has_it(self):
        start = date(2023, 1, 1)
        series = [
            TrendDataPoint(start + timedelta(days=i), 1000 + 10 * i, 50, cpc=1 + i * 0.01)
            for i in range(40)
        ]
        factors = [c.factor for c in analyze_trend("seo tools", series).correlations]
        assert "CPC" in factors
        assert "Difficulty" not in factors


class TestInsights:
    """Opportunities, risks and timing advice."""

    def test_rising_series_insights(self, linear_series):
        insights = analyze_trend("seo tools", linear_series).insights
        assert "Strong upward trend - good long-term potential" in insights.opportunities
        assert "Reliable short-term forecast - good for immediate planning" in insights.opportunities
        assert insights.risks == ()
        assert "Overall positive outlook - recommended for investment" in insights.recommendations
        assert insights.best_timing_advice == "Current momentum is positive - good time to act"


class TestInputHandling:
    """Cleaning, ordering and rejection of malformed series."""

    def test_clean_series_clamps_and_sorts(self):
        points = [
            TrendDataPoint("2024-01-03", -20, 150),
            TrendDataPoint("2024-01-01", 10, -5),
            TrendDataPoint("2024-01-02", 30, 40),
        ]
        cleaned = clean_series(points)
        assert [p.date.day for p in cleaned] == [1, 2, 3]
        assert cleaned[0].interest == 0
        assert cleaned[2].volume == 0
        assert cleaned[2].interest == 100
        assert points[0].volume == -20

    def test_unsorted_input_matches_sorted(self, linear_series):
        shuffled = list(reversed(linear_series))
        assert analyze_trend("seo tools", shuffled) == analyze_trend("seo tools", linear_series)

    def test_dict_points(self):
        start = date(2023, 1, 1)
        series = [
            {"date": (start + timedelta(days=i)).isoformat(), "volume": 100 + i}
            for i in range(30)
        ]
        result = analyze_trend("seo tools", series)
        assert result.time_range.data_points == 30

    def test_insufficient_data(self, make_series):
        with pytest.raises(InsufficientDataError) as exc_info:
            analyze_trend("seo tools", make_series(10, lambda i, _: 100))
        assert exc_info.value.required == 30
        assert exc_info.value.received == 10

    def test_min_data_points_option(self, make_series):
        options = TrendOptions(min_data_points=5)
        result = analyze_trend("seo tools", make_series(10, lambda i, _: 100 + i), options)
        assert result.time_range.data_points == 10

    @pytest.mark.parametrize("series", ["2024-01-01", [1, 2, 3], None])
    def test_invalid_series(self, series):
        with pytest.raises(InvalidInputError):
            analyze_trend("seo tools", series)

    def test_empty_keyword(self, linear_series):
        with pytest.raises(InvalidInputError):
            analyze_trend("", linear_series)
