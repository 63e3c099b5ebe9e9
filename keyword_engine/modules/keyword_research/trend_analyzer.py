"""Keyword trend analyzer -- direction, seasonality, volatility, momentum and forecast.

Works on a daily (or any regular) series of :class:`TrendDataPoint`. The
series is cleaned and sorted first; all later steps read the cleaned copy
so the caller's data is never altered.
"""

import logging
import math
from dataclasses import replace
from datetime import timedelta
from statistics import NormalDist
from typing import Any, Mapping, Optional, Sequence, Union

from keyword_engine.exceptions import InsufficientDataError, InvalidInputError
from keyword_engine.models.trend import (
    Correlation,
    Forecast,
    ForecastPoint,
    ForecastRange,
    Momentum,
    OverallTrend,
    SeasonalPeak,
    SeasonalPeriod,
    Seasonality,
    SeasonalityPattern,
    TimeRange,
    TrendAnalysisResult,
    TrendDataPoint,
    TrendDirection,
    TrendInsights,
    TrendOptions,
    Volatility,
    VolatilityLevel,
)
from keyword_engine.utils.helpers import clamp, mean, month_name, round_half_up, round_to
from keyword_engine.utils.stats import (
    correlation,
    linear_regression,
    mean_squared_error,
    moving_average,
    std_dev,
)
from keyword_engine.utils.validators import ensure, ensure_sequence_of, validate_keyword_text

logger = logging.getLogger(__name__)

FORECAST_HORIZONS = {"next_month": 30, "next_quarter": 90, "next_year": 365}
MOMENTUM_WINDOWS = {"short_term": 30, "medium_term": 90, "long_term": 365}

MIN_MONTHS = 6
MIN_QUARTERS = 3
MIN_YEARS = 2
MIN_POINTS_FOR_YEARLY = 365

CORRELATION_CUTOFF = 0.2

PointInput = Union[TrendDataPoint, Mapping[str, Any]]


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def analyze_trend(
    keyword: str,
    series: Sequence[PointInput],
    options: Optional[TrendOptions] = None,
) -> TrendAnalysisResult:
    """Analyze a keyword's search-demand history.

    Args:
        keyword: Keyword the series belongs to.
        series: Data points (or dicts with ``date`` and ``volume``), in any
            order.
        options: Tuning knobs; defaults to :class:`TrendOptions()`.

    Returns:
        A :class:`TrendAnalysisResult`.

    Raises:
        InvalidInputError: If *series* has the wrong shape.
        InsufficientDataError: If fewer than ``options.min_data_points``
            points remain after cleaning.
    """
    options = options or TrendOptions()
    ensure(validate_keyword_text(keyword), "keyword")
    points = clean_series(_coerce_series(series))

    logger.info("Analyzing trend for %r over %d points", keyword, len(points))
    if len(points) < options.min_data_points:
        raise InsufficientDataError(options.min_data_points, len(points))

    volumes = [p.volume for p in points]
    smoothed = [
        float(round_half_up(v))
        for v in moving_average(volumes, options.smoothing_window)
    ]

    overall = calculate_overall_trend(smoothed)
    seasonality = detect_seasonality(points, options)
    volatility = calculate_volatility(volumes, options.volatility_window)
    momentum = calculate_momentum(volumes)
    forecast = generate_forecast(points, seasonality, options)
    correlations = detect_correlations(points)
    insights = generate_insights(overall, seasonality, volatility, momentum, forecast)

    result = TrendAnalysisResult(
        keyword=keyword,
        time_range=TimeRange(start=points[0].date, end=points[-1].date, data_points=len(points)),
        overall_trend=overall,
        seasonality=seasonality,
        volatility=volatility,
        momentum=momentum,
        forecast=forecast,
        insights=insights,
        correlations=tuple(correlations),
    )
    logger.info(
        "Trend for %r: %s (confidence %.2f, seasonal=%s, volatility=%s)",
        keyword, overall.direction.value, overall.confidence,
        seasonality.has_seasonality, volatility.level.value,
    )
    return result


def clean_series(points: Sequence[TrendDataPoint]) -> list[TrendDataPoint]:
    """Clamp volume to >= 0 and interest to [0, 100], then sort by date (stable)."""
    cleaned = []
    for point in points:
        volume = max(0, point.volume)
        interest = clamp(point.interest, 0, 100)
        if volume != point.volume or interest != point.interest:
            point = replace(point, volume=volume, interest=interest)
        cleaned.append(point)
    cleaned.sort(key=lambda p: p.date)
    return cleaned


def calculate_overall_trend(values: Sequence[float]) -> OverallTrend:
    """Fit a line through *values* (usually the smoothed volumes)."""
    fit = linear_regression(values)
    slope = fit["slope"]
    r_squared = fit["r_squared"]
    avg = mean(values)

    # A flat zero series has no slope to compare
    if avg == 0 or abs(slope) < avg * 0.01:
        direction = TrendDirection.STABLE
    elif r_squared < 0.3:
        direction = TrendDirection.VOLATILE
    elif slope > 0:
        direction = TrendDirection.RISING
    else:
        direction = TrendDirection.FALLING

    strength = min(1.0, abs(slope) / avg) if avg > 0 else 0.0
    first = values[0] if values and values[0] != 0 else 1
    last = values[-1] if values else 0
    change_percent = round_to((last - first) / first * 100, 2)

    return OverallTrend(
        direction=direction,
        strength=strength,
        confidence=clamp(r_squared, 0.0, 1.0),
        change_percent=change_percent,
        slope=slope,
        r_squared=r_squared,
    )


# ------------------------------------------------------------------
# Seasonality
# ------------------------------------------------------------------

def detect_seasonality(points: Sequence[TrendDataPoint], options: TrendOptions) -> Seasonality:
    """Look for monthly, quarterly and yearly patterns in the cleaned volumes."""
    candidates = [_monthly_pattern(points), _quarterly_pattern(points)]
    if len(points) >= MIN_POINTS_FOR_YEARLY:
        candidates.append(_yearly_pattern(points))

    patterns = []
    for pattern in candidates:
        logger.debug("Seasonality %s strength %.3f", pattern.period.value, pattern.strength)
        if pattern.strength > options.seasonality_threshold:
            patterns.append(pattern)

    predictability = min(1.0, mean(p.strength for p in patterns)) if patterns else 0.0
    return Seasonality(
        has_seasonality=bool(patterns),
        patterns=tuple(patterns),
        predictability=predictability,
    )


def _bucket(points: Sequence[TrendDataPoint], key) -> dict[Any, list[float]]:
    buckets: dict[Any, list[float]] = {}
    for point in points:
        buckets.setdefault(key(point), []).append(point.volume)
    return dict(sorted(buckets.items()))


def _pattern(
    period: SeasonalPeriod,
    buckets: dict[Any, list[float]],
    label,
    peak_count: int,
    confidence_divisor: float,
) -> SeasonalityPattern:
    averages = [(bucket_key, mean(vals), len(vals)) for bucket_key, vals in buckets.items()]
    overall = mean(avg for _, avg, _ in averages)
    if overall <= 0:
        return SeasonalityPattern(period=period, strength=0.0, peaks=(), valleys=())

    strength = min(1.0, std_dev([avg for _, avg, _ in averages]) / overall)
    ranked = sorted(averages, key=lambda item: item[1], reverse=True)

    def _peak(item) -> SeasonalPeak:
        bucket_key, avg, count = item
        return SeasonalPeak(
            period=label(bucket_key),
            intensity=avg / overall,
            confidence=min(1.0, count / confidence_divisor),
        )

    peaks = tuple(_peak(item) for item in ranked[:peak_count])
    valleys = tuple(_peak(item) for item in reversed(ranked[-peak_count:]))
    return SeasonalityPattern(period=period, strength=strength, peaks=peaks, valleys=valleys)


def _monthly_pattern(points: Sequence[TrendDataPoint]) -> SeasonalityPattern:
    buckets = _bucket(points, lambda p: p.date.month - 1)
    if len(buckets) < MIN_MONTHS:
        return SeasonalityPattern(period=SeasonalPeriod.MONTHLY, strength=0.0, peaks=(), valleys=())
    return _pattern(SeasonalPeriod.MONTHLY, buckets, month_name, 3, 10)


def _quarterly_pattern(points: Sequence[TrendDataPoint]) -> SeasonalityPattern:
    buckets = _bucket(points, lambda p: (p.date.month - 1) // 3)
    if len(buckets) < MIN_QUARTERS:
        return SeasonalityPattern(period=SeasonalPeriod.QUARTERLY, strength=0.0, peaks=(), valleys=())
    return _pattern(SeasonalPeriod.QUARTERLY, buckets, lambda q: "Q" + str(q + 1), 2, 30)


def _yearly_pattern(points: Sequence[TrendDataPoint]) -> SeasonalityPattern:
    buckets = _bucket(points, lambda p: p.date.year)
    if len(buckets) < MIN_YEARS:
        return SeasonalityPattern(period=SeasonalPeriod.YEARLY, strength=0.0, peaks=(), valleys=())
    count = math.ceil(len(buckets) / 3)
    return _pattern(SeasonalPeriod.YEARLY, buckets, str, count, 100)


def monthly_factors(points: Sequence[TrendDataPoint]) -> list[float]:
    """Per calendar month, the ratio of the month's mean volume to the overall mean."""
    factors = [1.0] * 12
    overall = mean(p.volume for p in points)
    if overall <= 0:
        return factors
    for month, vals in _bucket(points, lambda p: p.date.month - 1).items():
        factors[month] = mean(vals) / overall
    return factors


# ------------------------------------------------------------------
# Volatility & momentum
# ------------------------------------------------------------------

def calculate_volatility(volumes: Sequence[float], window: int) -> Volatility:
    """Average rolling standard deviation of period-over-period returns."""
    returns = []
    for previous, current in zip(volumes, volumes[1:]):
        previous = previous or 1
        current = current or 1
        returns.append((current - previous) / previous)

    if len(returns) < window:
        windows = [returns] if returns else []
    else:
        windows = [returns[i - window:i] for i in range(window, len(returns) + 1)]

    avg_volatility = mean(std_dev(chunk) for chunk in windows)
    score = min(1.0, avg_volatility * 10)

    if score < 0.2:
        level = VolatilityLevel.LOW
    elif score < 0.4:
        level = VolatilityLevel.MEDIUM
    elif score < 0.7:
        level = VolatilityLevel.HIGH
    else:
        level = VolatilityLevel.EXTREME

    return Volatility(score=score, level=level, risk_factor=score)


def _relative_change(baseline: Sequence[float], recent: Sequence[float]) -> float:
    base = mean(baseline)
    if base <= 0:
        return 0.0
    return (mean(recent) - base) / base


def _period_momentum(values: Sequence[float]) -> float:
    if len(values) < 2:
        return 0.0
    half = len(values) // 2
    return _relative_change(values[:half], values[half:])


def calculate_momentum(volumes: Sequence[float]) -> Momentum:
    n = len(volumes)
    edge = max(3, int(n * 0.1))
    current = _relative_change(volumes[:edge], volumes[-edge:])
    spans = {
        name: _period_momentum(volumes[-min(days, n):])
        for name, days in MOMENTUM_WINDOWS.items()
    }
    return Momentum(
        current=clamp(current, -1.0, 1.0),
        short_term=clamp(spans["short_term"], -1.0, 1.0),
        medium_term=clamp(spans["medium_term"], -1.0, 1.0),
        long_term=clamp(spans["long_term"], -1.0, 1.0),
    )


# ------------------------------------------------------------------
# Forecast & correlations
# ------------------------------------------------------------------

def z_score(confidence_level: float) -> float:
    """Two-sided normal critical value, e.g. 1.96 for 0.95."""
    return round_to(NormalDist().inv_cdf((1 + confidence_level) / 2), 2)


def generate_forecast(
    points: Sequence[TrendDataPoint],
    seasonality: Seasonality,
    options: TrendOptions,
) -> Forecast:
    """Linear trend projection, scaled by the monthly factor when seasonal.

    Only horizons of at most ``options.forecast_horizon`` days are projected.
    """
    values = [p.volume for p in points]
    n = len(values)
    fit = linear_regression(values)
    slope, intercept = fit["slope"], fit["intercept"]
    error = math.sqrt(mean_squared_error(values, slope, intercept))
    z = z_score(options.confidence_level)
    factors = monthly_factors(points) if seasonality.has_seasonality else None
    last_date = points[-1].date

    forecasts = {}
    for name, days in FORECAST_HORIZONS.items():
        if days > options.forecast_horizon:
            continue
        predicted = slope * (n + days / 2) + intercept
        if factors is not None:
            target = last_date + timedelta(days=days / 2)
            predicted *= factors[target.month - 1]
        predicted = max(0.0, predicted)

        confidence = clamp(1 - error / (predicted or 1), 0.1, 0.9)
        margin = error * z
        forecasts[name] = ForecastPoint(
            horizon_days=days,
            predicted=round_half_up(predicted),
            confidence=round_to(confidence, 2),
            range=ForecastRange(
                min=round_half_up(max(0.0, predicted - margin)),
                max=round_half_up(predicted + margin),
            ),
        )
    return Forecast(**forecasts)


def detect_correlations(points: Sequence[TrendDataPoint]) -> list[Correlation]:
    """Pearson correlations of volume with time, interest, CPC and difficulty."""
    volumes = [p.volume for p in points]
    n = len(volumes)
    series = [
        ("Time", [float(i) for i in range(n)]),
        ("Interest", [p.interest for p in points]),
    ]
    if all(p.cpc is not None for p in points):
        series.append(("CPC", [p.cpc for p in points]))
    if all(p.difficulty is not None for p in points):
        series.append(("Difficulty", [p.difficulty for p in points]))

    correlations = []
    for factor, values in series:
        r = correlation(volumes, values)
        if abs(r) <= CORRELATION_CUTOFF:
            continue
        correlations.append(Correlation(
            factor=factor,
            correlation=round_to(r, 2),
            significance=round_to(_significance(r, n), 2),
        ))
    return correlations


def _significance(r: float, n: int) -> float:
    """Rough 0-1 significance: the t-statistic of *r* scaled down by ten."""
    if n <= 2:
        return 0.0
    denominator = math.sqrt(max(0.0, 1 - r * r))
    if denominator == 0:
        return 1.0
    t_stat = abs(r) * math.sqrt(n - 2) / denominator
    return clamp(t_stat / 10, 0.0, 1.0)


# ------------------------------------------------------------------
# Insights
# ------------------------------------------------------------------

def generate_insights(
    overall: OverallTrend,
    seasonality: Seasonality,
    volatility: Volatility,
    momentum: Momentum,
    forecast: Forecast,
) -> TrendInsights:
    opportunities: list[str] = []
    risks: list[str] = []
    recommendations: list[str] = []
    timing = ""

    if overall.direction == TrendDirection.RISING and overall.confidence > 0.6:
        opportunities.append("Strong upward trend - good long-term potential")
        recommendations.append("Invest in content creation for this keyword")
    elif overall.direction == TrendDirection.FALLING:
        risks.append("Declining trend - may indicate decreasing interest")
        recommendations.append("Consider pivoting to related trending keywords")

    if seasonality.has_seasonality and seasonality.predictability > 0.6:
        opportunities.append("Predictable seasonal patterns - plan content calendar accordingly")
        peaks = seasonality.patterns[0].peaks
        if peaks:
            timing = "Peak season: " + peaks[0].period + " - prepare content in advance"

    if volatility.level == VolatilityLevel.LOW:
        opportunities.append("Low volatility - stable and predictable keyword")
    elif volatility.level in (VolatilityLevel.HIGH, VolatilityLevel.EXTREME):
        risks.append("High volatility - unpredictable performance")
        recommendations.append("Monitor closely and be prepared to adjust strategy")

    if momentum.current > 0.2 and momentum.short_term > 0.1:
        opportunities.append("Strong current momentum - act quickly to capitalize")
        recommendations.append("Prioritize this keyword in current content strategy")
    elif momentum.current < -0.2:
        risks.append("Negative momentum - declining interest")

    short = forecast.next_month
    if short is not None and short.confidence > 0.7 and short.predicted > 0:
        opportunities.append("Reliable short-term forecast - good for immediate planning")

    if len(opportunities) > len(risks):
        recommendations.append("Overall positive outlook - recommended for investment")
    elif len(risks) > len(opportunities):
        recommendations.append("Proceed with caution - consider alternative keywords")

    if not timing:
        if momentum.current > 0:
            timing = "Current momentum is positive - good time to act"
        else:
            timing = "Wait for better momentum or seasonal upturn"

    return TrendInsights(
        opportunities=tuple(opportunities),
        risks=tuple(risks),
        recommendations=tuple(recommendations),
        best_timing_advice=timing,
    )


def _coerce_series(series: Sequence[PointInput]) -> list[TrendDataPoint]:
    ensure_sequence_of(series, name="series")
    points: list[TrendDataPoint] = []
    for index, item in enumerate(series):
        if isinstance(item, TrendDataPoint):
            points.append(item)
        elif isinstance(item, Mapping):
            points.append(TrendDataPoint.from_dict(item))
        else:
            raise InvalidInputError(
                "item " + str(index) + " must be TrendDataPoint or a dict.", field="series",
            )
    return points
