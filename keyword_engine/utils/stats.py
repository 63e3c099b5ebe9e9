"""Statistical utilities shared by every analyzer.

Plain-Python implementations so results are bit-for-bit reproducible
across platforms; every division is guarded so degenerate inputs yield
degenerate-but-valid values instead of NaN or infinity.
"""

import math
from typing import Sequence

from keyword_engine.utils.helpers import clamp, mean, round_half_up


def normalize_score(value: float, minimum: float, maximum: float) -> int:
    """Scale *value* from [minimum, maximum] onto an integer 0-100 score.

    Examples:
        >>> normalize_score(5, 0, 10)
        50
        >>> normalize_score(15, 0, 10)
        100
    """
    span = maximum - minimum
    if span == 0:
        return 0
    return round_half_up(clamp((value - minimum) / span * 100, 0, 100))


def percentile(value: float, values: Sequence[float]) -> int:
    """Percentile rank (0-100) of *value* within *values*.

    The rank is the share of elements strictly below the first element
    that is >= *value*; a value above every element ranks 100.
    """
    ordered = sorted(values)
    if not ordered:
        return 0
    for index, item in enumerate(ordered):
        if item >= value:
            return round_half_up(index / len(ordered) * 100)
    return 100


def variance(values: Sequence[float]) -> float:
    """Population variance; 0.0 for fewer than one value."""
    if not values:
        return 0.0
    avg = mean(values)
    return sum((v - avg) ** 2 for v in values) / len(values)


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation."""
    return math.sqrt(variance(values))


def correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson correlation coefficient; 0.0 for mismatched, empty or constant series."""
    if len(x) != len(y) or not x:
        return 0.0
    n = len(x)
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(a * b for a, b in zip(x, y))
    sum_xx = sum(a * a for a in x)
    sum_yy = sum(b * b for b in y)

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_xx - sum_x * sum_x) * (n * sum_yy - sum_y * sum_y)
    if spread <= 0:
        return 0.0
    return clamp(numerator / math.sqrt(spread), -1.0, 1.0)


def moving_average(values: Sequence[float], window: int) -> list[float]:
    """Centered moving average, truncating the window at both edges."""
    half = max(0, window) // 2
    result: list[float] = []
    for i in range(len(values)):
        start = max(0, i - half)
        end = min(len(values), i + half + 1)
        chunk = values[start:end]
        result.append(sum(chunk) / len(chunk))
    return result


def detect_outliers(values: Sequence[float]) -> dict[str, list[float]]:
    """Split *values* into IQR outliers and the cleaned remainder.

    Quartiles are taken by index (floor of 25% / 75% of the length) on the
    sorted copy; the fences sit 1.5 IQR beyond them. Input order is kept
    in both output lists.
    """
    if not values:
        return {"outliers": [], "cleaned": []}
    ordered = sorted(values)
    q1 = ordered[int(len(ordered) * 0.25)]
    q3 = ordered[min(len(ordered) - 1, int(len(ordered) * 0.75))]
    iqr = q3 - q1
    lower = q1 - 1.5 * iqr
    upper = q3 + 1.5 * iqr
    return {
        "outliers": [v for v in values if v < lower or v > upper],
        "cleaned": [v for v in values if lower <= v <= upper],
    }


def confidence(sample_size: int, sample_variance: float) -> float:
    """Confidence score in [0, 1] from sample size and variance.

    Uses a t-value of 2.0 below 30 samples and 1.96 otherwise; the score
    is one minus the margin of error relative to the standard deviation.
    """
    if sample_size < 2 or sample_variance <= 0:
        return 0.0
    t_value = 2.0 if sample_size < 30 else 1.96
    standard_error = math.sqrt(sample_variance / sample_size)
    margin = t_value * standard_error
    return clamp(1 - margin / math.sqrt(sample_variance), 0.0, 1.0)


def linear_regression(values: Sequence[float]) -> dict[str, float]:
    """Ordinary least squares of *values* against their index.

    Returns:
        Dict with slope, intercept and r_squared. A constant or single
        point series gives slope 0 and r_squared 0.
    """
    n = len(values)
    if n == 0:
        return {"slope": 0.0, "intercept": 0.0, "r_squared": 0.0}

    x_mean = (n - 1) / 2
    y_mean = sum(values) / n

    numerator = 0.0
    denominator = 0.0
    for i, value in enumerate(values):
        x_diff = i - x_mean
        numerator += x_diff * (value - y_mean)
        denominator += x_diff * x_diff

    slope = numerator / denominator if denominator != 0 else 0.0
    intercept = y_mean - slope * x_mean

    ss_res = 0.0
    ss_tot = 0.0
    for i, value in enumerate(values):
        predicted = slope * i + intercept
        ss_res += (value - predicted) ** 2
        ss_tot += (value - y_mean) ** 2
    r_squared = 1 - ss_res / ss_tot if ss_tot != 0 else 0.0

    return {"slope": slope, "intercept": intercept, "r_squared": r_squared}


def mean_squared_error(values: Sequence[float], slope: float, intercept: float) -> float:
    """MSE of *values* against the line ``slope * index + intercept``."""
    if not values:
        return 0.0
    return sum((v - (slope * i + intercept)) ** 2 for i, v in enumerate(values)) / len(values)
