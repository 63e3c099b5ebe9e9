"""General-purpose numeric and date helpers shared by the analyzers."""

import math
from datetime import date, datetime
from typing import Iterable, Union

Number = Union[int, float]

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def clamp(value: Number, lower: Number, upper: Number) -> Number:
    """Constrain *value* to the closed interval [lower, upper].

    Examples:
        >>> clamp(120, 0, 100)
        100
        >>> clamp(-0.4, -1, 1)
        -0.4
    """
    return max(lower, min(upper, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity.

    Python's built-in ``round`` uses banker's rounding, which would make
    35.5 and 36.5 both land on 36. Scores are rounded the conventional way.

    Examples:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-2.5)
        -2
    """
    return int(math.floor(value + 0.5))


def round_to(value: float, digits: int = 2) -> float:
    """Round half-up to a fixed number of decimal places."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def safe_div(numerator: Number, denominator: Number, default: float = 0.0) -> float:
    """Divide, returning *default* instead of raising on a zero denominator."""
    if denominator == 0:
        return default
    return numerator / denominator


def mean(values: Iterable[Number]) -> float:
    """Arithmetic mean; 0.0 for an empty iterable."""
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


def month_name(month_index: int) -> str:
    """Return the English month name for a zero-based month index."""
    if 0 <= month_index < 12:
        return MONTH_NAMES[month_index]
    return "Unknown"


def parse_date(value: Union[str, date, datetime]) -> date:
    """Coerce an ISO date string, ``date`` or ``datetime`` to a ``date``.

    Raises:
        ValueError: If *value* is a string that is not an ISO date.
        TypeError: If *value* is of an unsupported type.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) > 10 and text[10] in ("T", " "):
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text[:10])
    raise TypeError("Unsupported date value: " + repr(value))
