"""Input points, options and result types for keyword trend analysis."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional

from keyword_engine.exceptions import InvalidInputError
from keyword_engine.models.base import SerializableMixin
from keyword_engine.utils.helpers import parse_date
from keyword_engine.utils.validators import ensure, validate_number, validate_required_fields


class TrendDirection(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"
    VOLATILE = "volatile"


class VolatilityLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


class SeasonalPeriod(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class TrendDataPoint(SerializableMixin):
    """One observation of a keyword's search demand.

    Negative volume or out-of-range interest are accepted here and
    clamped during analysis; only the shape is validated.
    """

    date: date
    volume: float
    interest: float = 0.0
    cpc: Optional[float] = None
    difficulty: Optional[float] = None

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "date", parse_date(self.date))
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(str(exc), field="date") from exc
        ensure(validate_number(self.volume, "volume"))
        ensure(validate_number(self.interest, "interest"))
        if self.cpc is not None:
            ensure(validate_number(self.cpc, "cpc", 0))
        if self.difficulty is not None:
            ensure(validate_number(self.difficulty, "difficulty", 0, 100))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TrendDataPoint":
        ensure(validate_required_fields(data, ["date", "volume"]))
        return cls(
            date=data["date"],
            volume=data["volume"],
            interest=data.get("interest", 0.0),
            cpc=data.get("cpc"),
            difficulty=data.get("difficulty"),
        )


@dataclass(frozen=True)
class TrendOptions(SerializableMixin):
    """Tuning knobs for :func:`analyze_trend`."""

    smoothing_window: int = 7
    seasonality_threshold: float = 0.3
    volatility_window: int = 30
    forecast_horizon: int = 365
    confidence_level: float = 0.95
    min_data_points: int = 30

    def __post_init__(self) -> None:
        for name in ("smoothing_window", "volatility_window", "forecast_horizon", "min_data_points"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidInputError("must be a positive integer.", field=name)
        ensure(validate_number(self.seasonality_threshold, "seasonality_threshold", 0, 1))
        ensure(validate_number(self.confidence_level, "confidence_level", 0.5, 0.999))


@dataclass(frozen=True)
class TimeRange(SerializableMixin):
    start: date
    end: date
    data_points: int


@dataclass(frozen=True)
class OverallTrend(SerializableMixin):
    direction: TrendDirection
    strength: float  # 0-1
    confidence: float  # 0-1
    change_percent: float
    slope: float
    r_squared: float


@dataclass(frozen=True)
class SeasonalPeak(SerializableMixin):
    period: str
    intensity: float
    confidence: float


@dataclass(frozen=True)
class SeasonalityPattern(SerializableMixin):
    period: SeasonalPeriod
    strength: float
    peaks: tuple[SeasonalPeak, ...]
    valleys: tuple[SeasonalPeak, ...]


@dataclass(frozen=True)
class Seasonality(SerializableMixin):
    has_seasonality: bool
    patterns: tuple[SeasonalityPattern, ...]
    predictability: float


@dataclass(frozen=True)
class Volatility(SerializableMixin):
    score: float
    level: VolatilityLevel
    risk_factor: float


@dataclass(frozen=True)
class Momentum(SerializableMixin):
    """Relative change in demand, each value clamped to [-1, 1]."""

    current: float
    short_term: float
    medium_term: float
    long_term: float


@dataclass(frozen=True)
class ForecastRange(SerializableMixin):
    min: int
    max: int


@dataclass(frozen=True)
class ForecastPoint(SerializableMixin):
    horizon_days: int
    predicted: int
    confidence: float
    range: ForecastRange


@dataclass(frozen=True)
class Forecast(SerializableMixin):
    """Projections per horizon; a horizon beyond ``forecast_horizon`` is None."""

    next_month: Optional[ForecastPoint] = None
    next_quarter: Optional[ForecastPoint] = None
    next_year: Optional[ForecastPoint] = None


@dataclass(frozen=True)
class Correlation(SerializableMixin):
    factor: str
    correlation: float
    significance: float


@dataclass(frozen=True)
class TrendInsights(SerializableMixin):
    opportunities: tuple[str, ...]
    risks: tuple[str, ...]
    recommendations: tuple[str, ...]
    best_timing_advice: str


@dataclass(frozen=True)
class TrendAnalysisResult(SerializableMixin):
    keyword: str
    time_range: TimeRange
    overall_trend: OverallTrend
    seasonality: Seasonality
    volatility: Volatility
    momentum: Momentum
    forecast: Forecast
    insights: TrendInsights
    correlations: tuple[Correlation, ...]
