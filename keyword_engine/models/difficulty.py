"""Result types for keyword difficulty analysis."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from keyword_engine.models.base import SerializableMixin
from keyword_engine.models.keyword import CompetitorMetrics


class FactorKind(str, Enum):
    """Tag identifying each of the seven difficulty factors."""

    SEARCH_VOLUME = "search_volume"
    COMPETITION_LEVEL = "competition_level"
    TOP_COMPETITORS = "top_competitors"
    SERP_FEATURES = "serp_features"
    CONTENT_QUALITY = "content_quality"
    BACKLINK_PROFILE = "backlink_profile"
    COMMERCIAL_INTENT = "commercial_intent"


class FactorImpact(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class DifficultyLevel(str, Enum):
    VERY_EASY = "Very Easy"
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    VERY_HARD = "Very Hard"
    EXTREMELY_HARD = "Extremely Hard"


class EffortLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"


@dataclass(frozen=True)
class DifficultyFactor(SerializableMixin):
    """One weighted component of the overall difficulty score."""

    kind: FactorKind
    name: str
    value: float  # 0-100
    weight: float  # 0-1
    impact: FactorImpact
    description: str


@dataclass(frozen=True)
class AverageCompetitorMetrics(SerializableMixin):
    domain_authority: int = 0
    backlinks: int = 0
    content_length: int = 0


@dataclass(frozen=True)
class CompetitorAnalysis(SerializableMixin):
    """Strength-ranked summary of the supplied competitors."""

    top_competitors: tuple[CompetitorMetrics, ...]
    average_metrics: AverageCompetitorMetrics
    weakest_competitor: Optional[CompetitorMetrics]
    strongest_competitor: Optional[CompetitorMetrics]


@dataclass(frozen=True)
class SerpComplexity(SerializableMixin):
    score: int
    features: tuple[str, ...]
    organic_spots: int


@dataclass(frozen=True)
class DifficultyAnalysisResult(SerializableMixin):
    """Everything :func:`analyze_difficulty` knows about one keyword."""

    keyword: str
    location: str
    overall_score: int  # 0-100
    difficulty_level: DifficultyLevel
    factors: tuple[DifficultyFactor, ...]
    competitor_analysis: CompetitorAnalysis
    serp_complexity: SerpComplexity
    recommendations: tuple[str, ...]
    time_to_rank: str
    effort_required: EffortLevel
    success_probability: int  # 5-95

    def factor(self, kind: FactorKind) -> DifficultyFactor:
        """Return the factor tagged *kind*."""
        for item in self.factors:
            if item.kind == kind:
                return item
        raise KeyError(kind)
