"""Frozen dataclass models: analyzer inputs, options and results."""

from keyword_engine.models.keyword import (
    Intent,
    KeywordRecord,
    CompetitorMetrics,
    SerpSnapshot,
)
from keyword_engine.models.difficulty import (
    FactorKind,
    FactorImpact,
    DifficultyLevel,
    EffortLevel,
    DifficultyFactor,
    CompetitorAnalysis,
    SerpComplexity,
    DifficultyAnalysisResult,
)
from keyword_engine.models.clustering import (
    ClusteringOptions,
    KeywordCluster,
    ClusteringStatistics,
    ClusteringResult,
)
from keyword_engine.models.trend import (
    TrendDirection,
    VolatilityLevel,
    SeasonalPeriod,
    TrendDataPoint,
    TrendOptions,
    SeasonalityPattern,
    TrendAnalysisResult,
)
from keyword_engine.models.serp import (
    FeatureImpact,
    CompetitionLevel,
    Priority,
    SerpFeature,
    OrganicResult,
    PaidResult,
    LocalResult,
    SerpAnalysisData,
    SerpAnalysisResult,
)

__all__ = [
    "Intent",
    "KeywordRecord",
    "CompetitorMetrics",
    "SerpSnapshot",
    "FactorKind",
    "FactorImpact",
    "DifficultyLevel",
    "EffortLevel",
    "DifficultyFactor",
    "CompetitorAnalysis",
    "SerpComplexity",
    "DifficultyAnalysisResult",
    "ClusteringOptions",
    "KeywordCluster",
    "ClusteringStatistics",
    "ClusteringResult",
    "TrendDirection",
    "VolatilityLevel",
    "SeasonalPeriod",
    "TrendDataPoint",
    "TrendOptions",
    "SeasonalityPattern",
    "TrendAnalysisResult",
    "FeatureImpact",
    "CompetitionLevel",
    "Priority",
    "SerpFeature",
    "OrganicResult",
    "PaidResult",
    "LocalResult",
    "SerpAnalysisData",
    "SerpAnalysisResult",
]
