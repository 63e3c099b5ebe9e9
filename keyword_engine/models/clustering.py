"""Options and result types for semantic keyword clustering."""

from dataclasses import dataclass

from keyword_engine.exceptions import InvalidInputError
from keyword_engine.models.base import SerializableMixin
from keyword_engine.models.keyword import Intent, KeywordRecord
from keyword_engine.utils.validators import ensure, validate_number


@dataclass(frozen=True)
class ClusteringOptions(SerializableMixin):
    """Tuning knobs for :func:`cluster_keywords`."""

    min_cluster_size: int = 3
    max_clusters: int = 50
    similarity_threshold: float = 0.6
    semantic_weight: float = 0.4
    structural_weight: float = 0.3
    intent_weight: float = 0.3
    large_input_warning: int = 500

    def __post_init__(self) -> None:
        for name in ("min_cluster_size", "max_clusters", "large_input_warning"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidInputError("must be a positive integer.", field=name)
        ensure(validate_number(self.similarity_threshold, "similarity_threshold", 0, 1))
        for name in ("semantic_weight", "structural_weight", "intent_weight"):
            ensure(validate_number(getattr(self, name), name, 0, 1))


@dataclass(frozen=True)
class KeywordCluster(SerializableMixin):
    """A coherent group of keywords and its derived metadata."""

    id: str
    name: str
    keywords: tuple[KeywordRecord, ...]
    primary_keyword: KeywordRecord
    intent: Intent
    avg_volume: int
    avg_difficulty: int
    avg_cpc: float
    total_volume: int
    size: int
    coherence_score: float
    themes: tuple[str, ...]
    opportunities: tuple[str, ...]
    recommendations: tuple[str, ...]


@dataclass(frozen=True)
class ClusteringStatistics(SerializableMixin):
    total_keywords: int
    clustered_keywords: int
    cluster_count: int
    avg_cluster_size: int
    coherence_score: float


@dataclass(frozen=True)
class ClusteringResult(SerializableMixin):
    clusters: tuple[KeywordCluster, ...]
    unclustered: tuple[KeywordRecord, ...]
    statistics: ClusteringStatistics
    intent_distribution: dict[str, int]
    recommendations: tuple[str, ...]
