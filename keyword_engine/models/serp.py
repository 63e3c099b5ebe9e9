"""SERP snapshot inputs and result types for SERP competitiveness analysis."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from keyword_engine.exceptions import InvalidInputError
from keyword_engine.models.base import SerializableMixin
from keyword_engine.utils.validators import (
    ensure,
    validate_keyword_text,
    validate_number,
    validate_required_fields,
)


class FeatureImpact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CompetitionLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class SerpFeature(SerializableMixin):
    type: str
    present: bool
    impact: FeatureImpact = FeatureImpact.MEDIUM
    position: Optional[int] = None
    click_through_rate: Optional[float] = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, str) or not self.type:
            raise InvalidInputError("must be a non-empty string.", field="type")
        if not isinstance(self.present, bool):
            raise InvalidInputError("must be a boolean.", field="present")
        try:
            impact = FeatureImpact(getattr(self.impact, "value", self.impact))
        except ValueError as exc:
            raise InvalidInputError("must be high, medium or low.", field="impact") from exc
        object.__setattr__(self, "impact", impact)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SerpFeature":
        ensure(validate_required_fields(data, ["type", "present"]))
        return cls(
            type=data["type"],
            present=data["present"],
            impact=data.get("impact", FeatureImpact.MEDIUM),
            position=data.get("position"),
            click_through_rate=data.get("click_through_rate", data.get("clickThroughRate")),
        )


@dataclass(frozen=True)
class OrganicResult(SerializableMixin):
    """One organic listing with the ranking page's competitive metadata."""

    position: int
    domain: str
    url: str = ""
    title: str = ""
    domain_authority: float = 0.0
    page_authority: float = 0.0
    backlinks: int = 0
    content_length: int = 0
    page_speed: float = 0.0
    social_signals: int = 0
    keyword_density: float = 0.0
    title_match: bool = False
    url_match: bool = False
    meta_match: bool = False
    structured_data: bool = False
    https: bool = True
    mobile_optimized: bool = True

    def __post_init__(self) -> None:
        ensure(validate_number(self.position, "position", 1))
        if not isinstance(self.domain, str):
            raise InvalidInputError("must be a string.", field="domain")
        ensure(validate_number(self.domain_authority, "domain_authority", 0, 100))
        ensure(validate_number(self.page_authority, "page_authority", 0, 100))
        ensure(validate_number(self.page_speed, "page_speed", 0, 100))
        for name in ("backlinks", "content_length", "social_signals", "keyword_density"):
            ensure(validate_number(getattr(self, name), name, 0))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OrganicResult":
        ensure(validate_required_fields(data, ["position", "domain"]))
        aliases = {
            "domain_authority": "domainAuthority",
            "page_authority": "pageAuthority",
            "content_length": "contentLength",
            "page_speed": "pageSpeed",
            "social_signals": "socialSignals",
            "keyword_density": "keywordDensity",
            "title_match": "titleMatch",
            "url_match": "urlMatch",
            "meta_match": "metaMatch",
            "structured_data": "structuredData",
            "mobile_optimized": "mobileOptimized",
        }
        kwargs: dict[str, Any] = {}
        for name in ("url", "title", "backlinks", "https"):
            if name in data:
                kwargs[name] = data[name]
        for name, alias in aliases.items():
            if name in data:
                kwargs[name] = data[name]
            elif alias in data:
                kwargs[name] = data[alias]
        return cls(position=data["position"], domain=data["domain"], **kwargs)


@dataclass(frozen=True)
class PaidResult(SerializableMixin):
    position: int
    domain: str
    url: str = ""
    estimated_cpc: float = 0.0
    ad_extensions: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PaidResult":
        ensure(validate_required_fields(data, ["position", "domain"]))
        return cls(
            position=data["position"],
            domain=data["domain"],
            url=data.get("url", ""),
            estimated_cpc=data.get("estimated_cpc", data.get("estimatedCpc", 0.0)),
            ad_extensions=tuple(data.get("ad_extensions", data.get("adExtensions", ()))),
        )


@dataclass(frozen=True)
class LocalResult(SerializableMixin):
    name: str
    rating: float = 0.0
    reviews: int = 0
    category: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LocalResult":
        ensure(validate_required_fields(data, ["name"]))
        return cls(
            name=data["name"],
            rating=data.get("rating", 0.0),
            reviews=data.get("reviews", 0),
            category=data.get("category", ""),
        )


@dataclass(frozen=True)
class SerpAnalysisData(SerializableMixin):
    """A full results-page snapshot for one keyword."""

    keyword: str
    location: str = "US"
    device: str = "desktop"
    language: str = "en"
    total_results: int = 0
    features: tuple[SerpFeature, ...] = ()
    organic_results: tuple[OrganicResult, ...] = ()
    paid_results: tuple[PaidResult, ...] = ()
    local_results: tuple[LocalResult, ...] = ()
    related_searches: tuple[str, ...] = ()
    people_also_ask: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        ensure(validate_keyword_text(self.keyword), "keyword")
        if self.device not in ("desktop", "mobile"):
            raise InvalidInputError("must be desktop or mobile.", field="device")
        for name, item_type in (
            ("features", SerpFeature),
            ("organic_results", OrganicResult),
            ("paid_results", PaidResult),
            ("local_results", LocalResult),
            ("related_searches", str),
            ("people_also_ask", str),
        ):
            items = tuple(getattr(self, name))
            for index, item in enumerate(items):
                if not isinstance(item, item_type):
                    raise InvalidInputError(
                        f"item {index} must be {item_type.__name__}, got {type(item).__name__}.",
                        field=name,
                    )
            object.__setattr__(self, name, items)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SerpAnalysisData":
        ensure(validate_required_fields(data, ["keyword"]))

        def _items(name: str, alias: str) -> list:
            return list(data.get(name, data.get(alias, [])) or [])

        return cls(
            keyword=data["keyword"],
            location=data.get("location", "US"),
            device=data.get("device", "desktop"),
            language=data.get("language", "en"),
            total_results=data.get("total_results", data.get("totalResults", 0)),
            features=tuple(SerpFeature.from_dict(f) for f in _items("features", "features")),
            organic_results=tuple(
                OrganicResult.from_dict(r) for r in _items("organic_results", "organicResults")
            ),
            paid_results=tuple(
                PaidResult.from_dict(r) for r in _items("paid_results", "paidResults")
            ),
            local_results=tuple(
                LocalResult.from_dict(r) for r in _items("local_results", "localResults")
            ),
            related_searches=tuple(_items("related_searches", "relatedSearches")),
            people_also_ask=tuple(_items("people_also_ask", "peopleAlsoAsk")),
        )


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClickDistribution(SerializableMixin):
    """Estimated share of clicks (percent) per result type."""

    organic: int
    paid: int
    features: int


@dataclass(frozen=True)
class SerpOverview(SerializableMixin):
    total_results: int
    features_count: int
    organic_spots: int
    paid_ads_count: int
    competition_level: CompetitionLevel
    click_distribution: ClickDistribution


@dataclass(frozen=True)
class FeatureOpportunity(SerializableMixin):
    feature: str
    priority: Priority
    description: str
    action_items: tuple[str, ...]


@dataclass(frozen=True)
class FeatureAnalysis(SerializableMixin):
    present: tuple[SerpFeature, ...]
    absent: tuple[SerpFeature, ...]
    opportunities: tuple[FeatureOpportunity, ...]


@dataclass(frozen=True)
class OrganicAverages(SerializableMixin):
    domain_authority: int = 0
    content_length: int = 0
    page_speed: int = 0
    backlinks: int = 0


@dataclass(frozen=True)
class OrganicAnalysis(SerializableMixin):
    top_competitors: tuple[OrganicResult, ...]
    average_metrics: OrganicAverages
    content_gaps: tuple[str, ...]
    technical_gaps: tuple[str, ...]
    optimization_opportunities: tuple[str, ...]


@dataclass(frozen=True)
class DominantDomain(SerializableMixin):
    domain: str
    positions: tuple[int, ...]
    average_position: float
    market_share: float


@dataclass(frozen=True)
class CompetitorInsights(SerializableMixin):
    dominant_domains: tuple[DominantDomain, ...]
    weakest_competitor: Optional[OrganicResult]
    strongest_competitor: Optional[OrganicResult]
    content_patterns: tuple[str, ...]


@dataclass(frozen=True)
class SerpRecommendations(SerializableMixin):
    immediate: tuple[str, ...] = ()
    short_term: tuple[str, ...] = ()
    long_term: tuple[str, ...] = ()
    content_strategy: tuple[str, ...] = ()
    technical_seo: tuple[str, ...] = ()


@dataclass(frozen=True)
class DifficultyComponent(SerializableMixin):
    factor: str
    impact: float
    description: str


@dataclass(frozen=True)
class SerpDifficulty(SerializableMixin):
    score: int
    factors: tuple[DifficultyComponent, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SerpAnalysisResult(SerializableMixin):
    keyword: str
    overview: SerpOverview
    features: FeatureAnalysis
    organic_analysis: OrganicAnalysis
    competitor_insights: CompetitorInsights
    recommendations: SerpRecommendations
    difficulty: SerpDifficulty
