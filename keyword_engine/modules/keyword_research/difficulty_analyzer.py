"""Keyword difficulty analyzer -- weighted multi-factor ranking difficulty score."""

import logging
from typing import Any, Mapping, Sequence, Union

from keyword_engine.exceptions import InvalidInputError
from keyword_engine.models.difficulty import (
    AverageCompetitorMetrics,
    CompetitorAnalysis,
    DifficultyAnalysisResult,
    DifficultyFactor,
    DifficultyLevel,
    EffortLevel,
    FactorImpact,
    FactorKind,
    SerpComplexity,
)
from keyword_engine.models.keyword import CompetitorMetrics, SerpSnapshot
from keyword_engine.utils.helpers import clamp, mean, round_half_up
from keyword_engine.utils.text_processing import count_words
from keyword_engine.utils.validators import (
    ensure,
    ensure_sequence_of,
    validate_keyword_text,
    validate_number,
)

logger = logging.getLogger(__name__)

# Fixed weight table; must sum to 1.0
FACTOR_WEIGHTS: dict[FactorKind, float] = {
    FactorKind.SEARCH_VOLUME: 0.15,
    FactorKind.COMPETITION_LEVEL: 0.20,
    FactorKind.TOP_COMPETITORS: 0.25,
    FactorKind.SERP_FEATURES: 0.15,
    FactorKind.CONTENT_QUALITY: 0.10,
    FactorKind.BACKLINK_PROFILE: 0.10,
    FactorKind.COMMERCIAL_INTENT: 0.05,
}

FACTOR_NAMES: dict[FactorKind, str] = {
    FactorKind.SEARCH_VOLUME: "Search Volume",
    FactorKind.COMPETITION_LEVEL: "Competition Level",
    FactorKind.TOP_COMPETITORS: "Top Competitors Strength",
    FactorKind.SERP_FEATURES: "SERP Features",
    FactorKind.CONTENT_QUALITY: "Content Quality Required",
    FactorKind.BACKLINK_PROFILE: "Backlink Profile Required",
    FactorKind.COMMERCIAL_INTENT: "Commercial Intent",
}

# Fallback factor values when no competitor data is supplied
EMPTY_COMPETITION_SCORE = 20
EMPTY_TOP_COMPETITORS_SCORE = 25
EMPTY_CONTENT_QUALITY_SCORE = 40
EMPTY_BACKLINK_SCORE = 35

# (snapshot attribute, display name, point cost)
SERP_FEATURE_COSTS: list[tuple[str, str, int]] = [
    ("featured_snippet", "Featured Snippet", 15),
    ("knowledge_panel", "Knowledge Panel", 10),
    ("local_pack", "Local Pack", 12),
    ("shopping_results", "Shopping Results", 8),
    ("image_results", "Image Results", 5),
    ("video_results", "Video Results", 7),
    ("news_results", "News Results", 6),
    ("people_also_ask", "People Also Ask", 4),
]
PAID_AD_COST = 3

TRANSACTIONAL_TERMS = ["buy", "purchase", "order", "shop", "cart", "checkout", "price", "cost"]
COMMERCIAL_TERMS = ["best", "top", "review", "compare", "vs", "alternative", "cheap", "discount"]
INFORMATIONAL_TERMS = ["how to", "what is", "guide", "tutorial", "learn", "tips"]

TOP_COMPETITOR_COUNT = 5
STRONG_COMPETITOR_SCORE = 50


CompetitorInput = Union[CompetitorMetrics, Mapping[str, Any]]


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def analyze_difficulty(
    keyword: str,
    search_volume: int,
    competitors: Sequence[CompetitorInput] = (),
    serp_data: Union[SerpSnapshot, Mapping[str, Any], None] = None,
    location: str = "US",
) -> DifficultyAnalysisResult:
    """Score how hard *keyword* is to rank for.

    Args:
        keyword: The keyword phrase.
        search_volume: Monthly search volume (>= 0).
        competitors: Ranking competitors, best first. Dicts are coerced
            through :meth:`CompetitorMetrics.from_dict`. May be empty.
        serp_data: SERP feature snapshot; ``None`` uses the default
            :class:`SerpSnapshot`.
        location: Market label carried through to the result.

    Returns:
        A :class:`DifficultyAnalysisResult` with the seven factors, overall
        score, level, competitor and SERP summaries and recommendations.

    Raises:
        InvalidInputError: If an argument has the wrong shape.
    """
    ensure(validate_keyword_text(keyword), "keyword")
    ensure(validate_number(search_volume, "search_volume", 0))
    comps = _coerce_competitors(competitors)
    serp = _coerce_serp(serp_data)

    logger.info(
        "Analyzing difficulty for %r (volume=%s, competitors=%d, location=%s)",
        keyword, search_volume, len(comps), location,
    )

    factors = calculate_factors(keyword, search_volume, comps, serp)
    overall = calculate_overall_score(factors)
    competitor_analysis = analyze_competitors(comps)
    serp_complexity = analyze_serp_complexity(serp)

    result = DifficultyAnalysisResult(
        keyword=keyword,
        location=location,
        overall_score=overall,
        difficulty_level=difficulty_level(overall),
        factors=tuple(factors),
        competitor_analysis=competitor_analysis,
        serp_complexity=serp_complexity,
        recommendations=tuple(_generate_recommendations(overall, factors)),
        time_to_rank=estimate_time_to_rank(overall),
        effort_required=effort_required(overall),
        success_probability=success_probability(overall, factors),
    )
    logger.info(
        "Difficulty for %r: %d (%s)", keyword, overall, result.difficulty_level.value,
    )
    return result


def calculate_factors(
    keyword: str,
    search_volume: int,
    competitors: Sequence[CompetitorMetrics],
    serp: SerpSnapshot,
) -> list[DifficultyFactor]:
    """Compute the seven weighted difficulty factors in their fixed order."""
    volume_score, volume_impact, volume_desc = _volume_factor(search_volume)
    negative = FactorImpact.NEGATIVE
    scored = [
        (FactorKind.SEARCH_VOLUME, volume_impact, volume_score, volume_desc),
        (FactorKind.COMPETITION_LEVEL, negative, *_competition_factor(competitors)),
        (FactorKind.TOP_COMPETITORS, negative, *_top_competitors_factor(competitors)),
        (FactorKind.SERP_FEATURES, negative, *_serp_features_factor(serp)),
        (FactorKind.CONTENT_QUALITY, negative, *_content_quality_factor(competitors, keyword)),
        (FactorKind.BACKLINK_PROFILE, negative, *_backlink_factor(competitors)),
        (FactorKind.COMMERCIAL_INTENT, negative, *_commercial_intent_factor(keyword)),
    ]

    factors: list[DifficultyFactor] = []
    for kind, impact, value, description in scored:
        factors.append(DifficultyFactor(
            kind=kind,
            name=FACTOR_NAMES[kind],
            value=clamp(value, 0, 100),
            weight=FACTOR_WEIGHTS[kind],
            impact=impact,
            description=description,
        ))
        logger.debug("Factor %s = %.2f (%s)", kind.value, value, impact.value)
    return factors


def calculate_overall_score(factors: Sequence[DifficultyFactor]) -> int:
    """Weighted average of factor values, inverting positive-impact factors."""
    weighted = 0.0
    total_weight = 0.0
    for factor in factors:
        adjusted = factor.value if factor.impact == FactorImpact.NEGATIVE else 100 - factor.value
        weighted += adjusted * factor.weight
        total_weight += factor.weight
    if total_weight == 0:
        return 0
    return int(clamp(round_half_up(weighted / total_weight), 0, 100))


def difficulty_level(score: int) -> DifficultyLevel:
    if score < 20:
        return DifficultyLevel.VERY_EASY
    if score < 35:
        return DifficultyLevel.EASY
    if score < 50:
        return DifficultyLevel.MEDIUM
    if score < 65:
        return DifficultyLevel.HARD
    if score < 80:
        return DifficultyLevel.VERY_HARD
    return DifficultyLevel.EXTREMELY_HARD


def estimate_time_to_rank(score: int) -> str:
    if score < 20:
        return "1-3 months"
    if score < 35:
        return "3-6 months"
    if score < 50:
        return "6-9 months"
    if score < 65:
        return "9-15 months"
    if score < 80:
        return "15-24 months"
    return "24+ months"


def effort_required(score: int) -> EffortLevel:
    if score < 35:
        return EffortLevel.LOW
    if score < 50:
        return EffortLevel.MEDIUM
    if score < 65:
        return EffortLevel.HIGH
    return EffortLevel.VERY_HIGH


def success_probability(score: int, factors: Sequence[DifficultyFactor]) -> int:
    """Chance of ranking (5-95) derived from the score.

    High search volume (volume factor > 80) costs 10 points and fierce
    competition (competition factor > 70) another 15, before clamping.
    """
    probability = 100 - score
    for factor in factors:
        if factor.kind == FactorKind.SEARCH_VOLUME and factor.value > 80:
            probability -= 10
        elif factor.kind == FactorKind.COMPETITION_LEVEL and factor.value > 70:
            probability -= 15
    return int(clamp(round_half_up(probability), 5, 95))


def analyze_competitors(competitors: Sequence[CompetitorMetrics]) -> CompetitorAnalysis:
    """Rank competitors by a rough strength index and summarise them."""
    if not competitors:
        return CompetitorAnalysis(
            top_competitors=(),
            average_metrics=AverageCompetitorMetrics(),
            weakest_competitor=None,
            strongest_competitor=None,
        )

    # sorted() is stable, so equal-strength competitors keep input order
    ranked = sorted(competitors, key=_competitor_strength, reverse=True)
    return CompetitorAnalysis(
        top_competitors=tuple(ranked[:TOP_COMPETITOR_COUNT]),
        average_metrics=AverageCompetitorMetrics(
            domain_authority=round_half_up(mean(c.domain_authority for c in competitors)),
            backlinks=round_half_up(mean(c.backlinks for c in competitors)),
            content_length=round_half_up(mean(c.content_length for c in competitors)),
        ),
        weakest_competitor=ranked[-1],
        strongest_competitor=ranked[0],
    )


def analyze_serp_complexity(serp: SerpSnapshot) -> SerpComplexity:
    """Count SERP features and estimate how many organic spots remain."""
    features = tuple(label for attr, label, _ in SERP_FEATURE_COSTS if getattr(serp, attr))
    score = min(100, len(features) * 10 + serp.paid_ads * 5)
    organic_spots = max(10 - serp.paid_ads - len(features), 3)
    return SerpComplexity(score=int(score), features=features, organic_spots=int(organic_spots))


# ------------------------------------------------------------------
# Input coercion
# ------------------------------------------------------------------

def _coerce_competitors(competitors: Sequence[CompetitorInput]) -> list[CompetitorMetrics]:
    if competitors is None:
        return []
    ensure_sequence_of(competitors, name="competitors")
    coerced: list[CompetitorMetrics] = []
    for index, item in enumerate(competitors):
        if isinstance(item, CompetitorMetrics):
            coerced.append(item)
        elif isinstance(item, Mapping):
            coerced.append(CompetitorMetrics.from_dict(item))
        else:
            raise InvalidInputError(
                "item " + str(index) + " must be CompetitorMetrics or a dict.",
                field="competitors",
            )
    return coerced


def _coerce_serp(serp_data: Union[SerpSnapshot, Mapping[str, Any], None]) -> SerpSnapshot:
    if serp_data is None:
        return SerpSnapshot()
    if isinstance(serp_data, SerpSnapshot):
        return serp_data
    if isinstance(serp_data, Mapping):
        return SerpSnapshot.from_dict(serp_data)
    raise InvalidInputError("must be a SerpSnapshot or a dict.", field="serp_data")


# ------------------------------------------------------------------
# Individual factors
# ------------------------------------------------------------------

def _volume_factor(search_volume: int) -> tuple[int, FactorImpact, str]:
    if search_volume < 100:
        return 10, FactorImpact.POSITIVE, (
            "Very low search volume - easier to rank but limited traffic potential"
        )
    if search_volume < 1000:
        return 25, FactorImpact.POSITIVE, "Low search volume - moderate competition expected"
    if search_volume < 10000:
        return 50, FactorImpact.POSITIVE, "Medium search volume - balanced opportunity"
    if search_volume < 50000:
        return 75, FactorImpact.NEGATIVE, "High search volume - increased competition expected"
    return 90, FactorImpact.NEGATIVE, "Very high search volume - intense competition likely"


def _competition_factor(competitors: Sequence[CompetitorMetrics]) -> tuple[float, str]:
    if not competitors:
        return EMPTY_COMPETITION_SCORE, "Limited competitor data available"

    avg_da = mean(c.domain_authority for c in competitors)
    avg_backlinks = mean(c.backlinks for c in competitors)

    score = 30
    if avg_da > 80:
        score += 30
    elif avg_da > 60:
        score += 20
    elif avg_da > 40:
        score += 10
    else:
        score -= 5

    if avg_backlinks > 100000:
        score += 25
    elif avg_backlinks > 50000:
        score += 20
    elif avg_backlinks > 10000:
        score += 15
    elif avg_backlinks > 1000:
        score += 10

    score = clamp(score, 0, 100)
    if score < 30:
        description = "Low competition - good opportunity"
    elif score < 50:
        description = "Moderate competition - achievable with effort"
    elif score < 70:
        description = "High competition - requires strong strategy"
    else:
        description = "Very high competition - challenging to rank"
    return score, description


def _competitor_sub_score(competitor: CompetitorMetrics) -> int:
    score = 0
    da = competitor.domain_authority
    if da > 80:
        score += 25
    elif da > 60:
        score += 20
    elif da > 40:
        score += 15
    else:
        score += 10

    backlinks = competitor.backlinks
    if backlinks > 50000:
        score += 20
    elif backlinks > 10000:
        score += 15
    elif backlinks > 1000:
        score += 10
    else:
        score += 5

    if competitor.content_length > 3000:
        score += 10
    elif competitor.content_length > 1500:
        score += 5

    if competitor.page_speed > 90:
        score += 5
    elif competitor.page_speed < 50:
        score -= 5
    return score


def _top_competitors_factor(competitors: Sequence[CompetitorMetrics]) -> tuple[float, str]:
    if not competitors:
        return EMPTY_TOP_COMPETITORS_SCORE, "No competitor data available"

    top = competitors[:TOP_COMPETITOR_COUNT]
    sub_scores = [_competitor_sub_score(c) for c in top]
    strong = sum(1 for s in sub_scores if s > STRONG_COMPETITOR_SCORE)
    score = clamp(sum(sub_scores) / max(1, len(top)), 0, 100)

    if strong >= 4:
        description = "Dominated by very strong competitors - extremely challenging"
    elif strong >= 2:
        description = "Several strong competitors present - high difficulty"
    elif strong >= 1:
        description = "Some strong competitors - moderate difficulty"
    else:
        description = "Weak competitors - good opportunity"
    return score, description


def _serp_features_factor(serp: SerpSnapshot) -> tuple[float, str]:
    score = sum(cost for attr, _, cost in SERP_FEATURE_COSTS if getattr(serp, attr))
    score += serp.paid_ads * PAID_AD_COST
    score = min(score, 100)

    if score < 20:
        description = "Clean SERP - good organic visibility potential"
    elif score < 40:
        description = "Some SERP features present - moderate impact on clicks"
    elif score < 60:
        description = "Multiple SERP features - reduced organic click-through"
    else:
        description = "Heavily featured SERP - limited organic visibility"
    return score, description


def _content_quality_factor(
    competitors: Sequence[CompetitorMetrics], keyword: str,
) -> tuple[float, str]:
    if not competitors:
        return EMPTY_CONTENT_QUALITY_SCORE, "Standard content quality expected"

    avg_length = mean(c.content_length for c in competitors)
    max_length = max(c.content_length for c in competitors)

    score = 30
    if avg_length > 4000:
        score += 25
    elif avg_length > 2500:
        score += 20
    elif avg_length > 1500:
        score += 15
    elif avg_length > 800:
        score += 10

    if max_length > 8000:
        score += 15
    elif max_length > 5000:
        score += 10

    # Head terms need broader content; long-tail can be narrower
    words = count_words(keyword)
    if words == 1:
        score += 10
    elif words > 4:
        score -= 5

    score = clamp(score, 0, 100)
    if score < 30:
        description = "Basic content sufficient - low quality bar"
    elif score < 50:
        description = "Good quality content needed - moderate standards"
    elif score < 70:
        description = "High-quality, comprehensive content required"
    else:
        description = "Exceptional, expert-level content essential"
    return score, description


def _backlink_factor(competitors: Sequence[CompetitorMetrics]) -> tuple[float, str]:
    if not competitors:
        return EMPTY_BACKLINK_SCORE, "Moderate backlink profile expected"

    avg_backlinks = mean(c.backlinks for c in competitors)
    avg_domains = mean(c.referring_domains for c in competitors)

    score = 20
    if avg_backlinks > 100000:
        score += 30
    elif avg_backlinks > 50000:
        score += 25
    elif avg_backlinks > 10000:
        score += 20
    elif avg_backlinks > 1000:
        score += 15
    elif avg_backlinks > 100:
        score += 10

    if avg_domains > 5000:
        score += 20
    elif avg_domains > 1000:
        score += 15
    elif avg_domains > 500:
        score += 10
    elif avg_domains > 100:
        score += 5

    score = clamp(score, 0, 100)
    if score < 30:
        description = "Minimal backlinks needed - focus on content"
    elif score < 50:
        description = "Moderate link building required"
    elif score < 70:
        description = "Strong backlink profile essential"
    else:
        description = "Extensive, high-authority link building required"
    return score, description


def _commercial_intent_factor(keyword: str) -> tuple[float, str]:
    lowered = keyword.lower()
    if any(term in lowered for term in TRANSACTIONAL_TERMS):
        return 80, "High commercial intent - intense advertiser competition"
    if any(term in lowered for term in COMMERCIAL_TERMS):
        return 60, "Commercial intent - significant competition from businesses"
    if any(term in lowered for term in INFORMATIONAL_TERMS):
        return 25, "Informational intent - moderate competition"
    return 35, "Mixed intent - balanced competition level"


# ------------------------------------------------------------------
# Summaries
# ------------------------------------------------------------------

def _competitor_strength(competitor: CompetitorMetrics) -> float:
    return (
        competitor.domain_authority
        + competitor.backlinks / 1000
        + competitor.content_length / 100
    )


def _generate_recommendations(
    score: int, factors: Sequence[DifficultyFactor],
) -> list[str]:
    recommendations: list[str] = []
    if score > 80:
        recommendations.extend([
            "Consider targeting long-tail variations of this keyword first",
            "Build significant domain authority before attempting to rank",
            "Create exceptional, comprehensive content (4000+ words)",
            "Develop a strong backlink acquisition strategy",
        ])
    elif score > 60:
        recommendations.extend([
            "Focus on creating high-quality, in-depth content",
            "Build relevant, authoritative backlinks",
            "Optimize for user intent and search experience",
            "Consider content clusters around this topic",
        ])
    elif score > 40:
        recommendations.extend([
            "Good opportunity with proper content optimization",
            "Focus on on-page SEO and user experience",
            "Build some quality backlinks to support rankings",
        ])
    else:
        recommendations.extend([
            "Excellent opportunity for quick wins",
            "Focus primarily on content quality and relevance",
            "Basic link building should be sufficient",
        ])

    for factor in factors:
        if factor.value <= 70 or factor.impact != FactorImpact.NEGATIVE:
            continue
        if factor.kind == FactorKind.SERP_FEATURES:
            recommendations.append("Optimize for featured snippets and other SERP features")
        elif factor.kind == FactorKind.TOP_COMPETITORS:
            recommendations.append("Study and exceed top competitor content strategies")
        elif factor.kind == FactorKind.BACKLINK_PROFILE:
            recommendations.append("Plan a sustained, high-authority link building campaign")
        elif factor.kind == FactorKind.COMPETITION_LEVEL:
            recommendations.append("Differentiate with a unique angle the top results lack")
    return recommendations
