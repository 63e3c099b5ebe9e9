"""SERP Analyzer -- feature landscape, organic competition and ranking difficulty for one results page."""

import logging
import math
from typing import Any, Mapping, Sequence, Union
from urllib.parse import urlparse

from keyword_engine.exceptions import InvalidInputError
from keyword_engine.models.serp import (
    ClickDistribution,
    CompetitionLevel,
    CompetitorInsights,
    DifficultyComponent,
    DominantDomain,
    FeatureAnalysis,
    FeatureImpact,
    FeatureOpportunity,
    OrganicAnalysis,
    OrganicAverages,
    OrganicResult,
    Priority,
    SerpAnalysisData,
    SerpAnalysisResult,
    SerpDifficulty,
    SerpFeature,
    SerpOverview,
    SerpRecommendations,
)
from keyword_engine.utils.helpers import clamp, mean, round_half_up, safe_div

logger = logging.getLogger(__name__)

# Known SERP feature types: (impact, average click-through rate)
SERP_FEATURES: dict[str, tuple[FeatureImpact, float]] = {
    "featured_snippet": (FeatureImpact.HIGH, 0.35),
    "people_also_ask": (FeatureImpact.MEDIUM, 0.15),
    "local_pack": (FeatureImpact.HIGH, 0.44),
    "knowledge_panel": (FeatureImpact.HIGH, 0.25),
    "image_results": (FeatureImpact.MEDIUM, 0.12),
    "video_results": (FeatureImpact.MEDIUM, 0.18),
    "shopping_results": (FeatureImpact.HIGH, 0.22),
    "news_results": (FeatureImpact.MEDIUM, 0.14),
    "site_links": (FeatureImpact.LOW, 0.08),
    "reviews": (FeatureImpact.MEDIUM, 0.16),
    "events": (FeatureImpact.LOW, 0.06),
    "jobs": (FeatureImpact.MEDIUM, 0.13),
    "flights": (FeatureImpact.HIGH, 0.28),
    "hotels": (FeatureImpact.HIGH, 0.26),
}

# Features most pages can realistically win, checked for absence
CANDIDATE_FEATURES = [
    "featured_snippet",
    "people_also_ask",
    "image_results",
    "video_results",
    "site_links",
    "reviews",
]

PRIORITY_ORDER = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}

BASE_ORGANIC_CTR = 0.65
BASE_PAID_CTR = 0.15
BASE_FEATURES_CTR = 0.20
PAID_CTR_SHIFT = 0.03

TOP_RESULTS = 10


def _extract_domain(result: OrganicResult) -> str:
    """Root domain of a result, falling back to its URL when ``domain`` is blank."""
    raw = result.domain or result.url
    try:
        parsed = urlparse(raw if "://" in raw else "https://" + raw)
        host = parsed.hostname or raw
    except ValueError:
        host = raw
    return host.lower().removeprefix("www.")


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def analyze_serp_data(data: Union[SerpAnalysisData, Mapping[str, Any]]) -> SerpAnalysisResult:
    """Analyze one results page.

    Args:
        data: A :class:`SerpAnalysisData` snapshot, or a dict accepted by
            :meth:`SerpAnalysisData.from_dict`.

    Returns:
        A :class:`SerpAnalysisResult` with the overview, feature analysis,
        organic analysis, competitor insights, recommendations and a
        SERP-based difficulty score.
    """
    if isinstance(data, Mapping):
        data = SerpAnalysisData.from_dict(data)
    elif not isinstance(data, SerpAnalysisData):
        raise InvalidInputError("must be SerpAnalysisData or a dict.", field="data")

    logger.info(
        "Analyzing SERP for %r (%s, %s): %d organic, %d paid, %d features",
        data.keyword, data.location, data.device,
        len(data.organic_results), len(data.paid_results), len(data.features),
    )

    overview = analyze_overview(data)
    features = analyze_features(data)
    organic = analyze_organic_results(data)
    insights = analyze_competitors(data)
    recommendations = generate_recommendations(overview, features, organic, insights)
    difficulty = calculate_serp_difficulty(data, organic)

    logger.info(
        "SERP for %r: competition=%s, difficulty=%d",
        data.keyword, overview.competition_level.value, difficulty.score,
    )
    return SerpAnalysisResult(
        keyword=data.keyword,
        overview=overview,
        features=features,
        organic_analysis=organic,
        competitor_insights=insights,
        recommendations=recommendations,
        difficulty=difficulty,
    )


# ------------------------------------------------------------------
# Overview
# ------------------------------------------------------------------

def _present(data: SerpAnalysisData) -> list[SerpFeature]:
    return [f for f in data.features if f.present]


def analyze_overview(data: SerpAnalysisData) -> SerpOverview:
    features_count = len(_present(data))
    paid_count = len(data.paid_results)

    spots = 10 - min(4, paid_count) - features_count * 0.5
    organic_spots = int(clamp(round_half_up(spots), 3, 10))

    score = paid_count * 2 + features_count * 1.5
    if score < 3:
        level = CompetitionLevel.LOW
    elif score < 6:
        level = CompetitionLevel.MEDIUM
    elif score < 10:
        level = CompetitionLevel.HIGH
    else:
        level = CompetitionLevel.EXTREME

    return SerpOverview(
        total_results=data.total_results,
        features_count=features_count,
        organic_spots=organic_spots,
        paid_ads_count=paid_count,
        competition_level=level,
        click_distribution=click_distribution(data),
    )


def click_distribution(data: SerpAnalysisData) -> ClickDistribution:
    """Estimated percentage of clicks going to organic, paid and feature results."""
    organic = BASE_ORGANIC_CTR
    paid = BASE_PAID_CTR
    features = BASE_FEATURES_CTR

    for feature in _present(data):
        known = SERP_FEATURES.get(feature.type)
        if known is None:
            continue
        shift = known[1] * 0.1
        features += shift
        organic -= shift

    paid_count = len(data.paid_results)
    paid += paid_count * PAID_CTR_SHIFT
    organic -= paid_count * PAID_CTR_SHIFT

    total = organic + paid + features
    return ClickDistribution(
        organic=round_half_up(organic / total * 100),
        paid=round_half_up(paid / total * 100),
        features=round_half_up(features / total * 100),
    )


# ------------------------------------------------------------------
# Features
# ------------------------------------------------------------------

def analyze_features(data: SerpAnalysisData) -> FeatureAnalysis:
    present = _present(data)
    present_types = {f.type for f in present}
    absent = [
        SerpFeature(
            type=feature_type,
            present=False,
            impact=SERP_FEATURES.get(feature_type, (FeatureImpact.MEDIUM, 0.0))[0],
        )
        for feature_type in CANDIDATE_FEATURES
        if feature_type not in present_types
    ]
    return FeatureAnalysis(
        present=tuple(present),
        absent=tuple(absent),
        opportunities=tuple(_feature_opportunities(present_types, data)),
    )


def _feature_opportunities(present_types: set, data: SerpAnalysisData) -> list[FeatureOpportunity]:
    opportunities: list[FeatureOpportunity] = []

    if "featured_snippet" not in present_types:
        opportunities.append(FeatureOpportunity(
            feature="Featured Snippet",
            priority=Priority.HIGH,
            description="No featured snippet present - opportunity to capture position zero",
            action_items=(
                "Create comprehensive FAQ section",
                "Structure content with clear headings",
                "Use bullet points and numbered lists",
                "Answer specific questions directly",
            ),
        ))

    if data.people_also_ask:
        opportunities.append(FeatureOpportunity(
            feature="People Also Ask",
            priority=Priority.HIGH,
            description="PAA questions identified - create content to target these",
            action_items=(
                "Create dedicated sections for each PAA question",
                "Provide comprehensive answers",
                "Use question-based headings",
                "Include related subtopics",
            ),
        ))

    if "image_results" not in present_types:
        opportunities.append(FeatureOpportunity(
            feature="Image Results",
            priority=Priority.MEDIUM,
            description="No image results - opportunity for visual content",
            action_items=(
                "Add relevant, high-quality images",
                "Optimize image alt text",
                "Use descriptive file names",
                "Create infographics and diagrams",
            ),
        ))

    if "video_results" not in present_types:
        opportunities.append(FeatureOpportunity(
            feature="Video Results",
            priority=Priority.MEDIUM,
            description="No video results - opportunity for video content",
            action_items=(
                "Create educational videos",
                "Optimize video titles and descriptions",
                "Add video transcripts",
                "Use video schema markup",
            ),
        ))

    if "site_links" not in present_types:
        opportunities.append(FeatureOpportunity(
            feature="Site Links",
            priority=Priority.LOW,
            description="No site links shown - clear site structure can earn them",
            action_items=(
                "Use a clear, shallow navigation hierarchy",
                "Give key pages descriptive titles and anchor text",
            ),
        ))

    if "reviews" not in present_types:
        opportunities.append(FeatureOpportunity(
            feature="Reviews",
            priority=Priority.LOW,
            description="No review stars shown - rich results can lift click-through",
            action_items=(
                "Collect genuine customer reviews",
                "Add review schema markup",
            ),
        ))

    # sorted() is stable, so equal priorities keep insertion order
    return sorted(opportunities, key=lambda o: PRIORITY_ORDER[o.priority], reverse=True)


# ------------------------------------------------------------------
# Organic results
# ------------------------------------------------------------------

def _share(results: Sequence[OrganicResult], attr: str) -> float:
    return safe_div(sum(1 for r in results if getattr(r, attr)), len(results))


def analyze_organic_results(data: SerpAnalysisData) -> OrganicAnalysis:
    top = list(data.organic_results[:TOP_RESULTS])
    if not top:
        return OrganicAnalysis(
            top_competitors=(),
            average_metrics=OrganicAverages(),
            content_gaps=(),
            technical_gaps=(),
            optimization_opportunities=(),
        )

    averages = OrganicAverages(
        domain_authority=round_half_up(mean(r.domain_authority for r in top)),
        content_length=round_half_up(mean(r.content_length for r in top)),
        page_speed=round_half_up(mean(r.page_speed for r in top)),
        backlinks=round_half_up(mean(r.backlinks for r in top)),
    )
    return OrganicAnalysis(
        top_competitors=tuple(top),
        average_metrics=averages,
        content_gaps=tuple(_content_gaps(top)),
        technical_gaps=tuple(_technical_gaps(top)),
        optimization_opportunities=tuple(_optimization_opportunities(top, averages)),
    )


def _content_gaps(results: Sequence[OrganicResult]) -> list[str]:
    gaps: list[str] = []
    avg_length = mean(r.content_length for r in results)
    if avg_length > 2000:
        gaps.append("Long-form content needed (average: " + str(round_half_up(avg_length)) + " words)")

    if _share(results, "title_match") > 0.8:
        gaps.append("Strong title optimization required - most competitors target keyword in title")

    avg_density = mean(r.keyword_density for r in results)
    if avg_density > 2:
        gaps.append("Higher keyword density needed (average: %.1f%%)" % avg_density)

    if _share(results, "structured_data") > 0.6:
        gaps.append("Structured data implementation recommended - used by majority of competitors")
    return gaps


def _technical_gaps(results: Sequence[OrganicResult]) -> list[str]:
    gaps: list[str] = []
    avg_speed = mean(r.page_speed for r in results)
    if avg_speed > 80:
        gaps.append("High page speed required (average: " + str(round_half_up(avg_speed)) + ")")
    if _share(results, "https") > 0.9:
        gaps.append("HTTPS required - used by most competitors")
    if _share(results, "mobile_optimized") > 0.8:
        gaps.append("Mobile optimization critical - standard among competitors")
    return gaps


def _optimization_opportunities(
    results: Sequence[OrganicResult], averages: OrganicAverages,
) -> list[str]:
    opportunities: list[str] = []
    weak = [
        r for r in results
        if r.domain_authority < averages.domain_authority * 0.8
        or r.content_length < averages.content_length * 0.7
        or r.page_speed < averages.page_speed * 0.8
    ]
    if weak:
        opportunities.append(
            str(len(weak)) + " weak competitors in top 10 - opportunity to outrank"
        )

    low_backlinks = [r for r in results if r.backlinks < averages.backlinks * 0.5]
    if len(low_backlinks) > 2:
        opportunities.append(
            "Several competitors have low backlink counts - link building opportunity"
        )

    if _share(results, "url_match") < 0.5:
        opportunities.append("URL optimization opportunity - few competitors optimize URLs")
    return opportunities


# ------------------------------------------------------------------
# Competitors
# ------------------------------------------------------------------

def competitor_score(result: OrganicResult) -> float:
    """Composite strength of one organic result."""
    return (
        result.domain_authority * 0.3
        + result.page_authority * 0.2
        + math.log10(result.backlinks + 1) * 10 * 0.2
        + result.page_speed * 0.1
        + result.content_length / 100 * 0.1
        + (10 if result.structured_data else 0) * 0.1
    )


def analyze_competitors(data: SerpAnalysisData) -> CompetitorInsights:
    results = list(data.organic_results)
    if not results:
        return CompetitorInsights(
            dominant_domains=(),
            weakest_competitor=None,
            strongest_competitor=None,
            content_patterns=(),
        )

    top = results[:TOP_RESULTS]
    positions: dict[str, list[int]] = {}
    for result in top:
        positions.setdefault(_extract_domain(result), []).append(result.position)

    dominant = [
        DominantDomain(
            domain=domain,
            positions=tuple(domain_positions),
            average_position=mean(domain_positions),
            market_share=len(domain_positions) / len(top),
        )
        for domain, domain_positions in positions.items()
        if len(domain_positions) > 1
    ]
    dominant.sort(key=lambda d: d.market_share, reverse=True)

    weakest = strongest = results[0]
    weakest_score = strongest_score = competitor_score(results[0])
    for result in results[1:]:
        score = competitor_score(result)
        if score < weakest_score:
            weakest, weakest_score = result, score
        if score > strongest_score:
            strongest, strongest_score = result, score

    return CompetitorInsights(
        dominant_domains=tuple(dominant),
        weakest_competitor=weakest,
        strongest_competitor=strongest,
        content_patterns=tuple(_content_patterns(results)),
    )


def _content_patterns(results: Sequence[OrganicResult]) -> list[str]:
    patterns: list[str] = []
    avg_length = mean(r.content_length for r in results)
    if avg_length > 3000:
        patterns.append("Long-form content dominates (3000+ words)")
    elif avg_length > 1500:
        patterns.append("Medium-form content preferred (1500-3000 words)")
    else:
        patterns.append("Short-form content acceptable (<1500 words)")

    if _share(results, "title_match") > 0.8:
        patterns.append("Title optimization is standard practice")
    if _share(results, "structured_data") > 0.6:
        patterns.append("Structured data widely implemented")
    return patterns


# ------------------------------------------------------------------
# Recommendations & difficulty
# ------------------------------------------------------------------

def _has_line(lines: Sequence[str], prefix: str) -> bool:
    return any(line.startswith(prefix) for line in lines)


def generate_recommendations(
    overview: SerpOverview,
    features: FeatureAnalysis,
    organic: OrganicAnalysis,
    insights: CompetitorInsights,
) -> SerpRecommendations:
    immediate: list[str] = []
    short_term: list[str] = []
    long_term: list[str] = []
    content_strategy: list[str] = []
    technical_seo: list[str] = []

    if features.opportunities:
        immediate.append("Target featured snippet opportunities")
        immediate.append("Optimize for People Also Ask questions")
    if _has_line(organic.technical_gaps, "HTTPS required"):
        immediate.append("Implement HTTPS if not already done")

    if organic.average_metrics.content_length > 2000:
        short_term.append("Create comprehensive, long-form content")
    if _has_line(organic.content_gaps, "Structured data implementation recommended"):
        short_term.append("Implement relevant structured data markup")

    if organic.average_metrics.domain_authority > 60:
        long_term.append("Build domain authority through quality backlinks")
    if overview.competition_level in (CompetitionLevel.HIGH, CompetitionLevel.EXTREME):
        long_term.append("Consider targeting long-tail variations first")

    content_strategy.append("Create topic clusters around main keyword")
    content_strategy.append("Address all People Also Ask questions")
    if _has_line(insights.content_patterns, "Long-form content dominates"):
        content_strategy.append("Develop comprehensive, in-depth content (3000+ words)")

    technical_seo.append("Optimize page speed to match or exceed competitors")
    technical_seo.append("Ensure mobile optimization")
    if organic.average_metrics.page_speed > 80:
        technical_seo.append("Prioritize page speed optimization (target 80+ score)")

    return SerpRecommendations(
        immediate=tuple(immediate),
        short_term=tuple(short_term),
        long_term=tuple(long_term),
        content_strategy=tuple(content_strategy),
        technical_seo=tuple(technical_seo),
    )


def calculate_serp_difficulty(data: SerpAnalysisData, organic: OrganicAnalysis) -> SerpDifficulty:
    """Difficulty from ads, features and average competitor authority."""
    paid_count = len(data.paid_results)
    features_count = len(_present(data))
    avg_da = organic.average_metrics.domain_authority

    components = (
        DifficultyComponent(
            factor="Paid Advertisements",
            impact=paid_count * 10,
            description=str(paid_count) + " paid ads reduce organic visibility",
        ),
        DifficultyComponent(
            factor="SERP Features",
            impact=features_count * 5,
            description=str(features_count) + " SERP features compete for clicks",
        ),
        DifficultyComponent(
            factor="Competitor Strength",
            impact=avg_da * 0.375,
            description="Average competitor DA: " + str(avg_da),
        ),
    )
    score = min(100, round_half_up(sum(c.impact for c in components)))
    return SerpDifficulty(score=score, factors=components)
