"""Semantic keyword clustering -- group keywords that one page could target.

Similarity between two keywords blends three signals:

* semantic: token and stem overlap,
* structural: word-count and character-level closeness,
* intent: same or related search intent.

Keywords are merged bottom-up with average linkage until no pair of
clusters is similar enough, then loosely attached members are pruned.

Usage::

    result = cluster_keywords(records, ClusteringOptions(min_cluster_size=2))
    for cluster in result.clusters:
        print(cluster.name, [k.keyword for k in cluster.keywords])
"""

import logging
import math
from typing import Any, Mapping, Optional, Sequence, Union

from keyword_engine.exceptions import InvalidInputError
from keyword_engine.models.clustering import (
    ClusteringOptions,
    ClusteringResult,
    ClusteringStatistics,
    KeywordCluster,
)
from keyword_engine.models.keyword import Intent, KeywordRecord
from keyword_engine.utils.helpers import mean, round_half_up, round_to, safe_div
from keyword_engine.utils.text_processing import (
    character_similarity,
    jaccard_similarity,
    overlap_similarity,
    stem_tokens,
    tokenize,
)
from keyword_engine.utils.validators import ensure_sequence_of

logger = logging.getLogger(__name__)

# Intent pairs that usually share a results page
RELATED_INTENTS = {
    frozenset({Intent.COMMERCIAL, Intent.TRANSACTIONAL}),
    frozenset({Intent.INFORMATIONAL, Intent.NAVIGATIONAL}),
}
RELATED_INTENT_SIMILARITY = 0.7

# Members whose coherence falls below this share of the best member are pruned
REFINEMENT_RATIO = 0.6
MAX_THEMES = 5

KeywordInput = Union[KeywordRecord, Mapping[str, Any]]


class _Prepared:
    """Tokenised view of one input keyword."""

    __slots__ = ("record", "tokens", "token_set", "stem_set")

    def __init__(self, record: KeywordRecord):
        self.record = record
        self.tokens = tokenize(record.keyword)
        self.token_set = set(self.tokens)
        self.stem_set = set(stem_tokens(self.tokens))


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def cluster_keywords(
    keywords: Sequence[KeywordInput],
    options: Optional[ClusteringOptions] = None,
) -> ClusteringResult:
    """Group *keywords* into semantically coherent clusters.

    Args:
        keywords: Keyword records (or provider dicts) to cluster. Duplicates
            are allowed and tracked by position.
        options: Tuning knobs; defaults to :class:`ClusteringOptions()`.

    Returns:
        A :class:`ClusteringResult`. Every input record appears exactly once,
        either inside one cluster or in ``unclustered``.
    """
    options = options or ClusteringOptions()
    records = _coerce_keywords(keywords)
    n = len(records)

    if n > options.large_input_warning:
        logger.warning(
            "Clustering %d keywords; pairwise similarity is quadratic in input size", n,
        )
    logger.info("Clustering %d keywords (threshold=%.2f)", n, options.similarity_threshold)

    if n == 0:
        return _empty_result()

    prepared = [_Prepared(record) for record in records]
    matrix = build_similarity_matrix(prepared, options)

    groups = _agglomerate(matrix, options)
    groups = [g for g in groups if len(g) >= options.min_cluster_size]
    groups = _refine(groups, matrix, options)

    clusters = [
        _build_cluster(number, group, prepared, matrix)
        for number, group in enumerate(groups, start=1)
    ]

    clustered_indices = {index for group in groups for index in group}
    unclustered = tuple(records[i] for i in range(n) if i not in clustered_indices)

    statistics = _statistics(n, clusters)
    result = ClusteringResult(
        clusters=tuple(clusters),
        unclustered=unclustered,
        statistics=statistics,
        intent_distribution=_intent_distribution(clusters),
        recommendations=tuple(_run_recommendations(clusters, statistics)),
    )
    logger.info(
        "Clustering done: %d clusters, %d of %d keywords clustered",
        len(clusters), statistics.clustered_keywords, n,
    )
    return result


def keyword_similarity(
    first: "_Prepared",
    second: "_Prepared",
    options: ClusteringOptions,
) -> float:
    """Weighted semantic, structural and intent similarity of two keywords."""
    semantic = (
        0.4 * jaccard_similarity(first.token_set, second.token_set)
        + 0.4 * jaccard_similarity(first.stem_set, second.stem_set)
        + 0.2 * overlap_similarity(first.token_set, second.token_set)
    )

    len_a = len(first.tokens)
    len_b = len(second.tokens)
    longest = max(len_a, len_b)
    length_similarity = 1.0 if longest == 0 else 1 - abs(len_a - len_b) / longest
    structural = (
        0.6 * length_similarity
        + 0.4 * character_similarity(first.record.keyword, second.record.keyword)
    )

    intent = intent_similarity(first.record.intent, second.record.intent)

    return (
        semantic * options.semantic_weight
        + structural * options.structural_weight
        + intent * options.intent_weight
    )


def intent_similarity(first: Intent, second: Intent) -> float:
    if first == second:
        return 1.0
    if frozenset({first, second}) in RELATED_INTENTS:
        return RELATED_INTENT_SIMILARITY
    return 0.0


def build_similarity_matrix(
    prepared: Sequence["_Prepared"], options: ClusteringOptions,
) -> list[list[float]]:
    """Symmetric n x n similarity matrix with ones on the diagonal."""
    n = len(prepared)
    matrix = [[0.0] * n for _ in range(n)]
    for i in range(n):
        matrix[i][i] = 1.0
        for j in range(i + 1, n):
            value = keyword_similarity(prepared[i], prepared[j], options)
            matrix[i][j] = value
            matrix[j][i] = value
    return matrix


# ------------------------------------------------------------------
# Clustering steps
# ------------------------------------------------------------------

def _coerce_keywords(keywords: Sequence[KeywordInput]) -> list[KeywordRecord]:
    ensure_sequence_of(keywords, name="keywords")
    records: list[KeywordRecord] = []
    for index, item in enumerate(keywords):
        if isinstance(item, KeywordRecord):
            records.append(item)
        elif isinstance(item, Mapping):
            records.append(KeywordRecord.from_dict(item))
        else:
            raise InvalidInputError(
                "item " + str(index) + " must be KeywordRecord or a dict.",
                field="keywords",
            )
    return records


def _average_linkage(
    first: list[int], second: list[int], matrix: list[list[float]],
) -> float:
    total = 0.0
    for i in first:
        for j in second:
            total += matrix[i][j]
    return total / (len(first) * len(second))


def _agglomerate(
    matrix: list[list[float]], options: ClusteringOptions,
) -> list[list[int]]:
    """Average-linkage agglomerative clustering over keyword indices."""
    n = len(matrix)
    clusters: list[list[int]] = [[i] for i in range(n)]

    while len(clusters) > 1 and len(clusters) > n - options.max_clusters:
        best_score = -1.0
        best_pair = (-1, -1)
        for i in range(len(clusters)):
            for j in range(i + 1, len(clusters)):
                score = _average_linkage(clusters[i], clusters[j], matrix)
                if score > best_score:
                    best_score = score
                    best_pair = (i, j)

        if best_score < options.similarity_threshold:
            logger.debug("Stopping merge: best linkage %.3f below threshold", best_score)
            break

        i, j = best_pair
        merged = clusters[i] + clusters[j]
        # Remove the higher index first so the lower one stays valid
        del clusters[j]
        del clusters[i]
        clusters.append(merged)
        logger.debug("Merged clusters at linkage %.3f (size %d)", best_score, len(merged))

    return clusters


def _refine(
    groups: list[list[int]],
    matrix: list[list[float]],
    options: ClusteringOptions,
) -> list[list[int]]:
    """Drop weakly attached members from oversized clusters."""
    refined: list[list[int]] = []
    for group in groups:
        if len(group) <= options.min_cluster_size:
            refined.append(group)
            continue

        coherence = []
        for member in group:
            others = [matrix[member][other] for other in group if other != member]
            coherence.append(mean(others))
        cutoff = max(coherence) * REFINEMENT_RATIO

        kept = [member for member, score in zip(group, coherence) if score >= cutoff]
        if len(kept) < len(group):
            logger.debug("Refinement pruned %d member(s)", len(group) - len(kept))
        if len(kept) >= options.min_cluster_size:
            refined.append(kept)
    return refined


# ------------------------------------------------------------------
# Cluster metadata
# ------------------------------------------------------------------

def _build_cluster(
    number: int,
    group: list[int],
    prepared: Sequence["_Prepared"],
    matrix: list[list[float]],
) -> KeywordCluster:
    members = [prepared[i].record for i in group]
    primary = members[0]
    for record in members[1:]:
        if record.search_volume > primary.search_volume:
            primary = record

    size = len(members)
    total_volume = sum(r.search_volume for r in members)
    avg_volume = round_half_up(total_volume / size)
    avg_difficulty = round_half_up(mean(r.difficulty for r in members))
    avg_cpc = round_to(mean(r.cpc for r in members), 2)
    intent = _dominant_intent(members)
    themes = _common_themes([prepared[i].tokens for i in group])

    return KeywordCluster(
        id="cluster-" + str(number),
        name=_cluster_name(primary, themes),
        keywords=tuple(members),
        primary_keyword=primary,
        intent=intent,
        avg_volume=avg_volume,
        avg_difficulty=avg_difficulty,
        avg_cpc=avg_cpc,
        total_volume=total_volume,
        size=size,
        coherence_score=_coherence(group, matrix),
        themes=tuple(themes),
        opportunities=tuple(_cluster_opportunities(members, avg_difficulty, total_volume)),
        recommendations=tuple(_cluster_recommendations(intent, avg_difficulty)),
    )


def _dominant_intent(members: Sequence[KeywordRecord]) -> Intent:
    counts: dict[Intent, int] = {}
    for record in members:
        counts[record.intent] = counts.get(record.intent, 0) + 1
    best = None
    best_count = 0
    for intent, count in counts.items():
        if count > best_count:
            best, best_count = intent, count
    return best


def _common_themes(token_lists: Sequence[list[str]]) -> list[str]:
    """Tokens shared by enough members, most frequent first."""
    frequency: dict[str, int] = {}
    for tokens in token_lists:
        for token in dict.fromkeys(tokens):
            frequency[token] = frequency.get(token, 0) + 1

    threshold = max(2, math.ceil(len(token_lists) * 0.3))
    common = [(token, count) for token, count in frequency.items() if count >= threshold]
    common.sort(key=lambda item: item[1], reverse=True)
    return [token for token, _ in common[:MAX_THEMES]]


def _coherence(group: list[int], matrix: list[list[float]]) -> float:
    if len(group) < 2:
        return 1.0
    scores = [
        matrix[group[a]][group[b]]
        for a in range(len(group))
        for b in range(a + 1, len(group))
    ]
    return round_to(mean(scores), 2)


def _cluster_name(primary: KeywordRecord, themes: Sequence[str]) -> str:
    if themes:
        return " + ".join(themes[:2]).upper()
    return " ".join(primary.keyword.split()[:2]).upper()


def _cluster_opportunities(
    members: Sequence[KeywordRecord], avg_difficulty: int, total_volume: int,
) -> list[str]:
    opportunities: list[str] = []
    if avg_difficulty < 30:
        opportunities.append("Low competition cluster - quick wins possible")
    if total_volume > 50000:
        opportunities.append("High volume potential - significant traffic opportunity")

    easy = [r for r in members if r.difficulty < 25]
    if len(easy) > len(members) * 0.5:
        opportunities.append("Multiple easy-to-rank keywords available")

    high_volume = [r for r in members if r.search_volume > 10000]
    if high_volume:
        opportunities.append(str(len(high_volume)) + " high-volume keywords to target")
    return opportunities


def _cluster_recommendations(intent: Intent, avg_difficulty: int) -> list[str]:
    recommendations: list[str] = []
    if intent == Intent.INFORMATIONAL:
        recommendations.append("Create comprehensive, educational content")
        recommendations.append("Focus on answering user questions thoroughly")
    elif intent == Intent.COMMERCIAL:
        recommendations.append("Create comparison and review content")
        recommendations.append("Include clear calls-to-action")
    elif intent == Intent.TRANSACTIONAL:
        recommendations.append("Optimize for conversion-focused landing pages")
        recommendations.append("Include pricing and purchase information")
    elif intent == Intent.NAVIGATIONAL:
        recommendations.append("Make sure brand and product pages are easy to find")

    if avg_difficulty < 30:
        recommendations.append("Target all keywords in this cluster simultaneously")
    elif avg_difficulty > 60:
        recommendations.append("Start with long-tail variations first")
        recommendations.append("Build authority gradually before targeting main terms")

    recommendations.append("Create topic cluster content strategy")
    return recommendations


# ------------------------------------------------------------------
# Run-level summaries
# ------------------------------------------------------------------

def _statistics(total: int, clusters: Sequence[KeywordCluster]) -> ClusteringStatistics:
    clustered = sum(c.size for c in clusters)
    count = len(clusters)
    return ClusteringStatistics(
        total_keywords=total,
        clustered_keywords=clustered,
        cluster_count=count,
        avg_cluster_size=round_half_up(safe_div(clustered, count)),
        coherence_score=round_to(mean(c.coherence_score for c in clusters), 2),
    )


def _intent_distribution(clusters: Sequence[KeywordCluster]) -> dict[str, int]:
    distribution: dict[str, int] = {}
    for cluster in clusters:
        distribution[cluster.intent.value] = distribution.get(cluster.intent.value, 0) + 1
    return distribution


def _run_recommendations(
    clusters: Sequence[KeywordCluster], statistics: ClusteringStatistics,
) -> list[str]:
    recommendations: list[str] = []
    if statistics.coherence_score > 0.7:
        recommendations.append("Excellent clustering quality - clusters are highly coherent")
    elif statistics.coherence_score < 0.5:
        recommendations.append("Consider adjusting similarity threshold for better clustering")

    if statistics.avg_cluster_size < 3:
        recommendations.append("Many small clusters - consider lowering similarity threshold")
    elif statistics.avg_cluster_size > 10:
        recommendations.append("Large clusters detected - consider increasing similarity threshold")

    high_opportunity = [c for c in clusters if c.avg_difficulty < 30 and c.total_volume > 10000]
    if high_opportunity:
        recommendations.append(
            str(len(high_opportunity)) + " high-opportunity clusters identified - prioritize these"
        )

    recommendations.append("Create content hubs around each major cluster")
    recommendations.append("Use cluster themes for internal linking strategy")
    return recommendations


def _empty_result() -> ClusteringResult:
    statistics = _statistics(0, [])
    return ClusteringResult(
        clusters=(),
        unclustered=(),
        statistics=statistics,
        intent_distribution={},
        recommendations=tuple(_run_recommendations([], statistics)),
    )
