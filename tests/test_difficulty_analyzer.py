"""Tests for the keyword difficulty analyzer."""

import pytest

from keyword_engine.exceptions import InvalidInputError
from keyword_engine.models import CompetitorMetrics, SerpSnapshot
from keyword_engine.models.difficulty import (
    DifficultyLevel,
    EffortLevel,
    FactorImpact,
    FactorKind,
)
from keyword_engine.modules.keyword_research.difficulty_analyzer import (
    FACTOR_WEIGHTS,
    analyze_difficulty,
    difficulty_level,
    effort_required,
    estimate_time_to_rank,
)


class TestScoring:
    """Overall score, level and derived estimates."""

    def test_weights_sum_to_one(self):
        assert sum(FACTOR_WEIGHTS.values()) == pytest.approx(1.0)

    def test_transactional_keyword_without_competitors(self):
        result = analyze_difficulty("buy running shoes", 5000)
        assert result.overall_score == 35
        assert result.difficulty_level == DifficultyLevel.MEDIUM
        assert result.success_probability == 65
        assert result.time_to_rank == "6-9 months"
        assert result.effort_required == EffortLevel.MEDIUM
        assert result.factor(FactorKind.SERP_FEATURES).value == 39
        assert result.factor(FactorKind.COMMERCIAL_INTENT).value == 80
        assert result.factor(FactorKind.SEARCH_VOLUME).impact == FactorImpact.POSITIVE
        assert result.recommendations[0] == "Excellent opportunity for quick wins"

    def test_empty_competitors_use_fallbacks(self):
        result = analyze_difficulty("buy running shoes", 5000, [])
        assert result.factor(FactorKind.COMPETITION_LEVEL).value == 20
        assert result.factor(FactorKind.TOP_COMPETITORS).value == 25
        assert result.factor(FactorKind.CONTENT_QUALITY).value == 40
        assert result.factor(FactorKind.BACKLINK_PROFILE).value == 35
        assert result.competitor_analysis.strongest_competitor is None
        assert result.competitor_analysis.weakest_competitor is None
        assert result.competitor_analysis.average_metrics.domain_authority == 0

    def test_head_term_against_strong_competitors(self, strong_competitors):
        result = analyze_difficulty("seo", 60000, strong_competitors)
        assert result.factor(FactorKind.COMPETITION_LEVEL).value == 85
        assert result.factor(FactorKind.TOP_COMPETITORS).value == 58
        assert result.factor(FactorKind.CONTENT_QUALITY).value == 75
        assert result.factor(FactorKind.BACKLINK_PROFILE).value == 70
        assert result.factor(FactorKind.COMMERCIAL_INTENT).value == 35
        assert result.overall_score == 67
        assert result.difficulty_level == DifficultyLevel.VERY_HARD
        # 100 - 67, minus 10 for volume and 15 for competition
        assert result.success_probability == 8
        assert result.factor(FactorKind.TOP_COMPETITORS).description.startswith("Dominated")
        assert "Differentiate with a unique angle the top results lack" in result.recommendations

    def test_weak_competitors(self, weak_competitors):
        result = analyze_difficulty("handmade soap tips", 400, weak_competitors)
        competition = result.factor(FactorKind.COMPETITION_LEVEL)
        assert competition.value == 25
        assert competition.description == "Low competition - good opportunity"
        top = result.factor(FactorKind.TOP_COMPETITORS)
        assert top.value == pytest.approx(35 / 3)
        assert top.description == "Weak competitors - good opportunity"
        assert result.factor(FactorKind.COMMERCIAL_INTENT).value == 25

    def test_factor_order_and_weights(self, strong_competitors):
        result = analyze_difficulty("seo", 60000, strong_competitors)
        assert [f.kind for f in result.factors] == list(FACTOR_WEIGHTS)
        for factor in result.factors:
            assert factor.weight == FACTOR_WEIGHTS[factor.kind]
            assert 0 <= factor.value <= 100

    @pytest.mark.parametrize("volume", [0, 50, 500, 5000, 20000, 1000000])
    def test_bounds(self, volume, strong_competitors, weak_competitors):
        for competitors in ([], weak_competitors, strong_competitors):
            result = analyze_difficulty("best seo tools", volume, competitors)
            assert 0 <= result.overall_score <= 100
            assert 5 <= result.success_probability <= 95

    def test_stronger_competitors_never_lower_the_score(self, make_competitor):
        scores = []
        for da in (10, 30, 50, 70, 90):
            competitors = [make_competitor(da, "site" + str(i) + ".com") for i in range(3)]
            scores.append(analyze_difficulty("seo audit", 3000, competitors).overall_score)
        assert scores == sorted(scores)
        assert scores[-1] > scores[0]

    def test_domain_authority_never_lowers_competitor_factors(self, make_competitor):
        competition = []
        top = []
        for da in (0, 40, 41, 60, 61, 80, 81, 100):
            competitors = [
                make_competitor(da, "site" + str(i) + ".com", backlinks=20000,
                                referring_domains=400, content_length=2000, page_speed=75)
                for i in range(3)
            ]
            result = analyze_difficulty("seo audit", 3000, competitors)
            competition.append(result.factor(FactorKind.COMPETITION_LEVEL).value)
            top.append(result.factor(FactorKind.TOP_COMPETITORS).value)

        assert competition == sorted(competition)
        assert top == sorted(top)
        # Each band edge raises both factors
        assert competition == [40, 40, 55, 55, 65, 65, 75, 75]
        assert top == [30, 30, 35, 35, 40, 40, 45, 45]

    def test_deterministic(self, strong_competitors):
        first = analyze_difficulty("seo", 60000, strong_competitors)
        second = analyze_difficulty("seo", 60000, strong_competitors)
        assert first == second
        assert first.to_dict() == second.to_dict()

    @pytest.mark.parametrize("score,level,time,effort", [
        (0, DifficultyLevel.VERY_EASY, "1-3 months", EffortLevel.LOW),
        (20, DifficultyLevel.EASY, "3-6 months", EffortLevel.LOW),
        (35, DifficultyLevel.MEDIUM, "6-9 months", EffortLevel.MEDIUM),
        (50, DifficultyLevel.HARD, "9-15 months", EffortLevel.HIGH),
        (65, DifficultyLevel.VERY_HARD, "15-24 months", EffortLevel.VERY_HIGH),
        (80, DifficultyLevel.EXTREMELY_HARD, "24+ months", EffortLevel.VERY_HIGH),
    ])
    def test_level_boundaries(self, score, level, time, effort):
        assert difficulty_level(score) == level
        assert estimate_time_to_rank(score) == time
        assert effort_required(score) == effort


class TestCompetitorAnalysis:
    """Competitor ranking and averages."""

    def test_strongest_and_weakest(self, strong_competitors):
        analysis = analyze_difficulty("seo", 60000, strong_competitors).competitor_analysis
        assert analysis.strongest_competitor.domain == "wikipedia.org"
        assert analysis.weakest_competitor.domain == "cnet.com"
        assert len(analysis.top_competitors) == 5
        assert analysis.average_metrics.domain_authority == 85
        assert analysis.average_metrics.backlinks == 232000
        assert analysis.average_metrics.content_length == 4060

    def test_equal_strength_keeps_input_order(self, make_competitor):
        competitors = [make_competitor(50, "first.com"), make_competitor(50, "second.com")]
        analysis = analyze_difficulty("seo", 100, competitors).competitor_analysis
        assert [c.domain for c in analysis.top_competitors] == ["first.com", "second.com"]


class TestSerpComplexity:
    """SERP snapshot handling."""

    def test_default_snapshot(self):
        complexity = analyze_difficulty("buy running shoes", 5000).serp_complexity
        assert complexity.features == ("Featured Snippet", "Local Pack")
        assert complexity.score == 40
        assert complexity.organic_spots == 4

    def test_clean_serp_from_dict(self):
        serp = {"paidAds": 0, "featuredSnippet": False, "localPack": False}
        result = analyze_difficulty("handmade soap", 300, serp_data=serp)
        factor = result.factor(FactorKind.SERP_FEATURES)
        assert factor.value == 0
        assert factor.description.startswith("Clean SERP")
        assert result.serp_complexity.score == 0
        assert result.serp_complexity.organic_spots == 10

    def test_organic_spots_floor(self):
        serp = SerpSnapshot(paid_ads=8, knowledge_panel=True, video_results=True)
        assert analyze_difficulty("seo", 100, serp_data=serp).serp_complexity.organic_spots == 3


class TestInputHandling:
    """Dict coercion and rejection of malformed input."""

    def test_dict_competitors_match_records(self):
        from_dicts = analyze_difficulty(
            "seo", 1000, [{"domain": "a.com", "domainAuthority": 50, "backlinks": 2000}],
        )
        from_records = analyze_difficulty(
            "seo", 1000, [CompetitorMetrics("a.com", domain_authority=50, backlinks=2000)],
        )
        assert from_dicts == from_records

    @pytest.mark.parametrize("kwargs", [
        {"keyword": "", "search_volume": 100},
        {"keyword": "seo", "search_volume": -1},
        {"keyword": "seo", "search_volume": "many"},
        {"keyword": "seo", "search_volume": 100, "competitors": "moz.com"},
        {"keyword": "seo", "search_volume": 100, "competitors": [42]},
        {"keyword": "seo", "search_volume": 100, "serp_data": 5},
    ])
    def test_invalid_input(self, kwargs):
        with pytest.raises(InvalidInputError):
            analyze_difficulty(**kwargs)

    def test_location_carried_through(self):
        assert analyze_difficulty("seo", 100, location="ES").location == "ES"
