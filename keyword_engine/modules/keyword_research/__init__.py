"""Keyword Research module -- difficulty scoring, semantic clustering and trend analysis."""

from keyword_engine.modules.keyword_research.difficulty_analyzer import analyze_difficulty
from keyword_engine.modules.keyword_research.clustering import cluster_keywords
from keyword_engine.modules.keyword_research.trend_analyzer import analyze_trend

__all__ = ["analyze_difficulty", "cluster_keywords", "analyze_trend"]
