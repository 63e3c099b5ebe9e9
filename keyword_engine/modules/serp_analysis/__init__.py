"""SERP Analysis module -- feature landscape and organic competition for a results page."""

from keyword_engine.modules.serp_analysis.serp_analyzer import analyze_serp_data

__all__ = ["analyze_serp_data"]
