"""Keyword Research Engine -- difficulty, clustering, trend and SERP analytics."""

from keyword_engine.exceptions import (
    ConfigurationError,
    InsufficientDataError,
    InvalidInputError,
    KeywordEngineError,
)
from keyword_engine.modules.keyword_research import (
    analyze_difficulty,
    analyze_trend,
    cluster_keywords,
)
from keyword_engine.modules.serp_analysis import analyze_serp_data
from keyword_engine.app import KeywordResearchEngine, setup_logging

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "InsufficientDataError",
    "InvalidInputError",
    "KeywordEngineError",
    "KeywordResearchEngine",
    "analyze_difficulty",
    "analyze_serp_data",
    "analyze_trend",
    "cluster_keywords",
    "setup_logging",
]
