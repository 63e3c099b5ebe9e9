"""Main application facade for the Keyword Research Engine."""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml
from dotenv import load_dotenv

from keyword_engine.exceptions import ConfigurationError, InvalidInputError
from keyword_engine.models.clustering import ClusteringOptions
from keyword_engine.models.trend import TrendOptions

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ENV_LOG_LEVEL = "KEYWORD_ENGINE_LOG_LEVEL"
ENV_CONCURRENCY = "KEYWORD_ENGINE_CONCURRENCY"

DEFAULT_CONCURRENCY = 4


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging with the engine's standard format."""
    numeric = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric, int):
        raise ConfigurationError("Unknown log level: " + repr(level))
    logging.basicConfig(level=numeric, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


class KeywordResearchEngine:
    """Central application class wiring configuration to the four analyzers.

    Usage::

        engine = KeywordResearchEngine()
        engine.initialize()
        result = engine.analyze_difficulty("seo tools", 12000, competitors)
        status = engine.get_status()
    """

    def __init__(
        self,
        config_path: str = "config/settings.yaml",
        env_path: str = ".env",
        configure_logging: bool = False,
    ):
        self._config_path = config_path
        self._env_path = env_path
        self._configure_logging = configure_logging
        self.config: dict[str, Any] = {}
        self._initialized = False
        self._clustering_options: Optional[ClusteringOptions] = None
        self._trend_options: Optional[TrendOptions] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Load environment and configuration, then build option objects."""
        if self._initialized:
            return

        env_file = Path(self._env_path)
        if env_file.exists():
            load_dotenv(env_file)
            logger.info("Loaded environment from %s", self._env_path)

        self.config = self._load_config()
        self._apply_env_overrides()

        if self._configure_logging:
            setup_logging(self.config.get("app", {}).get("log_level", "INFO"))

        self._clustering_options = self._build_options(ClusteringOptions, "clustering")
        self._trend_options = self._build_options(TrendOptions, "trend")

        self._initialized = True
        logger.info("KeywordResearchEngine initialised.")

    def _load_config(self) -> dict[str, Any]:
        """Load the YAML configuration file."""
        config_file = Path(self._config_path)
        if not config_file.exists():
            logger.warning("Config file not found: %s - using defaults.", self._config_path)
            return {}
        try:
            with open(config_file, "r", encoding="utf-8") as fh:
                config = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError("Invalid YAML in " + self._config_path + ": " + str(exc)) from exc
        if not isinstance(config, dict):
            raise ConfigurationError(
                "Settings file must contain a mapping, got " + type(config).__name__
            )
        for section in ("app", "clustering", "trend", "batch"):
            value = config.get(section)
            if value is not None and not isinstance(value, dict):
                raise ConfigurationError("Section '" + section + "' must be a mapping")
        logger.info("Configuration loaded from %s", self._config_path)
        return config

    def _apply_env_overrides(self) -> None:
        level = os.getenv(ENV_LOG_LEVEL)
        if level:
            self.config.setdefault("app", {})["log_level"] = level
            logger.debug("Log level overridden from %s", ENV_LOG_LEVEL)

        concurrency = os.getenv(ENV_CONCURRENCY)
        if concurrency:
            try:
                value = int(concurrency)
            except ValueError as exc:
                raise ConfigurationError(
                    ENV_CONCURRENCY + " must be an integer, got " + repr(concurrency)
                ) from exc
            self.config.setdefault("batch", {})["concurrency"] = value
            logger.debug("Batch concurrency overridden from %s", ENV_CONCURRENCY)

    def _build_options(self, options_cls, section: str):
        values = self.config.get(section) or {}
        try:
            return options_cls(**values)
        except TypeError as exc:
            raise ConfigurationError("Unknown key in '" + section + "' section: " + str(exc)) from exc
        except InvalidInputError as exc:
            raise ConfigurationError("Invalid '" + section + "' settings: " + str(exc)) from exc

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("Call initialize() before using the engine.")

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def clustering_options(self) -> ClusteringOptions:
        self._ensure_initialized()
        return self._clustering_options

    def trend_options(self) -> TrendOptions:
        self._ensure_initialized()
        return self._trend_options

    @property
    def concurrency(self) -> int:
        value = self.config.get("batch", {}).get("concurrency", DEFAULT_CONCURRENCY)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigurationError("batch.concurrency must be a positive integer")
        return value

    # ------------------------------------------------------------------
    # Analyzers
    # ------------------------------------------------------------------

    def analyze_difficulty(
        self,
        keyword: str,
        search_volume: int,
        competitors: Sequence[Any] = (),
        serp_data: Any = None,
        location: str = "US",
    ):
        from keyword_engine.modules.keyword_research import analyze_difficulty

        self._ensure_initialized()
        return analyze_difficulty(keyword, search_volume, competitors, serp_data, location)

    def cluster_keywords(self, keywords: Sequence[Any], options: Optional[ClusteringOptions] = None):
        from keyword_engine.modules.keyword_research import cluster_keywords

        self._ensure_initialized()
        return cluster_keywords(keywords, options or self._clustering_options)

    def analyze_trend(
        self, keyword: str, series: Sequence[Any], options: Optional[TrendOptions] = None,
    ):
        from keyword_engine.modules.keyword_research import analyze_trend

        self._ensure_initialized()
        return analyze_trend(keyword, series, options or self._trend_options)

    def analyze_serp(self, data: Any):
        from keyword_engine.modules.serp_analysis import analyze_serp_data

        self._ensure_initialized()
        return analyze_serp_data(data)

    def batch(self):
        """Return a :class:`BatchAnalyzer` configured from the settings."""
        from keyword_engine.workflows import BatchAnalyzer

        self._ensure_initialized()
        return BatchAnalyzer(
            concurrency=self.concurrency,
            clustering_options=self._clustering_options,
            trend_options=self._trend_options,
        )

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_status(self) -> dict[str, dict[str, Any]]:
        """Return a health summary of configuration and analyzer settings."""
        self._ensure_initialized()
        status: dict[str, dict[str, Any]] = {}

        status["config"] = {
            "status": "ok" if self.config else "warning",
            "details": f"{len(self.config)} sections loaded" if self.config else "no config, defaults in use",
        }
        status["clustering"] = {
            "status": "ok",
            "details": (
                f"threshold={self._clustering_options.similarity_threshold}, "
                f"min_size={self._clustering_options.min_cluster_size}"
            ),
        }
        status["trend"] = {
            "status": "ok",
            "details": (
                f"min_points={self._trend_options.min_data_points}, "
                f"confidence={self._trend_options.confidence_level}"
            ),
        }
        try:
            status["batch"] = {"status": "ok", "details": f"concurrency={self.concurrency}"}
        except ConfigurationError as exc:
            status["batch"] = {"status": "error", "details": str(exc)}
        status["logging"] = {
            "status": "ok",
            "details": "level=" + str(self.config.get("app", {}).get("log_level", "INFO")).upper(),
        }
        return status
