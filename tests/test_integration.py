"""Integration tests for the Keyword Research Engine.

Covers package imports, the shipped settings file, an end-to-end pass
through all four analyzers, JSON serialisation of results, and syntax
validation of every Python file in the project.
"""

import ast
import importlib
import json
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Project root (conftest.py already puts it on sys.path)
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent


# ===========================================================================
# 1. Module imports
# ===========================================================================
class TestModuleImports:
    """All packages should be importable and expose their entry points."""

    @pytest.mark.parametrize("module_path,names", [
        ("keyword_engine", ["analyze_difficulty", "cluster_keywords", "analyze_trend",
                            "analyze_serp_data", "KeywordResearchEngine", "setup_logging"]),
        ("keyword_engine.modules.keyword_research", ["analyze_difficulty", "cluster_keywords",
                                                     "analyze_trend"]),
        ("keyword_engine.modules.serp_analysis", ["analyze_serp_data"]),
        ("keyword_engine.models", ["KeywordRecord", "CompetitorMetrics", "SerpSnapshot",
                                   "TrendDataPoint", "SerpAnalysisData", "ClusteringOptions",
                                   "TrendOptions"]),
        ("keyword_engine.utils.stats", ["normalize_score", "percentile", "correlation",
                                        "moving_average", "detect_outliers", "confidence"]),
        ("keyword_engine.workflows", ["BatchAnalyzer", "BatchItemResult"]),
        ("keyword_engine.exceptions", ["KeywordEngineError", "InvalidInputError",
                                       "InsufficientDataError", "ConfigurationError"]),
    ])
    def test_module_importable(self, module_path, names):
        mod = importlib.import_module(module_path)
        for name in names:
            assert hasattr(mod, name), (
                "Name " + name + " not found in " + module_path
            )

    def test_version(self):
        import keyword_engine
        assert keyword_engine.__version__ == "1.0.0"


# ===========================================================================
# 2. Settings YAML
# ===========================================================================
class TestSettingsYaml:
    """Configuration file should be loadable."""

    def _load(self):
        import yaml
        settings_path = PROJECT_ROOT / "config" / "settings.yaml"
        with open(settings_path, encoding="utf-8") as fh:
            return yaml.safe_load(fh)

    def test_settings_file_exists(self):
        settings_path = PROJECT_ROOT / "config" / "settings.yaml"
        assert settings_path.exists(), "config/settings.yaml not found"

    def test_settings_has_required_sections(self):
        config = self._load()
        for section in ("app", "clustering", "trend", "batch"):
            assert section in config, (
                "Missing config section: " + section
            )

    def test_settings_app_name(self):
        assert self._load()["app"]["name"] == "Keyword Research Engine"

    def test_shipped_settings_match_defaults(self, clean_env):
        from keyword_engine import KeywordResearchEngine
        from keyword_engine.models import ClusteringOptions, TrendOptions

        engine = KeywordResearchEngine(
            config_path=str(PROJECT_ROOT / "config" / "settings.yaml"),
            env_path=str(PROJECT_ROOT / "no-such.env"),
        )
        engine.initialize()
        assert engine.clustering_options() == ClusteringOptions()
        assert engine.trend_options() == TrendOptions()
        assert engine.concurrency == 4


# ===========================================================================
# 3. End-to-end analysis
# ===========================================================================
class TestEndToEnd:
    """Run every analyzer on realistic inputs and serialise the results."""

    def test_full_keyword_report(self, seo_tool_keywords, strong_competitors,
                                 linear_series, serp_snapshot):
        from keyword_engine import (
            analyze_difficulty,
            analyze_serp_data,
            analyze_trend,
            cluster_keywords,
        )

        report = {
            "difficulty": analyze_difficulty("seo tools", 12000, strong_competitors).to_dict(),
            "clusters": cluster_keywords(seo_tool_keywords).to_dict(),
            "trend": analyze_trend("seo tools", linear_series).to_dict(),
            "serp": analyze_serp_data(serp_snapshot).to_dict(),
        }
        encoded = json.dumps(report)
        decoded = json.loads(encoded)

        assert decoded["difficulty"]["difficulty_level"] in (
            "Very Easy", "Easy", "Medium", "Hard", "Very Hard", "Extremely Hard",
        )
        assert decoded["clusters"]["statistics"]["cluster_count"] == 1
        assert decoded["trend"]["time_range"]["start"] == "2023-01-01"
        assert decoded["trend"]["overall_trend"]["direction"] == "rising"
        assert decoded["serp"]["overview"]["competition_level"] == "extreme"


# ===========================================================================
# 4. All Python files syntax validation
# ===========================================================================
class TestAllPythonFilesSyntax:
    """Every .py file in keyword_engine/ and tests/ should pass ast.parse."""

    def _collect_python_files(self):
        files = []
        for directory in ("keyword_engine", "tests"):
            base = PROJECT_ROOT / directory
            if base.exists():
                for py_file in base.rglob("*.py"):
                    if "__pycache__" in py_file.parts:
                        continue
                    files.append(py_file)
        return sorted(files)

    def test_all_python_files_parse(self):
        py_files = self._collect_python_files()
        assert len(py_files) > 0, "No Python files found"
        errors = []
        for py_file in py_files:
            try:
                ast.parse(py_file.read_text(encoding="utf-8"))
            except SyntaxError as exc:
                rel = py_file.relative_to(PROJECT_ROOT)
                errors.append(str(rel) + ": " + str(exc))
        if errors:
            msg = "Python syntax errors found in " + str(len(errors)) + " files:\n"
            msg += "\n".join(errors[:20])
            pytest.fail(msg)


# ===========================================================================
# 5. Requirements / key packages importable
# ===========================================================================
class TestRequirementsInstallable:
    """Key packages from requirements.txt should be importable."""

    @pytest.mark.parametrize("package", [
        "yaml",    # PyYAML
        "dotenv",  # python-dotenv
    ])
    def test_package_importable(self, package):
        importlib.import_module(package)
