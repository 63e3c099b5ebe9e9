"""Shared pytest fixtures for the Keyword Research Engine tests.

All mock data lives here. Anything random is drawn from a seeded
generator so every run sees the same inputs.
"""

import math
import random
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'keyword_engine' is importable.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from keyword_engine.models.keyword import CompetitorMetrics, KeywordRecord  # noqa: E402
from keyword_engine.models.serp import (  # noqa: E402
    OrganicResult,
    PaidResult,
    SerpAnalysisData,
    SerpFeature,
)
from keyword_engine.models.trend import TrendDataPoint  # noqa: E402


# ---------------------------------------------------------------------------
# Keywords
# ---------------------------------------------------------------------------

@pytest.fixture()
def make_keyword():
    """Factory for KeywordRecord with sensible defaults."""

    def _make(keyword, search_volume=1000, cpc=1.0, difficulty=40.0,
              intent="informational", competition=0.5):
        return KeywordRecord(
            keyword=keyword,
            search_volume=search_volume,
            cpc=cpc,
            competition=competition,
            intent=intent,
            difficulty=difficulty,
        )

    return _make


@pytest.fixture()
def seo_tool_keywords(make_keyword):
    """A tight group of commercial 'seo tools' variants plus unrelated terms."""
    return [
        make_keyword("seo tools", 12000, 4.5, 20, "commercial"),
        make_keyword("seo tools free", 5400, 3.2, 18, "commercial"),
        make_keyword("seo tools online", 2900, 3.8, 22, "commercial"),
        make_keyword("seo tools list", 1900, 2.9, 15, "commercial"),
        make_keyword("weather forecast", 90000, 0.4, 70, "informational"),
        make_keyword("chocolate cake recipe", 40000, 0.8, 55, "informational"),
    ]


# ---------------------------------------------------------------------------
# Competitors
# ---------------------------------------------------------------------------

@pytest.fixture()
def make_competitor():
    """Factory for CompetitorMetrics scaled by a single authority value."""

    def _make(domain_authority, domain="example.com", backlinks=None,
              referring_domains=None, content_length=2000, page_speed=75):
        if backlinks is None:
            backlinks = int(domain_authority * 1000)
        if referring_domains is None:
            referring_domains = int(domain_authority * 20)
        return CompetitorMetrics(
            domain=domain,
            domain_authority=domain_authority,
            page_authority=max(0, domain_authority - 10),
            backlinks=backlinks,
            referring_domains=referring_domains,
            content_length=content_length,
            page_speed=page_speed,
        )

    return _make


@pytest.fixture()
def strong_competitors(make_competitor):
    return [
        make_competitor(92, "wikipedia.org", 500000, 9000, 6000, 95),
        make_competitor(88, "amazon.com", 300000, 7000, 4500, 92),
        make_competitor(85, "nytimes.com", 150000, 6000, 3500, 91),
        make_competitor(81, "forbes.com", 120000, 5500, 3200, 93),
        make_competitor(78, "cnet.com", 90000, 4000, 3100, 88),
    ]


@pytest.fixture()
def weak_competitors(make_competitor):
    return [
        make_competitor(18, "smallblog.net", 120, 40, 700, 45),
        make_competitor(22, "hobbyist.io", 300, 60, 900, 55),
        make_competitor(25, "localshop.biz", 450, 80, 650, 48),
    ]


# ---------------------------------------------------------------------------
# Trend series
# ---------------------------------------------------------------------------

@pytest.fixture()
def make_series():
    """Factory building a daily series from ``volume_fn(index, day)``."""

    def _make(days, volume_fn, start=date(2023, 1, 1), interest_fn=None):
        points = []
        for i in range(days):
            day = start + timedelta(days=i)
            volume = volume_fn(i, day)
            interest = interest_fn(i, day) if interest_fn else 50.0
            points.append(TrendDataPoint(date=day, volume=volume, interest=interest))
        return points

    return _make


@pytest.fixture()
def linear_series(make_series):
    """120 days rising by exactly 10 per day."""
    return make_series(120, lambda i, _: 100 + 10 * i, interest_fn=lambda i, _: min(100, 20 + i * 0.5))


@pytest.fixture()
def seasonal_series(make_series):
    """Two years of daily data peaking every December, with seeded noise."""
    rng = random.Random(42)

    def _volume(_, day):
        seasonal = 1 + 0.8 * math.cos((day.month - 12) / 12 * 2 * math.pi)
        return max(0.0, 1000 * seasonal + rng.uniform(-30, 30))

    return make_series(730, _volume, start=date(2022, 1, 1))


# ---------------------------------------------------------------------------
# SERP snapshots
# ---------------------------------------------------------------------------

@pytest.fixture()
def make_organic():
    def _make(position, domain, domain_authority=50, **kwargs):
        defaults = dict(
            url="https://" + domain + "/page-" + str(position),
            title="Result " + str(position),
            page_authority=max(0, domain_authority - 5),
            backlinks=int(domain_authority * 500),
            content_length=1800,
            page_speed=70,
            keyword_density=1.5,
            title_match=True,
            url_match=False,
            structured_data=False,
        )
        defaults.update(kwargs)
        return OrganicResult(position=position, domain=domain,
                             domain_authority=domain_authority, **defaults)

    return _make


@pytest.fixture()
def serp_snapshot(make_organic):
    """A busy commercial SERP: three ads, three features, a repeated domain."""
    organic = [
        make_organic(1, "moz.com", 91, content_length=3500, page_speed=85, structured_data=True),
        make_organic(2, "ahrefs.com", 88, content_length=4200, page_speed=90, structured_data=True),
        make_organic(3, "moz.com", 91, content_length=2600, page_speed=84, structured_data=True),
        make_organic(4, "semrush.com", 86, content_length=3900, page_speed=88, structured_data=True),
        make_organic(5, "smallblog.net", 22, backlinks=150, content_length=900, page_speed=40),
        make_organic(6, "backlinko.com", 75, content_length=5200, page_speed=82),
    ]
    return SerpAnalysisData(
        keyword="best seo tools",
        total_results=125000000,
        features=(
            SerpFeature("featured_snippet", True, "high", position=0),
            SerpFeature("people_also_ask", True, "medium"),
            SerpFeature("video_results", True, "medium"),
            SerpFeature("shopping_results", False, "high"),
        ),
        organic_results=tuple(organic),
        paid_results=(
            PaidResult(1, "semrush.com", estimated_cpc=12.5),
            PaidResult(2, "similarweb.com", estimated_cpc=9.8),
            PaidResult(3, "spyfu.com", estimated_cpc=7.1),
        ),
        related_searches=("free seo tools", "seo tools list"),
        people_also_ask=("What is the best SEO tool?", "Is Ahrefs worth it?"),
    )


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture()
def settings_file(tmp_path):
    """Write a settings.yaml into a temp dir and return a writer for custom content."""

    def _write(content):
        path = tmp_path / "settings.yaml"
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture()
def clean_env(monkeypatch):
    """Remove engine overrides from the environment for the test's duration.

    Each variable is set before being deleted so monkeypatch restores the
    original state even when a .env file loaded during the test sets it.
    """
    for name in ("KEYWORD_ENGINE_LOG_LEVEL", "KEYWORD_ENGINE_CONCURRENCY"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
