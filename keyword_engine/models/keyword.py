"""Keyword, competitor and SERP-snapshot input records."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from keyword_engine.exceptions import InvalidInputError
from keyword_engine.models.base import SerializableMixin
from keyword_engine.utils.text_processing import infer_intent
from keyword_engine.utils.validators import (
    ensure,
    validate_intent,
    validate_keyword_text,
    validate_number,
    validate_required_fields,
)


class Intent(str, Enum):
    """Search intent of a keyword."""

    INFORMATIONAL = "informational"
    NAVIGATIONAL = "navigational"
    COMMERCIAL = "commercial"
    TRANSACTIONAL = "transactional"


def _pick(data: Mapping[str, Any], name: str, alias: str, default: Any = None) -> Any:
    """Read *name*, falling back to its camelCase *alias* used by JS data providers."""
    if name in data:
        return data[name]
    return data.get(alias, default)


@dataclass(frozen=True)
class KeywordRecord(SerializableMixin):
    """A keyword with its search metrics, as supplied by a data provider."""

    keyword: str
    search_volume: int = 0
    cpc: float = 0.0
    competition: float = 0.0
    intent: Intent = Intent.INFORMATIONAL
    serp_features: frozenset[str] = field(default_factory=frozenset)
    difficulty: float = 0.0

    def __post_init__(self) -> None:
        ensure(validate_keyword_text(self.keyword), "keyword")
        ensure(validate_number(self.search_volume, "search_volume", 0))
        ensure(validate_number(self.cpc, "cpc", 0))
        ensure(validate_number(self.competition, "competition", 0, 1))
        ensure(validate_number(self.difficulty, "difficulty", 0, 100))
        ensure(validate_intent(self.intent))
        object.__setattr__(self, "intent", Intent(getattr(self.intent, "value", self.intent)))
        if isinstance(self.serp_features, str):
            raise InvalidInputError("must be a collection of strings.", field="serp_features")
        object.__setattr__(self, "serp_features", frozenset(self.serp_features))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KeywordRecord":
        """Build a record from a provider dict (snake_case or camelCase keys).

        When ``intent`` is absent it is inferred from the keyword's terms,
        defaulting to informational.
        """
        ensure(validate_required_fields(data, ["keyword"]))
        keyword = data["keyword"]
        intent = data.get("intent")
        if intent is None and isinstance(keyword, str):
            intent = infer_intent(keyword) or Intent.INFORMATIONAL.value
        return cls(
            keyword=keyword,
            search_volume=_pick(data, "search_volume", "searchVolume", 0),
            cpc=data.get("cpc", 0.0),
            competition=data.get("competition", 0.0),
            intent=intent,
            serp_features=frozenset(_pick(data, "serp_features", "serpFeatures", ()) or ()),
            difficulty=data.get("difficulty", 0.0),
        )


@dataclass(frozen=True)
class CompetitorMetrics(SerializableMixin):
    """Authority and content metrics for one ranking competitor."""

    domain: str
    domain_authority: float = 0.0
    page_authority: float = 0.0
    backlinks: int = 0
    referring_domains: int = 0
    content_length: int = 0
    page_speed: float = 0.0
    social_signals: int = 0
    brand_mentions: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.domain, str):
            raise InvalidInputError("must be a string.", field="domain")
        ensure(validate_number(self.domain_authority, "domain_authority", 0, 100))
        ensure(validate_number(self.page_authority, "page_authority", 0, 100))
        ensure(validate_number(self.page_speed, "page_speed", 0, 100))
        for name in ("backlinks", "referring_domains", "content_length",
                     "social_signals", "brand_mentions"):
            ensure(validate_number(getattr(self, name), name, 0))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompetitorMetrics":
        ensure(validate_required_fields(data, ["domain"]))
        return cls(
            domain=data["domain"],
            domain_authority=_pick(data, "domain_authority", "domainAuthority", 0.0),
            page_authority=_pick(data, "page_authority", "pageAuthority", 0.0),
            backlinks=data.get("backlinks", 0),
            referring_domains=_pick(data, "referring_domains", "referringDomains", 0),
            content_length=_pick(data, "content_length", "contentLength", 0),
            page_speed=_pick(data, "page_speed", "pageSpeed", 0.0),
            social_signals=_pick(data, "social_signals", "socialSignals", 0),
            brand_mentions=_pick(data, "brand_mentions", "brandMentions", 0),
        )


# Boolean SERP flags paired with their camelCase provider keys
_SERP_FLAGS = [
    ("featured_snippet", "featuredSnippet"),
    ("knowledge_panel", "knowledgePanel"),
    ("local_pack", "localPack"),
    ("image_results", "imageResults"),
    ("video_results", "videoResults"),
    ("shopping_results", "shoppingResults"),
    ("news_results", "newsResults"),
    ("people_also_ask", "peopleAlsoAsk"),
]


@dataclass(frozen=True)
class SerpSnapshot(SerializableMixin):
    """Which SERP features a keyword's results page shows.

    The defaults describe a typical commercial SERP: four ads, a
    featured snippet and a local pack.
    """

    total_results: int = 0
    paid_ads: int = 4
    featured_snippet: bool = True
    knowledge_panel: bool = False
    local_pack: bool = True
    image_results: bool = False
    video_results: bool = False
    shopping_results: bool = False
    news_results: bool = False
    people_also_ask: bool = False

    def __post_init__(self) -> None:
        ensure(validate_number(self.total_results, "total_results", 0))
        ensure(validate_number(self.paid_ads, "paid_ads", 0))
        for name, _ in _SERP_FLAGS:
            if not isinstance(getattr(self, name), bool):
                raise InvalidInputError("must be a boolean.", field=name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SerpSnapshot":
        ensure(validate_required_fields(data, []))
        defaults = cls()
        flags = {
            name: _pick(data, name, alias, getattr(defaults, name))
            for name, alias in _SERP_FLAGS
        }
        return cls(
            total_results=_pick(data, "total_results", "totalResults", 0),
            paid_ads=_pick(data, "paid_ads", "paidAds", defaults.paid_ads),
            **flags,
        )
