"""Text processing utilities for keyword similarity analysis."""

import re
from typing import AbstractSet, Optional

# Common English and Spanish stop-words
STOPWORDS = frozenset([
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "has", "he",
    "in", "is", "it", "its", "of", "on", "that", "the", "to", "was", "will", "with",
    "el", "la", "de", "que", "y", "en", "un", "es", "se", "no", "te", "lo", "le",
    "da", "su", "por", "son", "con", "para", "al", "del", "los", "las", "una", "como",
])

# Terms used to guess intent when a provider omits it
TRANSACTIONAL_TERMS = frozenset([
    "buy", "purchase", "order", "shop", "checkout", "price", "cost", "cheap",
    "discount", "sale", "deal",
    "comprar", "precio", "barato", "descuento", "oferta", "venta",
])

COMMERCIAL_TERMS = frozenset([
    "best", "top", "review", "reviews", "compare", "comparison", "vs",
    "alternative", "alternatives",
    "mejor", "mejores", "comparar", "opiniones",
])

INFORMATIONAL_TERMS = frozenset([
    "how", "what", "why", "when", "where", "guide", "tutorial", "tips", "learn",
    "que", "por", "cuando", "donde", "guia", "consejos", "aprender",
])

NAVIGATIONAL_TERMS = frozenset([
    "login", "signin", "sign", "website", "official", "app", "download",
])

# (suffix, min_length) pairs, checked in order; min_length 0 means no limit
_STEM_RULES: list[tuple[str, int]] = [
    ("ing", 0),
    ("ed", 0),
    ("er", 0),
    ("est", 0),
    ("ly", 0),
    ("s", 4),
    ("ando", 0),
    ("iendo", 0),
    ("mente", 0),
    ("ción", 0),
    ("sión", 0),
]

_NON_WORD = re.compile(r"[^\w\s]")


def count_words(text: str) -> int:
    """Count whitespace-separated words in text."""
    return len(text.split())


def tokenize(text: str) -> list[str]:
    """Lowercase, strip punctuation, split and drop stop-words and 1-char tokens.

    Examples:
        >>> tokenize("The Best SEO-Tools, 2025!")
        ['best', 'seo', 'tools', '2025']
    """
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [
        token for token in cleaned.split()
        if len(token) > 1 and token not in STOPWORDS
    ]


def stem(word: str) -> str:
    """Strip the first matching English or Spanish suffix.

    A deliberately small rule table; the trailing-``s`` rule only fires on
    words longer than three characters so "seo" or "gas" survive.
    """
    for suffix, min_length in _STEM_RULES:
        if word.endswith(suffix) and len(word) >= min_length:
            return word[: -len(suffix)]
    return word


def stem_tokens(tokens: list[str]) -> list[str]:
    """Apply :func:`stem` to every token."""
    return [stem(token) for token in tokens]


def jaccard_similarity(first: AbstractSet[str], second: AbstractSet[str]) -> float:
    """|A intersect B| / |A union B|; 0.0 when both sets are empty."""
    union = first | second
    if not union:
        return 0.0
    return len(first & second) / len(union)


def overlap_similarity(first: AbstractSet[str], second: AbstractSet[str]) -> float:
    """|A intersect B| / min(|A|, |B|); 0.0 when either set is empty."""
    smallest = min(len(first), len(second))
    if smallest == 0:
        return 0.0
    return len(first & second) / smallest


def levenshtein_distance(first: str, second: str) -> int:
    """Classic edit distance (insert, delete, substitute all cost 1)."""
    if len(first) < len(second):
        first, second = second, first
    previous = list(range(len(second) + 1))
    for i, char_a in enumerate(first, start=1):
        current = [i]
        for j, char_b in enumerate(second, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j - 1], previous[j], current[j - 1]) + 1)
        previous = current
    return previous[-1]


def character_similarity(first: str, second: str) -> float:
    """Edit-distance similarity normalised by the longer string's length."""
    longer = first if len(first) > len(second) else second
    shorter = second if longer is first else first
    if not longer:
        return 1.0
    return (len(longer) - levenshtein_distance(longer, shorter)) / len(longer)


def infer_intent(keyword: str) -> Optional[str]:
    """Guess a search intent from the terms in *keyword*.

    Returns:
        One of transactional, commercial, navigational, informational,
        or None when no known term matches.
    """
    tokens = set(re.sub(r"[^\w\s]", " ", keyword.lower()).split())
    if tokens & TRANSACTIONAL_TERMS:
        return "transactional"
    if tokens & COMMERCIAL_TERMS:
        return "commercial"
    if tokens & NAVIGATIONAL_TERMS:
        return "navigational"
    if tokens & INFORMATIONAL_TERMS:
        return "informational"
    return None
