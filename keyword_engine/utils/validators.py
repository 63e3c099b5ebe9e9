"""Input validation utilities for keyword, competitor, SERP and trend records."""

import math
from typing import Any, Iterable, Mapping, Optional

from keyword_engine.exceptions import InvalidInputError

VALID_INTENTS = ("informational", "navigational", "commercial", "transactional")


def validate_number(
    value: Any,
    name: str,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> tuple[bool, str]:
    """Validate that *value* is a finite real number inside optional bounds.

    Args:
        value: The value to check. ``bool`` is rejected even though it is an int.
        name: Field name used in the error message.
        minimum: Inclusive lower bound, if any.
        maximum: Inclusive upper bound, if any.

    Returns:
        Tuple of (is_valid, error_message). error_message is empty on success.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False, f"{name} must be a number, got {type(value).__name__}."
    if math.isnan(value) or math.isinf(value):
        return False, f"{name} must be finite."
    if minimum is not None and value < minimum:
        return False, f"{name} must be >= {minimum}, got {value}."
    if maximum is not None and value > maximum:
        return False, f"{name} must be <= {maximum}, got {value}."
    return True, ""


def validate_keyword_text(keyword: Any) -> tuple[bool, str]:
    """Validate a keyword phrase.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not isinstance(keyword, str):
        return False, "keyword must be a string."
    if not keyword.strip():
        return False, "keyword is empty."
    if len(keyword) > 500:
        return False, "keyword exceeds maximum length (500 chars)."
    return True, ""


def validate_intent(intent: Any) -> tuple[bool, str]:
    """Validate a search-intent label."""
    value = getattr(intent, "value", intent)
    if value not in VALID_INTENTS:
        return False, f"intent must be one of {', '.join(VALID_INTENTS)}, got {value!r}."
    return True, ""


def validate_required_fields(data: Any, fields: Iterable[str]) -> tuple[bool, str]:
    """Check that *data* is a mapping containing every name in *fields*."""
    if not isinstance(data, Mapping):
        return False, f"expected a mapping, got {type(data).__name__}."
    missing = [f for f in fields if f not in data]
    if missing:
        return False, "missing required field(s): " + ", ".join(missing)
    return True, ""


def ensure(result: tuple[bool, str], field: Optional[str] = None) -> None:
    """Raise :class:`InvalidInputError` when a validator result is negative."""
    is_valid, message = result
    if not is_valid:
        raise InvalidInputError(message, field=field)


def ensure_sequence_of(items: Any, item_type: type = object, name: Optional[str] = None) -> None:
    """Reject anything that is not a list/tuple whose members are *item_type*."""
    if not isinstance(items, (list, tuple)):
        raise InvalidInputError(
            f"must be a list or tuple, got {type(items).__name__}.", field=name
        )
    for index, item in enumerate(items):
        if not isinstance(item, item_type):
            raise InvalidInputError(
                f"item {index} must be {item_type.__name__}, got {type(item).__name__}.",
                field=name,
            )
