"""Shared serialisation for the engine's frozen dataclasses."""

import dataclasses
from datetime import date
from enum import Enum
from typing import Any


def to_plain(value: Any) -> Any:
    """Recursively convert dataclasses, enums, dates and sets to JSON-ready values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_plain(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (frozenset, set)):
        return sorted(to_plain(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    return value


class SerializableMixin:
    """Adds ``to_dict`` to a dataclass."""

    def to_dict(self) -> dict[str, Any]:
        return to_plain(self)
