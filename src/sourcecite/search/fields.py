"""Field resolution for loosely-typed search result records."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_NESTED_KEYS = ("name", "title", "text", "value")


def _coerce(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, Mapping):
        for key in _NESTED_KEYS:
            nested = _coerce(value.get(key))
            if nested:
                return nested
    return ""


@dataclass(frozen=True)
class FieldResolutionPolicy:
    """Ordered candidate keys for each logical field of a search result.

    The first candidate holding a non-empty value wins. Mapping values such as
    SerpAPI's ``{"source": {"name": "..."}}`` are unwrapped through their
    ``name``/``title``/``text``/``value`` keys.
    """

    url: tuple[str, ...] = ("link", "url")
    title: tuple[str, ...] = ("title", "name", "headline")
    publisher: tuple[str, ...] = ("source", "publisher", "source_name")
    summary: tuple[str, ...] = ("snippet", "summary", "description")
    published: tuple[str, ...] = ("date", "iso_date", "published_at", "publishedAt")

    def resolve(self, record: Mapping[str, Any], field: str) -> str:
        """Resolve a logical field of ``record`` to a stripped string ("" if absent)."""
        candidates: tuple[str, ...] = getattr(self, field)
        for key in candidates:
            value = _coerce(record.get(key))
            if value:
                return value
        return ""


DEFAULT_FIELD_POLICY = FieldResolutionPolicy()
