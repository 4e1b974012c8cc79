from sourcecite.search.base import SearchError, SearchProvider
from sourcecite.search.fields import DEFAULT_FIELD_POLICY, FieldResolutionPolicy
from sourcecite.search.serpapi import SerpApiSearchProvider
from sourcecite.search.sources import (
    SourceFetcher,
    map_freshness_to_tbs,
    normalize_title,
    resolve_freshness,
)

__all__ = [
    "DEFAULT_FIELD_POLICY",
    "FieldResolutionPolicy",
    "SearchError",
    "SearchProvider",
    "SerpApiSearchProvider",
    "SourceFetcher",
    "map_freshness_to_tbs",
    "normalize_title",
    "resolve_freshness",
]
