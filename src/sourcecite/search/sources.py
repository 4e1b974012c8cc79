"""Source discovery: one fresh news search, deduplicated by publisher and headline."""

import logging
import re
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from sourcecite.cache import PrefetchCache
from sourcecite.data import DEFAULT_FRESHNESS, Article, Freshness
from sourcecite.search.base import SearchProvider
from sourcecite.search.fields import DEFAULT_FIELD_POLICY, FieldResolutionPolicy
from sourcecite.timestamps import is_within_window, parse_published_timestamp, to_iso
from sourcecite.url import extract_domain

logger = logging.getLogger(__name__)

SEARCH_ENGINE = "google_news"
SEARCH_RESULT_LIMIT = 8
MAX_SOURCES = 5
MIN_RECENCY_WINDOW = timedelta(days=7)

FRESHNESS_TO_TBS: dict[Freshness, str] = {
    Freshness.ONE_HOUR: "qdr:h",
    Freshness.SIX_HOURS: "qdr:h6",
    Freshness.ONE_DAY: "qdr:d",
    Freshness.SEVEN_DAYS: "qdr:w",
    Freshness.THIRTY_DAYS: "qdr:m",
}

FRESHNESS_TO_WINDOW: dict[Freshness, timedelta] = {
    Freshness.ONE_HOUR: timedelta(hours=1),
    Freshness.SIX_HOURS: timedelta(hours=6),
    Freshness.ONE_DAY: timedelta(days=1),
    Freshness.SEVEN_DAYS: timedelta(days=7),
    Freshness.THIRTY_DAYS: timedelta(days=30),
}

# " - The Verge", " | Wired", " — CNN" at the end of a headline
_TITLE_SUFFIX_RE = re.compile(r"\s+[-|–—]\s+[^-|–—]+$")


def resolve_freshness(value: Freshness | str | None) -> Freshness:
    """Coerce a freshness value, falling back to the 6-hour default."""
    if value is None:
        return DEFAULT_FRESHNESS
    try:
        return Freshness(value)
    except ValueError:
        logger.warning(f"Unknown freshness {value!r}, using {DEFAULT_FRESHNESS}")
        return DEFAULT_FRESHNESS


def map_freshness_to_tbs(value: Freshness | str | None) -> str:
    """Map a freshness window to SerpAPI's ``tbs`` time filter token."""
    return FRESHNESS_TO_TBS[resolve_freshness(value)]


def normalize_publisher(value: str) -> str:
    return " ".join(value.split()).lower()


def normalize_title(value: str) -> str:
    """Lower-case, collapse whitespace and drop a trailing publisher suffix."""
    collapsed = " ".join(value.split())
    stripped = _TITLE_SUFFIX_RE.sub("", collapsed)
    return (stripped or collapsed).lower()


class SourceFetcher:
    """Find recent sources for a topic via a single search call.

    Results are deduplicated in order (first occurrence wins) by publisher
    label, or by hostname when the result has no label, and by normalized
    headline. At most ``max_sources`` are returned.

    Args:
        provider: Search provider to query.
        max_sources: Maximum number of sources to return.
        result_limit: Number of raw results requested from the provider.
        field_policy: How to read fields from raw result records.
        cache: Optional prefetch cache keyed on ``(topic, freshness)``.
        clock: Returns the current time; injectable for tests.
    """

    def __init__(
        self,
        provider: SearchProvider,
        *,
        max_sources: int = MAX_SOURCES,
        result_limit: int = SEARCH_RESULT_LIMIT,
        field_policy: FieldResolutionPolicy = DEFAULT_FIELD_POLICY,
        cache: PrefetchCache[list[Article]] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._provider = provider
        self._max_sources = max_sources
        self._result_limit = result_limit
        self._fields = field_policy
        self._cache = cache
        self._clock = clock or (lambda: datetime.now(tz=UTC))

    async def fetch_sources(
        self,
        topic: str,
        freshness: Freshness | str | None = None,
    ) -> list[Article]:
        """Fetch deduplicated sources for ``topic``.

        Args:
            topic: Search topic (usually a headline).
            freshness: Recency window; defaults to 6 hours.

        Returns:
            Up to ``max_sources`` articles in search ranking order.

        Raises:
            SearchError: If the search provider reports an error.
            httpx.HTTPError: On transport failure.
        """
        window = resolve_freshness(freshness)
        cache_key = (topic.strip(), window)
        if self._cache is not None:
            cached = self._cache.get(cache_key)
            if cached is not None:
                logger.info(f"Using cached sources for {topic!r}")
                return list(cached)

        records = await self._provider.search(
            engine=SEARCH_ENGINE,
            query=topic,
            limit=self._result_limit,
            extra_params={"tbs": FRESHNESS_TO_TBS[window]},
        )

        now = self._clock()
        recency = max(FRESHNESS_TO_WINDOW[window], MIN_RECENCY_WINDOW)
        seen_publishers: set[str] = set()
        seen_titles: set[str] = set()
        sources: list[Article] = []

        for record in records:
            article = self._to_article(record, now=now)
            if article is None:
                continue

            if article.published_at:
                published = parse_published_timestamp(article.published_at, now=now)
                if published is not None and not is_within_window(published, recency, now=now):
                    logger.info(f"Skipping stale source {article.url}")
                    continue

            publisher_key = normalize_publisher(article.source)
            if publisher_key in seen_publishers:
                continue
            title_key = normalize_title(article.title) if article.title else ""
            if title_key and title_key in seen_titles:
                continue

            seen_publishers.add(publisher_key)
            if title_key:
                seen_titles.add(title_key)
            sources.append(article)
            if len(sources) >= self._max_sources:
                break

        if self._cache is not None:
            self._cache.set(cache_key, list(sources))
        return sources

    def _to_article(self, record: dict[str, Any], *, now: datetime) -> Article | None:
        url = self._fields.resolve(record, "url")
        if not url:
            return None
        publisher = self._fields.resolve(record, "publisher") or extract_domain(url)
        raw_published = self._fields.resolve(record, "published")
        published = parse_published_timestamp(raw_published, now=now)
        return Article(
            url=url,
            source=publisher,
            published_at=to_iso(published) if published else (raw_published or None),
            title=" ".join(self._fields.resolve(record, "title").split()),
            summary=" ".join(self._fields.resolve(record, "summary").split()),
        )
