"""SerpAPI search provider."""

import logging
import os
from typing import Any

import httpx

from sourcecite.search.base import SearchError

SERPAPI_URL = "https://serpapi.com/search.json"

logger = logging.getLogger(__name__)


class SerpApiSearchProvider:
    """Run searches through SerpAPI's JSON endpoint.

    Args:
        api_key: SerpAPI key (defaults to SERPAPI_KEY env var).
        timeout: Request timeout in seconds.
        http_client: Optional shared client; a short-lived one is created per
            search otherwise.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key or os.environ.get("SERPAPI_KEY")
        if not self._api_key:
            raise ValueError("SerpAPI key required. Pass api_key or set SERPAPI_KEY env var.")
        self._timeout = timeout
        self._http_client = http_client

    async def search(
        self,
        *,
        engine: str,
        query: str,
        limit: int,
        extra_params: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        """Search SerpAPI and return up to ``limit`` raw result records.

        Args:
            engine: SerpAPI engine (e.g. "google_news", "google").
            query: Search query text.
            limit: Maximum number of results to return.
            extra_params: Additional SerpAPI parameters (e.g. ``{"tbs": "qdr:h"}``).

        Returns:
            Result records from ``news_results`` or ``organic_results``.
        """
        params: dict[str, str | int] = {
            "q": query,
            "engine": engine,
            "num": limit,
            "api_key": self._api_key,  # type: ignore[dict-item]
        }
        if extra_params:
            params.update(extra_params)

        if self._http_client is not None:
            data = await self._fetch(self._http_client, params)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                data = await self._fetch(client, params)

        if data.get("error"):
            raise SearchError(f"SerpAPI error for {engine} query {query!r}: {data['error']}")

        results = _flatten_results(data)
        logger.info(f"SerpAPI {engine} returned {len(results)} results for {query!r}")
        return results[:limit]

    async def _fetch(
        self, client: httpx.AsyncClient, params: dict[str, str | int]
    ) -> dict[str, Any]:
        response = await client.get(SERPAPI_URL, params=params)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise SearchError("SerpAPI returned a non-object payload")
        return data


def _flatten_results(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Collect result records, expanding Google News story clusters in place."""
    raw = data.get("news_results") or data.get("organic_results") or []
    results: list[dict[str, Any]] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        if item.get("link"):
            results.append(item)
        for story in item.get("stories") or []:
            if isinstance(story, dict) and story.get("link"):
                results.append(story)
    return results
