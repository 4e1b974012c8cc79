from typing import Any, Protocol


class SearchError(RuntimeError):
    """Raised when the search provider reports a failed query."""


class SearchProvider(Protocol):
    """Interface for the external search API used for source discovery."""

    async def search(
        self,
        *,
        engine: str,
        query: str,
        limit: int,
        extra_params: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        """Run one search and return the raw result records.

        Args:
            engine: Provider engine name (e.g. "google_news").
            query: Search query text.
            limit: Maximum number of raw results to return.
            extra_params: Provider-specific parameters such as time filters.

        Returns:
            Raw result records, in provider ranking order.

        Raises:
            SearchError: If the provider reports an error.
            httpx.HTTPError: On transport failure.
        """
        ...
