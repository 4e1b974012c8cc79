"""Pipeline protocol for sourced content generation."""

from typing import Protocol

from sourcecite.data import ArticleResult, Freshness


class Pipeline(Protocol):
    """Interface for end-to-end sourced content pipelines."""

    async def run(
        self,
        topic: str,
        *,
        freshness: Freshness | str | None = None,
        custom_instructions: str | None = None,
        style_subject: str | None = None,
    ) -> ArticleResult:
        """Fetch sources, generate cited content and verify it.

        Args:
            topic: Headline or topic to write about.
            freshness: Recency window for source discovery.
            custom_instructions: Extra requirements appended to the prompt.
            style_subject: Travel style subject for this run, overriding the
                configured one.

        Returns:
            The generated content with its sources and verdicts.
        """
        ...
