"""Article pipeline: fetch sources, generate cited HTML, verify it."""

import logging
import time

from sourcecite.data import DEFAULT_FRESHNESS, ArticleResult, Freshness, TravelStyleResult
from sourcecite.generation.links import DEFAULT_MAX_TOKENS, MIN_LINKS, LinkEnforcingGenerator
from sourcecite.generation.prompts import DEFAULT_SYSTEM_PROMPT, build_article_prompt
from sourcecite.run_logger import RunLogger
from sourcecite.search.sources import SourceFetcher, resolve_freshness
from sourcecite.verification.orchestrator import VerificationOrchestrator
from sourcecite.verification.style import verify_travel_style

logger = logging.getLogger(__name__)


class ArticlePipeline:
    """Pipeline composed of a source fetcher, a link-enforcing generator and verifiers.

    Flow:
    1. The fetcher finds up to five recent, deduplicated sources
    2. The generator writes HTML citing the first ``min_links`` of them
    3. The orchestrator fact-checks the HTML against all sources
    4. Optionally, the travel style check validates the HTML structure

    Search and generation failures propagate. Verification never raises.

    Args:
        fetcher: Source discovery.
        generator: Citation-enforcing generator.
        orchestrator: Verification orchestrator.
        model: Generation model ID.
        freshness: Recency window used when a run does not pass one.
        min_links: Number of leading sources that must be cited.
        max_tokens: Output budget of the first generation call.
        min_output_length: Minimum words of visible text (0 disables).
        system_prompt: System turn for generation.
        style_subject: Subject required by the travel style check; None skips it.
        min_subject_mentions: Mentions of ``style_subject`` the style check requires.
        run_logger: Optional RunLogger for intermediate result logging.
    """

    def __init__(
        self,
        fetcher: SourceFetcher,
        generator: LinkEnforcingGenerator,
        orchestrator: VerificationOrchestrator,
        *,
        model: str,
        freshness: Freshness = DEFAULT_FRESHNESS,
        min_links: int = MIN_LINKS,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        min_output_length: int = 0,
        system_prompt: str | None = DEFAULT_SYSTEM_PROMPT,
        style_subject: str | None = None,
        min_subject_mentions: int = 2,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._generator = generator
        self._orchestrator = orchestrator
        self._model = model
        self._freshness = freshness
        self._min_links = min_links
        self._max_tokens = max_tokens
        self._min_output_length = min_output_length
        self._system_prompt = system_prompt
        self._style_subject = style_subject
        self._min_subject_mentions = min_subject_mentions
        self._run_logger = run_logger

    async def run(
        self,
        topic: str,
        *,
        freshness: Freshness | str | None = None,
        custom_instructions: str | None = None,
        style_subject: str | None = None,
    ) -> ArticleResult:
        """Execute the article pipeline.

        Args:
            topic: Headline or topic to write about.
            freshness: Recency window for source discovery.
            custom_instructions: Extra requirements appended to the prompt.
            style_subject: Travel style subject for this run, overriding the
                configured one.

        Returns:
            The generated content with its sources and verdicts.
        """
        window = resolve_freshness(freshness or self._freshness)
        if self._run_logger:
            self._run_logger.start_run("article", {"topic": topic, "freshness": str(window)})

        # Step 1: Discover sources
        t0 = time.monotonic()
        articles = await self._fetcher.fetch_sources(topic, window)
        if self._run_logger:
            self._run_logger.log_stage(
                stage="source_fetch",
                component=type(self._fetcher).__name__,
                input_data={"topic": topic, "freshness": str(window)},
                output_data=articles,
                duration_seconds=time.monotonic() - t0,
            )
        if not articles:
            logger.warning(f"No sources found for {topic!r}; generating without citations")

        # Step 2: Generate cited HTML
        t0 = time.monotonic()
        prompt = build_article_prompt(
            topic,
            articles,
            min_links=self._min_links,
            custom_instructions=custom_instructions,
        )
        generation = await self._generator.generate(
            prompt,
            model=self._model,
            sources=[a.url for a in articles],
            system_prompt=self._system_prompt,
            min_links=self._min_links,
            max_tokens=self._max_tokens,
            min_output_length=self._min_output_length,
        )
        if self._run_logger:
            self._run_logger.log_stage(
                stage="generation",
                component=type(self._generator).__name__,
                input_data={"model": self._model, "prompt": prompt},
                output_data=generation,
                duration_seconds=time.monotonic() - t0,
            )

        # Step 3: Fact-check
        t0 = time.monotonic()
        verification = await self._orchestrator.verify_output(generation.content, articles)
        if self._run_logger:
            self._run_logger.log_stage(
                stage="verification",
                component=type(self._orchestrator).__name__,
                input_data={"source_count": len(articles)},
                output_data=verification,
                duration_seconds=time.monotonic() - t0,
            )

        # Step 4: Style check
        style: TravelStyleResult | None = None
        subject = style_subject or self._style_subject
        if subject:
            t0 = time.monotonic()
            style = verify_travel_style(
                generation.content,
                required_subject=subject,
                min_subject_mentions=self._min_subject_mentions,
            )
            if self._run_logger:
                self._run_logger.log_stage(
                    stage="style",
                    component="verify_travel_style",
                    input_data={"required_subject": subject},
                    output_data=style,
                    duration_seconds=time.monotonic() - t0,
                )

        result = ArticleResult(
            topic=topic,
            content=generation.content,
            sources=tuple(articles),
            generation=generation,
            verification=verification,
            style=style,
        )
        logger.info(
            f"Article for {topic!r}: {len(articles)} sources, "
            f"verification {verification.status}, accepted={result.accepted}"
        )
        if self._run_logger:
            self._run_logger.finish_run(articles, accepted=result.accepted)
        return result
