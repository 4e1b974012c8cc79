"""Factory functions to create components from configuration."""

import logging
import os
from pathlib import Path

from sourcecite.cache import PrefetchCache
from sourcecite.config.models import (
    AnthropicGeneratorConfig,
    ArticlePipelineConfig,
    GeneratorConfig,
    GrokVerifierConfig,
    OpenAIGeneratorConfig,
    OpenAIVerifierConfig,
    SerpApiSearchConfig,
    SourceciteConfig,
    VerifierConfig,
)
from sourcecite.data import Article
from sourcecite.generation.anthropic_chat import AnthropicChatClient
from sourcecite.generation.base import ChatCompletionClient
from sourcecite.generation.links import LinkEnforcingGenerator
from sourcecite.generation.openai_chat import OpenAIChatClient
from sourcecite.generation.prompts import DEFAULT_SYSTEM_PROMPT
from sourcecite.pipeline.article import ArticlePipeline
from sourcecite.pipeline.base import Pipeline
from sourcecite.run_logger import RunLogger
from sourcecite.search.serpapi import SerpApiSearchProvider
from sourcecite.search.sources import SourceFetcher
from sourcecite.verification.base import VerificationProvider
from sourcecite.verification.chat import ChatVerifier
from sourcecite.verification.grok import GrokVerifier
from sourcecite.verification.orchestrator import VerificationOrchestrator

logger = logging.getLogger(__name__)


def create_source_fetcher(config: SerpApiSearchConfig) -> SourceFetcher:
    """Create source discovery from config."""
    if isinstance(config, SerpApiSearchConfig):
        cache: PrefetchCache[list[Article]] | None = None
        if config.cache_ttl_seconds:
            cache = PrefetchCache(
                ttl_seconds=config.cache_ttl_seconds,
                maxsize=config.cache_max_entries,
            )
        return SourceFetcher(
            SerpApiSearchProvider(timeout=config.timeout),
            max_sources=config.max_sources,
            result_limit=config.result_limit,
            cache=cache,
        )
    msg = f"Unknown search config type: {type(config)}"
    raise ValueError(msg)


def create_chat_client(config: GeneratorConfig) -> ChatCompletionClient:
    """Create a generation chat client from config."""
    if isinstance(config, OpenAIGeneratorConfig):
        return OpenAIChatClient(base_url=config.base_url)
    if isinstance(config, AnthropicGeneratorConfig):
        return AnthropicChatClient()
    msg = f"Unknown generator config type: {type(config)}"
    raise ValueError(msg)


def create_verifier(config: VerifierConfig) -> VerificationProvider | None:
    """Create a verification provider from config.

    Returns None for the Grok verifier when GROK_API_KEY is not set, so
    verification falls back to the remaining providers.
    """
    if isinstance(config, GrokVerifierConfig):
        if not os.environ.get("GROK_API_KEY", "").strip():
            logger.info("GROK_API_KEY not set, skipping Grok verification")
            return None
        return GrokVerifier(
            model=config.model,
            timeout=config.timeout,
            retry_delay=config.retry_delay,
        )
    if isinstance(config, OpenAIVerifierConfig):
        return ChatVerifier(
            OpenAIChatClient(),
            model=config.model,
            name="openai",
            timeout=config.timeout,
            max_tokens=config.max_tokens,
        )
    msg = f"Unknown verifier config type: {type(config)}"
    raise ValueError(msg)


def create_verifiers(configs: list[VerifierConfig]) -> list[VerificationProvider]:
    """Create the configured verifiers, streaming providers first."""
    providers = [create_verifier(c) for c in configs]
    available = [p for p in providers if p is not None]
    return sorted(available, key=lambda p: not isinstance(p, GrokVerifier))


def create_pipeline(
    config: ArticlePipelineConfig,
    run_logger: RunLogger | None = None,
) -> Pipeline:
    """Create a pipeline from config."""
    if isinstance(config, ArticlePipelineConfig):
        return ArticlePipeline(
            fetcher=create_source_fetcher(config.search),
            generator=LinkEnforcingGenerator(create_chat_client(config.generator)),
            orchestrator=VerificationOrchestrator(create_verifiers(config.verifiers)),
            model=config.generator.model,
            freshness=config.search.freshness,
            min_links=config.min_links,
            max_tokens=config.max_tokens,
            min_output_length=config.min_output_length,
            system_prompt=config.system_prompt or DEFAULT_SYSTEM_PROMPT,
            style_subject=config.style.required_subject,
            min_subject_mentions=config.style.min_subject_mentions,
            run_logger=run_logger,
        )
    msg = f"Unknown pipeline config type: {type(config)}"
    raise ValueError(msg)


def create_from_config(
    config: SourceciteConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[Pipeline, RunLogger | None]:
    """Create a complete pipeline from root config.

    Args:
        config: Root configuration.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Tuple of (pipeline, run_logger).
        run_logger is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    pipeline = create_pipeline(config.pipeline, run_logger=run_logger)
    return (pipeline, run_logger)
