"""Pydantic configuration models for sourcecite components."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from sourcecite.data import DEFAULT_FRESHNESS, Freshness

# ============================================================
# Search Configs
# ============================================================


class SerpApiSearchConfig(BaseModel):
    """Configuration for SerpAPI-backed source discovery."""

    type: Literal["serpapi"] = "serpapi"
    timeout: float = 10.0
    max_sources: int = 5
    result_limit: int = 8
    freshness: Freshness = DEFAULT_FRESHNESS
    cache_ttl_seconds: float | None = None
    cache_max_entries: int = 256

    model_config = {"frozen": True}


# ============================================================
# Generator Configs
# ============================================================


class OpenAIGeneratorConfig(BaseModel):
    """Configuration for generation through the OpenAI chat API."""

    type: Literal["openai"] = "openai"
    model: str = "gpt-4o"
    base_url: str | None = None

    model_config = {"frozen": True}


class AnthropicGeneratorConfig(BaseModel):
    """Configuration for generation through the Anthropic messages API."""

    type: Literal["anthropic"] = "anthropic"
    model: str = "claude-sonnet-4-5"

    model_config = {"frozen": True}


GeneratorConfig = Annotated[
    OpenAIGeneratorConfig | AnthropicGeneratorConfig,
    Field(discriminator="type"),
]


# ============================================================
# Verifier Configs
# ============================================================


class GrokVerifierConfig(BaseModel):
    """Streaming Grok verifier. Skipped when GROK_API_KEY is not set."""

    type: Literal["grok"] = "grok"
    model: str | None = None
    timeout: float = 45.0
    retry_delay: float = 1.0

    model_config = {"frozen": True}


class OpenAIVerifierConfig(BaseModel):
    """Non-streaming OpenAI chat verifier."""

    type: Literal["openai"] = "openai"
    model: str = "gpt-4o-mini"
    timeout: float = 45.0
    max_tokens: int = 800

    model_config = {"frozen": True}


VerifierConfig = Annotated[
    GrokVerifierConfig | OpenAIVerifierConfig,
    Field(discriminator="type"),
]


# ============================================================
# Pipeline Configs
# ============================================================


class StyleConfig(BaseModel):
    """Travel-guide style check; disabled when ``required_subject`` is unset."""

    required_subject: str | None = None
    min_subject_mentions: int = 2

    model_config = {"frozen": True}


class ArticlePipelineConfig(BaseModel):
    """Configuration for the fetch, generate and verify article pipeline."""

    type: Literal["article"] = "article"
    search: SerpApiSearchConfig = Field(default_factory=SerpApiSearchConfig)
    generator: GeneratorConfig = Field(default_factory=OpenAIGeneratorConfig)
    verifiers: list[VerifierConfig] = Field(
        default_factory=lambda: [GrokVerifierConfig(), OpenAIVerifierConfig()]
    )
    style: StyleConfig = Field(default_factory=StyleConfig)
    min_links: int = 3
    max_tokens: int = 2000
    min_output_length: int = 0
    system_prompt: str | None = None

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for per-run JSON logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class SourceciteConfig(BaseModel):
    """Root configuration for sourcecite."""

    pipeline: ArticlePipelineConfig = Field(default_factory=ArticlePipelineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
