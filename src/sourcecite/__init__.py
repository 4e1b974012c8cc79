"""sourcecite: LLM article generation with enforced citations and dual-provider fact checking."""

from sourcecite.cache import PrefetchCache
from sourcecite.config import SourceciteConfig, create_from_config, load_config
from sourcecite.data import (
    Article,
    ArticleResult,
    Freshness,
    GenerationResult,
    ModelCallAttempt,
    ProviderVerdict,
    Source,
    TravelStyleResult,
    VerdictStatus,
    VerificationVerdict,
)
from sourcecite.generation import (
    AnthropicChatClient,
    ChatCompletion,
    ChatCompletionClient,
    LinkEnforcingGenerator,
    OpenAIChatClient,
    generate_with_links,
)
from sourcecite.pipeline import ArticlePipeline, Pipeline
from sourcecite.run_logger import RunLogger
from sourcecite.search import SearchError, SearchProvider, SerpApiSearchProvider, SourceFetcher
from sourcecite.url import build_url_variants, extract_domain, find_missing_sources
from sourcecite.verification import (
    ChatVerifier,
    GrokAPIError,
    GrokVerifier,
    VerificationOrchestrator,
    VerificationProvider,
    verify_travel_style,
)

__all__ = [
    # Data models
    "Article",
    "ArticleResult",
    "Freshness",
    "GenerationResult",
    "ModelCallAttempt",
    "ProviderVerdict",
    "Source",
    "TravelStyleResult",
    "VerdictStatus",
    "VerificationVerdict",
    # Search
    "SearchError",
    "SearchProvider",
    "SerpApiSearchProvider",
    "SourceFetcher",
    "PrefetchCache",
    # URLs
    "build_url_variants",
    "extract_domain",
    "find_missing_sources",
    # Generation
    "AnthropicChatClient",
    "ChatCompletion",
    "ChatCompletionClient",
    "LinkEnforcingGenerator",
    "OpenAIChatClient",
    "generate_with_links",
    # Verification
    "ChatVerifier",
    "GrokAPIError",
    "GrokVerifier",
    "VerificationOrchestrator",
    "VerificationProvider",
    "verify_travel_style",
    # Pipeline
    "ArticlePipeline",
    "Pipeline",
    "RunLogger",
    # Config
    "SourceciteConfig",
    "create_from_config",
    "load_config",
]
