"""Configuration module for sourcecite."""

from sourcecite.config.factory import create_from_config
from sourcecite.config.loader import get_default_config_path, load_config
from sourcecite.config.models import (
    AnthropicGeneratorConfig,
    ArticlePipelineConfig,
    GeneratorConfig,
    GrokVerifierConfig,
    LoggingConfig,
    OpenAIGeneratorConfig,
    OpenAIVerifierConfig,
    SerpApiSearchConfig,
    SourceciteConfig,
    StyleConfig,
    VerifierConfig,
)

__all__ = [
    "AnthropicGeneratorConfig",
    "ArticlePipelineConfig",
    "GeneratorConfig",
    "GrokVerifierConfig",
    "LoggingConfig",
    "OpenAIGeneratorConfig",
    "OpenAIVerifierConfig",
    "SerpApiSearchConfig",
    "SourceciteConfig",
    "StyleConfig",
    "VerifierConfig",
    "create_from_config",
    "get_default_config_path",
    "load_config",
]
