"""Tests for configuration loading and factory functions."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from sourcecite.config import (
    AnthropicGeneratorConfig,
    ArticlePipelineConfig,
    GrokVerifierConfig,
    LoggingConfig,
    OpenAIGeneratorConfig,
    OpenAIVerifierConfig,
    SerpApiSearchConfig,
    SourceciteConfig,
    create_from_config,
    get_default_config_path,
    load_config,
)
from sourcecite.config.factory import (
    create_chat_client,
    create_pipeline,
    create_source_fetcher,
    create_verifier,
    create_verifiers,
)
from sourcecite.data import Freshness
from sourcecite.generation.anthropic_chat import AnthropicChatClient
from sourcecite.generation.openai_chat import OpenAIChatClient
from sourcecite.pipeline.article import ArticlePipeline
from sourcecite.run_logger import RunLogger
from sourcecite.search.sources import SourceFetcher
from sourcecite.verification.chat import ChatVerifier
from sourcecite.verification.grok import GrokVerifier


@pytest.fixture
def api_keys(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Provide every API key except Grok's."""
    monkeypatch.setenv("SERPAPI_KEY", "serp-key")
    monkeypatch.setenv("OPENAI_API_KEY", "openai-key")
    monkeypatch.setenv("CLAUDE_API_KEY", "claude-key")
    monkeypatch.delenv("GROK_API_KEY", raising=False)
    return monkeypatch


class TestConfigModels:
    """Tests for Pydantic config models."""

    def test_search_config_defaults(self) -> None:
        config = SerpApiSearchConfig()
        assert config.type == "serpapi"
        assert config.max_sources == 5
        assert config.result_limit == 8
        assert config.freshness is Freshness.SIX_HOURS
        assert config.cache_ttl_seconds is None

    def test_pipeline_config_defaults(self) -> None:
        config = ArticlePipelineConfig()
        assert config.type == "article"
        assert isinstance(config.generator, OpenAIGeneratorConfig)
        assert [v.type for v in config.verifiers] == ["grok", "openai"]
        assert config.min_links == 3
        assert config.max_tokens == 2000
        assert config.style.required_subject is None

    def test_logging_config_defaults(self) -> None:
        config = LoggingConfig()
        assert config.enabled is False
        assert config.log_dir == "logs"

    def test_configs_are_frozen(self) -> None:
        config = OpenAIVerifierConfig()
        with pytest.raises(ValidationError):
            config.model = "other"  # type: ignore[misc]

    def test_generator_discriminator(self) -> None:
        config = ArticlePipelineConfig.model_validate(
            {"generator": {"type": "anthropic", "model": "claude-haiku-4-5"}}
        )
        assert isinstance(config.generator, AnthropicGeneratorConfig)
        assert config.generator.model == "claude-haiku-4-5"

    def test_unknown_verifier_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ArticlePipelineConfig.model_validate({"verifiers": [{"type": "bard"}]})

    def test_freshness_validated(self) -> None:
        with pytest.raises(ValidationError):
            SerpApiSearchConfig.model_validate({"freshness": "2y"})


class TestLoader:
    def test_default_config_loads(self) -> None:
        path = get_default_config_path()
        assert path.exists()
        config = load_config(path)
        assert isinstance(config, SourceciteConfig)
        assert config.pipeline.search.freshness is Freshness.SIX_HOURS
        assert [v.type for v in config.pipeline.verifiers] == ["grok", "openai"]

    def test_load_custom_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text(
            "pipeline:\n"
            "  type: article\n"
            "  search:\n"
            "    freshness: 24h\n"
            "    cache_ttl_seconds: 120\n"
            "  generator:\n"
            "    type: anthropic\n"
            "  style:\n"
            "    required_subject: Colorado\n"
            "  min_links: 2\n"
            "logging:\n"
            "  enabled: true\n"
            "  log_dir: run_logs\n"
        )

        config = load_config(path)

        assert config.pipeline.search.freshness is Freshness.ONE_DAY
        assert isinstance(config.pipeline.generator, AnthropicGeneratorConfig)
        assert config.pipeline.style.required_subject == "Colorado"
        assert config.pipeline.min_links == 2
        assert config.logging.enabled is True

    def test_empty_yaml_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == SourceciteConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")


class TestFactory:
    def test_create_source_fetcher(self, api_keys: pytest.MonkeyPatch) -> None:
        fetcher = create_source_fetcher(SerpApiSearchConfig(cache_ttl_seconds=60))
        assert isinstance(fetcher, SourceFetcher)
        assert fetcher._cache is not None
        assert fetcher._cache.ttl_seconds == 60
        assert fetcher._cache.maxsize == 256

    def test_source_fetcher_cache_size(self, api_keys: pytest.MonkeyPatch) -> None:
        config = SerpApiSearchConfig(cache_ttl_seconds=60, cache_max_entries=16)
        fetcher = create_source_fetcher(config)
        assert fetcher._cache is not None
        assert fetcher._cache.maxsize == 16

    def test_no_cache_without_ttl(self, api_keys: pytest.MonkeyPatch) -> None:
        assert create_source_fetcher(SerpApiSearchConfig())._cache is None

    def test_create_chat_clients(self, api_keys: pytest.MonkeyPatch) -> None:
        assert isinstance(create_chat_client(OpenAIGeneratorConfig()), OpenAIChatClient)
        assert isinstance(create_chat_client(AnthropicGeneratorConfig()), AnthropicChatClient)

    def test_grok_skipped_without_key(self, api_keys: pytest.MonkeyPatch) -> None:
        assert create_verifier(GrokVerifierConfig()) is None

    def test_grok_created_with_key(self, api_keys: pytest.MonkeyPatch) -> None:
        api_keys.setenv("GROK_API_KEY", "grok-key")
        verifier = create_verifier(GrokVerifierConfig(model="grok-x", timeout=30))
        assert isinstance(verifier, GrokVerifier)
        assert verifier.model == "grok-x"
        assert verifier.timeout == 30

    def test_openai_verifier(self, api_keys: pytest.MonkeyPatch) -> None:
        verifier = create_verifier(OpenAIVerifierConfig(model="gpt-4o", timeout=20))
        assert isinstance(verifier, ChatVerifier)
        assert verifier.name == "openai"
        assert verifier.timeout == 20

    def test_verifiers_streaming_first(self, api_keys: pytest.MonkeyPatch) -> None:
        api_keys.setenv("GROK_API_KEY", "grok-key")
        verifiers = create_verifiers([OpenAIVerifierConfig(), GrokVerifierConfig()])
        assert [v.name for v in verifiers] == ["grok", "openai"]

    def test_create_pipeline(self, api_keys: pytest.MonkeyPatch) -> None:
        pipeline = create_pipeline(ArticlePipelineConfig())
        assert isinstance(pipeline, ArticlePipeline)
        assert [p.name for p in pipeline._orchestrator.providers] == ["openai"]

    def test_create_from_config_logging_disabled(self, api_keys: pytest.MonkeyPatch) -> None:
        pipeline, run_logger = create_from_config(SourceciteConfig())
        assert isinstance(pipeline, ArticlePipeline)
        assert run_logger is None

    def test_create_from_config_log_override(
        self, api_keys: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        pipeline, run_logger = create_from_config(
            SourceciteConfig(),
            log_override=True,
            log_dir_override=str(tmp_path),
        )
        assert isinstance(run_logger, RunLogger)
        assert run_logger.enabled
        assert pipeline._run_logger is run_logger
