from sourcecite.generation.anthropic_chat import AnthropicChatClient
from sourcecite.generation.base import ChatCompletion, ChatCompletionClient, ChatMessage
from sourcecite.generation.links import (
    FACTUAL_TEMPERATURE,
    MAX_ATTEMPTS,
    MIN_LINKS,
    LinkEnforcingGenerator,
    clean_model_output,
    generate_with_links,
    inject_missing_citations,
)
from sourcecite.generation.openai_chat import OpenAIChatClient
from sourcecite.generation.prompts import (
    DEFAULT_SYSTEM_PROMPT,
    build_article_prompt,
    build_link_instruction,
    build_recent_reporting_block,
)

__all__ = [
    "AnthropicChatClient",
    "ChatCompletion",
    "ChatCompletionClient",
    "ChatMessage",
    "DEFAULT_SYSTEM_PROMPT",
    "FACTUAL_TEMPERATURE",
    "LinkEnforcingGenerator",
    "MAX_ATTEMPTS",
    "MIN_LINKS",
    "OpenAIChatClient",
    "build_article_prompt",
    "build_link_instruction",
    "build_recent_reporting_block",
    "clean_model_output",
    "generate_with_links",
    "inject_missing_citations",
]
