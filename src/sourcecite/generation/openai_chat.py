"""OpenAI chat completions client."""

import logging
import os
import re
from typing import Any

from openai import AsyncOpenAI

from sourcecite.generation.base import ChatCompletion, ChatMessage

logger = logging.getLogger(__name__)

# Reasoning-style models reject custom temperatures and the legacy max_tokens field.
_FIXED_TEMPERATURE_PATTERNS = (
    re.compile(r"^gpt-4\.1", re.IGNORECASE),
    re.compile(r"^gpt-5", re.IGNORECASE),
    re.compile(r"^o\d", re.IGNORECASE),
)


def supports_adjustable_temperature(model: str) -> bool:
    return not any(pattern.match(model) for pattern in _FIXED_TEMPERATURE_PATTERNS)


def requires_max_completion_tokens(model: str) -> bool:
    return not supports_adjustable_temperature(model)


def normalize_chat_params(params: dict[str, Any]) -> dict[str, Any]:
    """Adapt request parameters to what the target model accepts.

    Drops a non-default ``temperature`` and renames ``max_tokens`` to
    ``max_completion_tokens`` for models that require it. Returns a new dict.
    """
    sanitized = dict(params)
    model = str(sanitized.get("model", ""))

    temperature = sanitized.get("temperature")
    if temperature is None:
        sanitized.pop("temperature", None)
    elif temperature != 1 and not supports_adjustable_temperature(model):
        sanitized.pop("temperature")

    if sanitized.get("max_tokens") is not None and requires_max_completion_tokens(model):
        sanitized["max_completion_tokens"] = sanitized.pop("max_tokens")

    return sanitized


class OpenAIChatClient:
    """Chat completions against the OpenAI API.

    Args:
        api_key: OpenAI API key (defaults to OPENAI_API_KEY env var).
        base_url: Optional alternative endpoint for OpenAI-compatible APIs.
    """

    def __init__(self, *, api_key: str | None = None, base_url: str | None = None) -> None:
        resolved_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not resolved_key:
            raise ValueError("OpenAI API key required. Pass api_key or set OPENAI_API_KEY env var.")
        self._client = AsyncOpenAI(api_key=resolved_key, base_url=base_url)

    async def complete(
        self,
        *,
        model: str,
        messages: list[ChatMessage],
        max_tokens: int,
        temperature: float | None = None,
    ) -> ChatCompletion:
        params = normalize_chat_params(
            {
                "model": model,
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        response = await self._client.chat.completions.create(**params)
        if not response.choices:
            logger.warning(f"OpenAI returned no choices for model {model}")
            return ChatCompletion(content="", finish_reason=None, model=model)

        choice = response.choices[0]
        return ChatCompletion(
            content=choice.message.content or "",
            finish_reason=choice.finish_reason,
            model=getattr(response, "model", None) or model,
        )
