"""Anthropic Messages API exposed through the chat completion interface."""

import os

import anthropic

from sourcecite.generation.base import ChatCompletion, ChatMessage

_STOP_REASON_TO_FINISH = {
    "max_tokens": "length",
    "end_turn": "stop",
    "stop_sequence": "stop",
}


class AnthropicChatClient:
    """Chat completions backed by Claude.

    System turns are folded into the ``system`` parameter; a ``max_tokens``
    stop is reported as ``finish_reason == "length"`` so callers can treat
    truncation the same way for every provider.

    Args:
        api_key: API key (defaults to CLAUDE_API_KEY env var).
    """

    def __init__(self, *, api_key: str | None = None) -> None:
        resolved_key = api_key or os.environ.get("CLAUDE_API_KEY")
        self._client = anthropic.AsyncAnthropic(api_key=resolved_key)

    async def complete(
        self,
        *,
        model: str,
        messages: list[ChatMessage],
        max_tokens: int,
        temperature: float | None = None,
    ) -> ChatCompletion:
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        turns = [
            {"role": m["role"], "content": m["content"]}
            for m in messages
            if m["role"] in ("user", "assistant")
        ]

        kwargs: dict[str, object] = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": turns,
        }
        if system_parts:
            kwargs["system"] = "\n\n".join(system_parts)
        if temperature is not None:
            kwargs["temperature"] = temperature

        response = await self._client.messages.create(**kwargs)  # type: ignore[call-overload]

        text = ""
        for block in response.content:
            if hasattr(block, "text"):
                text += block.text

        stop_reason = getattr(response, "stop_reason", None)
        return ChatCompletion(
            content=text,
            finish_reason=_STOP_REASON_TO_FINISH.get(stop_reason or "", stop_reason),
            model=model,
        )
