"""Tests for AnthropicChatClient."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from anthropic.types import TextBlock

from sourcecite.generation.anthropic_chat import AnthropicChatClient


def _make_response(text: str, stop_reason: str = "end_turn") -> MagicMock:
    response = MagicMock()
    response.content = [TextBlock(type="text", text=text)]
    response.stop_reason = stop_reason
    return response


@pytest.fixture
def client() -> AnthropicChatClient:
    """Create a client with mocked API."""
    chat = AnthropicChatClient(api_key="test-key")
    object.__setattr__(
        chat._client.messages, "create", AsyncMock(return_value=_make_response("<p>Hi</p>"))
    )
    return chat


async def test_folds_system_turns(client: AnthropicChatClient) -> None:
    await client.complete(
        model="claude-sonnet-4-5",
        messages=[
            {"role": "system", "content": "Be precise."},
            {"role": "user", "content": "Write."},
            {"role": "user", "content": "Cite more."},
        ],
        max_tokens=500,
        temperature=0.2,
    )

    kwargs = client._client.messages.create.call_args.kwargs
    assert kwargs["system"] == "Be precise."
    assert kwargs["messages"] == [
        {"role": "user", "content": "Write."},
        {"role": "user", "content": "Cite more."},
    ]
    assert kwargs["max_tokens"] == 500
    assert kwargs["temperature"] == 0.2


async def test_omits_optional_params(client: AnthropicChatClient) -> None:
    await client.complete(
        model="claude-sonnet-4-5",
        messages=[{"role": "user", "content": "Write."}],
        max_tokens=500,
    )

    kwargs = client._client.messages.create.call_args.kwargs
    assert "system" not in kwargs
    assert "temperature" not in kwargs


async def test_returns_text_and_stop(client: AnthropicChatClient) -> None:
    completion = await client.complete(
        model="claude-sonnet-4-5",
        messages=[{"role": "user", "content": "Write."}],
        max_tokens=500,
    )

    assert completion.content == "<p>Hi</p>"
    assert completion.finish_reason == "stop"
    assert not completion.truncated


async def test_max_tokens_maps_to_length(client: AnthropicChatClient) -> None:
    client._client.messages.create.return_value = _make_response("<p>cut", "max_tokens")

    completion = await client.complete(
        model="claude-sonnet-4-5",
        messages=[{"role": "user", "content": "Write."}],
        max_tokens=10,
    )

    assert completion.finish_reason == "length"
    assert completion.truncated
