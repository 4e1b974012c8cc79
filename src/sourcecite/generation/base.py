"""Chat completion interface shared by generation and verification."""

from dataclasses import dataclass
from typing import Protocol

ChatMessage = dict[str, str]


@dataclass(frozen=True)
class ChatCompletion:
    """Provider-neutral result of one chat completion call."""

    content: str
    finish_reason: str | None = None
    model: str = ""

    @property
    def truncated(self) -> bool:
        """Whether the provider cut the output off at the token limit."""
        return self.finish_reason == "length"


class ChatCompletionClient(Protocol):
    """Interface for a chat-style content generation provider."""

    async def complete(
        self,
        *,
        model: str,
        messages: list[ChatMessage],
        max_tokens: int,
        temperature: float | None = None,
    ) -> ChatCompletion:
        """Run one completion.

        Args:
            model: Provider model ID.
            messages: ``{"role": ..., "content": ...}`` turns; roles are
                ``system``, ``user`` or ``assistant``.
            max_tokens: Maximum output tokens.
            temperature: Sampling temperature, if the model supports one.

        Returns:
            The completion text and finish reason.
        """
        ...
