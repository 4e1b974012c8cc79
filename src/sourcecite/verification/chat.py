import logging

from sourcecite.generation.base import ChatCompletionClient
from sourcecite.verification.base import build_verification_messages

DEFAULT_CHAT_VERIFICATION_MODEL = "gpt-4o-mini"
DEFAULT_VERIFICATION_MAX_TOKENS = 800

logger = logging.getLogger(__name__)


class ChatVerifier:
    """Non-streaming verification provider over any chat completion client.

    Args:
        client: Chat completion client (OpenAI in the default configuration).
        model: Model ID used for verification.
        name: Provider name reported in verdicts.
        timeout: Deadline in seconds for one verification.
        max_tokens: Output budget for the verdict.
    """

    def __init__(
        self,
        client: ChatCompletionClient,
        *,
        model: str = DEFAULT_CHAT_VERIFICATION_MODEL,
        name: str = "openai",
        timeout: float = 45.0,
        max_tokens: int = DEFAULT_VERIFICATION_MAX_TOKENS,
    ) -> None:
        self._client = client
        self.model = model
        self.name = name
        self.timeout = timeout
        self._max_tokens = max_tokens

    async def run(self, prompt: str, *, reference_iso: str | None = None) -> str:
        completion = await self._client.complete(
            model=self.model,
            messages=build_verification_messages(prompt, reference_iso),
            max_tokens=self._max_tokens,
            temperature=0.0,
        )
        if completion.truncated:
            logger.warning(f"{self.name} verification reply truncated at {self._max_tokens} tokens")
        return completion.content
