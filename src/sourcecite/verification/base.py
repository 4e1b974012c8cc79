from typing import Protocol

from sourcecite.generation.base import ChatMessage


class VerificationProvider(Protocol):
    """Interface for an LLM-backed fact checker.

    Providers return free text; the orchestrator parses the judgment. ``timeout``
    is the deadline (seconds) the orchestrator applies to each ``run`` call.
    """

    name: str
    timeout: float

    async def run(self, prompt: str, *, reference_iso: str | None = None) -> str:
        """Send ``prompt`` to the provider and return its reply text.

        Args:
            prompt: Verification prompt.
            reference_iso: Instant to present to the model as "now".

        Returns:
            The model's reply text.
        """
        ...


def build_verification_messages(prompt: str, reference_iso: str | None) -> list[ChatMessage]:
    """Messages for a verification call, with a system turn stating "now" when known."""
    if reference_iso:
        return [
            {
                "role": "system",
                "content": (
                    f"The current date and time is {reference_iso}. Treat this as the present "
                    "moment when judging whether events are past, current or upcoming."
                ),
            },
            {"role": "user", "content": prompt},
        ]
    return [{"role": "user", "content": prompt}]
