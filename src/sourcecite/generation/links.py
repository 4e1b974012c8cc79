"""Citation-enforcing generation.

``LinkEnforcingGenerator`` asks a chat model for HTML content and guarantees
that the first ``min_links`` sources end up cited as anchors. It makes at most
two model calls: a retry is spent on truncated output, output that is too
short, or missing citations (in that order of precedence). Whatever is still
uncited after the last call is spliced into the HTML deterministically.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from html import escape

from bs4 import BeautifulSoup

from sourcecite.data import GenerationResult, ModelCallAttempt
from sourcecite.generation.base import ChatCompletionClient, ChatMessage
from sourcecite.url import find_missing_sources

logger = logging.getLogger(__name__)

MIN_LINKS = 3
MAX_ATTEMPTS = 2
DEFAULT_MAX_TOKENS = 2000
FACTUAL_TEMPERATURE = 0.2
DEFAULT_TEMPERATURE = 0.7

MODEL_CONTEXT_LIMITS: dict[str, int] = {
    "gpt-4o": 128000,
    "gpt-4o-mini": 128000,
    "gpt-4.1": 32768,
    "gpt-5": 128000,
    "gpt-4": 8192,
    "gpt-3.5-turbo": 16000,
    "claude-haiku-4-5": 64000,
    "claude-sonnet-4-5": 64000,
}
DEFAULT_CONTEXT_LIMIT = 8000

_FENCE_OPEN_RE = re.compile(r"^```[a-zA-Z]*\s*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?```\s*$")
_DOCTYPE_RE = re.compile(r"<!doctype[^>]*>", re.IGNORECASE)
_HEAD_RE = re.compile(r"<head\b[^>]*>.*?</head\s*>", re.IGNORECASE | re.DOTALL)
_WRAPPER_TAG_RE = re.compile(r"</?(?:html|body)\b[^>]*>", re.IGNORECASE)
_CONTAINER_RE = re.compile(r"<(p|li)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)


def get_context_limit(model: str, limits: Mapping[str, int] = MODEL_CONTEXT_LIMITS) -> int:
    """Look up a model's token cap by exact ID, then by longest matching prefix."""
    if model in limits:
        return limits[model]
    best_match: str | None = None
    for key in limits:
        if model.startswith(key) and (best_match is None or len(key) > len(best_match)):
            best_match = key
    if best_match is not None:
        return limits[best_match]
    return DEFAULT_CONTEXT_LIMIT


def clean_model_output(text: str) -> str:
    """Strip markdown code fences and document wrapper markup from model HTML."""
    cleaned = text.strip()
    cleaned = _FENCE_OPEN_RE.sub("", cleaned)
    cleaned = _FENCE_CLOSE_RE.sub("", cleaned)
    cleaned = _DOCTYPE_RE.sub("", cleaned)
    cleaned = _HEAD_RE.sub("", cleaned)
    cleaned = _WRAPPER_TAG_RE.sub("", cleaned)
    return cleaned.strip()


def count_words(html: str) -> int:
    """Number of words in the visible text of ``html``."""
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    return len(text.split())


def build_citation_anchor(url: str, text: str = "Source") -> str:
    return f'<a href="{escape(url, quote=True)}" target="_blank" rel="noopener">{escape(text)}</a>'


def build_missing_citation_message(missing: Sequence[str]) -> str:
    listing = "\n".join(f"- {url}" for url in missing)
    return (
        "Your previous response failed to cite these required sources:\n"
        f"{listing}\n"
        "Citation of these exact URLs failed and must be corrected. Rewrite the full "
        'article and link each URL above exactly once as <a href="URL" target="_blank">text</a> '
        "on a relevant phrase."
    )


def inject_missing_citations(html: str, missing: Sequence[str]) -> str:
    """Splice citations for ``missing`` sources into ``html``.

    Citations are spread round-robin across ``<p>``/``<li>`` containers in
    document order, each appended before the closing tag as
    `` (<a ...>Source</a>)``. Without any container, one
    ``<p>Source: <a ...>URL</a></p>`` block per source is appended.
    """
    if not missing:
        return html

    containers = list(_CONTAINER_RE.finditer(html))
    if not containers:
        blocks = [f"<p>Source: {build_citation_anchor(url, url)}</p>" for url in missing]
        if not html:
            return "\n".join(blocks)
        return "\n".join([html, *blocks])

    assigned: list[list[str]] = [[] for _ in containers]
    for index, url in enumerate(missing):
        assigned[index % len(containers)].append(url)

    pieces: list[str] = []
    cursor = 0
    for match, urls in zip(containers, assigned, strict=True):
        if not urls:
            continue
        closing_at = match.start() + match.group(0).rfind("</")
        markers = "".join(f" ({build_citation_anchor(url)})" for url in urls)
        pieces.append(html[cursor:closing_at])
        pieces.append(markers)
        cursor = closing_at
    pieces.append(html[cursor:])
    return "".join(pieces)


def _unique(values: Sequence[str]) -> list[str]:
    return list(dict.fromkeys(v for v in values if v.strip()))


class LinkEnforcingGenerator:
    """Generate HTML that cites a minimum number of sources.

    Args:
        client: Chat completion provider.
        context_limits: Per-model output token caps (prefix matched).
    """

    def __init__(
        self,
        client: ChatCompletionClient,
        *,
        context_limits: Mapping[str, int] | None = None,
    ) -> None:
        self._client = client
        self._limits = dict(context_limits) if context_limits is not None else MODEL_CONTEXT_LIMITS

    async def generate(
        self,
        prompt: str,
        *,
        model: str,
        sources: Sequence[str],
        system_prompt: str | None = None,
        min_links: int = MIN_LINKS,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        min_output_length: int = 0,
    ) -> GenerationResult:
        """Generate content and enforce citation of the first ``min_links`` sources.

        Args:
            prompt: User prompt.
            model: Model ID.
            sources: Candidate source URLs, in priority order.
            system_prompt: Optional system turn.
            min_links: Number of leading sources that must be cited; 0 disables
                the requirement.
            max_tokens: Output token budget for the first call.
            min_output_length: Minimum number of words in the visible text;
                0 disables the check.

        Returns:
            The final content, the attempts made and any injected sources.

        Raises:
            Whatever the chat client raises when a call cannot be completed.
        """
        limit = get_context_limit(model, self._limits)
        tokens = max(1, min(max_tokens, limit))
        unique_sources = _unique(sources)
        required = unique_sources[:min_links] if min_links > 0 else []
        temperature = FACTUAL_TEMPERATURE if unique_sources else DEFAULT_TEMPERATURE

        base_messages: list[ChatMessage] = []
        if system_prompt:
            base_messages.append({"role": "system", "content": system_prompt})
        base_messages.append({"role": "user", "content": prompt})

        messages = base_messages
        attempts: list[ModelCallAttempt] = []
        content = ""
        missing: list[str] = list(required)

        for attempt_number in range(1, MAX_ATTEMPTS + 1):
            attempts.append(
                ModelCallAttempt(
                    attempt_number=attempt_number,
                    max_tokens=tokens,
                    temperature=temperature,
                    context_limit=limit,
                    message_count=len(messages),
                )
            )
            completion = await self._client.complete(
                model=model,
                messages=messages,
                max_tokens=tokens,
                temperature=temperature,
            )
            cleaned = clean_model_output(completion.content)
            if cleaned or not content:
                content = cleaned
            missing = find_missing_sources(content, required) if required else []

            retry_tokens = min(tokens * 2, limit)
            if attempt_number >= MAX_ATTEMPTS or retry_tokens <= tokens:
                break

            if completion.truncated:
                logger.info(f"Attempt {attempt_number} truncated at {tokens} tokens, retrying")
                messages = base_messages
            elif min_output_length and count_words(content) < min_output_length:
                logger.info(
                    f"Attempt {attempt_number} shorter than {min_output_length} words, retrying"
                )
                messages = base_messages
            elif missing:
                logger.info(
                    f"Attempt {attempt_number} missing {len(missing)} required citations, retrying"
                )
                messages = [
                    *base_messages,
                    {"role": "user", "content": build_missing_citation_message(missing)},
                ]
            else:
                break
            tokens = retry_tokens

        if missing:
            logger.warning(f"Injecting {len(missing)} citations the model did not include")
            content = inject_missing_citations(content, missing)

        return GenerationResult(
            content=content,
            attempts=tuple(attempts),
            injected_sources=tuple(missing),
        )


async def generate_with_links(
    client: ChatCompletionClient,
    prompt: str,
    model: str,
    sources: Sequence[str],
    system_prompt: str | None = None,
    min_links: int = MIN_LINKS,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    min_output_length: int = 0,
) -> str:
    """Functional form of :meth:`LinkEnforcingGenerator.generate` returning only the HTML."""
    result = await LinkEnforcingGenerator(client).generate(
        prompt,
        model=model,
        sources=sources,
        system_prompt=system_prompt,
        min_links=min_links,
        max_tokens=max_tokens,
        min_output_length=min_output_length,
    )
    return result.content
