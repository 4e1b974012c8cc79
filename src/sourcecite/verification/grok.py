"""Streaming verifier backed by xAI's Grok chat completions API."""

import asyncio
import json
import logging
import os
from collections.abc import AsyncIterator
from typing import Any

import httpx

from sourcecite.generation.base import ChatCompletion, ChatMessage
from sourcecite.verification.base import build_verification_messages

GROK_ENDPOINT = "https://api.x.ai/v1/chat/completions"
DEFAULT_GROK_MODEL = "grok-4-fast"
DEFAULT_VERIFICATION_TIMEOUT = 45.0
MAX_GROK_ATTEMPTS = 2

logger = logging.getLogger(__name__)


class GrokAPIError(RuntimeError):
    """Non-success HTTP response from the Grok API."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def retryable(self) -> bool:
        return self.status_code == 429 or self.status_code >= 500


def get_default_grok_model() -> str:
    """Verification model from GROK_VERIFICATION_MODEL, else ``grok-4-fast``."""
    return os.environ.get("GROK_VERIFICATION_MODEL", "").strip() or DEFAULT_GROK_MODEL


def _error_message(status_code: int, body: str) -> str:
    message = f"Grok API request failed with status {status_code}"
    if not body:
        return message
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return f"{message}: {body}"
    detail: Any = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            detail = error.get("message")
        else:
            detail = error or data.get("message")
    return f"{message}: {detail}" if detail else message


async def read_chat_completion(lines: AsyncIterator[str]) -> ChatCompletion:
    """Aggregate a chat completion body into a single :class:`ChatCompletion`.

    Server-sent ``data:`` events are merged by concatenating each choice's
    ``delta.content``; the stream ends at ``data: [DONE]``. A body without any
    ``data:`` lines is parsed as a plain (non-streamed) completion object.
    """
    parts: list[str] = []
    raw_lines: list[str] = []
    finish_reason: str | None = None
    model = ""
    streamed = False

    async for line in lines:
        stripped = line.strip()
        if not stripped.startswith("data:"):
            if stripped and not stripped.startswith(":"):
                raw_lines.append(line)
            continue
        streamed = True
        payload = stripped[len("data:") :].strip()
        if payload == "[DONE]":
            break
        try:
            event = json.loads(payload)
        except json.JSONDecodeError:
            logger.warning(f"Skipping malformed Grok stream event: {payload[:80]!r}")
            continue
        model = event.get("model") or model
        for choice in event.get("choices") or []:
            delta = choice.get("delta") or choice.get("message") or {}
            content = delta.get("content")
            if isinstance(content, str):
                parts.append(content)
            finish_reason = choice.get("finish_reason") or finish_reason

    if streamed:
        return ChatCompletion(content="".join(parts), finish_reason=finish_reason, model=model)

    data = json.loads("\n".join(raw_lines)) if raw_lines else {}
    choices = data.get("choices") or [{}]
    message = choices[0].get("message") or {}
    return ChatCompletion(
        content=message.get("content") or "",
        finish_reason=choices[0].get("finish_reason"),
        model=data.get("model", ""),
    )


class GrokVerifier:
    """Verification provider calling Grok with streamed responses.

    Transport errors, HTTP 429 and 5xx responses are retried once after
    ``retry_delay`` seconds.

    Args:
        api_key: xAI API key (defaults to GROK_API_KEY env var).
        model: Model ID (defaults to GROK_VERIFICATION_MODEL or grok-4-fast).
        timeout: Deadline in seconds for one verification, retries included.
        retry_delay: Pause before the retry.
        http_client: Optional shared client; a short-lived one is created per
            run otherwise.
    """

    name = "grok"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float = DEFAULT_VERIFICATION_TIMEOUT,
        retry_delay: float = 1.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = (api_key or os.environ.get("GROK_API_KEY", "")).strip()
        if not self._api_key:
            raise ValueError("Grok API key required. Pass api_key or set GROK_API_KEY env var.")
        self.model = model or get_default_grok_model()
        self.timeout = timeout
        self._retry_delay = retry_delay
        self._http_client = http_client

    async def run(self, prompt: str, *, reference_iso: str | None = None) -> str:
        messages = build_verification_messages(prompt, reference_iso)
        if self._http_client is not None:
            completion = await self._complete_with_retry(self._http_client, messages)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                completion = await self._complete_with_retry(client, messages)
        return completion.content

    async def _complete_with_retry(
        self, client: httpx.AsyncClient, messages: list[ChatMessage]
    ) -> ChatCompletion:
        for attempt in range(1, MAX_GROK_ATTEMPTS + 1):
            try:
                return await self._complete(client, messages)
            except GrokAPIError as e:
                if not e.retryable or attempt == MAX_GROK_ATTEMPTS:
                    raise
                logger.warning(f"Grok returned {e.status_code}, retrying: {e.message}")
            except httpx.TransportError as e:
                if attempt == MAX_GROK_ATTEMPTS:
                    raise
                logger.warning(f"Grok transport error, retrying: {e}")
            await asyncio.sleep(self._retry_delay)
        raise AssertionError("unreachable")

    async def _complete(
        self, client: httpx.AsyncClient, messages: list[ChatMessage]
    ) -> ChatCompletion:
        payload = {"model": self.model, "messages": messages, "stream": True}
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        async with client.stream("POST", GROK_ENDPOINT, headers=headers, json=payload) as response:
            if response.status_code >= 400:
                body = (await response.aread()).decode("utf-8", errors="replace")
                raise GrokAPIError(response.status_code, _error_message(response.status_code, body))
            return await read_chat_completion(response.aiter_lines())
