from sourcecite.verification.base import VerificationProvider, build_verification_messages
from sourcecite.verification.chat import ChatVerifier
from sourcecite.verification.grok import (
    DEFAULT_GROK_MODEL,
    GROK_ENDPOINT,
    GrokAPIError,
    GrokVerifier,
    get_default_grok_model,
    read_chat_completion,
)
from sourcecite.verification.orchestrator import (
    MAX_ARTICLE_HTML_LENGTH,
    MAX_SOURCE_PROMPT_LENGTH,
    VerificationOrchestrator,
    build_verification_prompt,
    combine_verdicts,
    derive_reference_iso_timestamp,
    format_sources_for_prompt,
)
from sourcecite.verification.parsing import parse_verification_response
from sourcecite.verification.style import verify_travel_style

__all__ = [
    "ChatVerifier",
    "DEFAULT_GROK_MODEL",
    "GROK_ENDPOINT",
    "GrokAPIError",
    "GrokVerifier",
    "MAX_ARTICLE_HTML_LENGTH",
    "MAX_SOURCE_PROMPT_LENGTH",
    "VerificationOrchestrator",
    "VerificationProvider",
    "build_verification_messages",
    "build_verification_prompt",
    "combine_verdicts",
    "derive_reference_iso_timestamp",
    "format_sources_for_prompt",
    "get_default_grok_model",
    "parse_verification_response",
    "read_chat_completion",
    "verify_travel_style",
]
