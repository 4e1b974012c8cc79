"""Fact-checking of generated content against its sources.

The orchestrator derives a reference "now" from the sources, builds a size
guarded prompt, and runs every configured provider concurrently, each under
its own deadline. Provider failures never propagate: they become
``UNAVAILABLE`` verdicts that count neither as a pass nor as a fail.
"""

import asyncio
import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from sourcecite.data import ProviderVerdict, Source, VerdictStatus, VerificationVerdict
from sourcecite.timestamps import MAX_FUTURE_DRIFT, as_utc, parse_published_timestamp, to_iso
from sourcecite.url import extract_domain
from sourcecite.verification.base import VerificationProvider
from sourcecite.verification.parsing import parse_verification_response

MAX_ARTICLE_HTML_LENGTH = 80_000
MAX_SOURCE_PROMPT_LENGTH = 60_000
ARTICLE_TRUNCATION_NOTICE = "[Article truncated for verification]"
SOURCE_TRUNCATION_NOTICE = "[Sources truncated for verification]"
NO_VERDICT_ISSUE = "Verification inconclusive: no verification provider returned a verdict."

logger = logging.getLogger(__name__)


def normalize_sources(sources: Sequence[Source | str]) -> list[Source]:
    """Turn bare URL strings into :class:`Source` records labeled by domain."""
    normalized: list[Source] = []
    for item in sources:
        if isinstance(item, Source):
            normalized.append(item)
        elif isinstance(item, str) and item.strip():
            url = item.strip()
            normalized.append(Source(url=url, source=extract_domain(url)))
    return normalized


def derive_reference_iso_timestamp(
    sources: Sequence[Source], now: datetime | None = None
) -> str:
    """Latest trustworthy source timestamp as ISO-8601 UTC, else ``now``.

    Timestamps more than ``MAX_FUTURE_DRIFT`` ahead of ``now`` are ignored, as
    are values that do not parse. A naive ``now`` is taken as UTC.
    """
    now = as_utc(now) if now is not None else datetime.now(UTC)
    ceiling = now + MAX_FUTURE_DRIFT
    latest: datetime | None = None
    for source in sources:
        parsed = parse_published_timestamp(source.published_at, now=now)
        if parsed is None or parsed > ceiling:
            continue
        if latest is None or parsed > latest:
            latest = parsed
    return to_iso(latest or now)


def truncate_with_notice(text: str, limit: int, notice: str) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}\n{notice}"


def format_sources_for_prompt(sources: Sequence[Source]) -> str:
    """Numbered source listing, capped at ``MAX_SOURCE_PROMPT_LENGTH`` characters."""
    lines = []
    for i, source in enumerate(sources, 1):
        published = source.published_at or "date unavailable"
        lines.append(f"{i}. {source.source} ({published}): {source.url}")
    listing = "\n".join(lines)
    return truncate_with_notice(listing, MAX_SOURCE_PROMPT_LENGTH, SOURCE_TRUNCATION_NOTICE)


def build_verification_prompt(content: str, sources: Sequence[Source], reference_iso: str) -> str:
    """Prompt asking a provider to fact-check ``content`` against ``sources``."""
    article = truncate_with_notice(
        content.strip(), MAX_ARTICLE_HTML_LENGTH, ARTICLE_TRUNCATION_NOTICE
    )
    listing = format_sources_for_prompt(sources) or "No sources were provided."
    return (
        "You are a meticulous fact-checker. Review the HTML article below against the "
        f"listed sources. Treat {reference_iso} as the current date and time.\n\n"
        "Check that:\n"
        "- every factual claim is supported by the sources or is common knowledge,\n"
        "- dates and tenses are consistent with the current date (no past events "
        "described as upcoming, no future events described as having happened),\n"
        "- cited links point to the listed sources.\n\n"
        f"Sources:\n{listing}\n\n"
        f"Article HTML:\n{article}\n\n"
        'Respond with JSON only: {"passed": true|false, "issues": ["..."]}. '
        "List one specific issue per entry and leave issues empty when the article passes."
    )


def _verdict_from_reply(provider: str, reply: str) -> ProviderVerdict:
    passed, issues = parse_verification_response(reply)
    if passed is None:
        return ProviderVerdict(
            provider=provider,
            status=VerdictStatus.UNAVAILABLE,
            detail="unparseable verification reply",
        )
    return ProviderVerdict(
        provider=provider,
        status=VerdictStatus.PASS if passed else VerdictStatus.FAIL,
        issues=tuple(issues),
    )


def combine_verdicts(verdicts: Sequence[ProviderVerdict]) -> VerificationVerdict:
    """Merge provider verdicts, keeping issues in provider order."""
    issues: list[str] = []
    for verdict in verdicts:
        if verdict.available:
            issues.extend(verdict.issues)
    if not any(v.available for v in verdicts):
        issues.append(NO_VERDICT_ISSUE)
    return VerificationVerdict(verdicts=tuple(verdicts), issues=tuple(issues))


class VerificationOrchestrator:
    """Run verification providers against generated content.

    Args:
        providers: Providers in reporting order (the streaming one first).
    """

    def __init__(self, providers: Sequence[VerificationProvider]) -> None:
        self.providers = list(providers)

    async def verify_output(
        self,
        content: str,
        sources: Sequence[Source | str],
        *,
        now: datetime | None = None,
    ) -> VerificationVerdict:
        """Fact-check ``content`` against ``sources``.

        Never raises: provider failures turn into unavailable verdicts and a
        run without any available verdict is reported as inconclusive.
        """
        normalized = normalize_sources(sources)
        reference_iso = derive_reference_iso_timestamp(normalized, now)
        prompt = build_verification_prompt(content, normalized, reference_iso)

        if not self.providers:
            logger.warning("No verification providers configured")
        verdicts = await asyncio.gather(
            *(self._run_provider(p, prompt, reference_iso) for p in self.providers)
        )
        result = combine_verdicts(verdicts)
        logger.info(
            f"Verification {result.status} "
            f"({', '.join(f'{v.provider}={v.status}' for v in verdicts) or 'no providers'})"
        )
        return result

    async def _run_provider(
        self, provider: VerificationProvider, prompt: str, reference_iso: str
    ) -> ProviderVerdict:
        try:
            async with asyncio.timeout(provider.timeout):
                reply = await provider.run(prompt, reference_iso=reference_iso)
        except TimeoutError:
            logger.warning(f"{provider.name} verification timed out after {provider.timeout}s")
            return ProviderVerdict(
                provider=provider.name,
                status=VerdictStatus.UNAVAILABLE,
                detail=f"timed out after {provider.timeout}s",
            )
        except Exception as e:
            logger.warning(f"{provider.name} verification failed: {e}")
            return ProviderVerdict(
                provider=provider.name,
                status=VerdictStatus.UNAVAILABLE,
                detail=str(e) or type(e).__name__,
            )
        verdict = _verdict_from_reply(provider.name, reply)
        if not verdict.available:
            logger.warning(f"{provider.name} verification reply could not be parsed")
        return verdict
