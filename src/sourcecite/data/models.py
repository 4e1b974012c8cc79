"""Core data models for sourcecite."""

from dataclasses import dataclass
from enum import StrEnum


class Freshness(StrEnum):
    """Recency window applied to source search."""

    ONE_HOUR = "1h"
    SIX_HOURS = "6h"
    ONE_DAY = "24h"
    SEVEN_DAYS = "7d"
    THIRTY_DAYS = "30d"


DEFAULT_FRESHNESS = Freshness.SIX_HOURS


class VerdictStatus(StrEnum):
    """Outcome of a single verification provider call.

    ``UNAVAILABLE`` means the provider produced no usable judgment (timeout,
    transport error, unparseable reply). It counts neither as a pass nor as a
    fail when verdicts are combined.
    """

    PASS = "pass"
    FAIL = "fail"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Source:
    """An external article that generated content may cite."""

    url: str
    source: str
    published_at: str | None = None


@dataclass(frozen=True)
class Article(Source):
    """A news article returned by source discovery."""

    title: str = ""
    summary: str = ""


@dataclass(frozen=True)
class ModelCallAttempt:
    """Parameters of one completion call made by the link enforcer."""

    attempt_number: int
    max_tokens: int
    temperature: float
    context_limit: int
    message_count: int


@dataclass(frozen=True)
class GenerationResult:
    """Final content of a link-enforced generation plus how it got there."""

    content: str
    attempts: tuple[ModelCallAttempt, ...] = ()
    injected_sources: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProviderVerdict:
    """Judgment returned by one verification provider."""

    provider: str
    status: VerdictStatus
    issues: tuple[str, ...] = ()
    detail: str | None = None

    @property
    def available(self) -> bool:
        return self.status is not VerdictStatus.UNAVAILABLE


@dataclass(frozen=True)
class VerificationVerdict:
    """Combined verdict of all verification providers for one piece of content.

    ``issues`` lists the issues of every available provider, in provider
    order. The aggregate passes only if every available provider passed; if no
    provider was available the status is ``UNAVAILABLE`` (inconclusive).
    """

    verdicts: tuple[ProviderVerdict, ...] = ()
    issues: tuple[str, ...] = ()

    @property
    def status(self) -> VerdictStatus:
        available = [v for v in self.verdicts if v.available]
        if not available:
            return VerdictStatus.UNAVAILABLE
        if all(v.status is VerdictStatus.PASS for v in available):
            return VerdictStatus.PASS
        return VerdictStatus.FAIL

    @property
    def passed(self) -> bool | None:
        """True/False for a conclusive verdict, None when inconclusive."""
        status = self.status
        if status is VerdictStatus.UNAVAILABLE:
            return None
        return status is VerdictStatus.PASS

    def provider_passed(self, provider: str) -> bool | None:
        """Pass/fail of a named provider, or None if it is absent or unavailable."""
        for verdict in self.verdicts:
            if verdict.provider == provider and verdict.available:
                return verdict.status is VerdictStatus.PASS
        return None

    @property
    def passed_grok(self) -> bool | None:
        return self.provider_passed("grok")

    @property
    def passed_openai(self) -> bool | None:
        return self.provider_passed("openai")


@dataclass(frozen=True)
class TravelStyleResult:
    """Outcome of the deterministic travel-guide style check."""

    is_valid: bool
    issues: tuple[str, ...] = ()


@dataclass(frozen=True)
class ArticleResult:
    """Everything one article pipeline run produced.

    ``accepted`` is True only when verification passed conclusively and the
    style check, if one ran, found no issues.
    """

    topic: str
    content: str
    sources: tuple[Article, ...]
    generation: GenerationResult
    verification: VerificationVerdict
    style: TravelStyleResult | None = None

    @property
    def accepted(self) -> bool:
        if self.verification.passed is not True:
            return False
        return self.style is None or self.style.is_valid

    @property
    def source_urls(self) -> list[str]:
        return [s.url for s in self.sources]
