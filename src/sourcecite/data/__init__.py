from sourcecite.data.models import (
    DEFAULT_FRESHNESS,
    Article,
    ArticleResult,
    Freshness,
    GenerationResult,
    ModelCallAttempt,
    ProviderVerdict,
    Source,
    TravelStyleResult,
    VerdictStatus,
    VerificationVerdict,
)

__all__ = [
    "Article",
    "ArticleResult",
    "DEFAULT_FRESHNESS",
    "Freshness",
    "GenerationResult",
    "ModelCallAttempt",
    "ProviderVerdict",
    "Source",
    "TravelStyleResult",
    "VerdictStatus",
    "VerificationVerdict",
]
