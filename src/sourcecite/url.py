"""URL handling utilities.

Citations are matched by *variant sets*: every URL expands into the forms a
writer (or a model) is likely to use for the same page, and two URLs are
considered equivalent when their variant sets intersect. Wrapper URLs from
news aggregators and redirect services are unwrapped by a small allow-list of
resolvers so that citing the real target counts as citing the wrapper.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from collections.abc import Iterable, Sequence
from typing import Protocol
from urllib.parse import SplitResult, parse_qs, urlparse, urlsplit

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Printable ASCII minus whitespace, quotes and angle brackets.
_EMBEDDED_URL_RE = re.compile(r"https?://[!#-&(-;=?-~]+")
_HTTP_PREFIX_RE = re.compile(r"^https?://", re.IGNORECASE)

_MAX_RESOLVE_DEPTH = 2


def extract_domain(url: str) -> str:
    """Extract domain name from URL.

    Args:
        url: The URL to extract the domain from.

    Returns:
        The domain name (without 'www.' prefix), or "Unknown" if extraction fails.
    """
    try:
        parsed = urlparse(url)
        domain = (parsed.hostname or "").lower()
        if not domain:
            logger.warning(f"Could not get domain from url {url}")
            return "Unknown"
        if domain.startswith("www."):
            domain = domain[4:]
        return domain
    except ValueError:
        return "Unknown"


class UrlResolver(Protocol):
    """Recognizes one family of wrapper URLs and returns their real targets."""

    def resolve(self, parts: SplitResult) -> list[str]:
        """Return the target URLs embedded in ``parts`` (empty if not a wrapper)."""
        ...


def decode_embedded_url(blob: str) -> str | None:
    """Decode a base64url blob and return the longest ``http(s)://`` URL inside it."""
    padded = blob + "=" * (-len(blob) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError):
        return None
    candidates = _EMBEDDED_URL_RE.findall(raw.decode("latin-1"))
    if not candidates:
        return None
    return max(candidates, key=len)


class GoogleNewsResolver:
    """Unwraps ``news.google.com`` article links.

    The article id in ``/articles/<id>``, ``/rss/articles/<id>`` and
    ``/read/<id>`` is a base64url protobuf blob that embeds the publisher URL.
    """

    hosts: frozenset[str] = frozenset({"news.google.com"})
    markers: tuple[str, ...] = ("articles", "read")

    def resolve(self, parts: SplitResult) -> list[str]:
        if (parts.hostname or "").lower() not in self.hosts:
            return []
        segments = [s for s in parts.path.split("/") if s]
        for marker in self.markers:
            if marker not in segments:
                continue
            index = segments.index(marker)
            if index + 1 >= len(segments):
                continue
            target = decode_embedded_url(segments[index + 1])
            if target:
                return [target]
        return []


class QueryParamRedirectResolver:
    """Unwraps redirect links that carry their target in a query parameter.

    Covers ``google.com/url?url=...``/``?q=...`` and the usual tracking
    redirectors. Only absolute ``http(s)`` targets are accepted.

    Args:
        params: Query parameter names that may hold the target URL.
    """

    DEFAULT_PARAMS: tuple[str, ...] = (
        "url",
        "q",
        "u",
        "target",
        "dest",
        "destination",
        "redirect",
        "redirect_url",
        "link",
    )

    def __init__(self, params: Sequence[str] | None = None) -> None:
        self._params = tuple(params) if params is not None else self.DEFAULT_PARAMS

    def resolve(self, parts: SplitResult) -> list[str]:
        if not parts.query:
            return []
        query = parse_qs(parts.query)
        targets: list[str] = []
        for name in self._params:
            for value in query.get(name, []):
                value = value.strip()
                if _HTTP_PREFIX_RE.match(value):
                    targets.append(value)
        return targets


DEFAULT_RESOLVERS: tuple[UrlResolver, ...] = (
    GoogleNewsResolver(),
    QueryParamRedirectResolver(),
)


def _split(value: str) -> SplitResult | None:
    try:
        return urlsplit(value)
    except ValueError:
        return None


def _plain_variants(value: str) -> set[str]:
    """Variants of a single URL, ignoring any wrapper it may be."""
    variants = {value}
    without_fragment = value.split("#", 1)[0]
    variants.add(without_fragment)
    variants.add(without_fragment.split("?", 1)[0])

    parts = _split(value)
    if parts is None or not parts.netloc or parts.scheme.lower() not in ("http", "https", ""):
        return variants

    host = parts.netloc.lower()
    bare_host = host[4:] if host.startswith("www.") else host
    path = parts.path
    paths = {path, path.rstrip("/")}
    if parts.query:
        paths |= {f"{p}?{parts.query}" for p in list(paths)}

    for candidate_host in (bare_host, f"www.{bare_host}"):
        for candidate_path in paths:
            for prefix in ("https://", "http://", ""):
                variants.add(f"{prefix}{candidate_host}{candidate_path}")
    return variants


def _collect_variants(value: str, resolvers: Iterable[UrlResolver], depth: int) -> set[str]:
    variants = _plain_variants(value)
    if depth >= _MAX_RESOLVE_DEPTH:
        return variants
    parts = _split(value)
    if parts is None:
        return variants
    for resolver in resolvers:
        for target in resolver.resolve(parts):
            variants |= _collect_variants(target, resolvers, depth + 1)
    return variants


def build_url_variants(
    url: str,
    resolvers: Sequence[UrlResolver] = DEFAULT_RESOLVERS,
) -> set[str]:
    """Build the set of strings treated as equivalent to ``url`` for citation.

    The set holds the exact URL; forms with and without query string and
    fragment; with and without a ``www.`` host prefix; ``http``, ``https`` and
    scheme-less forms; with and without a trailing slash. If a resolver
    recognizes ``url`` as a wrapper, the target's variants are added as well.

    Args:
        url: The URL to expand.
        resolvers: Wrapper resolvers to consult.

    Returns:
        The variant set (empty for a blank URL).
    """
    value = url.strip()
    if not value:
        return set()
    return _collect_variants(value, resolvers, 0)


def extract_hrefs(html: str) -> list[str]:
    """Return every anchor ``href`` in ``html``, HTML entities decoded."""
    soup = BeautifulSoup(html, "html.parser")
    hrefs: list[str] = []
    for anchor in soup.find_all("a", href=True):
        href = str(anchor["href"]).strip()
        if href:
            hrefs.append(href)
    return hrefs


def find_missing_sources(
    html: str,
    required: Sequence[str],
    resolvers: Sequence[UrlResolver] = DEFAULT_RESOLVERS,
) -> list[str]:
    """Return the required sources that ``html`` does not cite.

    A source counts as cited when its variant set intersects the variant set
    of at least one anchor ``href`` in ``html``.

    Args:
        html: Generated HTML content.
        required: Source URLs that must be cited.
        resolvers: Wrapper resolvers used for both sides of the comparison.

    Returns:
        Uncited sources, in the order they appear in ``required``.
    """
    cited: set[str] = set()
    for href in extract_hrefs(html):
        cited |= build_url_variants(href, resolvers)

    missing: list[str] = []
    for url in required:
        if not build_url_variants(url, resolvers) & cited:
            missing.append(url)
    return missing
