"""Tests for URL variants, wrapper resolution and citation matching."""

import base64
from urllib.parse import urlsplit

import pytest

from sourcecite.url import (
    GoogleNewsResolver,
    QueryParamRedirectResolver,
    build_url_variants,
    decode_embedded_url,
    extract_domain,
    extract_hrefs,
    find_missing_sources,
)


def _google_news_url(target: str, prefix: str = "articles") -> str:
    blob = base64.urlsafe_b64encode(b"\x08\x13\x22\x2b" + target.encode() + b"\xd2\x01\x00")
    return f"https://news.google.com/{prefix}/{blob.decode().rstrip('=')}?hl=en-US"


class TestExtractDomain:
    def test_strips_www(self) -> None:
        assert extract_domain("https://www.Example.com/path") == "example.com"

    def test_keeps_subdomain(self) -> None:
        assert extract_domain("https://news.bbc.co.uk/a") == "news.bbc.co.uk"

    def test_unknown_without_host(self) -> None:
        assert extract_domain("not a url") == "Unknown"


class TestBuildUrlVariants:
    def test_blank_url_has_no_variants(self) -> None:
        assert build_url_variants("   ") == set()

    def test_includes_exact_string(self) -> None:
        url = "https://example.com/story"
        assert url in build_url_variants(url)

    def test_scheme_host_and_slash_forms(self) -> None:
        variants = build_url_variants("https://www.example.com/story/")
        assert "http://example.com/story" in variants
        assert "https://example.com/story/" in variants
        assert "example.com/story" in variants
        assert "www.example.com/story" in variants

    def test_query_and_fragment_dropped(self) -> None:
        variants = build_url_variants("https://example.com/story?utm=1#top")
        assert "https://example.com/story?utm=1" in variants
        assert "https://example.com/story" in variants

    def test_host_lowercased(self) -> None:
        variants = build_url_variants("https://EXAMPLE.com/Story")
        assert "https://example.com/Story" in variants

    def test_google_news_wrapper_adds_target(self) -> None:
        wrapper = _google_news_url("https://publisher.com/news/item")
        variants = build_url_variants(wrapper)
        assert "https://publisher.com/news/item" in variants
        assert "publisher.com/news/item" in variants

    def test_redirect_param_adds_target(self) -> None:
        variants = build_url_variants(
            "https://www.google.com/url?q=https://publisher.com/a&sa=D"
        )
        assert "https://publisher.com/a" in variants


class TestResolvers:
    def test_decode_embedded_url_picks_longest(self) -> None:
        blob = base64.urlsafe_b64encode(
            b"\x01http://a.co\x02https://publisher.com/long/path\x03"
        ).decode()
        assert decode_embedded_url(blob.rstrip("=")) == "https://publisher.com/long/path"

    def test_decode_embedded_url_invalid(self) -> None:
        assert decode_embedded_url("!!!") is None

    @pytest.mark.parametrize("prefix", ["articles", "rss/articles", "read"])
    def test_google_news_paths(self, prefix: str) -> None:
        wrapper = _google_news_url("https://publisher.com/x", prefix=prefix)
        assert GoogleNewsResolver().resolve(urlsplit(wrapper)) == ["https://publisher.com/x"]

    def test_google_news_ignores_other_hosts(self) -> None:
        wrapper = _google_news_url("https://publisher.com/x").replace("news.google.com", "a.com")
        assert GoogleNewsResolver().resolve(urlsplit(wrapper)) == []

    def test_query_param_only_http_targets(self) -> None:
        parts = urlsplit("https://r.example/out?url=ftp://x.com/a&u=https%3A%2F%2Fy.com%2Fb")
        assert QueryParamRedirectResolver().resolve(parts) == ["https://y.com/b"]

    def test_query_param_custom_names(self) -> None:
        parts = urlsplit("https://r.example/out?to=https://y.com/b")
        assert QueryParamRedirectResolver(params=["to"]).resolve(parts) == ["https://y.com/b"]


class TestExtractHrefs:
    def test_decodes_entities(self) -> None:
        html = '<p><a href="https://example.com/a?x=1&amp;y=2">a</a><a name="x">no href</a></p>'
        assert extract_hrefs(html) == ["https://example.com/a?x=1&y=2"]


class TestFindMissingSources:
    def test_tracking_params_still_count_as_cited(self) -> None:
        html = '<a href="https://example.com/story?utm_source=feed">x</a>'
        assert find_missing_sources(html, ["https://example.com/story"]) == []

    def test_www_and_scheme_differences(self) -> None:
        html = '<a href="http://www.example.com/story/">x</a>'
        assert find_missing_sources(html, ["https://example.com/story"]) == []

    def test_preserves_required_order(self) -> None:
        html = '<a href="https://b.com/2">b</a>'
        required = ["https://c.com/3", "https://b.com/2", "https://a.com/1"]
        assert find_missing_sources(html, required) == ["https://c.com/3", "https://a.com/1"]

    def test_google_news_source_cited_by_target(self) -> None:
        wrapper = _google_news_url("https://publisher.com/news/item")
        html = '<a href="https://publisher.com/news/item">story</a>'
        assert find_missing_sources(html, [wrapper]) == []

    def test_redirect_href_cites_target(self) -> None:
        html = '<a href="https://www.google.com/url?q=https://publisher.com/a">x</a>'
        assert find_missing_sources(html, ["https://publisher.com/a"]) == []

    def test_plain_text_url_is_not_a_citation(self) -> None:
        html = "<p>See https://example.com/story for more.</p>"
        assert find_missing_sources(html, ["https://example.com/story"]) == [
            "https://example.com/story"
        ]

    def test_different_path_is_missing(self) -> None:
        html = '<a href="https://example.com/other">x</a>'
        assert find_missing_sources(html, ["https://example.com/story"]) == [
            "https://example.com/story"
        ]
