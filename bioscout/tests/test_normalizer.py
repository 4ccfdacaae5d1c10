"""Tests for the link normalizer."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from bioscout.models import RawLink
from bioscout.normalizer import LINK_TYPES, LinkNormalizer


def _raw(url: str, source: str = "bio") -> RawLink:
    return RawLink(title="t", original_url=url, platform="tiktok", source=source)


class TestClassify:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://www.amazon.com/dp/B000111222", "amazon"),
            ("https://amzn.to/3abc", "amazon"),
            ("https://store.myshopify.com/products/hat", "shopify"),
            ("https://click.linksynergy.com/deeplink?id=1", "affiliate_network"),
            ("https://www.instagram.com/someone", "social_media"),
            ("https://youtu.be/abc", "social_media"),
            ("https://x.com/someone", "social_media"),
            ("https://www.nike.com/t/shoe", "brand_direct"),
            ("https://example.org/about", "unknown"),
        ],
    )
    def test_types(self, url: str, expected: str) -> None:
        assert LinkNormalizer.classify(url) == expected
        assert expected in LINK_TYPES

    def test_lookalike_host_is_not_social(self) -> None:
        assert LinkNormalizer.classify("https://www.netflix.com/title/1") == "unknown"


class TestDetectAffiliate:
    def test_amazon_tag(self) -> None:
        info = LinkNormalizer.detect_affiliate("https://amazon.com/dp/B000111222?tag=creator-20")
        assert info.is_affiliate
        assert info.network == "amazon"
        assert info.affiliate_id == "creator-20"

    def test_shareasale(self) -> None:
        info = LinkNormalizer.detect_affiliate("https://shareasale.com/r.cfm?afftrack=abc")
        assert info.network == "shareasale"
        assert info.affiliate_id == "abc"

    def test_generic_ref_param(self) -> None:
        info = LinkNormalizer.detect_affiliate("https://brand.com/?ref=creator")
        assert info.network == "generic"
        assert info.affiliate_id == "creator"

    def test_path_based_ref(self) -> None:
        info = LinkNormalizer.detect_affiliate("https://brand.com/ref/creator123")
        assert info.network == "path_based"

    def test_plain_url_is_not_affiliate(self) -> None:
        info = LinkNormalizer.detect_affiliate("https://example.com/page")
        assert not info.is_affiliate
        assert info.affiliate_id is None


class TestExtractBrand:
    def test_known_domain(self) -> None:
        assert LinkNormalizer.extract_brand("https://shop.teremana.com/") == "Teremana"

    def test_amazon_fallback(self) -> None:
        assert LinkNormalizer.extract_brand("https://amazon.com/dp/B000111222") == "Amazon"

    def test_unknown(self) -> None:
        assert LinkNormalizer.extract_brand("https://example.com/") is None


# ---------------------------------------------------------------------------
# Expansion and processing
# ---------------------------------------------------------------------------


class TestExpand:
    @pytest.mark.asyncio
    async def test_disabled_returns_original(self) -> None:
        resolver = AsyncMock(return_value="https://elsewhere.com/")
        normalizer = LinkNormalizer(expand=False, resolver=resolver)
        assert await normalizer.expand("https://bit.ly/x") == "https://bit.ly/x"
        resolver.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_uses_resolver(self) -> None:
        normalizer = LinkNormalizer(resolver=AsyncMock(return_value="https://nike.com/shoe"))
        assert await normalizer.expand("https://bit.ly/x") == "https://nike.com/shoe"

    @pytest.mark.asyncio
    async def test_failure_keeps_original(self) -> None:
        normalizer = LinkNormalizer(resolver=AsyncMock(side_effect=httpx.ConnectError("boom")))
        assert await normalizer.expand("https://bit.ly/x") == "https://bit.ly/x"

    @pytest.mark.asyncio
    async def test_default_resolver_is_httpx_helper(self) -> None:
        with patch(
            "bioscout.normalizer.resolve_url",
            new=AsyncMock(return_value="https://nike.com/"),
        ) as mock_resolve:
            normalizer = LinkNormalizer(timeout=3.0)
            assert await normalizer.expand("https://bit.ly/x") == "https://nike.com/"
        mock_resolve.assert_awaited_once_with("https://bit.ly/x", timeout=3.0)

    @pytest.mark.asyncio
    async def test_expand_many_dedupes_requests(self) -> None:
        resolver = AsyncMock(side_effect=lambda url: url + "?expanded")
        normalizer = LinkNormalizer(resolver=resolver, concurrency=2)
        result = await normalizer.expand_many(["https://a.com/", "https://a.com/", "https://b.com/"])
        assert result == {
            "https://a.com/": "https://a.com/?expanded",
            "https://b.com/": "https://b.com/?expanded",
        }
        assert resolver.await_count == 2


class TestProcess:
    @pytest.mark.asyncio
    async def test_annotates_expanded_url(self) -> None:
        normalizer = LinkNormalizer(
            resolver=AsyncMock(return_value="https://www.amazon.com/dp/B000111222?tag=me-20"),
        )
        [link] = await normalizer.process([_raw("https://amzn.to/abc")])
        assert link.original_url == "https://amzn.to/abc"
        assert link.expanded_url == "https://www.amazon.com/dp/B000111222?tag=me-20"
        assert link.type == "amazon"
        assert link.is_affiliate
        assert link.affiliate_id == "me-20"
        assert link.brand == "Amazon"
        assert link.source == "bio"

    @pytest.mark.asyncio
    async def test_classification_failure_degrades(self) -> None:
        normalizer = LinkNormalizer(expand=False)
        with patch.object(LinkNormalizer, "classify", side_effect=RuntimeError("bad table")):
            [link] = await normalizer.process([_raw("https://nike.com/")])
        assert link.type == "unknown"
        assert not link.is_affiliate
        assert link.brand is None

    @pytest.mark.asyncio
    async def test_empty(self) -> None:
        assert await LinkNormalizer().process([]) == []
