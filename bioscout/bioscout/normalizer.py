"""Link normalizer: expand, classify and annotate raw links."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable

from bioscout.models import ProcessedLink, RawLink
from bioscout.utils.html import SOCIAL_HOSTS, host_matches, host_of
from bioscout.utils.http import resolve_url

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Awaitable[str]]

LINK_TYPES = (
    "amazon",
    "shopify",
    "affiliate_network",
    "brand_direct",
    "social_media",
    "unknown",
)

_AMAZON_MARKERS = ("amazon.", "amzn.to", "/dp/", "/gp/product/")
_SHOPIFY_MARKERS = ("shopify.com", "myshopify.com", ".shopify.")
_AFFILIATE_NETWORK_MARKERS = (
    "linksynergy",
    "shareasale",
    "cj.com",
    "commission-junction",
    "impact.com",
    "partnerize.com",
    "awin1.com",
    "rstyle.me",
    "shopstyle.it",
    "go.skimresources.com",
)
_SOCIAL_HOSTS = SOCIAL_HOSTS + ("youtu.be",)

BRAND_DOMAINS: dict[str, str] = {
    "nike.com": "Nike",
    "adidas.com": "Adidas",
    "underarmour.com": "Under Armour",
    "puma.com": "Puma",
    "gymshark.com": "Gymshark",
    "lululemon.com": "Lululemon",
    "fabletics.com": "Fabletics",
    "projectrock.com": "Project Rock",
    "projectrock.online": "Project Rock",
    "teremana.com": "Teremana",
    "zoa.energy": "ZOA Energy",
    "reebok.com": "Reebok",
    "newbalance.com": "New Balance",
    "asics.com": "ASICS",
    "champion.com": "Champion",
    "hoka.com": "Hoka",
    "allbirds.com": "Allbirds",
    "patagonia.com": "Patagonia",
    "thenorthface.com": "The North Face",
}

_AMAZON_TAG_RE = re.compile(r"[?&]tag=([^&#]+)", re.IGNORECASE)
_SHAREASALE_RE = re.compile(r"[?&](?:afftrack|saref)=([^&#]+)", re.IGNORECASE)
_CJ_RE = re.compile(r"[?&](?:cjdata|cjevent)=([^&#]+)", re.IGNORECASE)
_GENERIC_AFFILIATE_PARAMS = ("ref", "affiliate", "partner", "utm_source")
_SHOPIFY_REF_RE = re.compile(r"[?&](?:ref|source)=([^&#]+)", re.IGNORECASE)
_PATH_REF_RE = re.compile(r"/ref/([^/?#]+)", re.IGNORECASE)


@dataclass(frozen=True)
class AffiliateInfo:
    is_affiliate: bool = False
    network: str | None = None
    affiliate_id: str | None = None


class LinkNormalizer:
    """Default normalizer: httpx redirect following plus keyword tables.

    ``resolver`` may be swapped for tests or for a caching expansion
    service; ``expand=False`` skips network expansion entirely.
    """

    def __init__(
        self,
        *,
        expand: bool = True,
        timeout: float = 10.0,
        concurrency: int = 10,
        resolver: Resolver | None = None,
    ) -> None:
        self.expand_enabled = expand
        self.timeout = timeout
        self.concurrency = max(1, concurrency)
        self._resolver = resolver

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------

    async def expand(self, url: str) -> str:
        """Return the redirect target of *url*, or *url* itself on failure."""
        if not self.expand_enabled:
            return url
        try:
            if self._resolver is not None:
                expanded = await self._resolver(url)
            else:
                expanded = await resolve_url(url, timeout=self.timeout)
        except Exception:
            logger.warning("Failed to expand %s, keeping original", url, exc_info=True)
            return url
        return expanded or url

    async def expand_many(self, urls: list[str]) -> dict[str, str]:
        """Expand distinct URLs concurrently with bounded parallelism."""
        unique = list(dict.fromkeys(urls))
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _guarded(url: str) -> str:
            async with semaphore:
                return await self.expand(url)

        expanded = await asyncio.gather(*(_guarded(u) for u in unique))
        return dict(zip(unique, expanded))

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    @staticmethod
    def classify(url: str) -> str:
        lowered = url.lower()
        if any(m in lowered for m in _AMAZON_MARKERS):
            return "amazon"
        if any(m in lowered for m in _SHOPIFY_MARKERS):
            return "shopify"
        if any(m in lowered for m in _AFFILIATE_NETWORK_MARKERS):
            return "affiliate_network"
        host = host_of(url)
        if host_matches(host, _SOCIAL_HOSTS):
            return "social_media"
        if host_matches(host, tuple(BRAND_DOMAINS)):
            return "brand_direct"
        return "unknown"

    @staticmethod
    def detect_affiliate(url: str) -> AffiliateInfo:
        if m := _AMAZON_TAG_RE.search(url):
            return AffiliateInfo(True, "amazon", m.group(1))
        if m := _SHAREASALE_RE.search(url):
            return AffiliateInfo(True, "shareasale", m.group(1))
        if m := _CJ_RE.search(url):
            return AffiliateInfo(True, "cj_affiliate", m.group(1))
        for param in _GENERIC_AFFILIATE_PARAMS:
            if m := re.search(rf"[?&]{param}=([^&#]+)", url, re.IGNORECASE):
                return AffiliateInfo(True, "generic", m.group(1))
        if "shopify" in url.lower():
            if m := _SHOPIFY_REF_RE.search(url):
                return AffiliateInfo(True, "shopify", m.group(1))
        if m := _PATH_REF_RE.search(url):
            return AffiliateInfo(True, "path_based", m.group(1))
        return AffiliateInfo()

    @staticmethod
    def extract_brand(url: str) -> str | None:
        host = host_of(url)
        if not host:
            return None
        for domain, brand in BRAND_DOMAINS.items():
            if host == domain or host.endswith(f".{domain}"):
                return brand
        if "amazon" in url.lower():
            return "Amazon"
        return None

    # ------------------------------------------------------------------
    # Pipeline entry point
    # ------------------------------------------------------------------

    def annotate(self, link: RawLink, expanded_url: str) -> ProcessedLink:
        """Build a ProcessedLink; classification failures degrade to defaults."""
        try:
            link_type = self.classify(expanded_url)
            affiliate = self.detect_affiliate(expanded_url)
            brand = self.extract_brand(expanded_url)
        except Exception:
            logger.warning("Failed to classify %s", expanded_url, exc_info=True)
            link_type, affiliate, brand = "unknown", AffiliateInfo(), None

        return ProcessedLink(
            **link.model_dump(),
            expanded_url=expanded_url,
            type=link_type,
            brand=brand,
            is_affiliate=affiliate.is_affiliate,
            affiliate_id=affiliate.affiliate_id,
            affiliate_network=affiliate.network,
        )

    async def process(self, links: list[RawLink]) -> list[ProcessedLink]:
        if not links:
            return []
        logger.info("Processing %d links", len(links))
        expanded = await self.expand_many([link.original_url for link in links])
        return [
            self.annotate(link, expanded.get(link.original_url) or link.original_url)
            for link in links
        ]
