"""Amazon influencer storefront adapter."""

from __future__ import annotations

import logging
import re

import httpx

from bioscout.adapters.base import BaseAdapter
from bioscout.models import AdapterConfig, PlatformResult, RawLink
from bioscout.utils.html import clean_text
from bioscout.utils.http import fetch_text, is_not_found

logger = logging.getLogger(__name__)

_ASIN_RE = re.compile(r"/(?:dp|gp/product)/([A-Z0-9]{10})")
_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
_MISSING_MARKERS = ("page not found", "looking for something?")


def _storefront_title(html: str) -> str | None:
    m = _TITLE_RE.search(html)
    if not m:
        return None
    return clean_text(m.group(1)) or None


class AmazonStorefrontAdapter(BaseAdapter):
    """Storefront link plus the products featured on it."""

    def get_platform_name(self) -> str:
        return "amazon_storefront"

    def profile_url(self, handle: str) -> str:
        return f"https://www.amazon.com/shop/{handle}"

    async def extract(self, handle: str, config: AdapterConfig) -> PlatformResult:
        url = self.profile_url(handle)
        try:
            html = await fetch_text(url, timeout=config.timeout)
        except httpx.HTTPStatusError as exc:
            if is_not_found(exc):
                return self._not_found(handle)
            raise

        title = _storefront_title(html)
        if title is None or any(marker in title.lower() for marker in _MISSING_MARKERS):
            return self._not_found(handle)

        links: list[RawLink] = [
            self._link(url, title, source="storefront", confidence=90),
        ]
        for asin in dict.fromkeys(_ASIN_RE.findall(html)):
            links.append(
                self._link(
                    f"https://www.amazon.com/dp/{asin}",
                    f"Amazon product {asin}",
                    source="storefront",
                    confidence=85,
                )
            )
        logger.debug("Amazon storefront %s: %d links", handle, len(links))

        return PlatformResult(
            platform=self.get_platform_name(),
            handle=handle,
            success=True,
            links=links[: config.max_items],
            profile={"url": url, "title": title, "products": len(links) - 1},
        )
