"""Personal website adapter: outbound links from ``https://<handle>.com``."""

from __future__ import annotations

import logging
from typing import Any

import trafilatura

from bioscout.adapters.base import BaseAdapter
from bioscout.models import AdapterConfig, PlatformResult
from bioscout.utils.html import (
    SOCIAL_HOSTS,
    extract_anchors,
    host_matches,
    host_of,
)
from bioscout.utils.http import fetch_text

logger = logging.getLogger(__name__)


def _metadata(html: str, url: str) -> dict[str, Any]:
    try:
        doc = trafilatura.extract_metadata(html, default_url=url)
    except Exception:
        logger.warning("trafilatura metadata extraction failed for %s", url, exc_info=True)
        return {}
    if doc is None:
        return {}
    return {
        "title": getattr(doc, "title", None),
        "description": getattr(doc, "description", None),
        "sitename": getattr(doc, "sitename", None),
    }


class WebsiteAdapter(BaseAdapter):
    """Treat ``<handle>.com`` as the creator's site and collect its outbound links."""

    def get_platform_name(self) -> str:
        return "website"

    def profile_url(self, handle: str) -> str:
        return f"https://{handle}.com"

    async def extract(self, handle: str, config: AdapterConfig) -> PlatformResult:
        url = self.profile_url(handle)
        html = await fetch_text(url, timeout=config.timeout)
        site_host = host_of(url)

        links = []
        for link_url, title in extract_anchors(html):
            host = host_of(link_url)
            if not host or host_matches(host, (site_host,)) or host_matches(host, SOCIAL_HOSTS):
                continue
            links.append(self._link(link_url, title or host, source="website", confidence=75))

        return PlatformResult(
            platform=self.get_platform_name(),
            handle=handle,
            success=True,
            links=links[: config.max_items],
            profile={"url": url, **_metadata(html, url)},
        )
