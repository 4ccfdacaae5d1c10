"""Beacons.ai adapter."""

from __future__ import annotations

import logging

import httpx

from bioscout.adapters.base import BaseAdapter
from bioscout.models import AdapterConfig, PlatformResult
from bioscout.utils.html import (
    SOCIAL_HOSTS,
    extract_anchors,
    host_matches,
    host_of,
)
from bioscout.utils.http import fetch_text, is_not_found

logger = logging.getLogger(__name__)

_EXCLUDED_HOSTS = ("beacons.ai", "beacons.page") + SOCIAL_HOSTS


class BeaconsAdapter(BaseAdapter):
    """Collect outbound link blocks from a public Beacons page."""

    def get_platform_name(self) -> str:
        return "beacons"

    def profile_url(self, handle: str) -> str:
        return f"https://beacons.ai/{handle}"

    async def extract(self, handle: str, config: AdapterConfig) -> PlatformResult:
        url = self.profile_url(handle)
        try:
            html = await fetch_text(url, timeout=config.timeout)
        except httpx.HTTPStatusError as exc:
            if is_not_found(exc):
                return self._not_found(handle)
            raise

        links = [
            self._link(link_url, title or host_of(link_url), source="beacons", confidence=85)
            for link_url, title in extract_anchors(html)
            if not host_matches(host_of(link_url), _EXCLUDED_HOSTS)
        ][: config.max_items]
        logger.debug("Beacons %s: %d links", handle, len(links))

        return PlatformResult(
            platform=self.get_platform_name(),
            handle=handle,
            success=True,
            links=links,
            profile={"url": url},
        )
