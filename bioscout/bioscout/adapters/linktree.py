"""Linktree adapter: reads the page's embedded Next.js payload."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from bioscout.adapters.base import BaseAdapter
from bioscout.models import AdapterConfig, PlatformResult, RawLink
from bioscout.utils.html import clean_text, host_matches, host_of, parse_script_json
from bioscout.utils.http import fetch_text, is_not_found

logger = logging.getLogger(__name__)

_EXCLUDED_HOSTS = ("linktr.ee", "linktree.com", "cookiepedia.co.uk", "onetrust.com")


def _page_props(data: dict[str, Any]) -> dict[str, Any]:
    props = data.get("props") or {}
    return props.get("pageProps") or {}


def _parse_links(page_props: dict[str, Any]) -> list[tuple[str, str]]:
    """Return ``(url, title)`` for each visible link block."""
    parsed: list[tuple[str, str]] = []
    for block in page_props.get("links") or []:
        if not isinstance(block, dict):
            continue
        url = (block.get("url") or "").strip()
        title = clean_text(block.get("title") or "")
        if not url.startswith(("http://", "https://")) or len(title) < 2:
            continue
        if host_matches(host_of(url), _EXCLUDED_HOSTS):
            continue
        parsed.append((url, title))
    return parsed


class LinktreeAdapter(BaseAdapter):
    """Extract curated links from a public Linktree page."""

    def get_platform_name(self) -> str:
        return "linktree"

    def profile_url(self, handle: str) -> str:
        return f"https://linktr.ee/{handle}"

    async def extract(self, handle: str, config: AdapterConfig) -> PlatformResult:
        url = self.profile_url(handle)
        try:
            html = await fetch_text(url, timeout=config.timeout)
        except httpx.HTTPStatusError as exc:
            if is_not_found(exc):
                return self._not_found(handle)
            raise

        data = parse_script_json(html, "__NEXT_DATA__")
        if data is None:
            raise ValueError(f"No __NEXT_DATA__ payload on {url}")

        page_props = _page_props(data)
        links: list[RawLink] = [
            self._link(link_url, title, source="linktree", confidence=85)
            for link_url, title in _parse_links(page_props)[: config.max_items]
        ]
        logger.debug("Linktree %s: %d links", handle, len(links))
        account = page_props.get("account") or {}

        return PlatformResult(
            platform=self.get_platform_name(),
            handle=handle,
            success=True,
            links=links,
            profile={
                "url": url,
                "username": account.get("username") or handle,
                "title": account.get("pageTitle"),
                "description": account.get("description"),
            },
        )
