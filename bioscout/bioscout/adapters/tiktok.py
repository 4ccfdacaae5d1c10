"""TikTok adapter: parses the rehydration payload of a public profile page."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from bioscout.adapters.base import BaseAdapter
from bioscout.models import AdapterConfig, PlatformMetrics, PlatformResult, RawLink
from bioscout.utils.html import find_urls, parse_script_json
from bioscout.utils.http import fetch_text, is_not_found

logger = logging.getLogger(__name__)

_PAYLOAD_ID = "__UNIVERSAL_DATA_FOR_REHYDRATION__"


def _user_info(data: dict[str, Any]) -> dict[str, Any] | None:
    scope = data.get("__DEFAULT_SCOPE__") or {}
    detail = scope.get("webapp.user-detail") or {}
    info = detail.get("userInfo")
    return info if isinstance(info, dict) and info.get("user") else None


def _normalize_bio_link(link: str) -> str:
    link = link.strip()
    if link and not link.startswith(("http://", "https://")):
        link = f"https://{link}"
    return link


class TikTokAdapter(BaseAdapter):
    """Bio link, signature URLs and follower stats from a TikTok profile."""

    def get_platform_name(self) -> str:
        return "tiktok"

    def profile_url(self, handle: str) -> str:
        return f"https://www.tiktok.com/@{handle}"

    async def extract(self, handle: str, config: AdapterConfig) -> PlatformResult:
        url = self.profile_url(handle)
        try:
            html = await fetch_text(url, timeout=config.timeout)
        except httpx.HTTPStatusError as exc:
            if is_not_found(exc):
                return self._not_found(handle)
            raise

        data = parse_script_json(html, _PAYLOAD_ID)
        if data is None:
            raise ValueError(f"No {_PAYLOAD_ID} payload on {url}")
        info = _user_info(data)
        if info is None:
            return self._not_found(handle)

        user: dict[str, Any] = info["user"]
        stats: dict[str, Any] = info.get("stats") or {}

        links: list[RawLink] = []
        bio_link = _normalize_bio_link((user.get("bioLink") or {}).get("link") or "")
        if bio_link:
            links.append(self._link(bio_link, "TikTok bio link", source="bio", confidence=90))
        for text_url in find_urls(user.get("signature")):
            if text_url != bio_link:
                links.append(self._link(text_url, "TikTok bio", source="bio", confidence=80))

        return PlatformResult(
            platform=self.get_platform_name(),
            handle=handle,
            success=True,
            links=links[: config.max_items],
            metrics=PlatformMetrics(followers=int(stats.get("followerCount") or 0)),
            profile={
                "url": url,
                "nickname": user.get("nickname"),
                "bio": user.get("signature"),
                "verified": bool(user.get("verified")),
                "video_count": stats.get("videoCount"),
                "likes": stats.get("heartCount"),
            },
        )
