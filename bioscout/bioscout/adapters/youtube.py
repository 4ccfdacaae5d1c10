"""YouTube adapter using the Data API v3."""

from __future__ import annotations

import logging
from typing import Any

from bioscout.adapters.base import BaseAdapter
from bioscout.models import AdapterConfig, PlatformMetrics, PlatformResult, RawLink
from bioscout.utils.html import find_urls
from bioscout.utils.http import fetch_json

logger = logging.getLogger(__name__)

_API_BASE = "https://www.googleapis.com/youtube/v3"
_RECENT_VIDEOS = 5


class YouTubeAdapter(BaseAdapter):
    """Channel and recent-video description links via the Data API."""

    def get_platform_name(self) -> str:
        return "youtube"

    def profile_url(self, handle: str) -> str:
        return f"https://www.youtube.com/@{handle}"

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    async def extract(self, handle: str, config: AdapterConfig) -> PlatformResult:
        api_key: str | None = config.extra.get("youtube_api_key")
        if not api_key:
            raise ValueError("YouTube API key not provided")
        timeout = config.timeout

        channel_id = await self._find_channel_id(handle, api_key, timeout)
        if channel_id is None:
            return self._not_found(handle)

        channel = await self._fetch_channel(channel_id, api_key, timeout)
        if channel is None:
            return self._not_found(handle)

        snippet = channel.get("snippet") or {}
        stats = channel.get("statistics") or {}
        description = snippet.get("description") or ""

        links = self._links_from_text(description, "YouTube channel", "channel_description", 90)
        warnings: list[str] = []
        try:
            links += await self._video_links(channel_id, api_key, timeout)
        except Exception:
            logger.warning("Failed to fetch recent videos for %s", handle, exc_info=True)
            warnings.append("youtube: recent video descriptions unavailable")

        return PlatformResult(
            platform=self.get_platform_name(),
            handle=handle,
            success=True,
            links=links[: config.max_items],
            metrics=PlatformMetrics(
                followers=int(stats.get("subscriberCount") or 0),
                engagement=int(stats.get("viewCount") or 0),
            ),
            profile={
                "channel_id": channel_id,
                "title": snippet.get("title"),
                "description": description,
                "custom_url": snippet.get("customUrl"),
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # API calls
    # ------------------------------------------------------------------

    @staticmethod
    async def _find_channel_id(handle: str, api_key: str, timeout: float) -> str | None:
        data = await fetch_json(
            f"{_API_BASE}/search",
            params={"part": "snippet", "q": handle, "type": "channel", "maxResults": 1, "key": api_key},
            timeout=timeout,
        )
        items = data.get("items") or []
        if not items:
            return None
        return (items[0].get("snippet") or {}).get("channelId")

    @staticmethod
    async def _fetch_channel(channel_id: str, api_key: str, timeout: float) -> dict[str, Any] | None:
        data = await fetch_json(
            f"{_API_BASE}/channels",
            params={"part": "snippet,statistics", "id": channel_id, "key": api_key},
            timeout=timeout,
        )
        items = data.get("items") or []
        return items[0] if items else None

    async def _video_links(self, channel_id: str, api_key: str, timeout: float) -> list[RawLink]:
        search = await fetch_json(
            f"{_API_BASE}/search",
            params={
                "part": "id",
                "channelId": channel_id,
                "order": "date",
                "type": "video",
                "maxResults": _RECENT_VIDEOS,
                "key": api_key,
            },
            timeout=timeout,
        )
        video_ids = [
            item["id"]["videoId"]
            for item in search.get("items") or []
            if (item.get("id") or {}).get("videoId")
        ]
        if not video_ids:
            return []

        videos = await fetch_json(
            f"{_API_BASE}/videos",
            params={"part": "snippet", "id": ",".join(video_ids), "key": api_key},
            timeout=timeout,
        )
        links: list[RawLink] = []
        for video in videos.get("items") or []:
            snippet = video.get("snippet") or {}
            links += self._links_from_text(
                snippet.get("description"),
                snippet.get("title") or "YouTube video",
                "video_description",
                80,
            )
        return links

    def _links_from_text(
        self, text: str | None, title: str, source: str, confidence: int
    ) -> list[RawLink]:
        return [self._link(url, title, source=source, confidence=confidence) for url in find_urls(text)]
