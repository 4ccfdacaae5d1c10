"""Regex helpers for pulling links out of HTML pages and free text."""

from __future__ import annotations

import html as html_mod
import json
import logging
import re
from typing import Any
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

_ANCHOR_RE = re.compile(
    r"<a\b[^>]*?href\s*=\s*[\"'](?P<href>https?://[^\"']+)[\"'][^>]*>(?P<body>.*?)</a>",
    re.IGNORECASE | re.DOTALL,
)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")
_TEXT_URL_RE = re.compile(r"https?://[^\s<>\"')\]]+", re.IGNORECASE)

SOCIAL_HOSTS = (
    "instagram.com",
    "tiktok.com",
    "twitter.com",
    "x.com",
    "facebook.com",
    "youtube.com",
    "threads.net",
    "snapchat.com",
    "pinterest.com",
)


def clean_text(text: str) -> str:
    return _WS_RE.sub(" ", html_mod.unescape(_TAG_RE.sub(" ", text))).strip()


def host_of(url: str) -> str:
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return host.lower().removeprefix("www.")


def host_matches(host: str, domains: tuple[str, ...]) -> bool:
    return any(host == d or host.endswith(f".{d}") for d in domains)


def extract_anchors(html: str) -> list[tuple[str, str]]:
    """Return ``(url, title)`` for every absolute http(s) anchor, in page order."""
    anchors: list[tuple[str, str]] = []
    seen: set[str] = set()
    for match in _ANCHOR_RE.finditer(html):
        url = html_mod.unescape(match.group("href")).strip()
        if url in seen:
            continue
        seen.add(url)
        anchors.append((url, clean_text(match.group("body"))))
    return anchors


def find_urls(text: str | None) -> list[str]:
    """Find http(s) URLs in free text such as bios and descriptions."""
    if not text:
        return []
    urls: list[str] = []
    for raw in _TEXT_URL_RE.findall(text):
        url = raw.rstrip(".,;:!?")
        if url not in urls:
            urls.append(url)
    return urls


def parse_script_json(html: str, script_id: str) -> dict[str, Any] | None:
    """Extract the JSON payload of ``<script id="...">`` from a page."""
    m = re.search(
        rf"<script[^>]*\bid=[\"']{re.escape(script_id)}[\"'][^>]*>(.*?)</script>",
        html,
        re.DOTALL | re.IGNORECASE,
    )
    if not m:
        return None
    try:
        data = json.loads(m.group(1))
    except json.JSONDecodeError:
        logger.debug("Failed to parse %s JSON", script_id)
        return None
    return data if isinstance(data, dict) else None
