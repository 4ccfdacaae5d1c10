"""HTTP utilities for bioscout adapters and the link normalizer."""

from __future__ import annotations

from typing import Any

import httpx

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/125.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/json",
    "Accept-Language": "en-US,en;q=0.9",
}

MAX_REDIRECTS = 5


async def fetch_json(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    timeout: float = 10.0,
) -> Any:
    merged = {**_DEFAULT_HEADERS, **{"Accept": "application/json"}, **(headers or {})}
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        resp = await client.get(url, headers=merged, params=params)
        resp.raise_for_status()
        return resp.json()


async def fetch_text(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    timeout: float = 10.0,
) -> str:
    merged = {**_DEFAULT_HEADERS, **(headers or {})}
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        resp = await client.get(url, headers=merged)
        resp.raise_for_status()
        return resp.text


async def resolve_url(url: str, *, timeout: float = 10.0) -> str:
    """Follow redirects and return the final URL."""
    async with httpx.AsyncClient(
        timeout=timeout, follow_redirects=True, max_redirects=MAX_REDIRECTS
    ) as client:
        resp = await client.get(url, headers=_DEFAULT_HEADERS)
        if resp.status_code >= 400:
            raise httpx.HTTPStatusError(
                f"{resp.status_code} while expanding {url}",
                request=resp.request,
                response=resp,
            )
        return str(resp.url)


def is_not_found(exc: BaseException) -> bool:
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code == 404
