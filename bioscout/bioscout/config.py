"""Configuration management for bioscout."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class Config:
    """Global configuration."""

    youtube_api_key: str | None = None
    platform_timeout: float = 15.0
    http_timeout: float = 10.0
    max_items_per_platform: int = 25
    run_deadline: float | None = None
    expand_links: bool = True
    expand_concurrency: int = 10

    @classmethod
    def from_env(cls) -> Config:
        deadline = os.getenv("BIOSCOUT_RUN_DEADLINE")
        return cls(
            youtube_api_key=os.getenv("YOUTUBE_API_KEY"),
            platform_timeout=float(os.getenv("BIOSCOUT_TIMEOUT", "15")),
            http_timeout=float(os.getenv("BIOSCOUT_HTTP_TIMEOUT", "10")),
            max_items_per_platform=int(os.getenv("BIOSCOUT_MAX_ITEMS", "25")),
            run_deadline=float(deadline) if deadline else None,
            expand_links=_env_flag("BIOSCOUT_EXPAND_LINKS", True),
            expand_concurrency=int(os.getenv("BIOSCOUT_EXPAND_CONCURRENCY", "10")),
        )
