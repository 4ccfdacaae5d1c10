"""Tests for profile output utilities."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from bioscout.dedup import deduplicate
from bioscout.intelligence import analyze
from bioscout.models import (
    CreatorProfile,
    PlatformMetrics,
    PlatformResult,
    ProcessedLink,
    ProfileSummary,
    Recommendation,
    RunMetadata,
)
from bioscout.output import render_summary, write_profile

_NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _profile() -> CreatorProfile:
    results = [
        PlatformResult(
            platform="youtube",
            handle="rock",
            success=True,
            metrics=PlatformMetrics(followers=1_000_000),
            elapsed_ms=40,
        ),
        PlatformResult(platform="linktree", handle="rock", success=False, error="profile not found"),
    ]
    links = [
        ProcessedLink(
            original_url="https://teremana.com/",
            expanded_url="https://teremana.com/",
            platform="youtube",
            source="channel_description",
            observed_at=_NOW,
        )
    ]
    canonical = deduplicate(links)
    return CreatorProfile(
        query="rock",
        handles={"youtube": "rock", "linktree": "rock"},
        platforms=results,
        all_links=links,
        canonical_links=canonical,
        intelligence=analyze(results, canonical, creator_id="rock", now=_NOW),
        summary=ProfileSummary(
            total_links=1,
            unique_links=1,
            platforms_found=["youtube"],
            total_reach=1_000_000,
            primary_platform="youtube",
        ),
        recommendation=Recommendation(priority="medium", reason="Hi rock!", estimated_value=1234),
        metadata=RunMetadata(started_at=_NOW, finished_at=_NOW, elapsed_ms=50),
    )


def test_write_profile(tmp_path: Path) -> None:
    path = write_profile(_profile(), str(tmp_path / "nested" / "rock.json"))
    assert path.exists()
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["summary"]["primary_platform"] == "youtube"
    assert data["canonical_links"][0]["url"] == "https://teremana.com/"


def test_render_summary() -> None:
    lines = render_summary(_profile())
    text = "\n".join(lines)
    assert "✓ youtube — 0 links (40 ms)" in text
    assert "✗ linktree — profile not found" in text
    assert "Reach: 1,000,000 followers" in text
    assert "est. $1,234/month" in text
    assert "https://teremana.com/" in text
    assert "Aggregator:" not in text
