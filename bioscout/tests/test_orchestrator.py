"""Tests for the discovery orchestrator (fake adapters, no network)."""

from __future__ import annotations

import asyncio
from unittest.mock import patch

import pytest

from bioscout.adapters.base import BaseAdapter
from bioscout.config import Config
from bioscout.models import AdapterConfig, DiscoveryOptions, PlatformMetrics, PlatformResult
from bioscout.normalizer import LinkNormalizer
from bioscout.orchestrator import (
    DiscoveryOrchestrator,
    HandleResolutionError,
    clean_handle,
    resolve_handles,
)
from bioscout.registry import AdapterRegistry


class FakeAdapter(BaseAdapter):
    def __init__(
        self,
        name: str,
        *,
        urls: list[str] | None = None,
        followers: int | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.name = name
        self.urls = urls or []
        self.followers = followers
        self.error = error
        self.delay = delay
        self.seen_handles: list[str] = []

    def get_platform_name(self) -> str:
        return self.name

    async def extract(self, handle: str, config: AdapterConfig) -> PlatformResult:
        self.seen_handles.append(handle)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return PlatformResult(
            platform=self.name,
            handle=handle,
            success=True,
            links=[self._link(url, f"{self.name} link", source="bio") for url in self.urls],
            metrics=PlatformMetrics(followers=self.followers) if self.followers is not None else None,
        )


def _orchestrator(*adapters: BaseAdapter, **config: object) -> DiscoveryOrchestrator:
    registry = AdapterRegistry()
    for adapter in adapters:
        registry.register(adapter)
    return DiscoveryOrchestrator(
        registry=registry,
        normalizer=LinkNormalizer(expand=False),
        config=Config(**config),
    )


# ---------------------------------------------------------------------------
# Handle resolution
# ---------------------------------------------------------------------------


class TestResolveHandles:
    def test_cleans_query(self) -> None:
        assert clean_handle("  @The Rock ") == "therock"

    def test_applies_to_every_platform(self) -> None:
        assert resolve_handles("@Rock", ["tiktok", "youtube"]) == {"tiktok": "rock", "youtube": "rock"}

    def test_override_wins(self) -> None:
        handles = resolve_handles("rock", ["tiktok", "youtube"], {"youtube": "@TheRockOfficial"})
        assert handles == {"tiktok": "rock", "youtube": "therockofficial"}

    @pytest.mark.parametrize("query", ["", "   ", "@"])
    def test_empty_query_raises(self, query: str) -> None:
        with pytest.raises(HandleResolutionError):
            resolve_handles(query, ["tiktok"])

    def test_empty_override_raises(self) -> None:
        with pytest.raises(HandleResolutionError):
            resolve_handles("rock", ["tiktok"], {"tiktok": " @ "})

    def test_is_value_error(self) -> None:
        assert issubclass(HandleResolutionError, ValueError)


# ---------------------------------------------------------------------------
# discover
# ---------------------------------------------------------------------------


class TestDiscover:
    @pytest.mark.asyncio
    async def test_partial_failure_tolerated(self) -> None:
        orchestrator = _orchestrator(
            FakeAdapter("linktree", urls=["https://nike.com/", "https://a.com/x?utm_source=lt"]),
            FakeAdapter("tiktok", urls=["https://a.com/x"], followers=500_000),
            FakeAdapter("youtube", urls=["https://b.com/"], followers=2_000_000),
            FakeAdapter("beacons", error=RuntimeError("parse failed")),
            FakeAdapter("website", delay=5.0),
            platform_timeout=0.05,
        )
        profile = await orchestrator.discover("creator")

        assert len(profile.platforms) == 5
        succeeded = [r for r in profile.platforms if r.success]
        failed = {r.platform: r.error for r in profile.platforms if not r.success}
        assert {r.platform for r in succeeded} == {"linktree", "tiktok", "youtube"}
        assert "parse failed" in failed["beacons"]
        assert "timed out" in failed["website"]
        assert len(profile.metadata.warnings) == 2

        assert {p.platform for p in profile.intelligence.platform_presence} == {"linktree", "tiktok", "youtube"}
        assert {c.url for c in profile.canonical_links} == {
            "https://nike.com/",
            "https://a.com/x",
            "https://b.com/",
        }
        assert profile.summary.total_links == 4
        assert profile.summary.unique_links == 3
        assert profile.summary.total_reach == 2_500_000
        assert profile.summary.primary_platform == "youtube"
        assert profile.summary.using_aggregator == "Linktree"

    @pytest.mark.asyncio
    async def test_adapter_returning_wrong_type_is_recorded(self) -> None:
        class NoneAdapter(FakeAdapter):
            async def extract(self, handle: str, config: AdapterConfig) -> PlatformResult:
                return None  # type: ignore[return-value]

        orchestrator = _orchestrator(
            NoneAdapter("beacons"),
            FakeAdapter("tiktok", urls=["https://a.com/"], followers=100),
        )
        profile = await orchestrator.discover("rock")

        broken = profile.get_platform("beacons")
        assert not broken.success
        assert broken.error == "adapter returned NoneType"
        assert profile.get_platform("tiktok").success
        assert [c.url for c in profile.canonical_links] == ["https://a.com/"]

    @pytest.mark.asyncio
    async def test_all_platforms_fail(self) -> None:
        orchestrator = _orchestrator(
            FakeAdapter("tiktok", error=ConnectionError("down")),
            FakeAdapter("youtube", error=ValueError("YouTube API key not provided")),
        )
        profile = await orchestrator.discover("creator")

        assert all(not r.success for r in profile.platforms)
        assert profile.canonical_links == []
        assert profile.summary.total_reach == 0
        assert profile.summary.primary_platform is None
        assert profile.intelligence.overall_score <= 5
        assert profile.recommendation.priority == "low"

    @pytest.mark.asyncio
    async def test_zero_links_is_success(self) -> None:
        orchestrator = _orchestrator(FakeAdapter("tiktok", followers=1_000))
        profile = await orchestrator.discover("creator")
        [result] = profile.platforms
        assert result.success
        assert result.error is None
        assert profile.metadata.warnings == []
        assert profile.summary.platforms_found == ["tiktok"]

    @pytest.mark.asyncio
    async def test_empty_query_raises(self) -> None:
        orchestrator = _orchestrator(FakeAdapter("tiktok"))
        with pytest.raises(HandleResolutionError):
            await orchestrator.discover("  ")

    @pytest.mark.asyncio
    async def test_handle_overrides_reach_adapters(self) -> None:
        tiktok = FakeAdapter("tiktok")
        youtube = FakeAdapter("youtube")
        orchestrator = _orchestrator(tiktok, youtube)
        profile = await orchestrator.discover(
            "@Rock", DiscoveryOptions(handle_overrides={"youtube": "TheRock"})
        )
        assert tiktok.seen_handles == ["rock"]
        assert youtube.seen_handles == ["therock"]
        assert profile.handles == {"tiktok": "rock", "youtube": "therock"}
        assert profile.get_platform("youtube").handle == "therock"

    @pytest.mark.asyncio
    async def test_platform_subset_and_unknown_platform(self) -> None:
        tiktok = FakeAdapter("tiktok")
        youtube = FakeAdapter("youtube")
        orchestrator = _orchestrator(tiktok, youtube)
        profile = await orchestrator.discover("rock", DiscoveryOptions(platforms=["tiktok", "myspace"]))

        assert [r.platform for r in profile.platforms] == ["tiktok", "myspace"]
        assert youtube.seen_handles == []
        assert profile.get_platform("myspace").error == "no adapter registered"

    @pytest.mark.asyncio
    async def test_primary_platform_tie_is_alphabetical(self) -> None:
        orchestrator = _orchestrator(
            FakeAdapter("youtube", followers=1_000),
            FakeAdapter("tiktok", followers=1_000),
        )
        profile = await orchestrator.discover("rock")
        assert profile.summary.primary_platform == "tiktok"

    @pytest.mark.asyncio
    async def test_run_deadline_cancels_stragglers(self) -> None:
        orchestrator = _orchestrator(
            FakeAdapter("tiktok", urls=["https://a.com/"]),
            FakeAdapter("youtube", delay=5.0),
            platform_timeout=10.0,
        )
        profile = await orchestrator.discover("rock", DiscoveryOptions(run_deadline=0.05))
        assert profile.get_platform("tiktok").success
        slow = profile.get_platform("youtube")
        assert not slow.success
        assert slow.error == "run deadline exceeded"

    @pytest.mark.asyncio
    async def test_adapter_warnings_collected(self) -> None:
        class WarningAdapter(FakeAdapter):
            async def extract(self, handle: str, config: AdapterConfig) -> PlatformResult:
                result = await super().extract(handle, config)
                return result.model_copy(update={"warnings": ["partial data"]})

        profile = await _orchestrator(WarningAdapter("youtube")).discover("rock")
        assert profile.metadata.warnings == ["partial data"]

    @pytest.mark.asyncio
    async def test_downstream_defect_propagates(self) -> None:
        orchestrator = _orchestrator(FakeAdapter("tiktok", urls=["https://a.com/"]))
        with patch("bioscout.orchestrator.deduplicate", side_effect=RuntimeError("bug")):
            with pytest.raises(RuntimeError, match="bug"):
                await orchestrator.discover("rock")

    @pytest.mark.asyncio
    async def test_recommendation_mirrors_report(self) -> None:
        orchestrator = _orchestrator(FakeAdapter("youtube", urls=["https://a.com/"], followers=3_000_000))
        profile = await orchestrator.discover("rock")
        assert profile.recommendation.estimated_value == profile.intelligence.value_estimation.total_value
        assert profile.recommendation.reason == profile.intelligence.actionable_insights.personalized_pitch
        assert profile.metadata.deduplication_report.unique_count == 1
        assert profile.metadata.finished_at >= profile.metadata.started_at

    @pytest.mark.asyncio
    async def test_adapter_receives_config(self) -> None:
        captured: list[AdapterConfig] = []

        class CapturingAdapter(FakeAdapter):
            async def extract(self, handle: str, config: AdapterConfig) -> PlatformResult:
                captured.append(config)
                return await super().extract(handle, config)

        orchestrator = _orchestrator(
            CapturingAdapter("youtube"),
            youtube_api_key="key",
            http_timeout=3.0,
            max_items_per_platform=7,
        )
        await orchestrator.discover("rock")
        [config] = captured
        assert config.timeout == 3.0
        assert config.max_items == 7
        assert config.extra["youtube_api_key"] == "key"
