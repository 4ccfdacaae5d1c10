"""Discovery orchestrator: fan out adapters, then normalize, dedupe and analyze.

Every requested platform runs as its own task and settles into exactly one
PlatformResult. A timeout or exception in one adapter is recorded on that
platform's result and never cancels its siblings. Only once every task has
settled do the downstream stages run, in order, on the flattened links.
"""

from __future__ import annotations

import asyncio
import logging
import time

from bioscout.config import Config
from bioscout.dedup import deduplicate, deduplication_report
from bioscout.intelligence import analyze, priority_for
from bioscout.intelligence.aggregators import aggregator_name
from bioscout.intelligence.presence import presence_order
from bioscout.models import (
    AdapterConfig,
    CreatorProfile,
    DiscoveryOptions,
    IntelligenceReport,
    PlatformResult,
    ProcessedLink,
    ProfileSummary,
    Recommendation,
    RunMetadata,
    utcnow,
)
from bioscout.normalizer import LinkNormalizer
from bioscout.registry import AdapterRegistry

logger = logging.getLogger(__name__)


class HandleResolutionError(ValueError):
    """No usable handle could be derived for a platform."""


def clean_handle(raw: str) -> str:
    handle = raw.strip().removeprefix("@")
    return "".join(handle.split()).lower()


def resolve_handles(
    query: str,
    platforms: list[str],
    overrides: dict[str, str] | None = None,
) -> dict[str, str]:
    """Map each platform to the handle it should be queried with."""
    base = clean_handle(query or "")
    if not base:
        raise HandleResolutionError(f"Cannot derive a handle from query {query!r}")

    handles: dict[str, str] = {}
    for platform in platforms:
        if overrides and platform in overrides:
            handle = clean_handle(overrides[platform])
            if not handle:
                raise HandleResolutionError(f"Empty handle override for {platform}")
            handles[platform] = handle
        else:
            handles[platform] = base
    return handles


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _failed(platform: str, handle: str, error: str, elapsed_ms: int = 0) -> PlatformResult:
    return PlatformResult(
        platform=platform,
        handle=handle,
        success=False,
        error=error,
        elapsed_ms=elapsed_ms,
    )


class DiscoveryOrchestrator:
    """Runs one discovery per call; holds no state between runs."""

    def __init__(
        self,
        registry: AdapterRegistry | None = None,
        normalizer: LinkNormalizer | None = None,
        config: Config | None = None,
    ) -> None:
        self.config = config or Config.from_env()
        self.registry = registry if registry is not None else AdapterRegistry.default()
        self._normalizer = normalizer

    def _normalizer_for(self, options: DiscoveryOptions) -> LinkNormalizer:
        if self._normalizer is not None:
            return self._normalizer
        expand = self.config.expand_links if options.expand_links is None else options.expand_links
        return LinkNormalizer(
            expand=expand,
            timeout=self.config.http_timeout,
            concurrency=self.config.expand_concurrency,
        )

    def _adapter_config(self) -> AdapterConfig:
        return AdapterConfig(
            timeout=self.config.http_timeout,
            max_items=self.config.max_items_per_platform,
            extra={"youtube_api_key": self.config.youtube_api_key},
        )

    # ------------------------------------------------------------------
    # Fan-out
    # ------------------------------------------------------------------

    async def _run_platform(
        self,
        platform: str,
        handle: str,
        adapter_config: AdapterConfig,
        timeout: float,
    ) -> PlatformResult:
        adapter = self.registry.get(platform)
        if adapter is None:
            return _failed(platform, handle, "no adapter registered")

        started = time.monotonic()
        try:
            result = await asyncio.wait_for(adapter.extract(handle, adapter_config), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("%s timed out after %.1fs", platform, timeout)
            return _failed(platform, handle, f"timed out after {timeout:g}s", _elapsed_ms(started))
        except Exception as exc:
            logger.warning("%s extraction failed", platform, exc_info=True)
            return _failed(platform, handle, f"{type(exc).__name__}: {exc}", _elapsed_ms(started))

        if not isinstance(result, PlatformResult):
            logger.warning("%s adapter returned %s", platform, type(result).__name__)
            return _failed(
                platform, handle, f"adapter returned {type(result).__name__}", _elapsed_ms(started)
            )
        return result.model_copy(
            update={"platform": platform, "handle": handle, "elapsed_ms": _elapsed_ms(started)}
        )

    async def _gather_platforms(
        self,
        handles: dict[str, str],
        timeout: float,
        deadline: float | None,
    ) -> list[PlatformResult]:
        adapter_config = self._adapter_config()
        tasks = {
            platform: asyncio.create_task(
                self._run_platform(platform, handle, adapter_config, timeout)
            )
            for platform, handle in handles.items()
        }
        if not tasks:
            return []

        _, pending = await asyncio.wait(tasks.values(), timeout=deadline)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        results: list[PlatformResult] = []
        for platform, task in tasks.items():
            if task in pending:
                results.append(_failed(platform, handles[platform], "run deadline exceeded"))
            else:
                results.append(task.result())
        return results

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    async def discover(self, query: str, options: DiscoveryOptions | None = None) -> CreatorProfile:
        options = options or DiscoveryOptions()
        platforms = list(dict.fromkeys(options.platforms or self.registry.platforms()))
        handles = resolve_handles(query, platforms, options.handle_overrides)
        timeout = options.per_platform_timeout or self.config.platform_timeout
        deadline = options.run_deadline if options.run_deadline is not None else self.config.run_deadline

        started_at = utcnow()
        started = time.monotonic()
        logger.info("Discovering %s across %d platform(s)", query, len(platforms))

        results = await self._gather_platforms(handles, timeout, deadline)

        warnings: list[str] = []
        for result in results:
            if not result.success:
                warnings.append(f"{result.platform}: {result.error or 'failed'}")
            warnings.extend(result.warnings)

        raw_links = [link for result in results if result.success for link in result.links]
        processed = await self._normalizer_for(options).process(raw_links)
        canonical = deduplicate(processed)
        report = deduplication_report(processed, canonical)
        creator_id = clean_handle(query)
        intelligence = analyze(results, canonical, creator_id=creator_id)

        finished_at = utcnow()
        logger.info(
            "Discovery for %s finished: %d/%d platforms, %d unique links",
            creator_id,
            sum(1 for r in results if r.success),
            len(results),
            len(canonical),
        )

        return CreatorProfile(
            query=query,
            handles=handles,
            platforms=results,
            all_links=processed,
            canonical_links=canonical,
            intelligence=intelligence,
            summary=build_summary(results, processed, len(canonical), intelligence),
            recommendation=build_recommendation(intelligence),
            metadata=RunMetadata(
                started_at=started_at,
                finished_at=finished_at,
                elapsed_ms=_elapsed_ms(started),
                warnings=warnings,
                deduplication_report=report,
            ),
        )


def build_summary(
    results: list[PlatformResult],
    processed: list[ProcessedLink],
    unique_links: int,
    intelligence: IntelligenceReport,
) -> ProfileSummary:
    successful = [r for r in results if r.success]
    primary = min(successful, key=lambda r: presence_order(r.followers, r.platform), default=None)
    aggregators = intelligence.link_aggregator_analysis.current_aggregators
    return ProfileSummary(
        total_links=len(processed),
        unique_links=unique_links,
        platforms_found=sorted(r.platform for r in successful),
        total_reach=sum(r.followers for r in successful),
        primary_platform=primary.platform if primary else None,
        using_aggregator=aggregator_name(aggregators[0]) if aggregators else None,
    )


def build_recommendation(intelligence: IntelligenceReport) -> Recommendation:
    return Recommendation(
        priority=priority_for(intelligence.overall_score),
        reason=intelligence.actionable_insights.personalized_pitch,
        estimated_value=intelligence.value_estimation.total_value,
    )


async def discover(
    query: str,
    options: DiscoveryOptions | None = None,
    *,
    config: Config | None = None,
) -> CreatorProfile:
    """Run one discovery with the bundled adapters."""
    return await DiscoveryOrchestrator(config=config).discover(query, options)


def discover_sync(
    query: str,
    options: DiscoveryOptions | None = None,
    *,
    config: Config | None = None,
) -> CreatorProfile:
    return asyncio.run(discover(query, options, config=config))
