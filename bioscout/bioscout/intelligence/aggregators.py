"""Link-aggregator competitive analysis stage."""

from __future__ import annotations

from datetime import datetime, timedelta
from urllib.parse import urlsplit

from bioscout.intelligence import tables
from bioscout.models import CanonicalLink, LinkAggregatorAnalysis, PlatformResult


def aggregator_for(url: str) -> str | None:
    try:
        host = (urlsplit(url).hostname or "").lower()
    except ValueError:
        return None
    return tables.LINK_AGGREGATORS.get(host.removeprefix("www."))


def aggregator_name(aggregator: str) -> str:
    return tables.AGGREGATOR_NAMES.get(aggregator, aggregator)


def organization_level(link_count: int, aggregators: list[str]) -> str:
    if aggregators and link_count >= 10:
        return "high"
    if aggregators or link_count >= 5:
        return "medium"
    return "low"


def update_frequency(links: list[CanonicalLink], now: datetime) -> str:
    if not links:
        return "rarely"
    cutoff = now - timedelta(days=tables.RECENT_DAYS)
    recent = sum(1 for link in links if link.last_seen > cutoff)
    if recent > len(links) * 0.5:
        return "weekly"
    if recent > len(links) * 0.3:
        return "monthly"
    return "rarely"


def migration_difficulty(link_count: int, aggregators: list[str]) -> str:
    if link_count <= 5 and len(aggregators) <= 1:
        return "easy"
    if link_count <= 15 and len(aggregators) <= 2:
        return "medium"
    return "hard"


def competitor_advantages(aggregators: list[str]) -> list[str]:
    advantages: list[str] = []
    if "linktree" in aggregators:
        advantages += [
            "Established brand recognition",
            "Large user base and network effects",
            "Familiar user interface",
        ]
    if "beacons" in aggregators:
        advantages += [
            "Creator-focused features",
            "Email collection capabilities",
            "Store integration",
        ]
    return advantages


def analyze_aggregators(
    results: list[PlatformResult],
    links: list[CanonicalLink],
    now: datetime,
) -> LinkAggregatorAnalysis:
    found: set[str] = set()
    aggregator_urls: list[str] = []
    for link in links:
        if aggregator := aggregator_for(link.url):
            found.add(aggregator)
            aggregator_urls.append(link.url)

    for result in results:
        if result.success and result.platform in tables.AGGREGATOR_PLATFORMS and result.links:
            found.add(result.platform)

    aggregators = sorted(found)
    link_count = len(links)
    return LinkAggregatorAnalysis(
        current_aggregators=aggregators,
        aggregator_urls=sorted(aggregator_urls),
        link_count=link_count,
        organization_level=organization_level(link_count, aggregators),
        update_frequency=update_frequency(links, now),
        competitor_advantages=competitor_advantages(aggregators),
        migration_difficulty=migration_difficulty(link_count, aggregators),
    )


def link_score(analysis: LinkAggregatorAnalysis) -> int:
    """0-100: link volume, organization tier, existing aggregator use."""
    score = min(analysis.link_count * 2, 40)
    score += {"high": 30, "medium": 20, "low": 10}[analysis.organization_level]
    if analysis.current_aggregators:
        score += 30
    return min(score, 100)
