"""Platform presence stage."""

from __future__ import annotations

from bioscout.intelligence import tables
from bioscout.models import PlatformPresence, PlatformResult


def content_frequency(followers: int, engagement: int) -> str:
    ratio = engagement / max(followers, 1)
    for threshold, tier in tables.CONTENT_FREQUENCY_RATIOS:
        if ratio > threshold:
            return tier
    return "low"


def audience_class(followers: int) -> str:
    for threshold, label in tables.AUDIENCE_CLASSES:
        if followers > threshold:
            return label
    return tables.DEFAULT_AUDIENCE


def link_sharing(link_count: int) -> str:
    for threshold, tier in tables.LINK_SHARING_TIERS:
        if link_count >= threshold:
            return tier
    return "none"


def presence_order(followers: int, platform: str) -> tuple[int, str]:
    """Sort key: most followers first, ties alphabetically."""
    return (-followers, platform)


def analyze_presence(results: list[PlatformResult]) -> list[PlatformPresence]:
    presence = [
        PlatformPresence(
            platform=result.platform,
            verified=result.followers > tables.VERIFIED_FOLLOWERS,
            followers=result.followers,
            engagement=result.engagement,
            content_frequency=content_frequency(result.followers, result.engagement),
            primary_audience=audience_class(result.followers),
            recent_activity=bool(result.links),
            link_sharing=link_sharing(len(result.links)),
        )
        for result in results
        if result.success
    ]
    return sorted(presence, key=lambda p: presence_order(p.followers, p.platform))


def platform_score(presence: list[PlatformPresence]) -> int:
    """0-100: peak followers, average engagement, platform spread, activity."""
    if not presence:
        return 0

    max_followers = max(p.followers for p in presence)
    follower_score = min(max_followers / 10_000_000 * 100, 100)

    avg_engagement = sum(p.engagement for p in presence) / len(presence)
    engagement_score = min(avg_engagement / 1_000_000 * 100, 100)

    diversity_score = min(len(presence) / 6 * 100, 100)

    active = sum(1 for p in presence if p.recent_activity)
    activity_score = active / len(presence) * 100

    return round(
        follower_score * 0.4
        + engagement_score * 0.3
        + diversity_score * 0.2
        + activity_score * 0.1
    )
