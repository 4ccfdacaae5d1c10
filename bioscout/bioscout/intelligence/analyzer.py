"""Creator intelligence analyzer: builds the IntelligenceReport."""

from __future__ import annotations

import logging
from datetime import datetime

from bioscout.intelligence import tables
from bioscout.intelligence.aggregators import analyze_aggregators, link_score
from bioscout.intelligence.presence import analyze_presence, platform_score
from bioscout.intelligence.strategy import (
    analyze_competitive,
    analyze_content_strategy,
    generate_insights,
)
from bioscout.intelligence.valuation import estimate_value, value_score
from bioscout.models import (
    CanonicalLink,
    IntelligenceReport,
    LinkAggregatorAnalysis,
    PlatformPresence,
    PlatformResult,
    ReportMetadata,
    ValueEstimation,
    utcnow,
)

logger = logging.getLogger(__name__)


def classify_creator(presence: list[PlatformPresence]) -> str:
    total = sum(p.followers for p in presence)
    primary = presence[0].platform if presence else ""

    if total > tables.FOLLOWER_TIERS["macro"]:
        if any(p.followers > tables.CELEBRITY_PLATFORM_FOLLOWERS for p in presence):
            return "celebrity"
        return "macro_influencer"
    if total > tables.FOLLOWER_TIERS["micro"]:
        if primary in ("youtube", "tiktok"):
            return "content_creator"
        return "micro_influencer"
    return "content_creator"


def overall_score(
    presence: list[PlatformPresence],
    analysis: LinkAggregatorAnalysis,
    value: ValueEstimation,
) -> int:
    return round(
        platform_score(presence) * tables.PLATFORM_WEIGHT
        + link_score(analysis) * tables.LINK_WEIGHT
        + value_score(value) * tables.VALUE_WEIGHT
    )


def priority_for(score: int) -> str:
    for threshold, priority in tables.PRIORITY_THRESHOLDS:
        if score >= threshold:
            return priority
    return "low"


def _success_rate(results: list[PlatformResult]) -> float:
    if not results:
        return 0.0
    return sum(1 for r in results if r.success) / len(results)


def data_quality(results: list[PlatformResult], unique_links: int) -> str:
    rate = _success_rate(results)
    if rate >= 0.8 and unique_links >= 5:
        return "high"
    if rate >= 0.6 and unique_links >= 3:
        return "medium"
    return "low"


def confidence_level(
    results: list[PlatformResult], presence: list[PlatformPresence], unique_links: int
) -> int:
    confidence = 50 + _success_rate(results) * 30
    if any(p.followers > 0 for p in presence):
        confidence += 15
    if unique_links >= 5:
        confidence += 10
    if unique_links >= 10:
        confidence += 15
    return round(min(confidence, 95))


def recommendation_strength(score: int, analysis: LinkAggregatorAnalysis) -> str:
    if score >= 80 or "linktree" in analysis.current_aggregators:
        return "strong"
    if score >= 60 or analysis.link_count >= 8:
        return "moderate"
    return "weak"


def analyze(
    platform_results: list[PlatformResult],
    canonical_links: list[CanonicalLink],
    *,
    creator_id: str = "",
    now: datetime | None = None,
) -> IntelligenceReport:
    """Derive the full report from a completed run.

    Missing followers, links or platforms push scores toward zero; only a
    malformed input shape raises.
    """
    now = now or utcnow()

    presence = analyze_presence(platform_results)
    aggregators = analyze_aggregators(platform_results, canonical_links, now)
    value = estimate_value(presence, canonical_links)
    total_reach = sum(p.followers for p in presence)

    score = overall_score(presence, aggregators, value)
    logger.info("Intelligence analysis for %s complete, score %d", creator_id or "?", score)

    return IntelligenceReport(
        creator_id=creator_id,
        creator_type=classify_creator(presence),
        overall_score=score,
        platform_presence=presence,
        link_aggregator_analysis=aggregators,
        value_estimation=value,
        competitive_intelligence=analyze_competitive(aggregators, total_reach),
        content_strategy=analyze_content_strategy(platform_results, canonical_links),
        actionable_insights=generate_insights(creator_id, presence, aggregators, value),
        metadata=ReportMetadata(
            analyzed_at=now,
            data_quality=data_quality(platform_results, len(canonical_links)),
            confidence_level=confidence_level(platform_results, presence, len(canonical_links)),
            recommendation_strength=recommendation_strength(score, aggregators),
        ),
    )
