"""Narrative stages: competitive intelligence, content strategy, insights.

Everything here is templated from the numeric stages so the same inputs
always produce the same text.
"""

from __future__ import annotations

from bioscout.intelligence import tables
from bioscout.intelligence.aggregators import aggregator_name
from bioscout.models import (
    ActionableInsights,
    CanonicalLink,
    CompetitiveIntelligence,
    ContentStrategy,
    LinkAggregatorAnalysis,
    PlatformPresence,
    PlatformResult,
    ValueEstimation,
)

_GENERIC_SELLING_POINTS = [
    "Advanced link analytics",
    "Multi-platform integration",
    "Custom branding options",
    "Performance optimization",
    "Creator-focused tools",
]

_CONTENT_TYPES = {
    "youtube": "Long-form video content",
    "tiktok": "Short-form viral content",
    "instagram": "Visual storytelling",
    "twitter": "Thought leadership and updates",
}


def _money(value: int) -> str:
    return f"${value:,}"


# ---------------------------------------------------------------------------
# Competitive intelligence
# ---------------------------------------------------------------------------


def market_position(total_reach: int) -> str:
    for threshold, position in tables.MARKET_POSITIONS:
        if total_reach > threshold:
            return position
    return "niche"


def competitor_features(aggregators: list[str]) -> list[str]:
    features: list[str] = []
    if "linktree" in aggregators:
        features += ["Basic link aggregation", "Simple analytics", "Theme customization"]
    if "beacons" in aggregators:
        features += ["Email collection", "Store integration", "Media kit generation"]
    return list(dict.fromkeys(features))


def switching_barriers(analysis: LinkAggregatorAnalysis) -> list[str]:
    barriers: list[str] = []
    if analysis.link_count > 20:
        barriers.append("Large number of existing links to migrate")
    if analysis.migration_difficulty == "hard":
        barriers.append("Complex current setup requiring careful migration")
    if len(analysis.current_aggregators) > 1:
        barriers.append("Multiple platforms currently in use")
    return barriers


def analyze_competitive(
    analysis: LinkAggregatorAnalysis, total_reach: int
) -> CompetitiveIntelligence:
    aggregators = analysis.current_aggregators
    advantages: list[str] = []
    if "linktree" in aggregators:
        advantages += ["Alternative to subscription models", "Enhanced customization options"]
    if total_reach > 1_000_000:
        advantages += ["Advanced analytics for large creators", "Scalable link management"]
    advantages += ["Creator-focused design", "Performance optimization tools"]

    return CompetitiveIntelligence(
        direct_competitors=[aggregator_name(a) for a in aggregators],
        competitor_features=competitor_features(aggregators),
        unique_selling_props=list(_GENERIC_SELLING_POINTS),
        market_position=market_position(total_reach),
        switching_barriers=switching_barriers(analysis),
        competitive_advantages=advantages,
    )


# ---------------------------------------------------------------------------
# Content strategy
# ---------------------------------------------------------------------------


def extract_brands(links: list[CanonicalLink]) -> list[str]:
    return list(dict.fromkeys(link.brand for link in links if link.brand))


def monetization_methods(links: list[CanonicalLink]) -> list[str]:
    methods: list[str] = []
    if any(link.is_affiliate for link in links):
        methods.append("Affiliate marketing")
    if len(extract_brands(links)) >= 3:
        methods.append("Brand partnerships")
    if sum(1 for link in links if link.type == "brand_direct") >= 2:
        methods.append("Product sales")
    return methods


def content_pillars(brands: list[str], content_types: list[str]) -> list[str]:
    lowered = [b.lower() for b in brands]
    pillars: list[str] = []
    if any("fitness" in b or "project rock" in b for b in lowered):
        pillars.append("Fitness and wellness")
    if any("energy" in b or "supplement" in b for b in lowered):
        pillars.append("Health and nutrition")
    if _CONTENT_TYPES["youtube"] in content_types:
        pillars.append("Educational content")
    if _CONTENT_TYPES["tiktok"] in content_types:
        pillars.append("Entertainment and trends")
    return pillars or ["Lifestyle and personal brand"]


def audience_demographics(successful: set[str]) -> str:
    if {"tiktok", "instagram"} <= successful:
        return "Young adults 18-34, highly engaged with social media trends"
    if {"youtube", "twitter"} <= successful:
        return "Educated professionals 25-45, interested in long-form content"
    if "instagram" in successful:
        return "Visual-first audience 20-40, lifestyle-focused"
    return "Diverse cross-platform audience"


def content_consistency(results: list[PlatformResult]) -> str:
    if not results:
        return "low"
    ratio = sum(1 for r in results if r.success) / len(results)
    if ratio >= 0.8:
        return "high"
    if ratio >= 0.5:
        return "medium"
    return "low"


def analyze_content_strategy(
    results: list[PlatformResult], links: list[CanonicalLink]
) -> ContentStrategy:
    successful = {r.platform for r in results if r.success}
    content_types = [label for platform, label in _CONTENT_TYPES.items() if platform in successful]
    brands = extract_brands(links)
    return ContentStrategy(
        primary_content=content_types,
        brand_partnerships=brands,
        monetization_methods=monetization_methods(links),
        content_pillars=content_pillars(brands, content_types),
        audience_demographics=audience_demographics(successful),
        content_consistency=content_consistency(results),
    )


# ---------------------------------------------------------------------------
# Actionable insights
# ---------------------------------------------------------------------------


def personalized_pitch(
    creator_id: str,
    presence: list[PlatformPresence],
    analysis: LinkAggregatorAnalysis,
    value: ValueEstimation,
) -> str:
    primary = presence[0].platform if presence else "social media"
    followers = presence[0].followers if presence else 0
    total = _money(value.total_value)

    pitch = f"Hi {creator_id}! You have {followers:,} followers on {primary}"
    if analysis.current_aggregators:
        name = aggregator_name(analysis.current_aggregators[0])
        pitch += (
            f" and currently manage {analysis.link_count} links through {name}."
            f" Smarter link management could be worth an estimated {total}/month"
            f" with deeper analytics than {name} offers."
        )
    else:
        pitch += (
            f" with {analysis.link_count} links across platforms."
            f" Organizing and tracking those links could unlock an estimated"
            f" {total}/month in additional revenue."
        )
    return pitch


def expected_outcomes(value: ValueEstimation, analysis: LinkAggregatorAnalysis) -> list[str]:
    outcomes = [
        f"Increase monthly revenue by {_money(value.total_value)}",
        "Improve link click-through rates by 15-25%",
        "Gain detailed analytics on audience behavior",
    ]
    if analysis.current_aggregators:
        outcomes += [
            "Eliminate monthly subscription fees from current aggregator",
            "Streamline link management across all platforms",
        ]
    outcomes += [
        "Access to A/B testing of link placement",
        "Custom branded landing page experience",
    ]
    return outcomes


def success_metrics(value: ValueEstimation) -> list[str]:
    return [
        f"Target: {value.estimated_clickthrough:,} monthly link clicks",
        f"Goal: {value.conversion_potential:,} monthly conversions",
        f"Revenue target: {_money(value.total_value)}/month",
        "Link organization efficiency: 80%+ improvement",
        "Time savings: 5+ hours/month on link management",
    ]


def generate_insights(
    creator_id: str,
    presence: list[PlatformPresence],
    analysis: LinkAggregatorAnalysis,
    value: ValueEstimation,
) -> ActionableInsights:
    immediate: list[str] = []
    short_term: list[str] = []
    long_term: list[str] = []

    if "linktree" in analysis.current_aggregators:
        immediate.append("Review advanced link analytics options")
        immediate.append("Compare transaction fees against Linktree's premium tiers")
    if analysis.link_count >= 10:
        immediate.append("Audit and reorganize the existing link set")
        short_term.append("Build a branded landing page showcasing current partnerships")
    if value.total_value > 10_000:
        immediate.append("Review revenue optimization opportunities")
        short_term.append("Offer assisted migration from the current aggregator")

    primary = presence[0].platform if presence else None
    if primary == "tiktok":
        short_term.append("Optimize bio links for platform-specific restrictions")
    elif primary == "youtube":
        short_term.append("Improve YouTube description link management")

    if len(presence) >= 4:
        long_term.append("Develop a centralized multi-platform link strategy")
        long_term.append("Build a cross-platform analytics dashboard")

    return ActionableInsights(
        immediate_actions=immediate,
        short_term_opportunities=short_term,
        long_term_strategy=long_term,
        personalized_pitch=personalized_pitch(creator_id, presence, analysis, value),
        expected_outcomes=expected_outcomes(value, analysis),
        success_metrics=success_metrics(value),
    )
