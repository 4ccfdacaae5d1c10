"""Value estimation stage.

Figures are monthly heuristics meant for ranking creators against each
other, not revenue forecasts:

* reach       = 10% of summed followers
* clicks      = 2% of reach
* conversions = clicks x conversion rate (2% base, capped at 5%)
* affiliate   = conversions x average order value x 5% commission
* brand value = reach / 1000 x CPM of the primary platform
"""

from __future__ import annotations

from bioscout.intelligence import tables
from bioscout.models import CanonicalLink, PlatformPresence, ValueEstimation


def conversion_rate(links: list[CanonicalLink], presence: list[PlatformPresence]) -> float:
    rate = tables.CONVERSION_BASE

    affiliate_ratio = sum(1 for link in links if link.is_affiliate) / max(len(links), 1)
    rate += affiliate_ratio * tables.CONVERSION_AFFILIATE_WEIGHT

    avg_engagement = sum(p.engagement for p in presence) / max(len(presence), 1)
    if avg_engagement > tables.HIGH_ENGAGEMENT:
        rate += tables.CONVERSION_ENGAGEMENT_BONUS

    return min(rate, tables.CONVERSION_CAP)


def average_order_value(links: list[CanonicalLink]) -> int:
    brands = [link.brand.lower() for link in links if link.brand]
    for keywords, value in tables.ORDER_VALUE_KEYWORDS:
        if any(keyword in brand for brand in brands for keyword in keywords):
            return value
    return tables.DEFAULT_ORDER_VALUE


def cpm_rate(presence: list[PlatformPresence]) -> float:
    if not presence:
        return tables.DEFAULT_CPM
    primary = presence[0]
    base = tables.PLATFORM_CPM.get(primary.platform, tables.DEFAULT_CPM)
    for threshold, multiplier in tables.CPM_AUDIENCE_MULTIPLIERS:
        if primary.followers > threshold:
            return base * multiplier
    return base


def value_factors(presence: list[PlatformPresence], links: list[CanonicalLink]) -> list[str]:
    factors: list[str] = []
    total_followers = sum(p.followers for p in presence)
    if total_followers > 5_000_000:
        factors.append("Large established audience")
    if total_followers > 1_000_000:
        factors.append("Significant reach and influence")

    affiliate_count = sum(1 for link in links if link.is_affiliate)
    if affiliate_count >= 5:
        factors.append("Active affiliate marketing")
    if affiliate_count >= 10:
        factors.append("Sophisticated monetization strategy")

    if len(presence) >= 4:
        factors.append("Multi-platform presence")
    if len(presence) >= 6:
        factors.append("Comprehensive social media strategy")
    return factors


def risk_factors(presence: list[PlatformPresence], links: list[CanonicalLink]) -> list[str]:
    factors: list[str] = []
    total_followers = sum(p.followers for p in presence)
    if total_followers and presence[0].followers / total_followers > 0.8:
        factors.append("High dependency on single platform")

    low_confidence = sum(1 for link in links if link.confidence < 70)
    if links and low_confidence > len(links) * 0.3:
        factors.append("Some links may be outdated or temporary")

    infrequent = sum(1 for p in presence if p.content_frequency == "low")
    if presence and infrequent > len(presence) * 0.5:
        factors.append("Inconsistent content posting frequency")
    return factors


def estimate_value(
    presence: list[PlatformPresence], links: list[CanonicalLink]
) -> ValueEstimation:
    total_followers = sum(p.followers for p in presence)
    monthly_reach = round(total_followers * tables.REACH_RATE)
    clickthrough = round(monthly_reach * tables.CLICKTHROUGH_RATE)
    conversions = round(clickthrough * conversion_rate(links, presence))
    affiliate_revenue = round(
        conversions * average_order_value(links) * tables.COMMISSION_RATE
    )
    brand_value = round(monthly_reach / 1000 * cpm_rate(presence))

    return ValueEstimation(
        monthly_reach=monthly_reach,
        estimated_clickthrough=clickthrough,
        conversion_potential=conversions,
        affiliate_revenue=affiliate_revenue,
        brand_value=brand_value,
        total_value=affiliate_revenue + brand_value,
        value_factors=value_factors(presence, links),
        risk_factors=risk_factors(presence, links),
    )


def value_score(value: ValueEstimation) -> int:
    """0-100: total value plus affiliate and brand boosts."""
    base = min(value.total_value / 50_000 * 100, 100)
    affiliate_boost = min(value.affiliate_revenue / 10_000 * 20, 20)
    brand_boost = min(value.brand_value / 5_000 * 15, 15)
    return round(min(base + affiliate_boost + brand_boost, 100))
