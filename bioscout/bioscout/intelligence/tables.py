"""Heuristic tables and thresholds used by the intelligence stages."""

from __future__ import annotations

from typing import Final

FOLLOWER_TIERS: Final[dict[str, int]] = {
    "macro": 1_000_000,
    "micro": 100_000,
    "nano": 10_000,
    "emerging": 1_000,
}
CELEBRITY_PLATFORM_FOLLOWERS: Final[int] = 50_000_000
VERIFIED_FOLLOWERS: Final[int] = 1_000_000

# engagement / followers ratio
CONTENT_FREQUENCY_RATIOS: Final[tuple[tuple[float, str], ...]] = (
    (0.1, "high"),
    (0.05, "medium"),
)

AUDIENCE_CLASSES: Final[tuple[tuple[int, str], ...]] = (
    (10_000_000, "Global mass market"),
    (1_000_000, "Mainstream audience"),
    (100_000, "Engaged niche community"),
)
DEFAULT_AUDIENCE: Final[str] = "Small engaged following"

LINK_SHARING_TIERS: Final[tuple[tuple[int, str], ...]] = (
    (10, "frequent"),
    (5, "occasional"),
    (1, "rare"),
)

LINK_AGGREGATORS: Final[dict[str, str]] = {
    "linktr.ee": "linktree",
    "beacons.ai": "beacons",
    "bio.fm": "bio",
    "stan.store": "stan_store",
    "koji.to": "koji",
    "allmylinks.com": "allmylinks",
    "carrd.co": "carrd",
    "milkshake.app": "milkshake",
    "later.com": "later",
    "taplink.at": "taplink",
    "linkpop.com": "linkpop",
    "shorby.com": "shorby",
    "lnk.bio": "lnk_bio",
    "campsite.bio": "campsite",
    "flowpage.com": "flowpage",
}

AGGREGATOR_NAMES: Final[dict[str, str]] = {
    "linktree": "Linktree",
    "beacons": "Beacons.ai",
    "bio": "Bio.fm",
    "stan_store": "Stan Store",
    "koji": "Koji",
    "allmylinks": "AllMyLinks",
    "carrd": "Carrd",
    "milkshake": "Milkshake",
    "later": "Later Linkin.bio",
    "taplink": "Taplink",
    "linkpop": "LinkPop",
    "shorby": "Shorby",
    "lnk_bio": "Lnk.Bio",
    "campsite": "Campsite",
    "flowpage": "FlowPage",
}

# Platforms whose own adapter is an aggregator page scraper.
AGGREGATOR_PLATFORMS: Final[frozenset[str]] = frozenset({"linktree", "beacons"})

RECENT_DAYS: Final[int] = 7

CONVERSION_BASE: Final[float] = 0.02
CONVERSION_AFFILIATE_WEIGHT: Final[float] = 0.01
CONVERSION_ENGAGEMENT_BONUS: Final[float] = 0.005
CONVERSION_CAP: Final[float] = 0.05
HIGH_ENGAGEMENT: Final[int] = 100_000

REACH_RATE: Final[float] = 0.10
CLICKTHROUGH_RATE: Final[float] = 0.02
COMMISSION_RATE: Final[float] = 0.05

DEFAULT_ORDER_VALUE: Final[int] = 50
# Checked in order; first keyword hit wins.
ORDER_VALUE_KEYWORDS: Final[tuple[tuple[tuple[str, ...], int], ...]] = (
    (("tech", "electronics"), 150),
    (("supplement", "nutrition"), 45),
    (("fashion", "apparel"), 80),
)

PLATFORM_CPM: Final[dict[str, float]] = {
    "youtube": 8,
    "instagram": 6,
    "tiktok": 4,
    "twitter": 3,
}
DEFAULT_CPM: Final[float] = 5
CPM_AUDIENCE_MULTIPLIERS: Final[tuple[tuple[int, float], ...]] = (
    (10_000_000, 1.5),
    (1_000_000, 1.2),
)

MARKET_POSITIONS: Final[tuple[tuple[int, str], ...]] = (
    (50_000_000, "leader"),
    (10_000_000, "challenger"),
    (1_000_000, "follower"),
)

PRIORITY_THRESHOLDS: Final[tuple[tuple[int, str], ...]] = (
    (70, "high"),
    (40, "medium"),
)

# Overall score weights
PLATFORM_WEIGHT: Final[float] = 0.4
LINK_WEIGHT: Final[float] = 0.3
VALUE_WEIGHT: Final[float] = 0.3
