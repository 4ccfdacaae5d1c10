"""Core data models for bioscout."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Adapter side
# ---------------------------------------------------------------------------


class AdapterConfig(BaseModel, frozen=True):
    """Configuration passed to each extraction adapter."""

    timeout: float = 10.0
    max_items: int = 25
    extra: dict[str, Any] = Field(default_factory=dict)


class RawLink(BaseModel, frozen=True):
    """A link exactly as an adapter found it."""

    title: str = ""
    original_url: str
    platform: str
    source: str
    # Set by adapters that know more than the source table; None defers to it.
    confidence: int | None = None
    observed_at: datetime = Field(default_factory=utcnow)


class ProcessedLink(RawLink, frozen=True):
    """A RawLink after expansion and classification."""

    expanded_url: str
    type: str = "unknown"
    brand: str | None = None
    is_affiliate: bool = False
    affiliate_id: str | None = None
    affiliate_network: str | None = None


class PlatformMetrics(BaseModel, frozen=True):
    followers: int | None = None
    engagement: int | None = None


class PlatformResult(BaseModel, frozen=True):
    """Outcome of one platform extraction; one per platform per run."""

    platform: str
    handle: str = ""
    success: bool
    links: list[RawLink] = Field(default_factory=list)
    metrics: PlatformMetrics | None = None
    profile: dict[str, Any] | None = None
    error: str | None = None
    elapsed_ms: int = 0
    warnings: list[str] = Field(default_factory=list)

    @property
    def followers(self) -> int:
        if self.metrics is None:
            return 0
        return self.metrics.followers or 0

    @property
    def engagement(self) -> int:
        if self.metrics is None:
            return 0
        return self.metrics.engagement or 0


# ---------------------------------------------------------------------------
# Deduplication
# ---------------------------------------------------------------------------


class CanonicalLink(BaseModel, frozen=True):
    """All observations of one underlying link, merged."""

    url: str
    original_urls: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    platforms: list[str] = Field(default_factory=list)
    occurrences: int = 1
    confidence: int = 0
    first_seen: datetime
    last_seen: datetime
    title: str = ""
    type: str = "unknown"
    brand: str | None = None
    is_affiliate: bool = False
    affiliate_id: str | None = None


class DeduplicationReport(BaseModel, frozen=True):
    original_count: int = 0
    unique_count: int = 0
    duplicates_removed: int = 0
    reduction_percentage: int = 0
    source_breakdown: dict[str, int] = Field(default_factory=dict)
    duplicates_found: int = 0
    average_confidence: int = 0


# ---------------------------------------------------------------------------
# Intelligence report
# ---------------------------------------------------------------------------

Tier = Literal["high", "medium", "low"]


class PlatformPresence(BaseModel, frozen=True):
    platform: str
    verified: bool = False
    followers: int = 0
    engagement: int = 0
    content_frequency: Tier = "low"
    primary_audience: str = ""
    recent_activity: bool = False
    link_sharing: Literal["frequent", "occasional", "rare", "none"] = "none"


class LinkAggregatorAnalysis(BaseModel, frozen=True):
    current_aggregators: list[str] = Field(default_factory=list)
    aggregator_urls: list[str] = Field(default_factory=list)
    link_count: int = 0
    organization_level: Tier = "low"
    update_frequency: Literal["weekly", "monthly", "rarely"] = "rarely"
    competitor_advantages: list[str] = Field(default_factory=list)
    migration_difficulty: Literal["easy", "medium", "hard"] = "easy"


class ValueEstimation(BaseModel, frozen=True):
    monthly_reach: int = 0
    estimated_clickthrough: int = 0
    conversion_potential: int = 0
    affiliate_revenue: int = 0
    brand_value: int = 0
    total_value: int = 0
    value_factors: list[str] = Field(default_factory=list)
    risk_factors: list[str] = Field(default_factory=list)


class CompetitiveIntelligence(BaseModel, frozen=True):
    direct_competitors: list[str] = Field(default_factory=list)
    competitor_features: list[str] = Field(default_factory=list)
    unique_selling_props: list[str] = Field(default_factory=list)
    market_position: Literal["leader", "challenger", "follower", "niche"] = "niche"
    switching_barriers: list[str] = Field(default_factory=list)
    competitive_advantages: list[str] = Field(default_factory=list)


class ContentStrategy(BaseModel, frozen=True):
    primary_content: list[str] = Field(default_factory=list)
    brand_partnerships: list[str] = Field(default_factory=list)
    monetization_methods: list[str] = Field(default_factory=list)
    content_pillars: list[str] = Field(default_factory=list)
    audience_demographics: str = ""
    content_consistency: Tier = "low"


class ActionableInsights(BaseModel, frozen=True):
    immediate_actions: list[str] = Field(default_factory=list)
    short_term_opportunities: list[str] = Field(default_factory=list)
    long_term_strategy: list[str] = Field(default_factory=list)
    personalized_pitch: str = ""
    expected_outcomes: list[str] = Field(default_factory=list)
    success_metrics: list[str] = Field(default_factory=list)


class ReportMetadata(BaseModel, frozen=True):
    analyzed_at: datetime
    data_quality: Tier = "low"
    confidence_level: int = 0
    recommendation_strength: Literal["strong", "moderate", "weak"] = "weak"


CreatorType = Literal[
    "celebrity", "macro_influencer", "micro_influencer", "content_creator"
]


class IntelligenceReport(BaseModel, frozen=True):
    """Structured commercial profile derived from one completed run."""

    creator_id: str
    creator_type: CreatorType
    overall_score: int
    platform_presence: list[PlatformPresence]
    link_aggregator_analysis: LinkAggregatorAnalysis
    value_estimation: ValueEstimation
    competitive_intelligence: CompetitiveIntelligence
    content_strategy: ContentStrategy
    actionable_insights: ActionableInsights
    metadata: ReportMetadata


# ---------------------------------------------------------------------------
# Top-level profile
# ---------------------------------------------------------------------------


class DiscoveryOptions(BaseModel, frozen=True):
    """Per-run knobs; anything left as None falls back to Config."""

    platforms: list[str] | None = None
    per_platform_timeout: float | None = None
    handle_overrides: dict[str, str] = Field(default_factory=dict)
    run_deadline: float | None = None
    expand_links: bool | None = None


class ProfileSummary(BaseModel, frozen=True):
    total_links: int = 0
    unique_links: int = 0
    platforms_found: list[str] = Field(default_factory=list)
    total_reach: int = 0
    primary_platform: str | None = None
    using_aggregator: str | None = None


class Recommendation(BaseModel, frozen=True):
    priority: Literal["high", "medium", "low"]
    reason: str
    estimated_value: int


class RunMetadata(BaseModel, frozen=True):
    started_at: datetime
    finished_at: datetime
    elapsed_ms: int
    warnings: list[str] = Field(default_factory=list)
    deduplication_report: DeduplicationReport | None = None


class CreatorProfile(BaseModel, frozen=True):
    """The sole artifact handed back by a discovery run."""

    query: str
    handles: dict[str, str]
    platforms: list[PlatformResult]
    all_links: list[ProcessedLink]
    canonical_links: list[CanonicalLink]
    intelligence: IntelligenceReport
    summary: ProfileSummary
    recommendation: Recommendation
    metadata: RunMetadata

    def get_platform(self, name: str) -> PlatformResult | None:
        for result in self.platforms:
            if result.platform == name:
                return result
        return None
