"""bioscout — creator link discovery, deduplication and commercial intelligence."""

from bioscout.dedup import deduplicate
from bioscout.intelligence import analyze
from bioscout.models import CanonicalLink, CreatorProfile, DiscoveryOptions, IntelligenceReport
from bioscout.orchestrator import (
    DiscoveryOrchestrator,
    HandleResolutionError,
    discover,
    discover_sync,
)

__all__ = [
    "CanonicalLink",
    "CreatorProfile",
    "DiscoveryOptions",
    "DiscoveryOrchestrator",
    "HandleResolutionError",
    "IntelligenceReport",
    "analyze",
    "deduplicate",
    "discover",
    "discover_sync",
]
