"""Profile output utilities."""

from __future__ import annotations

from pathlib import Path

from bioscout.models import CreatorProfile


def write_profile(profile: CreatorProfile, path: str) -> Path:
    """Write *profile* as JSON to *path*, creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(profile.model_dump_json(indent=2), encoding="utf-8")
    return out


def render_summary(profile: CreatorProfile) -> list[str]:
    """Terminal summary of a finished run, one line per entry."""
    summary = profile.summary
    intel = profile.intelligence
    lines: list[str] = []

    for result in profile.platforms:
        if result.success:
            lines.append(f"  ✓ {result.platform} — {len(result.links)} links ({result.elapsed_ms} ms)")
        else:
            lines.append(f"  ✗ {result.platform} — {result.error}")

    lines.append("")
    lines.append(f"Links: {summary.total_links} found, {summary.unique_links} unique")
    lines.append(f"Reach: {summary.total_reach:,} followers")
    if summary.primary_platform:
        lines.append(f"Primary platform: {summary.primary_platform}")
    if summary.using_aggregator:
        lines.append(f"Aggregator: {summary.using_aggregator}")
    lines.append(f"Creator type: {intel.creator_type} (score {intel.overall_score})")
    lines.append(
        f"Recommendation: {profile.recommendation.priority} priority, "
        f"est. ${profile.recommendation.estimated_value:,}/month"
    )

    if profile.canonical_links:
        lines.append("")
        lines.append("Top links:")
        for link in profile.canonical_links[:10]:
            lines.append(f"  [{link.confidence:>3}] {link.url} ({', '.join(link.sources)})")
    return lines
