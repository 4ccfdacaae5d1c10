"""Link deduplication: canonical keys, grouping and confidence scoring."""

from __future__ import annotations

import logging
import re
from collections import Counter, defaultdict
from typing import Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from bioscout.models import CanonicalLink, DeduplicationReport, ProcessedLink

logger = logging.getLogger(__name__)

TRACKING_PARAMS = frozenset({
    "ref",
    "reference",
    "affiliate",
    "partner",
    "source",
    # click ids
    "fbclid",
    "gclid",
    "msclkid",
    "twclid",
    "dclid",
    "igshid",
    # mail-merge / analytics ids
    "mc_cid",
    "mc_eid",
    "_ga",
    "ck_subscriber_id",
})
TRACKING_PREFIXES = ("utm_",)

# Query parameters that survive on marketplace product pages; everything else is noise.
MARKETPLACE_PARAMS: dict[str, frozenset[str]] = {
    "amazon": frozenset({"asin", "dp", "product"}),
    "shopify": frozenset({"variant"}),
}
# Affiliate and session parameters dropped from any marketplace page.
MARKETPLACE_NOISE: dict[str, frozenset[str]] = {
    "amazon": frozenset({
        "tag", "linkcode", "linkid", "camp", "creative", "creativeasin",
        "ascsubtag", "psc", "th", "qid", "sr", "crid", "sprefix",
    }),
    "shopify": frozenset(),
}

SOURCE_CONFIDENCE: dict[str, int] = {
    "video_description": 95,
    "youtube_video": 95,
    "channel_description": 90,
    "youtube_channel": 90,
    "linktree": 85,
    "beacons": 85,
    "aggregator": 85,
    "storefront": 85,
    "bio": 80,
    "pinned": 80,
    "website": 75,
    "post": 70,
    "story": 60,
}
DEFAULT_SOURCE_CONFIDENCE = 70

OCCURRENCE_BOOST = 5
MAX_OCCURRENCE_BOOST = 20
AFFILIATE_BOOST = 10
MAX_TITLE_LENGTH = 100

_ASIN_RE = re.compile(r"/(?:dp|gp/product|product)/([a-z0-9]{10})(?:[/?#]|$)", re.IGNORECASE)
_SHOPIFY_PRODUCT_RE = re.compile(r"/products/([^/?#]+)", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Canonicalization
# ---------------------------------------------------------------------------


def _marketplace(host: str) -> str | None:
    if "amazon." in host or host.startswith("amzn."):
        return "amazon"
    if "shopify" in host:
        return "shopify"
    return None


def _is_tracking(param: str) -> bool:
    name = param.lower()
    return name in TRACKING_PARAMS or name.startswith(TRACKING_PREFIXES)


def _fallback_key(url: str) -> str:
    key = url.strip().lower()
    return key[:-1] if key.endswith("/") else key


def canonical_key(url: str) -> str:
    """Normalize *url* into the merge key used by :func:`deduplicate`.

    Never raises: unparseable input falls back to trimmed, lower-cased text.
    """
    try:
        parts = urlsplit(url.strip())
        host = (parts.hostname or "").lower()
        port = parts.port
    except ValueError:
        return _fallback_key(url)
    if not host:
        return _fallback_key(url)

    host = host.removeprefix("www.")
    netloc = host if port in (None, 80, 443) else f"{host}:{port}"

    params = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if not _is_tracking(k)]
    market = _marketplace(host)
    if market is not None:
        if extract_product_id(url) is not None:
            allowed = MARKETPLACE_PARAMS[market]
            params = [(k, v) for k, v in params if k.lower() in allowed]
        else:
            noise = MARKETPLACE_NOISE[market]
            params = [(k, v) for k, v in params if k.lower() not in noise]
    params.sort()

    path = parts.path or "/"
    if path != "/" and path.endswith("/"):
        path = path[:-1]

    return urlunsplit(("https", netloc, path, urlencode(params), "")).lower()


def extract_product_id(url: str) -> str | None:
    """Stable product identifier for marketplace URLs (ASIN or Shopify handle)."""
    try:
        parts = urlsplit(url.strip())
        host = (parts.hostname or "").lower()
    except ValueError:
        return None
    market = _marketplace(host)
    if market == "amazon":
        m = _ASIN_RE.search(parts.path)
        return m.group(1).lower() if m else None
    if market == "shopify":
        m = _SHOPIFY_PRODUCT_RE.search(parts.path)
        return m.group(1).lower() if m else None
    return None


def _merge_identity(key: str) -> str:
    """Collapse same-host marketplace keys that share a product id."""
    product_id = extract_product_id(key)
    if product_id is None:
        return key
    parts = urlsplit(key)
    if _marketplace(parts.hostname or "") == "amazon":
        return f"https://{parts.netloc}/dp/{product_id}"
    return f"https://{parts.netloc}/products/{product_id}"


def are_equivalent(url_a: str, url_b: str) -> bool:
    return _merge_identity(canonical_key(url_a)) == _merge_identity(canonical_key(url_b))


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def source_confidence(source: str) -> int:
    return SOURCE_CONFIDENCE.get(source, DEFAULT_SOURCE_CONFIDENCE)


def score_confidence(
    sources: Iterable[str],
    occurrences: int,
    is_affiliate: bool,
    observed: Iterable[int] = (),
) -> int:
    """Best base confidence, plus occurrence and affiliate boosts, clamped to 0-100.

    *observed* holds confidences adapters assigned to individual links; they
    compete with the per-source table for the base.
    """
    bases = [source_confidence(s) for s in sources] + list(observed)
    base = max(bases, default=DEFAULT_SOURCE_CONFIDENCE)
    boost = min(MAX_OCCURRENCE_BOOST, OCCURRENCE_BOOST * occurrences)
    score = base + boost + (AFFILIATE_BOOST if is_affiliate else 0)
    return max(0, min(100, score))


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def _best_title(titles: Iterable[str]) -> str:
    # Longest title under the limit; equal lengths resolve alphabetically.
    titles = list(titles)
    candidates = [t for t in titles if len(t) < MAX_TITLE_LENGTH]
    if candidates:
        return min(candidates, key=lambda t: (-len(t), t))
    return min(titles, key=lambda t: (len(t), t), default="")


def _earliest_value(group: list[ProcessedLink], attr: str) -> str | None:
    observed = sorted(
        (link.observed_at, value)
        for link in group
        if (value := getattr(link, attr))
    )
    return observed[0][1] if observed else None


def _fold(url: str, group: list[ProcessedLink]) -> CanonicalLink:
    sources = sorted({link.source for link in group})
    is_affiliate = any(link.is_affiliate for link in group)
    occurrences = len(group)
    known_types = [link for link in group if link.type != "unknown"]
    return CanonicalLink(
        url=url,
        original_urls=sorted({link.original_url for link in group}),
        sources=sources,
        platforms=sorted({link.platform for link in group}),
        occurrences=occurrences,
        confidence=score_confidence(
            sources,
            occurrences,
            is_affiliate,
            observed=[link.confidence for link in group if link.confidence is not None],
        ),
        first_seen=min(link.observed_at for link in group),
        last_seen=max(link.observed_at for link in group),
        title=_best_title(link.title for link in group),
        type=_earliest_value(known_types, "type") or "unknown",
        brand=_earliest_value(group, "brand"),
        is_affiliate=is_affiliate,
        affiliate_id=_earliest_value(group, "affiliate_id"),
    )


def deduplicate(links: list[ProcessedLink]) -> list[CanonicalLink]:
    """Merge observations of the same underlying link.

    Keys are computed for every input first, then each group is folded
    into one immutable CanonicalLink, so the result depends only on the
    input multiset.
    """
    groups: dict[str, list[ProcessedLink]] = defaultdict(list)
    for link in links:
        key = canonical_key(link.expanded_url or link.original_url)
        groups[_merge_identity(key)].append(link)

    merged = [_fold(url, group) for url, group in groups.items()]
    merged.sort(key=lambda c: (-c.confidence, -c.occurrences, c.url))

    logger.info(
        "Deduplicated %d links to %d unique (%d removed)",
        len(links), len(merged), len(links) - len(merged),
    )
    return merged


def deduplication_report(
    links: list[ProcessedLink], canonical: list[CanonicalLink]
) -> DeduplicationReport:
    removed = len(links) - len(canonical)
    return DeduplicationReport(
        original_count=len(links),
        unique_count=len(canonical),
        duplicates_removed=removed,
        reduction_percentage=round(removed / len(links) * 100) if links else 0,
        source_breakdown=dict(Counter(link.source for link in links)),
        duplicates_found=sum(1 for c in canonical if c.occurrences > 1),
        average_confidence=(
            round(sum(c.confidence for c in canonical) / len(canonical)) if canonical else 0
        ),
    )
