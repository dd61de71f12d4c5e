"""Cross-feed deduplication and ranking."""

from datetime import datetime, timezone
from typing import Iterable

from feed_aggregator.core.entities import NormalizedItem

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def published_at(item: NormalizedItem) -> datetime:
    """Published instant of an item, epoch zero if it does not parse."""
    try:
        parsed = datetime.fromisoformat(item.published.replace("Z", "+00:00"))
    except (AttributeError, TypeError, ValueError):
        return EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def dedupe_by_url(items: Iterable[NormalizedItem]) -> list[NormalizedItem]:
    """
    Collapse items sharing a canonical URL.
    
    The newest item wins; on equal timestamps the later-seen item wins.
    Output keeps the position at which each URL was first seen.
    """
    by_url: dict[str, NormalizedItem] = {}
    for item in items:
        existing = by_url.get(item.url)
        if existing is None or published_at(item) >= published_at(existing):
            by_url[item.url] = item
    return list(by_url.values())


def rank_and_limit(items: Iterable[NormalizedItem], max_total_items: int) -> list[NormalizedItem]:
    """Sort newest first and keep at most max_total_items."""
    ranked = sorted(items, key=published_at, reverse=True)
    return ranked[:max(max_total_items, 0)]
