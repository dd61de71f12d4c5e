"""Core domain entities."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

# Loosely-typed parser output: whatever fields the source actually sent.
RawEntry = dict[str, Any]


class RunStage(str, Enum):
    """Stage of a single aggregation run."""
    
    IDLE = "idle"
    LOADING = "loading"
    MERGING = "merging"
    RANKING = "ranking"
    ASSEMBLING = "assembling"
    DONE = "done"
    FATAL_CONFIG_ERROR = "fatal_config_error"


@dataclass(frozen=True)
class KeywordRules:
    """Per-feed include/exclude keyword lists."""

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()


@dataclass(frozen=True)
class FeedDefinition:
    """One configured syndication source."""

    id: str
    name: str
    url: str
    category: str = "Uncategorized"
    max_items_per_feed: int | None = None
    keywords: KeywordRules = field(default_factory=KeywordRules)


@dataclass(frozen=True)
class RunDefaults:
    """Run-wide settings; per-feed values override them where present."""

    max_items_per_feed: int = 40
    max_total_items: int = 700
    timeout_ms: int = 25000
    user_agent: str = "AdAuctionNewsBot/1.0 (+https://github.com/)"
    strip_url_params: tuple[str, ...] = ()
    summary_max_length: int = 280
    concurrency: int = 4

    @property
    def timeout(self) -> float:
        """Fetch timeout in seconds."""
        return self.timeout_ms / 1000

    def max_items_for(self, feed: FeedDefinition) -> int:
        if feed.max_items_per_feed is not None:
            return feed.max_items_per_feed
        return self.max_items_per_feed


def format_timestamp(value: datetime) -> str:
    """Render an instant as UTC ISO-8601 with milliseconds and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class NormalizedItem:
    """Canonical news item produced from one raw feed entry."""
    
    id: str
    title: str
    url: str
    source: str
    source_id: str
    category: str
    tags: tuple[str, ...]
    published: str
    summary: str
    
    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("Title cannot be empty")
        if not self.url:
            raise ValueError("URL cannot be empty")
    
    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "source": self.source,
            "sourceId": self.source_id,
            "category": self.category,
            "tags": list(self.tags),
            "published": self.published,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class FeedErrorRecord:
    """One failed feed in a run."""
    
    id: str
    name: str
    url: str
    error: str
    
    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "error": self.error,
        }


@dataclass(frozen=True)
class RunMetadata:
    """Summary of a completed run."""
    
    generated_at: datetime
    feed_count: int
    item_count: int
    errors: tuple[FeedErrorRecord, ...] = ()
    
    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": format_timestamp(self.generated_at),
            "feedCount": self.feed_count,
            "itemCount": self.item_count,
            "errors": [error.to_dict() for error in self.errors],
        }


@dataclass(frozen=True)
class FeedOutcome:
    """Terminal result of one feed task: items, or an error record."""
    
    feed_id: str
    items: tuple[NormalizedItem, ...] = ()
    error: FeedErrorRecord | None = None
    
    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class RunResult:
    """Final artifact pair of a run."""
    
    items: tuple[NormalizedItem, ...]
    metadata: RunMetadata
    outcomes: tuple[FeedOutcome, ...] = field(default=())
