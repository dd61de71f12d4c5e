"""Turn raw feed entries into canonical items."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Optional, Sequence

from feed_aggregator.core.entities import (
    FeedDefinition,
    NormalizedItem,
    RawEntry,
    RunDefaults,
    format_timestamp,
)
from feed_aggregator.core.identity import canonical_url, stable_id
from feed_aggregator.core.tagging import TagClassifier
from feed_aggregator.core.text import clean_text, truncate

UNTITLED = "(untitled)"

# Candidate fields per item attribute, highest priority first
TITLE_FIELDS = ("title",)
DATE_FIELDS = ("pubDate", "published", "date", "updated")
SUMMARY_FIELDS = ("contentSnippet", "summary", "content", "content:encoded")


def _first_link(entry: RawEntry) -> Any:
    links = entry.get("links")
    if isinstance(links, (list, tuple)) and links:
        first = links[0]
        if isinstance(first, dict):
            return first.get("url") or first.get("href")
        return first
    return None


URL_CANDIDATES: tuple[Callable[[RawEntry], Any], ...] = (
    lambda entry: entry.get("link"),
    lambda entry: entry.get("guid"),
    _first_link,
)


def parse_date(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 or RFC 2822 timestamp. Naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str) or not value.strip():
            return None
        text = value.strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            try:
                parsed = parsedate_to_datetime(text)
            except (TypeError, ValueError, IndexError, OverflowError):
                return None
    
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return None


def first_text(entry: RawEntry, fields: Sequence[str]) -> str:
    """Return the first candidate field that cleans to non-empty text."""
    for name in fields:
        text = clean_text(entry.get(name))
        if text:
            return text
    return ""


def first_date(entry: RawEntry, fields: Sequence[str] = DATE_FIELDS) -> Optional[datetime]:
    """Return the first candidate field that parses to a valid instant."""
    for name in fields:
        parsed = parse_date(entry.get(name))
        if parsed is not None:
            return parsed
    return None


def resolve_raw_url(entry: RawEntry) -> Optional[str]:
    for candidate in URL_CANDIDATES:
        value = candidate(entry)
        if isinstance(value, str) and value.strip():
            return value
    return None


def item_identifier(url: Optional[str], feed_id: str, title: str, published: Optional[str]) -> str:
    """Stable id: hash of the canonical URL, else of feed id, title and parsed date."""
    if url:
        return stable_id(url)
    return stable_id(f"{feed_id}|{title}|{published or ''}")


class ItemNormalizer:
    """Normalize raw entries of one run into NormalizedItems."""
    
    def __init__(
        self,
        defaults: RunDefaults,
        classifier: Optional[TagClassifier] = None,
        run_time: Optional[datetime] = None,
    ) -> None:
        self.defaults = defaults
        self.classifier = classifier or TagClassifier()
        self.run_time = run_time or datetime.now(timezone.utc)
    
    def normalize(self, entry: RawEntry, feed: FeedDefinition) -> Optional[NormalizedItem]:
        """
        Build a canonical item from one raw entry.
        
        Returns:
            The item, or None if no URL can be resolved from the entry
        """
        if not isinstance(entry, dict):
            return None
        
        url = canonical_url(resolve_raw_url(entry), self.defaults.strip_url_params)
        if not url:
            return None
        
        title = first_text(entry, TITLE_FIELDS) or UNTITLED
        
        parsed_date = first_date(entry)
        published = format_timestamp(parsed_date) if parsed_date else None
        
        summary = truncate(
            first_text(entry, SUMMARY_FIELDS),
            self.defaults.summary_max_length,
        )
        
        tags = self.classifier.classify(f"{title} {summary}")
        
        item_id = item_identifier(url, feed.id, title, published)
        
        return NormalizedItem(
            id=item_id,
            title=title,
            url=url,
            source=feed.name,
            source_id=feed.id,
            category=feed.category or "Uncategorized",
            tags=tags,
            published=published or format_timestamp(self.run_time),
            summary=summary,
        )
