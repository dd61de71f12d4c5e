"""Tests for core entities."""

from datetime import datetime, timedelta, timezone

import pytest

from feed_aggregator.core import (
    FeedDefinition,
    FeedErrorRecord,
    NormalizedItem,
    RunDefaults,
    RunMetadata,
)
from feed_aggregator.core.entities import format_timestamp


def make_item(**overrides) -> NormalizedItem:
    values = dict(
        id="abcd1234",
        title="Test Item",
        url="https://example.com/a",
        source="Example",
        source_id="example",
        category="News",
        tags=("Privacy",),
        published="2024-01-15T10:00:00.000Z",
        summary="Summary",
    )
    values.update(overrides)
    return NormalizedItem(**values)


def test_item_to_dict() -> None:
    """Test serialized keys and values."""
    data = make_item().to_dict()
    
    assert list(data) == [
        "id", "title", "url", "source", "sourceId", "category", "tags", "published", "summary",
    ]
    assert data["sourceId"] == "example"
    assert data["tags"] == ["Privacy"]


def test_item_validation() -> None:
    """Test item validation."""
    with pytest.raises(ValueError, match="Title cannot be empty"):
        make_item(title="")
    
    with pytest.raises(ValueError, match="URL cannot be empty"):
        make_item(url="")


def test_item_is_immutable() -> None:
    """Test items cannot be mutated after creation."""
    item = make_item()
    
    with pytest.raises(AttributeError):
        item.title = "Changed"


def test_format_timestamp() -> None:
    """Test UTC rendering with milliseconds and Z suffix."""
    plus_two = timezone(timedelta(hours=2))
    
    assert format_timestamp(datetime(2024, 1, 15, 12, 0, tzinfo=plus_two)) == "2024-01-15T10:00:00.000Z"
    assert format_timestamp(datetime(2024, 1, 15, 10, 0)) == "2024-01-15T10:00:00.000Z"


def test_metadata_to_dict() -> None:
    """Test metadata document shape."""
    metadata = RunMetadata(
        generated_at=datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
        feed_count=3,
        item_count=10,
        errors=(FeedErrorRecord(id="a", name="A", url="https://a.example/feed", error="HTTP 500"),),
    )
    
    assert metadata.to_dict() == {
        "generatedAt": "2024-01-15T10:00:00.000Z",
        "feedCount": 3,
        "itemCount": 10,
        "errors": [{"id": "a", "name": "A", "url": "https://a.example/feed", "error": "HTTP 500"}],
    }


def test_run_defaults_per_feed_override() -> None:
    """Test per-feed item cap overrides the default."""
    defaults = RunDefaults(max_items_per_feed=40, timeout_ms=2500)
    
    assert defaults.max_items_for(FeedDefinition(id="a", name="A", url="u")) == 40
    assert defaults.max_items_for(
        FeedDefinition(id="b", name="B", url="u", max_items_per_feed=5)
    ) == 5
    assert defaults.timeout == 2.5
