"""Tests for deduplication and ranking."""

from feed_aggregator.core import NormalizedItem
from feed_aggregator.core.ranking import EPOCH, dedupe_by_url, published_at, rank_and_limit


def make_item(url: str, published: str, source_id: str = "a") -> NormalizedItem:
    return NormalizedItem(
        id=f"{source_id}-{published}",
        title=f"Item {published}",
        url=url,
        source=source_id.upper(),
        source_id=source_id,
        category="News",
        tags=(),
        published=published,
        summary="",
    )


def test_dedupe_keeps_newest() -> None:
    """Test newer item wins regardless of order."""
    older = make_item("https://example.com/x", "2024-01-01T00:00:00.000Z", "a")
    newer = make_item("https://example.com/x", "2024-01-02T00:00:00.000Z", "b")
    
    assert dedupe_by_url([older, newer]) == [newer]
    assert dedupe_by_url([newer, older]) == [newer]


def test_dedupe_tie_prefers_later_seen() -> None:
    """Test equal timestamps keep the later-seen item."""
    first = make_item("https://example.com/x", "2024-01-01T00:00:00.000Z", "a")
    second = make_item("https://example.com/x", "2024-01-01T00:00:00.000Z", "b")
    
    assert dedupe_by_url([first, second]) == [second]


def test_dedupe_distinct_urls_kept() -> None:
    """Test one item per distinct URL."""
    items = [
        make_item("https://example.com/1", "2024-01-01T00:00:00.000Z"),
        make_item("https://example.com/2", "2024-01-01T00:00:00.000Z"),
        make_item("https://example.com/1", "2024-01-03T00:00:00.000Z"),
    ]
    
    result = dedupe_by_url(items)
    
    assert [item.url for item in result] == ["https://example.com/1", "https://example.com/2"]
    assert result[0].published == "2024-01-03T00:00:00.000Z"


def test_unparseable_timestamp_compares_as_epoch() -> None:
    """Test broken published values lose against real dates."""
    broken = make_item("https://example.com/x", "garbage", "a")
    dated = make_item("https://example.com/x", "2001-01-01T00:00:00.000Z", "b")
    
    assert published_at(broken) == EPOCH
    assert dedupe_by_url([dated, broken]) == [dated]


def test_rank_and_limit_keeps_most_recent() -> None:
    """Test five candidates truncated to the three newest, descending."""
    items = [
        make_item(f"https://example.com/{day}", f"2024-01-0{day}T00:00:00.000Z")
        for day in (3, 1, 5, 2, 4)
    ]
    
    ranked = rank_and_limit(items, 3)
    
    assert [item.published for item in ranked] == [
        "2024-01-05T00:00:00.000Z",
        "2024-01-04T00:00:00.000Z",
        "2024-01-03T00:00:00.000Z",
    ]


def test_rank_without_truncation() -> None:
    """Test limit larger than input keeps everything."""
    items = [
        make_item("https://example.com/1", "2024-01-01T00:00:00.000Z"),
        make_item("https://example.com/2", "2024-01-02T00:00:00.000Z"),
    ]
    
    assert [item.url for item in rank_and_limit(items, 700)] == [
        "https://example.com/2",
        "https://example.com/1",
    ]
    assert rank_and_limit(items, 0) == []
