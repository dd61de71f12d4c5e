"""Tests for the JSON artifact writer."""

import json
import os
from datetime import datetime, timezone
from pathlib import Path

import pytest

from feed_aggregator.adapters.output import JsonArtifactWriter
from feed_aggregator.core import FeedErrorRecord, NormalizedItem, RunMetadata


def make_item(n: int) -> NormalizedItem:
    return NormalizedItem(
        id=f"{n:08x}",
        title=f"Élément {n}",
        url=f"https://example.com/{n}",
        source="Example",
        source_id="example",
        category="News",
        tags=("AI",),
        published="2024-01-15T10:00:00.000Z",
        summary="Résumé…",
    )


def make_metadata(item_count: int) -> RunMetadata:
    return RunMetadata(
        generated_at=datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc),
        feed_count=2,
        item_count=item_count,
        errors=(FeedErrorRecord(id="b", name="B", url="https://b.example/feed", error="Timeout after 25s"),),
    )


def test_write_pair(tmp_path: Path) -> None:
    """Test both artifacts are written as valid JSON."""
    writer = JsonArtifactWriter(tmp_path / "data")
    
    items_path, meta_path = writer.write([make_item(1), make_item(2)], make_metadata(2))
    
    items = json.loads(items_path.read_text(encoding="utf-8"))
    meta = json.loads(meta_path.read_text(encoding="utf-8"))
    
    assert items_path.name == "news.json"
    assert meta_path.name == "meta.json"
    assert [item["id"] for item in items] == ["00000001", "00000002"]
    assert items[0]["title"] == "Élément 1"
    assert meta["itemCount"] == 2
    assert meta["errors"][0]["error"] == "Timeout after 25s"
    
    # Non-ASCII is written as-is and files end with a newline
    raw = items_path.read_text(encoding="utf-8")
    assert "Résumé…" in raw
    assert raw.endswith("\n")


def test_no_temp_files_left(tmp_path: Path) -> None:
    """Test staging files are cleaned up."""
    writer = JsonArtifactWriter(tmp_path)
    writer.write([make_item(1)], make_metadata(1))
    
    assert sorted(p.name for p in tmp_path.iterdir()) == ["meta.json", "news.json"]


def test_failed_publish_keeps_previous_artifacts(tmp_path: Path, monkeypatch) -> None:
    """Test a failure while publishing leaves the previous pair untouched."""
    writer = JsonArtifactWriter(tmp_path)
    writer.write([make_item(1)], make_metadata(1))
    before = {p.name: p.read_text(encoding="utf-8") for p in tmp_path.iterdir()}
    
    def failing_replace(src, dst):
        raise OSError("disk full")
    
    monkeypatch.setattr(os, "replace", failing_replace)
    
    with pytest.raises(OSError, match="disk full"):
        writer.write([make_item(1), make_item(2)], make_metadata(2))
    
    after = {p.name: p.read_text(encoding="utf-8") for p in tmp_path.iterdir()}
    assert after == before


def test_failed_metadata_publish_restores_items(tmp_path: Path, monkeypatch) -> None:
    """Test news.json is rolled back when only the meta.json move fails."""
    writer = JsonArtifactWriter(tmp_path)
    writer.write([make_item(1)], make_metadata(1))
    before = {p.name: p.read_text(encoding="utf-8") for p in tmp_path.iterdir()}
    
    real_replace = os.replace
    calls = []
    
    def replace_failing_second(src, dst):
        calls.append(Path(dst).name)
        if len(calls) == 2:
            raise OSError("disk full")
        return real_replace(src, dst)
    
    monkeypatch.setattr(os, "replace", replace_failing_second)
    
    with pytest.raises(OSError, match="disk full"):
        writer.write([make_item(1), make_item(2)], make_metadata(2))
    
    after = {p.name: p.read_text(encoding="utf-8") for p in tmp_path.iterdir()}
    assert calls[:2] == ["news.json", "meta.json"]
    assert after == before


def test_failed_first_metadata_publish_removes_items(tmp_path: Path, monkeypatch) -> None:
    """Test a first run leaves no lone news.json when meta.json cannot be moved."""
    writer = JsonArtifactWriter(tmp_path)
    real_replace = os.replace
    
    def replace_failing_meta(src, dst):
        if Path(dst).name == "meta.json":
            raise OSError("disk full")
        return real_replace(src, dst)
    
    monkeypatch.setattr(os, "replace", replace_failing_meta)
    
    with pytest.raises(OSError):
        writer.write([make_item(1)], make_metadata(1))
    
    assert list(tmp_path.iterdir()) == []
