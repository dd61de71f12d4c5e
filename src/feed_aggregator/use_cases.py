"""Business logic use cases."""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from feed_aggregator.adapters.sources.filters import passes_keyword_filter
from feed_aggregator.core import (
    ArtifactWriter,
    ConfigError,
    FeedDefinition,
    FeedErrorRecord,
    FeedFetcher,
    FeedOutcome,
    FeedParser,
    ItemNormalizer,
    NormalizedItem,
    RawEntry,
    RunDefaults,
    RunMetadata,
    RunResult,
    RunStage,
    TagClassifier,
)
from feed_aggregator.core.ranking import dedupe_by_url, rank_and_limit


class ErrorCollector:
    """Accumulate per-feed failures for the run metadata, reported in feed order."""
    
    def __init__(self, feeds: Sequence[FeedDefinition] = ()) -> None:
        self._order = {feed.id: i for i, feed in enumerate(feeds)}
        self._records: list[FeedErrorRecord] = []
    
    def record(self, feed: FeedDefinition, error: BaseException) -> FeedErrorRecord:
        message = str(error) or error.__class__.__name__
        record = FeedErrorRecord(id=feed.id, name=feed.name, url=feed.url, error=message)
        self._records.append(record)
        return record
    
    @property
    def records(self) -> tuple[FeedErrorRecord, ...]:
        return tuple(sorted(
            self._records,
            key=lambda record: self._order.get(record.id, len(self._order)),
        ))
    
    def __len__(self) -> int:
        return len(self._records)


class AggregationService:
    """Drive fetch, parse, normalize and filter per feed, then merge and rank."""
    
    def __init__(
        self,
        fetcher: FeedFetcher,
        parser: FeedParser,
        defaults: RunDefaults,
        classifier: Optional[TagClassifier] = None,
        verbose: bool = True,
    ) -> None:
        self.fetcher = fetcher
        self.parser = parser
        self.defaults = defaults
        self.classifier = classifier or TagClassifier()
        self.verbose = verbose
        self.stage = RunStage.IDLE
    
    def _log(self, message: str) -> None:
        if self.verbose:
            print(message)
    
    def _enter(self, stage: RunStage) -> None:
        self.stage = stage
    
    async def run(
        self,
        feeds: Sequence[FeedDefinition],
        run_time: Optional[datetime] = None,
    ) -> RunResult:
        """Aggregate all feeds into a bounded, ranked item list plus metadata.
        
        Raises:
            ConfigError: Feed list is empty or missing
        """
        if not feeds:
            self._enter(RunStage.FATAL_CONFIG_ERROR)
            raise ConfigError("No feeds configured")
        
        run_time = run_time or datetime.now(timezone.utc)
        normalizer = ItemNormalizer(self.defaults, self.classifier, run_time)
        errors = ErrorCollector(feeds)
        
        self._enter(RunStage.LOADING)
        self._log("\n" + "=" * 70)
        self._log(f"📥 STAGE 1: LOADING {len(feeds)} FEEDS")
        self._log("=" * 70)
        
        outcomes = await self._load_all(feeds, normalizer, errors)
        
        self._enter(RunStage.MERGING)
        all_items = [item for outcome in outcomes for item in outcome.items]
        merged = dedupe_by_url(all_items)
        
        self._enter(RunStage.RANKING)
        ranked = rank_and_limit(merged, self.defaults.max_total_items)
        
        self._log("\n" + "=" * 70)
        self._log("📊 STAGE 2: MERGE & RANK")
        self._log("=" * 70)
        self._log(f"✓ Collected: {len(all_items)} items")
        self._log(f"✓ After dedupe: {len(merged)}")
        self._log(f"✓ Kept newest: {len(ranked)} (limit {self.defaults.max_total_items})")
        if errors:
            self._log(f"⚠️  Failed feeds: {len(errors)}")
        
        self._enter(RunStage.ASSEMBLING)
        metadata = RunMetadata(
            generated_at=datetime.now(timezone.utc),
            feed_count=len(feeds),
            item_count=len(ranked),
            errors=errors.records,
        )
        
        self._enter(RunStage.DONE)
        return RunResult(items=tuple(ranked), metadata=metadata, outcomes=tuple(outcomes))
    
    async def run_and_write(
        self,
        feeds: Sequence[FeedDefinition],
        writer: ArtifactWriter,
        run_time: Optional[datetime] = None,
    ) -> tuple[RunResult, tuple[Path, Path]]:
        """Run aggregation and publish the artifact pair."""
        result = await self.run(feeds, run_time)
        paths = writer.write(result.items, result.metadata)
        return result, paths
    
    async def _load_all(
        self,
        feeds: Sequence[FeedDefinition],
        normalizer: ItemNormalizer,
        errors: ErrorCollector,
    ) -> list[FeedOutcome]:
        """Fan out one task per feed and wait until every task is terminal."""
        semaphore = asyncio.Semaphore(max(self.defaults.concurrency, 1))
        
        async def guarded(feed: FeedDefinition) -> FeedOutcome:
            async with semaphore:
                return await self._load_feed(feed, normalizer, errors)
        
        # gather keeps config order, so merge tie-breaks are deterministic
        return list(await asyncio.gather(*(guarded(feed) for feed in feeds)))
    
    async def _load_feed(
        self,
        feed: FeedDefinition,
        normalizer: ItemNormalizer,
        errors: ErrorCollector,
    ) -> FeedOutcome:
        """Fetch, parse, normalize and filter one feed; failures become an error record."""
        try:
            body = await self.fetcher.fetch(
                feed.url, self.defaults.timeout, self.defaults.user_agent
            )
            entries = self.parser.parse(body)
            items = self._normalize_entries(entries, feed, normalizer)
        except Exception as e:
            record = errors.record(feed, e)
            self._log(f"\n❌ {feed.name}")
            self._log(f"  └─ Error: {record.error}")
            return FeedOutcome(feed_id=feed.id, error=record)
        
        self._log(f"\n✓ {feed.name}")
        self._log(f"  └─ Entries: {len(entries)}, kept: {len(items)}")
        return FeedOutcome(feed_id=feed.id, items=tuple(items))
    
    def _normalize_entries(
        self,
        entries: list[RawEntry],
        feed: FeedDefinition,
        normalizer: ItemNormalizer,
    ) -> list[NormalizedItem]:
        """Normalize the capped entry list; drop entries without a URL or failing keyword rules."""
        items: list[NormalizedItem] = []
        for entry in entries[: self.defaults.max_items_for(feed)]:
            item = normalizer.normalize(entry, feed)
            if item is None:
                continue
            if not passes_keyword_filter(item, feed.keywords):
                continue
            items.append(item)
        return items
