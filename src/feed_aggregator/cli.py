"""CLI entry point for the feed aggregator."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from feed_aggregator.adapters.output import JsonArtifactWriter
from feed_aggregator.adapters.sources import HttpFeedFetcher, XmlFeedParser
from feed_aggregator.config import DEFAULT_CONFIG_PATH, get_settings
from feed_aggregator.core import ConfigError
from feed_aggregator.use_cases import AggregationService


def main(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Feeds YAML file"),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Directory for news.json and meta.json"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print the final summary"),
) -> None:
    """Fetch all configured feeds and write the news and metadata artifacts."""
    try:
        asyncio.run(async_run(config, output_dir, quiet))
    except ConfigError as e:
        print(f"❌ Config error: {e}")
        raise typer.Exit(code=1)


def app() -> None:
    """CLI entry point."""
    typer.run(main)


async def async_run(config: Path, output_dir: Optional[Path], quiet: bool = False) -> None:
    """Async implementation of run command."""
    settings = get_settings(config, output_dir)
    defaults = settings.defaults
    
    if not quiet:
        # Header
        print("\n" + "=" * 70)
        print("📰 FEED AGGREGATOR")
        print("=" * 70)
        
        print(f"\n⚙️  Settings:")
        print(f"  • Config: {config}")
        print(f"  • Feeds: {len(settings.feeds)}")
        print(f"  • Max items per feed: {defaults.max_items_per_feed}")
        print(f"  • Max total items: {defaults.max_total_items}")
        print(f"  • Timeout: {defaults.timeout:g}s, concurrency: {defaults.concurrency}")
        print(f"  • Output: {settings.output_dir}")
    
    service = AggregationService(
        fetcher=HttpFeedFetcher(),
        parser=XmlFeedParser(),
        defaults=defaults,
        classifier=settings.build_classifier(),
        verbose=not quiet,
    )
    writer = JsonArtifactWriter(settings.output_dir)
    
    result, (items_path, meta_path) = await service.run_and_write(settings.feeds, writer)
    metadata = result.metadata
    
    print("\n" + "=" * 70)
    print(f"✅ Generated {metadata.item_count} items from {metadata.feed_count} feeds")
    print("=" * 70)
    print(f"📄 Items: {items_path}")
    print(f"📄 Meta: {meta_path}")
    if metadata.errors:
        print(f"⚠️  Feed errors: {len(metadata.errors)}")
        for error in metadata.errors:
            print(f"  - {error.id}: {error.error}")
    print()


if __name__ == "__main__":
    app()
