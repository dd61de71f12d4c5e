"""Source adapters for fetching and parsing feeds."""

from feed_aggregator.adapters.sources.feed_parser import XmlFeedParser
from feed_aggregator.adapters.sources.filters import contains_any, passes_keyword_filter
from feed_aggregator.adapters.sources.http_fetcher import HttpFeedFetcher

__all__ = ["HttpFeedFetcher", "XmlFeedParser", "contains_any", "passes_keyword_filter"]
