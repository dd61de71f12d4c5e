"""Core domain layer."""

from feed_aggregator.core.entities import (
    FeedDefinition,
    FeedErrorRecord,
    FeedOutcome,
    KeywordRules,
    NormalizedItem,
    RawEntry,
    RunDefaults,
    RunMetadata,
    RunResult,
    RunStage,
)
from feed_aggregator.core.errors import (
    AggregatorError,
    ConfigError,
    FetchError,
    FetchTimeoutError,
    HTTPStatusError,
    ParseError,
)
from feed_aggregator.core.interfaces import ArtifactWriter, FeedFetcher, FeedParser
from feed_aggregator.core.normalizer import ItemNormalizer
from feed_aggregator.core.tagging import TagClassifier, TagRule

__all__ = [
    "FeedDefinition",
    "FeedErrorRecord",
    "FeedOutcome",
    "KeywordRules",
    "NormalizedItem",
    "RawEntry",
    "RunDefaults",
    "RunMetadata",
    "RunResult",
    "RunStage",
    "AggregatorError",
    "ConfigError",
    "FetchError",
    "FetchTimeoutError",
    "HTTPStatusError",
    "ParseError",
    "ArtifactWriter",
    "FeedFetcher",
    "FeedParser",
    "ItemNormalizer",
    "TagClassifier",
    "TagRule",
]
