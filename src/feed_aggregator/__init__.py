"""Syndication feed aggregator: fetch, normalize, dedupe and rank news items."""

__version__ = "1.0.0"
