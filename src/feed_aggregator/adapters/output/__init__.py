"""Output adapters."""

from feed_aggregator.adapters.output.json_writer import JsonArtifactWriter

__all__ = ["JsonArtifactWriter"]
