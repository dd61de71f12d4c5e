"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from feed_aggregator.core.entities import NormalizedItem, RawEntry, RunMetadata


class FeedFetcher(ABC):
    """Interface for downloading a feed body."""
    
    @abstractmethod
    async def fetch(self, url: str, timeout: float, user_agent: str) -> str:
        """Fetch the raw body of a feed."""
        pass


class FeedParser(ABC):
    """Interface for turning a feed body into raw entries."""
    
    @abstractmethod
    def parse(self, body: str) -> list[RawEntry]:
        """Parse feed body into an ordered list of raw entries."""
        pass


class ArtifactWriter(ABC):
    """Interface for publishing the run's output pair."""
    
    @abstractmethod
    def write(
        self, items: Sequence[NormalizedItem], metadata: RunMetadata
    ) -> tuple[Path, Path]:
        """Write items and metadata; both or neither become visible."""
        pass
