"""Error taxonomy for the aggregation pipeline."""


class AggregatorError(Exception):
    """Base error for the feed aggregator."""


class ConfigError(AggregatorError):
    """Feed configuration is missing or invalid. Aborts the run."""


class FetchError(AggregatorError):
    """Feed could not be downloaded."""


class FetchTimeoutError(FetchError):
    """Feed response did not complete within the timeout."""

    def __init__(self, url: str, timeout: float) -> None:
        self.url = url
        self.timeout = timeout
        super().__init__(f"Timeout after {timeout:g}s")


class HTTPStatusError(FetchError):
    """Feed server answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"HTTP {status_code} {reason}".rstrip())


class ParseError(AggregatorError):
    """Feed body is not interpretable as RSS or Atom."""
