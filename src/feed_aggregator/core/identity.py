"""Canonical URLs and stable item identifiers."""

from typing import Iterable
from urllib.parse import SplitResult, unquote_plus, urlsplit, urlunsplit

_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193


def stable_id(seed: str) -> str:
    """
    Hash a seed into an 8-hex-digit identifier.
    
    32-bit FNV-1a over UTF-16 code units, so ids stay identical to the ones
    the browser has already stored read-state for.
    """
    h = _FNV_OFFSET
    data = seed.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = (h * _FNV_PRIME) & 0xFFFFFFFF
    return f"{h:08x}"


def canonical_url(raw_url: str | None, strip_params: Iterable[str] = ()) -> str | None:
    """
    Remove tracking parameters and redundant markers from a URL.
    
    Args:
        raw_url: Link as found in the feed entry
        strip_params: Query parameter names to drop
        
    Returns:
        Canonical URL, the raw value unchanged if it cannot be parsed
        as an absolute URL, or None if there is no URL at all
    """
    if raw_url is None:
        return None
    url = str(raw_url).strip()
    if not url:
        return None
    
    try:
        parts = urlsplit(url)
        # Accessing port validates it
        parts.port
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url
    
    stripped = set(strip_params)
    query = "&".join(
        pair for pair in parts.query.split("&")
        if pair and unquote_plus(pair.split("=", 1)[0]) not in stripped
    )
    
    cleaned = SplitResult(
        scheme=parts.scheme.lower(),
        netloc=_lower_host(parts.netloc),
        path=parts.path or "/",
        query=query,
        fragment=parts.fragment,
    )
    # urlunsplit drops an empty query "?" and a bare "#"
    return urlunsplit(cleaned)


def _lower_host(netloc: str) -> str:
    userinfo, sep, host = netloc.rpartition("@")
    return f"{userinfo}{sep}{host.lower()}"
