"""HTTP fetcher for feed bodies."""

import asyncio
import codecs
import re
from typing import Optional

import httpx

from feed_aggregator.core import FeedFetcher, FetchError, FetchTimeoutError, HTTPStatusError

# Encoding named in the XML prolog, optionally after a UTF-8 byte order mark
_PROLOG_ENCODING_RE = re.compile(
    rb"^\s*(?:\xef\xbb\xbf)?<\?xml[^>]*?encoding\s*=\s*[\"']([A-Za-z0-9._:-]+)[\"']"
)


def prolog_encoding(content: bytes) -> Optional[str]:
    """Return the encoding declared by an XML prolog, if it names a known codec."""
    match = _PROLOG_ENCODING_RE.match(content[:512])
    if not match:
        return None
    name = match.group(1).decode("ascii")
    try:
        codecs.lookup(name)
    except LookupError:
        return None
    return name


class HttpFeedFetcher(FeedFetcher):
    """Download a feed with a single bounded GET, following redirects."""
    
    ACCEPT = (
        "application/rss+xml, application/atom+xml, application/xml, "
        "text/xml, text/html;q=0.9, */*;q=0.8"
    )
    
    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        """Initialize fetcher.
        
        Args:
            transport: Optional httpx transport, mainly for tests
        """
        self.transport = transport
    
    async def fetch(self, url: str, timeout: float, user_agent: str) -> str:
        """Fetch feed body text.
        
        Raises:
            FetchTimeoutError: Response not complete within timeout
            HTTPStatusError: Non-2xx response
            FetchError: Any other network failure
        """
        headers = {
            "User-Agent": user_agent,
            "Accept": self.ACCEPT,
        }
        
        async with httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            try:
                response = await asyncio.wait_for(client.get(url, headers=headers), timeout)
            except (asyncio.TimeoutError, httpx.TimeoutException) as e:
                raise FetchTimeoutError(url, timeout) from e
            except httpx.HTTPError as e:
                raise FetchError(str(e) or e.__class__.__name__) from e
        
        if not response.is_success:
            raise HTTPStatusError(response.status_code, response.reason_phrase)
        
        if response.charset_encoding is None:
            # No charset header: fall back to the prolog's declaration
            declared = prolog_encoding(response.content)
            if declared:
                response.encoding = declared
        
        return response.text
