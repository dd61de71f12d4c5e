"""Text cleanup helpers for feed titles and summaries."""

import html
import re
import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning, ParserRejectedMarkup

ELLIPSIS = "…"

_CDATA_RE = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_SCRIPT_STYLE_RE = re.compile(r"<(script|style)\b.*?</\1\s*>", re.DOTALL | re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def clean_text(value: object) -> str:
    """
    Strip markup from feed text.
    
    Removes CDATA wrappers, script/style blocks and all remaining tags,
    then collapses whitespace runs to a single space and trims.
    
    Args:
        value: Raw text, possibly HTML-bearing. None and non-strings are tolerated.
        
    Returns:
        Plain single-line text, empty string if nothing is left
    """
    if value is None:
        return ""
    
    text = _CDATA_RE.sub(r"\1", str(value))
    if "<" in text or "&" in text:
        text = _strip_markup(text)
    
    return _WHITESPACE_RE.sub(" ", text).strip()


def _strip_markup(text: str) -> str:
    try:
        with warnings.catch_warnings():
            # Plain text that looks like a URL or filename is fine here
            warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
            soup = BeautifulSoup(text, "html.parser")
    except ParserRejectedMarkup:
        # Broken declarations like "<![ x": strip tags by pattern instead
        text = _SCRIPT_STYLE_RE.sub(" ", text)
        return html.unescape(_TAG_RE.sub(" ", text))
    
    for element in soup(["script", "style"]):
        element.decompose()
    return soup.get_text(" ")


def truncate(text: str, max_length: int = 280) -> str:
    """Truncate text to at most max_length characters, marking the cut with an ellipsis."""
    text = (text or "").strip()
    if len(text) <= max_length:
        return text
    if max_length <= 1:
        return ELLIPSIS[:max_length]
    return text[: max_length - 1].rstrip() + ELLIPSIS
