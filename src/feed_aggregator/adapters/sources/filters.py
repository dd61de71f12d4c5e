"""Keyword gating for feed items."""

from typing import Optional, Sequence

from feed_aggregator.core import KeywordRules, NormalizedItem


def contains_any(text: str, keywords: Optional[Sequence[str]]) -> bool:
    """
    Check if any keyword occurs in text.
    
    Args:
        text: Text to search
        keywords: Keywords to look for
        
    Returns:
        True if any keyword is a case-insensitive substring of text
    """
    if not keywords:
        return False
    
    haystack = (text or "").lower()
    return any(str(keyword).lower() in haystack for keyword in keywords)


def passes_keyword_filter(item: NormalizedItem, rules: Optional[KeywordRules]) -> bool:
    """Apply a feed's include/exclude lists to the item's title and summary."""
    if rules is None:
        return True
    
    text = f"{item.title} {item.summary}"
    if rules.include and not contains_any(text, rules.include):
        return False
    if rules.exclude and contains_any(text, rules.exclude):
        return False
    return True
