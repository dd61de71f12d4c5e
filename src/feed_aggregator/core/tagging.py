"""Rule-based topic tagging."""

import re
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class TagRule:
    """Named case-insensitive pattern."""
    
    tag: str
    pattern: re.Pattern[str]
    
    @classmethod
    def compile(cls, tag: str, pattern: str) -> "TagRule":
        return cls(tag=tag, pattern=re.compile(pattern, re.IGNORECASE))
    
    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


DEFAULT_TAG_PATTERNS: tuple[tuple[str, str], ...] = (
    ("Privacy", r"\bprivacy\b|gdpr|consent|tracking|cookie|cookies|data broker|eprivacy|dsa|dma"),
    ("Antitrust", r"\bantitrust\b|\bcompetition\b|monopoly|dominant position|merger"),
    ("RTB", r"\brtb\b|real-time bidding|openrtb|bid request|bid response|auction"),
    ("Identity", r"\bidentity\b|id-less|idfa|maid|uid2|ppid"),
    ("Measurement", r"measurement|attribution|incrementality|mmm|mta|conversion"),
    ("CTV", r"\bctv\b|connected tv|\bott\b|streaming"),
    ("Fraud", r"fraud|ivt|spoofing|ads\.txt|app-ads\.txt|sellers\.json"),
    ("AI", r"\bai\b|llm|machine learning|generative"),
    ("Policy", r"regulation|law|court|enforcement|settlement|complaint|filed|trial"),
)


class TagClassifier:
    """Map text to labels by evaluating an ordered rule table."""
    
    def __init__(self, rules: Iterable[TagRule] | None = None) -> None:
        if rules is None:
            rules = [TagRule.compile(tag, pattern) for tag, pattern in DEFAULT_TAG_PATTERNS]
        self.rules: tuple[TagRule, ...] = tuple(rules)
    
    @classmethod
    def from_patterns(cls, patterns: Iterable[tuple[str, str]]) -> "TagClassifier":
        return cls(TagRule.compile(tag, pattern) for tag, pattern in patterns)
    
    def classify(self, text: str) -> tuple[str, ...]:
        """Return matching tags in rule-definition order, each at most once."""
        tags: list[str] = []
        for rule in self.rules:
            if rule.tag not in tags and rule.matches(text or ""):
                tags.append(rule.tag)
        return tuple(tags)
