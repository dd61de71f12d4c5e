"""Configuration management."""

import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from feed_aggregator.core import (
    ConfigError,
    FeedDefinition,
    KeywordRules,
    RunDefaults,
    TagClassifier,
)
from feed_aggregator.core.tagging import DEFAULT_TAG_PATTERNS

DEFAULT_CONFIG_PATH = Path("feeds.yml")
DEFAULT_OUTPUT_DIR = Path("data")
OUTPUT_DIR_ENV = "FEED_AGGREGATOR_OUTPUT_DIR"

# YAML key -> RunDefaults field
DEFAULTS_KEYS = {
    "maxItemsPerFeed": "max_items_per_feed",
    "maxTotalItems": "max_total_items",
    "timeoutMs": "timeout_ms",
    "summaryMaxLength": "summary_max_length",
    "concurrency": "concurrency",
}


@dataclass(frozen=True)
class TagRuleConfig:
    """Tag name and its regular expression."""
    tag: str
    pattern: str


@dataclass(frozen=True)
class Settings:
    """Application settings, loaded once per run."""
    
    feeds: tuple[FeedDefinition, ...]
    defaults: RunDefaults = field(default_factory=RunDefaults)
    tag_rules: tuple[TagRuleConfig, ...] = tuple(
        TagRuleConfig(tag, pattern) for tag, pattern in DEFAULT_TAG_PATTERNS
    )
    output_dir: Path = DEFAULT_OUTPUT_DIR
    
    def build_classifier(self) -> TagClassifier:
        return TagClassifier.from_patterns((rule.tag, rule.pattern) for rule in self.tag_rules)


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}
    
    with open(config_path, "r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{config_path}: invalid YAML: {e}") from e


def _string_list(value: Any, where: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list):
        raise ConfigError(f"{where} must be a list of strings")
    return tuple(str(v) for v in value if v is not None and str(v) != "")


def _positive_int(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{where} must be a positive integer, got {value!r}")
    return value


def parse_defaults(raw: Optional[dict]) -> RunDefaults:
    """Build RunDefaults from the `defaults` block."""
    if raw is None:
        return RunDefaults()
    if not isinstance(raw, dict):
        raise ConfigError("defaults must be a mapping")
    
    values: dict[str, Any] = {}
    for key, attr in DEFAULTS_KEYS.items():
        if raw.get(key) is not None:
            values[attr] = _positive_int(raw[key], f"defaults.{key}")
    
    if raw.get("userAgent"):
        values["user_agent"] = str(raw["userAgent"])
    if "stripUrlParams" in raw:
        values["strip_url_params"] = _string_list(raw["stripUrlParams"], "defaults.stripUrlParams")
    
    return RunDefaults(**values)


def parse_feed(raw: Any, index: int) -> FeedDefinition:
    """Build one FeedDefinition from its YAML mapping."""
    where = f"feeds[{index}]"
    if not isinstance(raw, dict):
        raise ConfigError(f"{where} must be a mapping")
    
    for key in ("id", "name", "url"):
        if not raw.get(key):
            raise ConfigError(f"{where} is missing required field '{key}'")
    
    max_items = raw.get("maxItemsPerFeed")
    if max_items is not None:
        max_items = _positive_int(max_items, f"{where}.maxItemsPerFeed")
    
    keywords = raw.get("keywords") or {}
    if not isinstance(keywords, dict):
        raise ConfigError(f"{where}.keywords must be a mapping")
    
    return FeedDefinition(
        id=str(raw["id"]),
        name=str(raw["name"]),
        url=str(raw["url"]),
        category=str(raw.get("category") or "Uncategorized"),
        max_items_per_feed=max_items,
        keywords=KeywordRules(
            include=_string_list(keywords.get("include"), f"{where}.keywords.include"),
            exclude=_string_list(keywords.get("exclude"), f"{where}.keywords.exclude"),
        ),
    )


def parse_feeds(raw: Any) -> tuple[FeedDefinition, ...]:
    """Build and validate the feed list. An empty or missing list is fatal."""
    if raw is None:
        raise ConfigError('Config is missing or invalid (expected top-level "feeds" array).')
    if not isinstance(raw, list):
        raise ConfigError('"feeds" must be a list')
    if not raw:
        raise ConfigError('"feeds" list is empty')
    
    feeds = tuple(parse_feed(item, i) for i, item in enumerate(raw))
    
    seen: set[str] = set()
    for feed in feeds:
        if feed.id in seen:
            raise ConfigError(f"Duplicate feed id '{feed.id}'")
        seen.add(feed.id)
    
    return feeds


def parse_tag_rules(raw: Any) -> tuple[TagRuleConfig, ...]:
    """Build tag rules from the optional `tags` section."""
    if not isinstance(raw, list):
        raise ConfigError('"tags" must be a list of {tag, pattern} mappings')
    
    rules = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict) or not item.get("tag") or not item.get("pattern"):
            raise ConfigError(f"tags[{i}] must have 'tag' and 'pattern'")
        try:
            re.compile(str(item["pattern"]))
        except re.error as e:
            raise ConfigError(f"tags[{i}] has invalid pattern: {e}") from e
        rules.append(TagRuleConfig(tag=str(item["tag"]), pattern=str(item["pattern"])))
    return tuple(rules)


def get_settings(
    config_path: Path = DEFAULT_CONFIG_PATH,
    output_dir: Optional[Path] = None,
) -> Settings:
    """Get application settings from YAML config and environment."""
    # Load YAML config
    config = load_config(config_path)
    if not isinstance(config, dict):
        raise ConfigError(f"{config_path}: top level must be a mapping")
    
    # Output directory: explicit argument, then environment, then default
    if output_dir is None:
        env_dir = os.getenv(OUTPUT_DIR_ENV)
        output_dir = Path(env_dir) if env_dir else DEFAULT_OUTPUT_DIR
    
    # Build settings
    settings = Settings(
        feeds=parse_feeds(config.get("feeds")),
        defaults=parse_defaults(config.get("defaults")),
        output_dir=output_dir,
    )
    
    if config.get("tags") is not None:
        settings = replace(settings, tag_rules=parse_tag_rules(config["tags"]))
    
    return settings
