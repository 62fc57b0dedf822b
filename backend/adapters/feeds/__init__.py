"""Feed adapters for RSS import."""

from .rss_adapter import (
    FeedError,
    FeedFetchError,
    FeedParseError,
    FeedValidationError,
    RssFeedReader,
    RssItem,
    clamp_item_count,
    parse_feed,
)

__all__ = [
    "RssFeedReader",
    "RssItem",
    "FeedError",
    "FeedFetchError",
    "FeedParseError",
    "FeedValidationError",
    "clamp_item_count",
    "parse_feed",
]
