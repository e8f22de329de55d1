"""Feed retrieval."""

from .feed import FeedSource, parse_feed

__all__ = ["FeedSource", "parse_feed"]
