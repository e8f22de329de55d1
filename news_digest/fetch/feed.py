"""
Feed retrieval and parsing.

The feed document is downloaded with httpx and parsed with feedparser,
which handles RSS 0.9x/1.0/2.0 and Atom. Any failure is fatal for the
run and surfaces as FeedError.
"""

from __future__ import annotations

import logging

import feedparser
import httpx

from ..core.types import Article
from ..errors import FeedError
from ..utils.logging import get_logger, log_event


class FeedSource:
    """Fetch a feed and turn its entries into Article values.

    Args:
        client: Shared HTTP client
        url: Feed URL
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        logger: logging.Logger | None = None,
    ):
        self.client = client
        self.url = url
        self.logger = logger or get_logger("fetch")

    async def fetch(self) -> list[Article]:
        """Download and parse the feed.

        Raises:
            FeedError: Network failure, non-2xx status, or a document
                that does not parse as a feed
        """
        log_event(self.logger, "Fetch feed", event="fetch_start", url=self.url)
        try:
            resp = await self.client.get(self.url, follow_redirects=True)
            resp.raise_for_status()
            body = resp.content
        except httpx.HTTPError as exc:
            raise FeedError(f"Failed to fetch feed {self.url}: {exc}") from exc

        articles = parse_feed(body)
        log_event(
            self.logger,
            "Fetched feed",
            event="fetch_complete",
            url=self.url,
            count=len(articles),
        )
        return articles


def parse_feed(document: bytes | str) -> list[Article]:
    """Parse a feed document into articles, keeping feed order.

    Entries without a link are skipped. The publish timestamp falls back
    to the updated timestamp and finally to an empty string, which the
    recency filter treats as unparsable.

    Raises:
        FeedError: The document is malformed and yielded no entries
    """
    # str input would be treated as a URL or path by feedparser
    if isinstance(document, str):
        document = document.encode("utf-8")
    feed = feedparser.parse(document)
    if not feed.entries and (feed.bozo or not feed.get("version")):
        raise FeedError(f"Malformed feed: {feed.get('bozo_exception') or 'unknown format'}")

    articles: list[Article] = []
    for entry in feed.entries:
        link = entry.get("link")
        if not link:
            continue
        articles.append(
            Article(
                title=entry.get("title", ""),
                link=link,
                pub_date=entry.get("published") or entry.get("updated") or "",
            )
        )
    return articles
