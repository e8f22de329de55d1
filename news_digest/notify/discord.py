"""
Discord webhook delivery.

Each finalized article is posted as one message of the form::

    [Title](https://link) - Posted at 2024/01/02 19:00:00
    Summary text...
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence
from zoneinfo import ZoneInfo

import httpx

from ..core.types import FinalizedArticle
from ..output.renderer import MISSING_SUMMARY
from ..utils.logging import get_logger, log_event

DISCORD_CONTENT_LIMIT = 2000


def format_message(article: FinalizedArticle, tz: ZoneInfo) -> str:
    """Render an article as Discord markdown, capped at the content limit."""
    if article.pub_date is not None:
        posted = article.pub_date.astimezone(tz).strftime("%Y/%m/%d %H:%M:%S")
    else:
        posted = "unknown time"
    summary = article.summary if article.summary is not None else MISSING_SUMMARY
    content = f"[{article.title}]({article.link}) - Posted at {posted}\n{summary}"
    if len(content) > DISCORD_CONTENT_LIMIT:
        content = content[: DISCORD_CONTENT_LIMIT - 1] + "…"
    return content


class DiscordNotifier:
    """Post finalized articles to a Discord webhook.

    Args:
        client: Shared HTTP client
        webhook_url: Discord webhook endpoint
        timezone: IANA zone name for "Posted at" timestamps
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        webhook_url: str,
        timezone: str = "Asia/Tokyo",
        logger: logging.Logger | None = None,
    ):
        self.client = client
        self.webhook_url = webhook_url
        self.tz = ZoneInfo(timezone)
        self.logger = logger or get_logger("notify")

    async def notify(self, article: FinalizedArticle) -> None:
        """Deliver one article; raises httpx.HTTPError on failure."""
        resp = await self.client.post(
            self.webhook_url,
            json={"content": format_message(article, self.tz)},
        )
        resp.raise_for_status()

    async def notify_all(
        self, articles: Sequence[FinalizedArticle]
    ) -> list[BaseException | None]:
        """Deliver every article and wait for all deliveries to settle.

        Returns:
            One entry per article in input order: None on success, the
            raised exception on failure.
        """
        outcomes = await asyncio.gather(
            *(self.notify(article) for article in articles),
            return_exceptions=True,
        )
        results: list[BaseException | None] = []
        for article, outcome in zip(articles, outcomes):
            if isinstance(outcome, BaseException):
                log_event(
                    self.logger,
                    f"failed to notify: {article.title}",
                    level=logging.ERROR,
                    event="notify_failed",
                    title=article.title,
                    link=article.link,
                    error=f"{type(outcome).__name__}: {outcome}",
                )
                results.append(outcome)
            else:
                results.append(None)
        return results
