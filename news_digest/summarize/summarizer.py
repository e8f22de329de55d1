"""
Concurrent per-article summarization.

Every article gets exactly one completion request. All requests are
started together and joined with a settle-all join, so one slow or
failing article never blocks or aborts the others. A failed article
keeps its place in the output with ``summary=None``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from ..core.recency import parse_pub_date
from ..core.result import Err, Ok, Result
from ..core.types import Article, SummarizedArticle
from ..errors import EmptyCompletionError
from ..llm.prompts import SYSTEM_PROMPT
from ..llm.providers.base import CompletionProvider
from ..utils.logging import get_logger, log_event


class Summarizer:
    """Summarize a batch of articles through a completion provider.

    Args:
        provider: Completion backend shared by all requests
        system_prompt: Instruction sent alongside each article link
        logger: Logger for per-item diagnostics
    """

    def __init__(
        self,
        provider: CompletionProvider,
        system_prompt: str = SYSTEM_PROMPT,
        logger: logging.Logger | None = None,
    ):
        self.provider = provider
        self.system_prompt = system_prompt
        self.logger = logger or get_logger("summarize")

    async def summarize(self, articles: Sequence[Article]) -> Result[list[SummarizedArticle]]:
        """Summarize all articles concurrently.

        Returns:
            Ok with one SummarizedArticle per input article, in input order.
            Err only when gathering or collecting the outcomes itself raised;
            individual request failures never produce Err.
        """
        if not articles:
            return Ok([])

        try:
            outcomes = await asyncio.gather(
                *(self._summarize_one(article) for article in articles),
                return_exceptions=True,
            )
            summarized = [
                self._collect(article, outcome)
                for article, outcome in zip(articles, outcomes)
            ]
        except Exception as exc:  # noqa: BLE001
            return Err(exc)

        failed = sum(1 for item in summarized if item.summary is None)
        log_event(
            self.logger,
            "Summarize batch complete",
            event="summarize_batch",
            total=len(summarized),
            failed=failed,
        )
        return Ok(summarized)

    async def _summarize_one(self, article: Article) -> str:
        content = await self.provider.complete(self.system_prompt, article.link)
        if not isinstance(content, str) or not content.strip():
            raise EmptyCompletionError(f"Completion for {article.link!r} returned no content")
        return content

    def _collect(self, article: Article, outcome: str | BaseException) -> SummarizedArticle:
        pub_date = parse_pub_date(article.pub_date)
        if isinstance(outcome, BaseException):
            log_event(
                self.logger,
                f"failed to summarize: {article.title}",
                level=logging.WARNING,
                event="summarize_failed",
                title=article.title,
                link=article.link,
                error=f"{type(outcome).__name__}: {outcome}",
            )
            return SummarizedArticle(
                title=article.title,
                link=article.link,
                pub_date=pub_date,
                summary=None,
            )
        return SummarizedArticle(
            title=article.title,
            link=article.link,
            pub_date=pub_date,
            summary=outcome,
        )
