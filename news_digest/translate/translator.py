"""
Optional per-article translation stage.

Mirrors the Summarizer's isolation policy: each summary is translated
by its own request, all requests are joined with a settle-all join, and
a failed translation falls back to the original summary.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
import logging
from typing import Protocol, Sequence

from ..core.types import FinalizedArticle, SummarizedArticle
from ..utils.logging import get_logger, log_event


class TranslationBackend(Protocol):
    async def translate(
        self, text: str, target_lang: str, source_lang: str | None = None
    ) -> str: ...


class Translator:
    """Translate summaries of a batch of articles.

    Args:
        backend: Translation service client (e.g. DeepLClient)
        source_lang: Optional fixed source language
        logger: Logger for per-item diagnostics
    """

    def __init__(
        self,
        backend: TranslationBackend,
        source_lang: str | None = None,
        logger: logging.Logger | None = None,
    ):
        self.backend = backend
        self.source_lang = source_lang
        self.logger = logger or get_logger("translate")

    async def translate(
        self,
        articles: Sequence[SummarizedArticle],
        target_lang: str,
    ) -> list[FinalizedArticle]:
        """Translate every present summary into ``target_lang``.

        Articles without a summary pass through untouched and trigger no
        request. Output has the same length and order as the input.
        """
        finalized = [FinalizedArticle.from_summarized(article) for article in articles]
        pending = [idx for idx, item in enumerate(finalized) if item.summary is not None]
        if not pending:
            return finalized

        outcomes = await asyncio.gather(
            *(self._translate_one(finalized[idx], target_lang) for idx in pending),
            return_exceptions=True,
        )

        failed = 0
        for idx, outcome in zip(pending, outcomes):
            article = finalized[idx]
            if isinstance(outcome, BaseException):
                failed += 1
                log_event(
                    self.logger,
                    f"failed to translate: {article.title}",
                    level=logging.WARNING,
                    event="translate_failed",
                    title=article.title,
                    link=article.link,
                    target_lang=target_lang,
                    error=f"{type(outcome).__name__}: {outcome}",
                    status_code=getattr(outcome, "status_code", None),
                    payload=getattr(outcome, "payload", None),
                )
                continue
            finalized[idx] = replace(
                article,
                summary=outcome,
                translated=True,
                language=target_lang,
            )

        log_event(
            self.logger,
            "Translate batch complete",
            event="translate_batch",
            total=len(finalized),
            requested=len(pending),
            failed=failed,
        )
        return finalized

    async def _translate_one(self, article: FinalizedArticle, target_lang: str) -> str:
        return await self.backend.translate(
            article.summary or "", target_lang, source_lang=self.source_lang
        )
