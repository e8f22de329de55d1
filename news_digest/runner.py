"""
Main pipeline orchestration for the news digest.

This module coordinates the workflow:
1. Fetch the feed
2. Keep entries from the recency window
3. Summarize each entry via the completion provider
4. Translate summaries (optional)
5. Print results, optionally write them to a file
6. Deliver each article to the webhook (optional)

Fetch failures and summarization batch failures abort the run. Per-item
failures in summarization and translation only degrade that item.
Delivery failures abort the run when ``notify.strict`` is set.

All collaborators share one httpx.AsyncClient created here and passed
down explicitly.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
import logging
from pathlib import Path
from typing import Protocol, Sequence

import httpx
from rich.console import Console

from .config import (
    AppConfig,
    HttpConfig,
    api_key_env_name,
    get_api_key,
    get_translate_key,
    get_webhook_url,
)
from .core.recency import filter_recent
from .core.result import Err
from .core.types import Article, FinalizedArticle
from .errors import BatchError, ConfigurationError, DeliveryError, FeedError
from .fetch.feed import FeedSource
from .llm.providers.base import CompletionProvider
from .llm.providers.factory import create_provider
from .llm.tracing import set_span_output, setup_langfuse, start_span
from .notify.discord import DiscordNotifier
from .output.renderer import render_console, write_output
from .summarize.summarizer import Summarizer
from .translate.deepl import DeepLClient
from .translate.translator import TranslationBackend, Translator
from .utils.logging import get_logger, log_event, setup_logging


class Stage(str, Enum):
    START = "start"
    FETCHED = "fetched"
    FILTERED = "filtered"
    SUMMARIZED = "summarized"
    TRANSLATED = "translated"
    NOTIFIED = "notified"
    DONE = "done"


class ArticleSource(Protocol):
    async def fetch(self) -> list[Article]: ...


class Notifier(Protocol):
    async def notify_all(
        self, articles: Sequence[FinalizedArticle]
    ) -> list[BaseException | None]: ...


@dataclass
class PipelineOutcome:
    """Summary of a completed run.

    Attributes:
        articles: Finalized articles in feed order
        fetched: Number of entries returned by the feed
        recent: Number of entries inside the recency window
        summarize_failures: Articles left without a summary
        translate_failures: Articles whose summary stayed untranslated
        notify_failures: Failed webhook deliveries
        notified: Whether the delivery stage ran
        stage: Last stage reached
    """

    articles: list[FinalizedArticle] = field(default_factory=list)
    fetched: int = 0
    recent: int = 0
    summarize_failures: int = 0
    translate_failures: int = 0
    notify_failures: int = 0
    notified: bool = False
    stage: Stage = Stage.START


def preflight(cfg: AppConfig) -> None:
    """Validate required credentials before any network activity.

    Raises:
        ConfigurationError: Completion key missing, or translation
            requested without a DeepL key
    """
    if not get_api_key(cfg.provider):
        raise ConfigurationError(
            f"You need `{api_key_env_name(cfg.provider)}` in environment variables."
        )
    if cfg.translate.target_lang and not get_translate_key(cfg.translate):
        raise ConfigurationError(
            f"Translation to {cfg.translate.target_lang} requested but "
            f"`{cfg.translate.api_key_env}` is not set."
        )


def run_pipeline(
    cfg: AppConfig,
    console: Console | None = None,
    output_path: Path | None = None,
    now: datetime | None = None,
) -> PipelineOutcome:
    """Run the complete pipeline synchronously.

    Sets up logging and tracing, then drives ``run_pipeline_async``.

    Raises:
        ConfigurationError, FeedError, BatchError, DeliveryError
    """
    setup_logging(cfg.logging)
    setup_langfuse(cfg.langfuse)
    preflight(cfg)
    return asyncio.run(
        run_pipeline_async(cfg, console=console, output_path=output_path, now=now)
    )


async def run_pipeline_async(
    cfg: AppConfig,
    console: Console | None = None,
    output_path: Path | None = None,
    now: datetime | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
    feed_source: ArticleSource | None = None,
    provider: CompletionProvider | None = None,
    translation_backend: TranslationBackend | None = None,
    notifier: Notifier | None = None,
) -> PipelineOutcome:
    """Run the pipeline; injected collaborators replace the configured ones."""
    client = http_client or build_http_client(cfg.http)
    try:
        return await _run(
            cfg,
            client,
            console or Console(),
            output_path,
            now,
            feed_source=feed_source,
            provider=provider,
            translation_backend=translation_backend,
            notifier=notifier,
        )
    finally:
        if http_client is None:
            await client.aclose()


def build_http_client(cfg: HttpConfig) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=cfg.timeout_seconds,
        trust_env=cfg.trust_env,
        headers={"User-Agent": cfg.user_agent},
    )


async def _run(
    cfg: AppConfig,
    client: httpx.AsyncClient,
    console: Console,
    output_path: Path | None,
    now: datetime | None,
    *,
    feed_source: ArticleSource | None,
    provider: CompletionProvider | None,
    translation_backend: TranslationBackend | None,
    notifier: Notifier | None,
) -> PipelineOutcome:
    logger = get_logger()
    outcome = PipelineOutcome()
    _enter(logger, outcome, Stage.START)

    with start_span("news_digest.run", kind="chain", input_value={"feed": cfg.feed.url}) as run_span:
        source = feed_source or FeedSource(client, cfg.feed.url)
        try:
            articles = await source.fetch()
        except FeedError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise FeedError(f"Failed to fetch feed {cfg.feed.url}: {exc}") from exc
        outcome.fetched = len(articles)
        _enter(logger, outcome, Stage.FETCHED, count=len(articles))

        reference = now or datetime.now(timezone.utc)
        recent = filter_recent(articles, reference, timedelta(hours=cfg.feed.window_hours))
        outcome.recent = len(recent)
        _enter(logger, outcome, Stage.FILTERED, count=len(recent))

        summarizer = Summarizer(
            provider or create_provider(cfg.provider, client),
            system_prompt=cfg.summary.system_prompt,
        )
        result = await summarizer.summarize(recent)
        if isinstance(result, Err):
            raise BatchError(f"Failed to summarize articles: {result.message}") from result.error
        summarized = result.data
        outcome.summarize_failures = sum(1 for a in summarized if a.summary is None)
        _enter(
            logger,
            outcome,
            Stage.SUMMARIZED,
            count=len(summarized),
            failed=outcome.summarize_failures,
        )

        target_lang = cfg.translate.target_lang
        if target_lang:
            backend = translation_backend or DeepLClient(
                client,
                get_translate_key(cfg.translate) or "",
                cfg.translate.base_url,
            )
            translator = Translator(backend, source_lang=cfg.translate.source_lang)
            finalized = await translator.translate(summarized, target_lang)
            outcome.translate_failures = sum(
                1 for a in finalized if a.summary is not None and not a.translated
            )
            _enter(
                logger,
                outcome,
                Stage.TRANSLATED,
                count=len(finalized),
                failed=outcome.translate_failures,
            )
        else:
            finalized = [FinalizedArticle.from_summarized(a) for a in summarized]
        outcome.articles = finalized

        render_console(finalized, console)
        if output_path is not None:
            write_output(finalized, output_path, f"News Digest - {reference:%Y-%m-%d}")
            log_event(logger, "Output written", event="output_written", path=str(output_path))

        if notifier is None:
            webhook_url = get_webhook_url(cfg.notify)
            if webhook_url:
                notifier = DiscordNotifier(client, webhook_url, cfg.notify.timezone)

        if notifier is None:
            log_event(
                logger,
                "No notification to the webhook because the webhook URL is not set.",
                level=logging.WARNING,
                event="notify_skipped",
            )
        else:
            deliveries = await notifier.notify_all(finalized)
            failures = [
                (article.link, exc)
                for article, exc in zip(finalized, deliveries)
                if exc is not None
            ]
            outcome.notified = True
            outcome.notify_failures = len(failures)
            _enter(
                logger,
                outcome,
                Stage.NOTIFIED,
                count=len(deliveries),
                failed=len(failures),
            )
            if failures and cfg.notify.strict:
                raise DeliveryError(
                    f"{len(failures)} of {len(finalized)} webhook deliveries failed",
                    failures=failures,
                )

        _enter(logger, outcome, Stage.DONE)
        set_span_output(
            run_span,
            {
                "fetched": outcome.fetched,
                "recent": outcome.recent,
                "summarize_failures": outcome.summarize_failures,
                "translate_failures": outcome.translate_failures,
                "notify_failures": outcome.notify_failures,
            },
        )
    return outcome


def _enter(logger: logging.Logger, outcome: PipelineOutcome, stage: Stage, **fields) -> None:
    outcome.stage = stage
    log_event(logger, f"Stage: {stage.value}", event="stage", stage=stage.value, **fields)
