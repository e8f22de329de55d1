"""
Command-line interface for the news digest.

Uses Typer to provide a CLI with options for the most common
configuration settings. Supports loading .env files for credentials.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from .config import load_config, select_provider
from .errors import ConfigurationError, DeliveryError, DigestError
from .llm.tracing import flush
from .runner import run_pipeline
from .utils.logging import get_logger

try:
    from dotenv import load_dotenv
except Exception:  # noqa: BLE001
    load_dotenv = None

app = typer.Typer(add_completion=False)
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main() -> None:
    """Summarize recent feed articles with an LLM and post them to a webhook."""


@app.command()
def run(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    feed_url: str | None = typer.Option(None, "--feed-url", help="RSS or Atom feed URL."),
    model: str | None = typer.Option(None, "--model", help="Completion model identifier."),
    provider: str | None = typer.Option(
        None, "--provider", help="Completion provider: openai, openai_compatible or gemini."
    ),
    window_hours: float | None = typer.Option(
        None, "--window-hours", help="Only summarize entries newer than this many hours."
    ),
    target_lang: str | None = typer.Option(
        None,
        "--target-lang",
        envvar="TARGET_LANG",
        help="Translate summaries to this DeepL language code (e.g. JA).",
    ),
    webhook_url: str | None = typer.Option(
        None,
        "--webhook-url",
        help="Discord webhook URL (or set DISCORD_WEBHOOK_URL / .env).",
    ),
    strict_notify: bool | None = typer.Option(
        None,
        "--strict-notify/--no-strict-notify",
        help="Exit nonzero when any webhook delivery fails.",
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Also write results to a .md or .json file."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    api_key: str | None = typer.Option(
        None,
        "--api-key",
        help="Override completion API key (or set OPEN_AI_API_KEY / .env).",
    ),
):
    """Fetch the feed, summarize recent entries and deliver them.

    Exits with code 1 when credentials are missing, the feed cannot be
    fetched, the summarization batch fails, or (in strict mode) any
    webhook delivery fails.
    """
    # Load environment variables from .env if available
    if load_dotenv is not None:
        load_dotenv()

    cfg = load_config(str(config) if config else None)

    # Override with CLI options
    if api_key:
        cfg.provider.api_key = api_key
    if provider:
        cfg.provider = select_provider(cfg.provider, provider)
    if model:
        cfg.provider.model = model
    if feed_url:
        cfg.feed.url = feed_url
    if window_hours is not None:
        cfg.feed.window_hours = window_hours
    if target_lang:
        cfg.translate.target_lang = target_lang
    if webhook_url:
        cfg.notify.webhook_url = webhook_url
    if strict_notify is not None:
        cfg.notify.strict = strict_notify
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file

    try:
        run_pipeline(cfg, console=console, output_path=output)
    except ConfigurationError as exc:
        err_console.print(f"[red]{exc}[/red]")
        err_console.print("Please read README.md again carefully!")
        raise typer.Exit(code=1)
    except DeliveryError as exc:
        logger = get_logger()
        for link, error in exc.failures:
            logger.error("Delivery failed for %s: %s", link, error)
        logger.error("Notify Error: %s", exc)
        raise typer.Exit(code=1)
    except DigestError as exc:
        get_logger().error("%s", exc, exc_info=exc.__cause__ is not None)
        raise typer.Exit(code=1)
    finally:
        # Flush Langfuse traces before exit
        flush()


if __name__ == "__main__":
    app()
