"""
Result rendering for the console, Markdown and JSON.

The console view is always printed at the end of summarization so that
degraded items (missing summaries) remain visible even when delivery is
skipped or fails.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from ..core.types import FinalizedArticle

MISSING_SUMMARY = "(summary unavailable)"


def render_console(articles: Sequence[FinalizedArticle], console: Console) -> None:
    """Print one panel per article."""
    if not articles:
        console.print("[yellow]No recent articles.[/yellow]")
        return
    for idx, article in enumerate(articles, 1):
        posted = article.pub_date.isoformat() if article.pub_date else "unknown"
        if article.summary is None:
            body = f"[red]{MISSING_SUMMARY}[/red]"
        else:
            body = escape(article.summary)
        lang = f" [{article.language}]" if article.translated and article.language else ""
        console.print(
            Panel(
                f"[dim]{escape(article.link)}[/dim]\n[dim]Posted at {posted}{escape(lang)}[/dim]\n\n{body}",
                title=f"{idx}. {escape(article.title)}",
                title_align="left",
            )
        )


def render_markdown(articles: Sequence[FinalizedArticle], output_path: Path, title: str) -> None:
    """Render articles as a Markdown document.

    Args:
        articles: Finalized articles to render
        output_path: Path where the Markdown file will be written
        title: Document title
    """
    lines = [f"# {title}", ""]
    for article in articles:
        lines.append(f"## [{article.title}]({article.link})")
        lines.append("")
        if article.pub_date is not None:
            lines.append(f"*Posted at {article.pub_date.isoformat()}*")
            lines.append("")
        lines.append(article.summary if article.summary is not None else MISSING_SUMMARY)
        lines.append("")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text("\n".join(lines), encoding="utf-8")


def render_json(articles: Sequence[FinalizedArticle], output_path: Path) -> None:
    """Write articles as a JSON array."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps([a.to_dict() for a in articles], ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


def write_output(articles: Sequence[FinalizedArticle], output_path: Path, title: str) -> None:
    """Write Markdown or JSON depending on the file suffix."""
    if output_path.suffix.lower() == ".json":
        render_json(articles, output_path)
    else:
        render_markdown(articles, output_path, title)
