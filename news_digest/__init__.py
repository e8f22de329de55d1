"""
News Digest - LLM-summarized feed digests delivered to a chat webhook.

This package fetches an RSS/Atom feed, keeps entries from the last 24
hours, summarizes each one through a completion service, optionally
translates the summaries with DeepL, and posts them to a Discord webhook.

Main entry point is the CLI via `news-digest run` command.

Example:
    $ OPEN_AI_API_KEY=... news-digest run --target-lang JA
"""

__all__ = [
    "__version__",
    "Article",
    "SummarizedArticle",
    "FinalizedArticle",
    "filter_recent",
    "Summarizer",
    "Translator",
]
__version__ = "0.1.0"

from .core.recency import filter_recent
from .core.types import Article, FinalizedArticle, SummarizedArticle
from .summarize.summarizer import Summarizer
from .translate.translator import Translator
