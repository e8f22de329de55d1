"""
Core data types for the digest pipeline.

This module defines the values that flow between pipeline stages:
- Article: Raw entry as produced by the feed source
- SummarizedArticle: Article with parsed timestamp and LLM summary (or None)
- FinalizedArticle: SummarizedArticle after the optional translation stage

All types are frozen; stages build new instances instead of mutating.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Article:
    """Represents a raw feed entry.

    Attributes:
        title: The article headline
        link: The full URL to the original article (identity within a batch)
        pub_date: Publish timestamp exactly as it appeared in the feed
    """

    title: str
    link: str
    pub_date: str


@dataclass(frozen=True)
class SummarizedArticle:
    """Article with a parsed publish time and an LLM summary.

    The summary has no default on purpose: None marks a failed
    summarization and has to be passed explicitly.

    Attributes:
        title: The article headline
        link: The full URL to the original article
        pub_date: Parsed publish time, or None when the feed value was unparsable
        summary: Generated summary text, or None if the request failed
    """

    title: str
    link: str
    pub_date: datetime | None
    summary: str | None


@dataclass(frozen=True)
class FinalizedArticle:
    """Article ready for output and delivery.

    Attributes:
        title: The article headline
        link: The full URL to the original article
        pub_date: Parsed publish time
        summary: Translated summary when translation succeeded, else the original
        translated: Whether summary holds translated text
        language: Target language code of the translated summary
    """

    title: str
    link: str
    pub_date: datetime | None
    summary: str | None
    translated: bool = False
    language: str | None = None

    @classmethod
    def from_summarized(cls, article: SummarizedArticle) -> FinalizedArticle:
        return cls(
            title=article.title,
            link=article.link,
            pub_date=article.pub_date,
            summary=article.summary,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "title": self.title,
            "link": self.link,
            "pub_date": self.pub_date.isoformat() if self.pub_date else None,
            "summary": self.summary,
            "translated": self.translated,
            "language": self.language,
        }
