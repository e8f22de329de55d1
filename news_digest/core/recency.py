"""
Publish-date parsing and the recency window filter.

Feeds disagree on timestamp formats: RSS uses RFC 2822
("Tue, 02 Jan 2024 10:00:00 +0000") while Atom and JSON exports use
ISO 8601 ("2024-01-02T10:00:00Z"). Both are accepted here.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Iterable

from .types import Article

DEFAULT_WINDOW = timedelta(hours=24)


def parse_pub_date(value: str | None) -> datetime | None:
    """Parse a feed timestamp into a timezone-aware datetime.

    Args:
        value: Raw timestamp string from the feed

    Returns:
        Aware datetime (naive values are taken as UTC), or None if the
        string matches neither RFC 2822 nor ISO 8601.

    Examples:
        >>> parse_pub_date("Tue, 02 Jan 2024 10:00:00 +0000")
        datetime.datetime(2024, 1, 2, 10, 0, tzinfo=datetime.timezone.utc)
        >>> parse_pub_date("not a date") is None
        True
    """
    if not value or not value.strip():
        return None
    text = value.strip()

    parsed: datetime | None = None
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        parsed = None

    if parsed is None:
        iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
        try:
            parsed = datetime.fromisoformat(iso)
        except ValueError:
            return None

    return _ensure_aware(parsed)


def filter_recent(
    articles: Iterable[Article],
    now: datetime,
    window: timedelta = DEFAULT_WINDOW,
) -> list[Article]:
    """Keep articles published strictly after ``now - window``.

    Entries whose pub_date cannot be parsed are excluded. Relative order
    is preserved and the input is not modified.

    Args:
        articles: Entries from the feed source
        now: Reference instant (naive values are taken as UTC)
        window: Look-back period, 24 hours by default

    Returns:
        New list with the recent entries
    """
    cutoff = _ensure_aware(now) - window
    recent: list[Article] = []
    for article in articles:
        published = parse_pub_date(article.pub_date)
        if published is None:
            continue
        if published > cutoff:
            recent.append(article)
    return recent


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
