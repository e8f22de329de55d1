"""Tests for publish-date parsing and the 24 hour recency window."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from news_digest.core.recency import filter_recent, parse_pub_date
from news_digest.core.types import Article


def _article(title: str, pub_date: str) -> Article:
    return Article(title=title, link=f"http://x/{title}", pub_date=pub_date)


def test_parse_pub_date_accepts_rfc2822_and_iso8601():
    rfc = parse_pub_date("Tue, 02 Jan 2024 10:00:00 +0000")
    iso = parse_pub_date("2024-01-02T10:00:00Z")

    expected = datetime(2024, 1, 2, 10, 0, tzinfo=timezone.utc)
    assert rfc == expected
    assert iso == expected


def test_parse_pub_date_treats_naive_values_as_utc():
    parsed = parse_pub_date("2024-01-02T10:00:00")

    assert parsed is not None
    assert parsed.utcoffset() == timedelta(0)


def test_parse_pub_date_returns_none_for_garbage():
    assert parse_pub_date("not a date") is None
    assert parse_pub_date("") is None
    assert parse_pub_date(None) is None


def test_article_two_hours_old_is_retained():
    article = _article("A", "2024-01-02T10:00:00Z")
    now = datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc)

    assert filter_recent([article], now) == [article]


def test_article_older_than_a_day_is_excluded():
    article = _article("A", "2024-01-02T10:00:00Z")
    now = datetime(2024, 1, 4, 0, 0, tzinfo=timezone.utc)

    assert filter_recent([article], now) == []


def test_boundary_is_exclusive():
    now = datetime(2024, 1, 3, 10, 0, tzinfo=timezone.utc)
    exactly_a_day = _article("edge", "2024-01-02T10:00:00Z")
    just_inside = _article("inside", "2024-01-02T10:00:01Z")

    assert filter_recent([exactly_a_day, just_inside], now) == [just_inside]


def test_unparsable_dates_are_excluded_and_order_is_preserved():
    now = datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc)
    articles = [
        _article("first", "Tue, 02 Jan 2024 11:00:00 +0000"),
        _article("broken", "yesterday-ish"),
        _article("old", "Sun, 31 Dec 2023 11:00:00 +0000"),
        _article("second", "2024-01-02T09:00:00+09:00"),
    ]

    recent = filter_recent(articles, now)

    assert [a.title for a in recent] == ["first", "second"]
    assert len(articles) == 4


def test_naive_now_is_treated_as_utc():
    article = _article("A", "2024-01-02T10:00:00Z")

    assert filter_recent([article], datetime(2024, 1, 2, 12, 0)) == [article]


def test_custom_window():
    article = _article("A", "2024-01-02T10:00:00Z")
    now = datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc)

    assert filter_recent([article], now, timedelta(hours=1)) == []
