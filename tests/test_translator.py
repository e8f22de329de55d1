"""Tests for DeepL translation and the fallback-to-original policy."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone

import httpx
import pytest

from news_digest.core.types import SummarizedArticle
from news_digest.errors import TranslationError
from news_digest.translate.deepl import DeepLClient
from news_digest.translate.translator import Translator


def _summarized(title: str, summary: str | None) -> SummarizedArticle:
    return SummarizedArticle(
        title=title,
        link=f"https://example.com/{title}",
        pub_date=datetime(2024, 1, 2, 10, 0, tzinfo=timezone.utc),
        summary=summary,
    )


def _run_with_transport(handler, articles, target_lang="JA"):
    async def _go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            backend = DeepLClient(client, "test-key", "https://api-free.deepl.com")
            return await Translator(backend).translate(articles, target_lang)

    return asyncio.run(_go())


def test_successful_translation_replaces_summary_only():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = json.loads(request.content)
        return httpx.Response(
            200,
            json={"translations": [{"detected_source_language": "EN", "text": f"JA:{body['text'][0]}"}]},
        )

    article = _summarized("A", "hello")
    result = _run_with_transport(handler, [article])

    assert len(result) == 1
    assert result[0].summary == "JA:hello"
    assert result[0].translated is True
    assert result[0].language == "JA"
    assert result[0].title == article.title
    assert result[0].link == article.link
    assert result[0].pub_date == article.pub_date

    request = seen[0]
    assert request.url == "https://api-free.deepl.com/v2/translate"
    assert request.headers["Authorization"] == "DeepL-Auth-Key test-key"
    assert json.loads(request.content) == {"text": ["hello"], "target_lang": "JA"}


def test_quota_exceeded_keeps_original_summary(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(456, json={"message": "Quota exceeded"})

    with caplog.at_level("WARNING", logger="news_digest"):
        result = _run_with_transport(handler, [_summarized("A", "hello")])

    assert result[0].summary == "hello"
    assert result[0].translated is False
    assert "failed to translate: A" in caplog.text
    record = next(r for r in caplog.records if getattr(r, "event", None) == "translate_failed")
    assert record.status_code == 456
    assert record.payload == {"message": "Quota exceeded"}


def test_absent_summary_passes_through_without_request():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json={"translations": [{"text": "x"}]})

    article = _summarized("A", None)
    result = _run_with_transport(handler, [article])

    assert calls == 0
    assert result[0].summary is None
    assert result[0].translated is False
    assert result[0].title == article.title


def test_mixed_batch_keeps_length_and_order():
    def handler(request: httpx.Request) -> httpx.Response:
        text = json.loads(request.content)["text"][0]
        if text == "bad":
            raise httpx.ConnectError("connection refused")
        return httpx.Response(200, json={"translations": [{"text": text.upper()}]})

    articles = [
        _summarized("one", "first"),
        _summarized("two", None),
        _summarized("three", "bad"),
        _summarized("four", "fourth"),
    ]
    result = _run_with_transport(handler, articles)

    assert [a.title for a in result] == ["one", "two", "three", "four"]
    assert [a.summary for a in result] == ["FIRST", None, "bad", "FOURTH"]
    assert [a.translated for a in result] == [True, False, False, True]


def test_empty_input_returns_empty_list():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert _run_with_transport(handler, []) == []


def test_unreadable_success_body_is_a_failure_not_a_crash():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"\x00<opaque>")

    result = _run_with_transport(handler, [_summarized("A", "hello")])

    assert result[0].summary == "hello"
    assert result[0].translated is False


def test_deepl_client_raises_translation_error_with_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, text="Forbidden")

    async def _go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await DeepLClient(client, "bad-key", "https://api.deepl.com").translate("hi", "DE")

    with pytest.raises(TranslationError) as excinfo:
        asyncio.run(_go())

    assert excinfo.value.status_code == 403
    assert excinfo.value.payload == "Forbidden"


def test_deepl_client_rejects_response_without_translations():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"translations": []})

    async def _go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await DeepLClient(client, "key", "https://api.deepl.com").translate("hi", "DE")

    with pytest.raises(TranslationError, match="no translations"):
        asyncio.run(_go())


def test_deepl_client_sends_source_lang_when_given():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"translations": [{"text": "hallo"}]})

    async def _go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await DeepLClient(client, "key", "https://api.deepl.com/").translate(
                "hello", "DE", source_lang="EN"
            )

    assert asyncio.run(_go()) == "hallo"
    assert bodies == [{"text": ["hello"], "target_lang": "DE", "source_lang": "EN"}]


class _BarrierBackend:
    """Backend whose calls only finish once every expected call has started."""

    def __init__(self, expected: int):
        self.expected = expected
        self.started = 0
        self.in_flight = 0
        self.peak_in_flight = 0
        self.all_started = asyncio.Event()

    async def translate(self, text, target_lang, source_lang=None):
        self.started += 1
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        if self.started == self.expected:
            self.all_started.set()
        try:
            await asyncio.wait_for(self.all_started.wait(), timeout=1.0)
        finally:
            self.in_flight -= 1
        return text.upper()


def test_translations_are_in_flight_together():
    articles = [_summarized(name, f"{name} summary") for name in ("a", "b", "c")]
    backend = _BarrierBackend(expected=len(articles))

    result = asyncio.run(Translator(backend).translate(articles, "JA"))

    assert backend.peak_in_flight == len(articles)
    assert [item.summary for item in result] == ["A SUMMARY", "B SUMMARY", "C SUMMARY"]
    assert all(item.translated for item in result)
