from __future__ import annotations

import logging

import pytest

from news_digest.llm import tracing


@pytest.fixture(autouse=True)
def _reset_logging_and_tracing(monkeypatch):
    """Undo CLI-level logging setup so caplog sees package records."""
    logger = logging.getLogger("news_digest")
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    monkeypatch.setattr(tracing, "_TRACER", None)
    monkeypatch.setattr(tracing, "_CFG", None)
    for key in (
        "OPEN_AI_API_KEY",
        "GOOGLE_API_KEY",
        "DEEPL_API_KEY",
        "DISCORD_WEBHOOK_URL",
        "TARGET_LANG",
    ):
        monkeypatch.delenv(key, raising=False)
    yield
    logger.handlers = []
    logger.propagate = True
