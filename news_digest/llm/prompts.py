"""Prompt constants and message builders for completion providers."""

from __future__ import annotations

SYSTEM_PROMPT = (
    "You're an IT-savvy journalist. Summarize news in around 100 words without title."
)


def build_messages(system_prompt: str, article_url: str) -> list[dict[str, str]]:
    """Build chat messages asking for a summary of the page at ``article_url``."""
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": article_url},
    ]
