"""
Google Gemini completion provider.

Uses the Generative Language REST API with the summary instruction
passed as ``systemInstruction``.
"""

from __future__ import annotations

from typing import Any

import httpx

from ...config import ProviderConfig
from ...errors import EmptyCompletionError
from ..tracing import record_span_error, set_span_output, start_span
from .base import CompletionProvider


class GeminiProvider(CompletionProvider):
    """Gemini-backed completion provider."""

    def __init__(self, cfg: ProviderConfig, api_key: str | None, client: httpx.AsyncClient):
        if not api_key:
            raise ValueError("Missing Google API key")
        self.cfg = cfg
        self.model = cfg.model
        self.api_key = api_key
        self.client = client

    async def complete(self, system: str, user: str) -> str:
        payload: dict[str, Any] = {
            "systemInstruction": {"parts": [{"text": system}]},
            "contents": [{"role": "user", "parts": [{"text": user}]}],
        }
        if self.cfg.temperature is not None:
            payload["generationConfig"] = {"temperature": self.cfg.temperature}

        with start_span(
            "gemini.generate_content",
            kind="llm",
            input_value={"system": system, "user": user},
            attributes={"llm.model": self.cfg.model, "llm.provider": "gemini"},
        ) as span:
            try:
                data = await self._post(payload)
                content = _extract_text(data)
                if not content:
                    raise EmptyCompletionError(
                        f"Completion for {user!r} returned no content"
                    )
            except (httpx.HTTPError, ValueError, EmptyCompletionError) as exc:
                record_span_error(span, exc)
                raise
            set_span_output(span, content)
        return content

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.cfg.base_url.rstrip('/')}/v1beta/models/{self.cfg.model}:generateContent"
        resp = await self.client.post(url, params={"key": self.api_key}, json=payload)
        resp.raise_for_status()
        return resp.json()


def _extract_text(data: Any) -> str:
    """Join the non-thought text parts of the first candidate.

    Falls back to every text part when the model only returned thoughts.
    """
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    if not isinstance(parts, list):
        return ""

    texts = [p.get("text", "") for p in parts if isinstance(p, dict) and not p.get("thought")]
    if not any(texts):
        texts = [p.get("text", "") for p in parts if isinstance(p, dict)]
    return "".join(t for t in texts if isinstance(t, str)).strip()
