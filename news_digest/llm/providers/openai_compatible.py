"""OpenAI-compatible chat completions provider."""

from __future__ import annotations

from typing import Any

import httpx

from ...config import ProviderConfig
from ...errors import EmptyCompletionError
from ..prompts import build_messages
from ..tracing import record_span_error, set_span_output, start_span
from .base import CompletionProvider


class OpenAICompatibleProvider(CompletionProvider):
    """Calls ``POST {base_url}/chat/completions`` with bearer auth.

    Works against api.openai.com and any server exposing the same
    wire format.
    """

    def __init__(self, cfg: ProviderConfig, api_key: str | None, client: httpx.AsyncClient):
        if not api_key:
            raise ValueError("Missing OpenAI API key")
        self.cfg = cfg
        self.model = cfg.model
        self.api_key = api_key
        self.client = client

    async def complete(self, system: str, user: str) -> str:
        payload: dict[str, Any] = {
            "model": self.cfg.model,
            "messages": build_messages(system, user),
        }
        if self.cfg.temperature is not None:
            payload["temperature"] = self.cfg.temperature

        with start_span(
            "openai.chat_completion",
            kind="llm",
            input_value=payload["messages"],
            attributes={"llm.model": self.cfg.model, "llm.provider": "openai"},
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
        return content.strip()

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.cfg.base_url.rstrip('/')}/chat/completions"
        headers = {"Authorization": f"Bearer {self.api_key}"}
        resp = await self.client.post(url, json=payload, headers=headers)
        resp.raise_for_status()
        return resp.json()


def _extract_text(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    if not isinstance(content, str):
        return ""
    return content.strip()
