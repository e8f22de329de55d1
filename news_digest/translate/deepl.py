"""
DeepL translation client.

Translates one text per request through ``POST /v2/translate``. Every
failure mode (transport error, non-2xx status, unreadable or unexpected
body) surfaces as TranslationError so callers can handle a single
exception type.
"""

from __future__ import annotations

from typing import Any

import httpx

from ..errors import TranslationError
from ..llm.tracing import record_span_error, set_span_output, start_span

_STATUS_HINTS = {
    403: "authorization failed, check the DeepL API key",
    413: "request too large",
    429: "too many requests",
    456: "quota exceeded",
}


class DeepLClient:
    """Thin async wrapper around the DeepL REST API.

    Args:
        client: Shared HTTP client
        api_key: DeepL authentication key
        base_url: API root, ``https://api-free.deepl.com`` for free keys
            or ``https://api.deepl.com`` for pro keys
    """

    def __init__(self, client: httpx.AsyncClient, api_key: str, base_url: str):
        if not api_key:
            raise ValueError("Missing DeepL API key")
        self.client = client
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    async def translate(
        self,
        text: str,
        target_lang: str,
        source_lang: str | None = None,
    ) -> str:
        """Translate a single text.

        Raises:
            TranslationError: On any failure; status_code and payload carry
                the diagnostics the service returned, if any.
        """
        payload: dict[str, Any] = {"text": [text], "target_lang": target_lang}
        if source_lang:
            payload["source_lang"] = source_lang

        with start_span(
            "deepl.translate",
            kind="tool",
            input_value=text,
            attributes={"translate.target_lang": target_lang},
        ) as span:
            try:
                translated = await self._request(payload)
            except TranslationError as exc:
                record_span_error(span, exc)
                raise
            set_span_output(span, translated)
        return translated

    async def _request(self, payload: dict[str, Any]) -> str:
        url = f"{self.base_url}/v2/translate"
        headers = {"Authorization": f"DeepL-Auth-Key {self.api_key}"}
        try:
            resp = await self.client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise TranslationError(f"DeepL request failed: {type(exc).__name__}: {exc}") from exc

        if not resp.is_success:
            hint = _STATUS_HINTS.get(resp.status_code, resp.reason_phrase or "error")
            raise TranslationError(
                f"DeepL returned HTTP {resp.status_code} ({hint})",
                status_code=resp.status_code,
                payload=_read_payload(resp),
            )

        try:
            data = resp.json()
        except (ValueError, httpx.HTTPError, httpx.StreamError) as exc:
            raise TranslationError(
                "DeepL response body could not be read",
                status_code=resp.status_code,
            ) from exc

        try:
            translated = data["translations"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise TranslationError(
                "DeepL response has no translations",
                status_code=resp.status_code,
                payload=data,
            ) from exc
        if not isinstance(translated, str):
            raise TranslationError(
                "DeepL response has no translations",
                status_code=resp.status_code,
                payload=data,
            )
        return translated


def _read_payload(resp: httpx.Response) -> Any:
    """Best-effort extraction of an error body: JSON, then text, then None."""
    try:
        return resp.json()
    except (ValueError, httpx.HTTPError, httpx.StreamError):
        pass
    try:
        return resp.text or None
    except (ValueError, httpx.HTTPError, httpx.StreamError):
        return None
