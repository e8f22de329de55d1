"""
Exception taxonomy for the digest pipeline.

Fatal errors derive from DigestError and abort the run with exit code 1.
Item-level errors (EmptyCompletionError, TranslationError) are recovered
inside their stage and only ever show up in logs.
"""

from __future__ import annotations

from typing import Any


class DigestError(Exception):
    """Base class for errors that abort the whole run."""


class ConfigurationError(DigestError):
    """A required credential or setting is missing."""


class FeedError(DigestError):
    """The feed could not be retrieved or parsed."""


class BatchError(DigestError):
    """The summarization batch machinery itself failed."""


class DeliveryError(DigestError):
    """One or more webhook deliveries failed."""

    def __init__(self, message: str, failures: list[tuple[str, Exception]] | None = None):
        super().__init__(message)
        self.failures = failures or []


class EmptyCompletionError(Exception):
    """The completion service answered without any text."""


class TranslationError(Exception):
    """A translation request failed.

    Attributes:
        status_code: HTTP status of the response, or None when the failure
            happened before or while reading a response
        payload: Diagnostic body returned by the service (decoded JSON,
            raw text, or None when the body was unreadable)
    """

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload
