"""
Abstract base class for completion providers.

New providers should inherit from CompletionProvider and implement
``complete``. Providers never swallow errors: a failed request raises,
and the Summarizer decides what a failure means for the batch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class CompletionProvider(ABC):
    """Interface for a chat-completion style text generation service."""

    model: str = ""

    @abstractmethod
    async def complete(self, system: str, user: str) -> str:
        """Generate text for a system instruction plus one user message.

        Args:
            system: Fixed system instruction
            user: User content (for summaries, the article URL)

        Returns:
            Generated text, never empty

        Raises:
            httpx.HTTPError: Transport failure or non-2xx response
            EmptyCompletionError: The response carried no text
        """
        raise NotImplementedError
