"""AI-powered per-article summarization."""

from .summarizer import Summarizer

__all__ = ["Summarizer"]
