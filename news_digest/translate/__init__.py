"""Optional translation of generated summaries."""

from .deepl import DeepLClient
from .translator import TranslationBackend, Translator

__all__ = ["DeepLClient", "TranslationBackend", "Translator"]
