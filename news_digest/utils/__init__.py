"""
Shared utility functions.

This package contains utility code used across multiple
pipeline stages.
"""

from .logging import (
    JsonlFormatter,
    get_logger,
    log_event,
    redact_text,
    setup_logging,
    truncate_text,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_event",
    "redact_text",
    "truncate_text",
    "JsonlFormatter",
]
