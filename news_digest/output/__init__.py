"""Rendering of finalized articles."""

from .renderer import render_console, render_json, render_markdown, write_output

__all__ = ["render_console", "render_json", "render_markdown", "write_output"]
