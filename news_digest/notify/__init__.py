"""Webhook delivery of finalized articles."""

from .discord import DiscordNotifier, format_message

__all__ = ["DiscordNotifier", "format_message"]
