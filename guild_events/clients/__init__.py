"""Clients for upstream event sources."""

from .discord import DiscordEventsClient

__all__ = ['DiscordEventsClient']
