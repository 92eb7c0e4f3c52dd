"""External service configurations."""

from .discord import (
    DiscordConfig,
    get_discord_config,
)

__all__ = [
    'DiscordConfig',
    'get_discord_config',
]
