"""Discord API configuration."""

import os
from typing import Dict, Any
from dataclasses import dataclass

from ..environment import IS_PRODUCTION_ENVIRONMENT  # noqa: F401  (loads .env)

DEFAULT_API_BASE_URL = "https://discord.com/api/v10"
DEFAULT_CDN_BASE_URL = "https://cdn.discordapp.com"

@dataclass
class DiscordConfig:
    """Discord configuration settings.

    Empty fields are filled from the environment after initialization, so
    ``DiscordConfig()`` reflects the current process environment while tests
    can pass explicit values.
    """

    # Guild whose scheduled events are served
    guild_id: str = ""

    # Authentication
    bot_token: str = ""

    # API configuration
    api_base_url: str = ""
    cdn_base_url: str = ""
    timeout: float = 0.0

    # Seconds a fetched event list stays fresh
    cache_ttl: float = 0.0

    def __post_init__(self):
        """Load unset values from the environment."""
        if not self.guild_id:
            self.guild_id = os.environ.get('GUILD_ID', '')
        if not self.bot_token:
            self.bot_token = os.environ.get('DISCORD_BOT_TOKEN', '')
        if not self.api_base_url:
            self.api_base_url = os.environ.get('DISCORD_API_BASE_URL', DEFAULT_API_BASE_URL)
        if not self.cdn_base_url:
            self.cdn_base_url = os.environ.get('DISCORD_CDN_BASE_URL', DEFAULT_CDN_BASE_URL)
        if not self.timeout:
            self.timeout = float(os.environ.get('DISCORD_API_TIMEOUT', '10'))
        if not self.cache_ttl:
            self.cache_ttl = float(os.environ.get('EVENTS_CACHE_TTL', '60'))

        self.api_base_url = self.api_base_url.rstrip('/')
        self.cdn_base_url = self.cdn_base_url.rstrip('/')

    def is_configured(self) -> bool:
        """Whether upstream credentials are present (otherwise mock mode)."""
        return bool(self.guild_id and self.bot_token)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format (token redacted)."""
        return {
            'guild_id': self.guild_id,
            'bot_token': '***' if self.bot_token else '',
            'api_base_url': self.api_base_url,
            'cdn_base_url': self.cdn_base_url,
            'timeout': self.timeout,
            'cache_ttl': self.cache_ttl,
        }

def get_discord_config() -> DiscordConfig:
    """Get Discord configuration from the environment."""
    return DiscordConfig()
