"""Client for the Discord guild scheduled-events endpoint."""

import logging
from typing import Any, List, Optional

import requests

from ..config.external_services import DiscordConfig
from ..errors import UpstreamRateLimited, UpstreamUnavailable

logger = logging.getLogger(__name__)

class DiscordEventsClient:
    """Fetches raw scheduled events for one guild."""

    HEADERS = {
        'Accept': 'application/json',
        'User-Agent': 'DiscordBot (guild-events-board, 1.0.0)',
    }

    def __init__(self, config: DiscordConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self.headers = self.HEADERS.copy()
        self.headers['Authorization'] = f"Bot {config.bot_token}"

    def _events_url(self) -> str:
        return f"{self.config.api_base_url}/guilds/{self.config.guild_id}/scheduled-events"

    def get_scheduled_events(self) -> List[Any]:
        """
        Fetch the raw scheduled events of the configured guild.

        Returns:
            List[Any]: Raw event records, undecoded

        Raises:
            UpstreamRateLimited: If Discord answers with HTTP 429
            UpstreamUnavailable: On any other failure (status, transport, timeout, payload)
        """
        try:
            response = self.session.get(
                self._events_url(),
                headers=self.headers,
                timeout=self.config.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Failed to reach Discord API: {e}")
            raise UpstreamUnavailable(f"Failed to reach Discord API: {e}") from e

        if response.status_code == 429:
            retry_after = self._retry_after(response)
            logger.warning(f"Discord API rate limited (retry after {retry_after}s): {response.text}")
            raise UpstreamRateLimited("Rate limited by Discord", retry_after=retry_after)

        if not response.ok:
            logger.error(f"Discord API error {response.status_code}: {response.text}")
            raise UpstreamUnavailable(
                f"Failed to fetch events from Discord (HTTP {response.status_code})",
                status_code=response.status_code
            )

        try:
            events_data = response.json()
        except ValueError as e:
            raise UpstreamUnavailable(f"Discord API returned invalid JSON: {e}") from e

        if not isinstance(events_data, list):
            raise UpstreamUnavailable("Discord API response must be a list of events")

        logger.info(f"Fetched {len(events_data)} scheduled events from Discord")
        return events_data

    @staticmethod
    def _retry_after(response: requests.Response) -> Optional[float]:
        """Read retry_after from the 429 body, falling back to the header."""
        try:
            body = response.json()
        except ValueError:
            body = {}
        value = body.get('retry_after') if isinstance(body, dict) else None
        if value is None:
            value = response.headers.get('Retry-After')
        try:
            return float(value) if value is not None else None
        except (TypeError, ValueError):
            return None
