"""Discord webhook notifier."""

import asyncio
from typing import Protocol

import aiohttp

from plexcord import __version__, log
from plexcord.exceptions import NotificationDeliveryError
from plexcord.models.schemas.notification import NotificationMessage

__all__ = ["DiscordNotifier", "Notifier"]


class Notifier(Protocol):
    """Sink for finished notification messages."""

    async def send(self, message: NotificationMessage) -> None:
        """Deliver ``message``; raise NotificationDeliveryError on failure."""
        ...

    async def close(self) -> None:
        """Release any connections held by the notifier."""
        ...


class DiscordNotifier:
    """Posts notifications to a Discord channel through a webhook.

    Messages go to the webhook's Slack-compatible endpoint, which accepts the
    ``username``/``text``/``attachments`` body produced by ``NotificationMessage``.
    Without a webhook ID and token the notifier is disabled and drops messages.
    """

    API_URL = "https://discord.com/api/webhooks"

    def __init__(
        self,
        webhook_id: str | None,
        webhook_token: str | None,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the Discord notifier.

        Args:
            webhook_id (str | None): The Discord webhook ID.
            webhook_token (str | None): The Discord webhook token.
            timeout (float): Total request timeout in seconds.
        """
        self.webhook_id = webhook_id
        self.webhook_token = webhook_token
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def enabled(self) -> bool:
        """Whether webhook credentials are configured."""
        return bool(self.webhook_id and self.webhook_token)

    @property
    def url(self) -> str:
        """The Slack-compatible endpoint of the configured webhook."""
        return f"{self.API_URL}/{self.webhook_id}/{self.webhook_token}/slack"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={
                    "Content-Type": "application/json",
                    "User-Agent": f"PlexCord/{__version__}",
                },
            )
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def send(self, message: NotificationMessage) -> None:
        """Post ``message`` to the Discord webhook.

        A single 429 response is honoured by waiting ``Retry-After`` seconds and
        posting again.

        Raises:
            NotificationDeliveryError: If Discord cannot be reached or rejects the
                message.
        """
        if not self.enabled:
            log.warning("Discord webhook is not configured, dropping notification")
            return

        await self._post(message.to_slack_body(), retry=True)

    async def _post(self, body: dict, retry: bool) -> None:
        session = await self._get_session()

        try:
            async with session.post(self.url, json=body) as response:
                if response.status == 429 and retry:
                    retry_after = float(response.headers.get("Retry-After", 1))
                    log.warning(f"Rate limited by Discord, waiting {retry_after}s")
                    await asyncio.sleep(retry_after)
                    return await self._post(body, retry=False)

                if response.status >= 400:
                    response_text = await response.text()
                    raise NotificationDeliveryError(
                        f"Discord responded with HTTP {response.status}: "
                        f"{response_text[:200]}"
                    )
        except (TimeoutError, asyncio.TimeoutError, aiohttp.ClientError) as e:
            raise NotificationDeliveryError(f"Discord unreachable: {e}") from e
