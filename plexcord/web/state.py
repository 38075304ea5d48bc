"""Global web application state utilities.

Holds the long-lived collaborators (image store, notifier, location client,
dispatcher) and the pipeline built from them, so route handlers share one set
of connections.
"""

from contextlib import suppress
from datetime import UTC, datetime
from functools import lru_cache

from plexcord import log
from plexcord.config.settings import PlexCordConfig
from plexcord.core.discord import DiscordNotifier, Notifier
from plexcord.core.dispatcher import NotificationDispatcher
from plexcord.core.geoip import LocationClient
from plexcord.core.pipeline import ImageServer, Locator, PlaybackPipeline
from plexcord.core.store import ImageStore, RedisImageStore

__all__ = ["AppState", "get_app_state"]


class AppState:
    """Container for global web application state."""

    def __init__(self) -> None:
        """Initialize empty state containers and record process start time."""
        self.store: ImageStore | None = None
        self.notifier: Notifier | None = None
        self.locator: Locator | None = None
        self.dispatcher: NotificationDispatcher | None = None
        self.pipeline: PlaybackPipeline | None = None
        self.image_server: ImageServer | None = None
        self.started_at: datetime = datetime.now(UTC)

    @property
    def configured(self) -> bool:
        """Whether the pipeline and image server have been built."""
        return self.pipeline is not None and self.image_server is not None

    def configure(
        self,
        config: PlexCordConfig,
        *,
        store: ImageStore | None = None,
        notifier: Notifier | None = None,
        locator: Locator | None = None,
    ) -> None:
        """Build the pipeline, creating any collaborator that was not injected.

        Args:
            config (PlexCordConfig): Application configuration.
            store (ImageStore | None): Image store to use instead of Redis.
            notifier (Notifier | None): Notifier to use instead of Discord.
            locator (Locator | None): Location lookup to use instead of geoip.
        """
        self.store = store or RedisImageStore.from_url(
            config.redis_url, key_prefix=config.redis_key_prefix
        )
        self.notifier = notifier or DiscordNotifier(
            config.discord_id,
            config.discord_token.get_secret_value() if config.discord_token else None,
        )
        self.locator = locator or LocationClient(config.geoip_url)
        self.dispatcher = NotificationDispatcher(self.notifier)
        self.pipeline = PlaybackPipeline(
            self.store,
            self.locator,
            self.dispatcher,
            app_url=config.app_url,
            image_ttl=config.image_ttl,
            thumbnail_size=config.thumbnail_size,
            notifier_username=config.notifier_username,
            rich_notifications=config.rich_notifications,
        )
        self.image_server = ImageServer(self.store)

        if not config.discord_enabled and notifier is None:
            log.warning(
                "Discord webhook credentials are not configured, "
                "notifications will be dropped"
            )

    async def shutdown(self) -> None:
        """Flush pending notifications, then close every collaborator.

        Errors from individual close calls are ignored so one failure does not leak
        the remaining connections.
        """
        if self.dispatcher is not None:
            await self.dispatcher.aclose()

        for resource in (self.notifier, self.locator, self.store):
            close = getattr(resource, "close", None)
            if close is not None:
                with suppress(Exception):
                    await close()

        self.pipeline = None
        self.image_server = None
        self.dispatcher = None


@lru_cache(maxsize=1)
def get_app_state() -> AppState:
    """Get the singleton application state instance.

    Returns:
        AppState: The application state instance.
    """
    return AppState()
