"""Playback webhook pipeline and cached image server."""

import asyncio
from dataclasses import dataclass
from typing import Protocol

from plexcord import log
from plexcord.core.classifier import (
    MediaClass,
    PlaybackAction,
    classify_media,
    format_subtitle,
    format_title,
    is_cacheable,
    notification_style,
)
from plexcord.core.dispatcher import NotificationDispatcher
from plexcord.core.images import normalize_thumbnail, reencode_jpeg
from plexcord.core.keys import derive_cache_key, is_cache_key
from plexcord.core.store import ImageStore
from plexcord.exceptions import (
    CorruptImageError,
    ImageNotFoundError,
    ImageStoreError,
    ImageTransformError,
    InvalidWebhookPayloadError,
    LocationLookupError,
)
from plexcord.models.schemas.geoip import Location
from plexcord.models.schemas.notification import (
    NotificationAttachment,
    NotificationMessage,
)
from plexcord.models.schemas.plex import PlexWebhook

__all__ = ["ImageServer", "IngestResult", "Locator", "PlaybackPipeline"]

SEVEN_DAYS = 7 * 24 * 60 * 60  # in seconds


class Locator(Protocol):
    """Resolves viewer IP addresses to locations."""

    async def lookup(self, ip: str) -> Location:
        """Return the location of ``ip``; raise LocationLookupError on failure."""
        ...


@dataclass(frozen=True)
class IngestResult:
    """Outcome of processing a single webhook event."""

    key: str
    event: str | None
    media: MediaClass
    cached_image: bool
    notified: bool


class PlaybackPipeline:
    """Processes Plex playback webhooks.

    Caches one thumbnail per (server, item) pair and announces playback of video
    items through the notification dispatcher. The thumbnail and location are
    enrichments: failures to produce either are logged and processing continues
    without them.
    """

    def __init__(
        self,
        store: ImageStore,
        locator: Locator,
        dispatcher: NotificationDispatcher,
        *,
        app_url: str,
        image_ttl: int = SEVEN_DAYS,
        thumbnail_size: int = 75,
        notifier_username: str = "Plex",
        rich_notifications: bool = False,
    ) -> None:
        """Initialize the pipeline.

        Args:
            store (ImageStore): Thumbnail cache.
            locator (Locator): Location lookup for viewer addresses.
            dispatcher (NotificationDispatcher): Background notification delivery.
            app_url (str): Public base URL used to build thumbnail links.
            image_ttl (int): Lifetime of newly cached thumbnails in seconds.
            thumbnail_size (int): Edge length of cached thumbnails in pixels.
            notifier_username (str): Display name for posted notifications.
            rich_notifications (bool): Whether to attach colour, subtitle and
                thumbnail fields to notifications.
        """
        self.store = store
        self.locator = locator
        self.dispatcher = dispatcher
        self.app_url = app_url.rstrip("/")
        self.image_ttl = image_ttl
        self.thumbnail_size = thumbnail_size
        self.notifier_username = notifier_username
        self.rich_notifications = rich_notifications

    def image_url(self, key: str) -> str:
        """Public URL under which the cached thumbnail for ``key`` is served."""
        return f"{self.app_url}/images/{key}.jpg"

    async def ingest(
        self, payload: PlexWebhook, image: bytes | None = None
    ) -> IngestResult:
        """Process a webhook event and its optional uploaded thumbnail.

        Args:
            payload (PlexWebhook): The parsed webhook payload.
            image (bytes | None): Raw bytes of the uploaded thumbnail, if any.

        Returns:
            IngestResult: What was cached and whether a notification was sent.

        Raises:
            InvalidWebhookPayloadError: If the payload fails validation. Nothing
                is read or written in that case.
        """
        media = classify_media(payload)
        if not payload.server_uuid or not payload.rating_key:
            raise InvalidWebhookPayloadError(
                "Webhook payload has no Server.uuid or Metadata.ratingKey"
            )

        key = derive_cache_key(payload.server_uuid, payload.rating_key)
        log.info(f"Received $$'{payload.event}'$$ for $$'{key}'$$")

        has_image = False
        if is_cacheable(payload.event_type):
            has_image = await self._cache_image(key, image)

        if media is not MediaClass.VIDEO:
            return IngestResult(key, payload.event, media, has_image, notified=False)

        action = notification_style(payload.event_type)
        if action is None:
            log.debug(f"Event $$'{payload.event}'$$ is not announced")
            return IngestResult(key, payload.event, media, has_image, notified=False)

        location_text = await self._describe_location(payload.public_address)
        message = self.build_message(
            payload,
            action,
            location_text=location_text,
            image_url=self.image_url(key) if has_image else None,
        )

        log.info(
            f"Sending $$'{key}'$$ {'with' if has_image else 'without'} image to Discord"
        )
        self.dispatcher.dispatch(message)
        return IngestResult(key, payload.event, media, has_image, notified=True)

    async def _cache_image(self, key: str, image: bytes | None) -> bool:
        """Reuse the cached thumbnail for ``key`` or store a new one.

        Returns:
            bool: Whether a thumbnail is available for ``key`` afterwards.
        """
        try:
            if await self.store.exists(key):
                log.debug(f"Using cached image $$'{key}'$$")
                return True
        except ImageStoreError as e:
            log.warning(f"Image cache unavailable, ignoring cached image: {e}")

        if not image:
            return False

        try:
            thumbnail = await asyncio.to_thread(
                normalize_thumbnail, image, self.thumbnail_size
            )
        except ImageTransformError as e:
            log.warning(f"Discarding uploaded image for $$'{key}'$$: {e}")
            return False

        try:
            await self.store.set_with_expiry(key, thumbnail, self.image_ttl)
        except ImageStoreError as e:
            log.warning(f"Failed to cache image $$'{key}'$$: {e}")
            return False

        log.info(f"Saved new image $$'{key}'$$")
        return True

    async def _describe_location(self, ip: str | None) -> str:
        """Best-effort ``near {city}, {state}`` text for the viewer's address."""
        if not ip:
            return ""
        try:
            location = await self.locator.lookup(ip)
        except LocationLookupError as e:
            log.debug(f"No location for $$'{ip}'$$: {e}")
            return ""
        except Exception as e:
            log.error(f"Unexpected location lookup error: {e}", exc_info=True)
            return ""
        return location.describe()

    def build_message(
        self,
        payload: PlexWebhook,
        action: PlaybackAction,
        *,
        location_text: str = "",
        image_url: str | None = None,
    ) -> NotificationMessage:
        """Compose the notification announcing a playback event.

        Args:
            payload (PlexWebhook): The validated webhook payload.
            action (PlaybackAction): Verb and colour for the event's phase.
            location_text (str): Optional ``near ...`` text for the viewer.
            image_url (str | None): URL of the cached thumbnail, if there is one.

        Returns:
            NotificationMessage: The finished message.
        """
        metadata = payload.metadata
        if metadata is None:
            raise InvalidWebhookPayloadError("Webhook payload has no Metadata")

        viewer = payload.account.title if payload.account else None
        server = payload.server.title if payload.server else None
        title = format_title(metadata)

        text = f"{viewer or 'Someone'} {action.verb} {title} on {server or 'Plex'}"
        if location_text:
            text += f" {location_text}"

        attachments = []
        if self.rich_notifications:
            attachments.append(
                NotificationAttachment(
                    color=action.color,
                    title=title,
                    text=format_subtitle(metadata),
                    thumb_url=image_url,
                    footer=metadata.summary,
                )
            )

        return NotificationMessage(
            username=self.notifier_username, text=text, attachments=attachments
        )


class ImageServer:
    """Serves cached thumbnails by key."""

    def __init__(self, store: ImageStore) -> None:
        """Initialize the image server.

        Args:
            store (ImageStore): Thumbnail cache to read from.
        """
        self.store = store

    async def fetch(self, key: str) -> bytes:
        """Return the cached thumbnail for ``key`` re-encoded as JPEG.

        Raises:
            ImageNotFoundError: If there is no live entry for ``key``.
            ImageStoreError: If the cache cannot be reached.
            CorruptImageError: If the stored entry is not a decodable image.
        """
        if not is_cache_key(key):
            raise ImageNotFoundError(f"No image for key '{key}'")

        data = await self.store.get_binary(key)
        if data is None:
            raise ImageNotFoundError(f"No image for key '{key}'")

        try:
            return await asyncio.to_thread(reencode_jpeg, data)
        except ImageTransformError as e:
            log.error(f"Cached image $$'{key}'$$ is corrupt: {e}")
            raise CorruptImageError(f"Cached image '{key}' could not be decoded") from e
