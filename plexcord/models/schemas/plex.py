"""Plex webhook schema definitions.

Plex posts these payloads as the ``payload`` field of a multipart request. Every
nested field is optional because Plex omits whatever does not apply to the item,
so consumers check for ``None`` instead of assuming a shape.
"""

from enum import StrEnum
from functools import cached_property

from pydantic import BaseModel, ConfigDict, Field


class PlexWebhookEventType(StrEnum):
    """Enumeration of Plex webhook event types."""

    MEDIA_ADDED = "library.new"
    ON_DECK = "library.on.deck"
    PLAY = "media.play"
    PAUSE = "media.pause"
    STOP = "media.stop"
    RESUME = "media.resume"
    SCROBBLE = "media.scrobble"
    RATE = "media.rate"
    DATABASE_BACKUP = "admin.database.backup"
    DATABASE_CORRUPTED = "admin.database.corrupted"
    NEW_ADMIN_DEVICE = "device.new"
    SHARED_PLAYBACK_STARTED = "playback.started"


class LibrarySectionType(StrEnum):
    """Enumeration of Plex library section types."""

    MOVIE = "movie"
    SHOW = "show"
    ARTIST = "artist"
    PHOTO = "photo"


class _PlexModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore", populate_by_name=True, coerce_numbers_to_str=True
    )


class Account(_PlexModel):
    """Represents a Plex account involved in a webhook event."""

    id: int | None = None
    thumb: str | None = None
    title: str | None = None


class Server(_PlexModel):
    """Represents a Plex server involved in a webhook event."""

    title: str | None = None
    uuid: str | None = None


class Player(_PlexModel):
    """Represents a Plex player involved in a webhook event."""

    local: bool | None = None
    publicAddress: str | None = None
    title: str | None = None
    uuid: str | None = None


class Metadata(_PlexModel):
    """Represents metadata information received from a Plex webhook event."""

    librarySectionType: str | None = None
    ratingKey: str | None = None
    key: str | None = None
    guid: str | None = None
    type: str | None = None
    title: str | None = None
    grandparentTitle: str | None = None
    parentTitle: str | None = None
    index: int | None = None
    parentIndex: int | None = None
    originallyAvailableAt: str | None = None
    year: int | None = None
    tagline: str | None = None
    summary: str | None = None
    thumb: str | None = None

    @cached_property
    def section_type(self) -> LibrarySectionType | None:
        """The library section type, or None if it is missing or unknown."""
        if self.librarySectionType is None:
            return None
        try:
            return LibrarySectionType(self.librarySectionType)
        except ValueError:
            return None


class PlexWebhook(_PlexModel):
    """Represents a Plex webhook event."""

    event: str | None = None
    user: bool = False
    owner: bool = False
    account: Account | None = Field(None, alias="Account")
    server: Server | None = Field(None, alias="Server")
    player: Player | None = Field(None, alias="Player")
    metadata: Metadata | None = Field(None, alias="Metadata")

    @cached_property
    def event_type(self) -> PlexWebhookEventType | None:
        """The webhook event type, or None if it is missing or unrecognised."""
        if self.event is None:
            return None
        try:
            return PlexWebhookEventType(self.event)
        except ValueError:
            return None

    @cached_property
    def server_uuid(self) -> str | None:
        """The identifier of the Plex server instance that sent the event."""
        return self.server.uuid if self.server else None

    @cached_property
    def rating_key(self) -> str | None:
        """The rating key of the media item the event is about."""
        return self.metadata.ratingKey if self.metadata else None

    @cached_property
    def public_address(self) -> str | None:
        """The public IP address of the player."""
        return self.player.publicAddress if self.player else None
