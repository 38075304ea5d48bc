"""Models Initialization Module."""

from plexcord.models.schemas.geoip import Location
from plexcord.models.schemas.notification import (
    NotificationAttachment,
    NotificationMessage,
)
from plexcord.models.schemas.plex import (
    LibrarySectionType,
    Metadata,
    PlexWebhook,
    PlexWebhookEventType,
)

__all__ = [
    "LibrarySectionType",
    "Location",
    "Metadata",
    "NotificationAttachment",
    "NotificationMessage",
    "PlexWebhook",
    "PlexWebhookEventType",
]
