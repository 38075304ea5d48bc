"""Playback event classification.

Decides what kind of media an event is about, which lifecycle phases may touch
the thumbnail cache, which phases produce a notification (and with which verb and
colour), and how titles are rendered in that notification.
"""

from dataclasses import dataclass
from enum import StrEnum

from plexcord.exceptions import (
    InvalidWebhookPayloadError,
    UnsupportedMediaTypeError,
)
from plexcord.models.schemas.plex import (
    LibrarySectionType,
    Metadata,
    PlexWebhook,
    PlexWebhookEventType,
)

__all__ = [
    "CACHEABLE_PHASES",
    "NOTIFIABLE_PHASES",
    "MediaClass",
    "PlaybackAction",
    "classify_media",
    "format_subtitle",
    "format_title",
    "is_cacheable",
    "notification_style",
]


class MediaClass(StrEnum):
    """Coarse classification of the media an event is about."""

    VIDEO = "video"
    AUDIO = "audio"


@dataclass(frozen=True)
class PlaybackAction:
    """Verb and attachment colour used to announce a playback phase."""

    verb: str
    color: str


GOOD_COLOR = "#36a64f"
WARNING_COLOR = "#a67a2d"
DANGER_COLOR = "danger"

MEDIA_CLASSES: dict[LibrarySectionType, MediaClass] = {
    LibrarySectionType.MOVIE: MediaClass.VIDEO,
    LibrarySectionType.SHOW: MediaClass.VIDEO,
    LibrarySectionType.ARTIST: MediaClass.AUDIO,
}

CACHEABLE_PHASES: frozenset[PlexWebhookEventType] = frozenset(
    {
        PlexWebhookEventType.PLAY,
        PlexWebhookEventType.STOP,
        PlexWebhookEventType.PAUSE,
        PlexWebhookEventType.RESUME,
    }
)

NOTIFIABLE_PHASES: dict[PlexWebhookEventType, PlaybackAction] = {
    PlexWebhookEventType.PLAY: PlaybackAction("started watching", GOOD_COLOR),
    PlexWebhookEventType.STOP: PlaybackAction("stopped watching", DANGER_COLOR),
    PlexWebhookEventType.RESUME: PlaybackAction("resumed playback of", GOOD_COLOR),
    PlexWebhookEventType.PAUSE: PlaybackAction("paused playback of", WARNING_COLOR),
}


def classify_media(payload: PlexWebhook) -> MediaClass:
    """Validate the payload's presence fields and classify its media.

    Args:
        payload (PlexWebhook): The parsed webhook payload.

    Returns:
        MediaClass: VIDEO for movie/show items, AUDIO for artist items.

    Raises:
        InvalidWebhookPayloadError: If the user flag or metadata is missing.
        UnsupportedMediaTypeError: If the item is neither video nor audio.
    """
    if not payload.user:
        raise InvalidWebhookPayloadError("Webhook payload is not attributed to a user")
    if payload.metadata is None:
        raise InvalidWebhookPayloadError("Webhook payload has no Metadata")

    section_type = payload.metadata.section_type
    media_class = MEDIA_CLASSES.get(section_type) if section_type else None
    if media_class is None:
        raise UnsupportedMediaTypeError(
            f"Unsupported library section type "
            f"'{payload.metadata.librarySectionType}'"
        )
    return media_class


def is_cacheable(event_type: PlexWebhookEventType | None) -> bool:
    """Whether an event of this phase may read or write the thumbnail cache."""
    return event_type in CACHEABLE_PHASES


def notification_style(
    event_type: PlexWebhookEventType | None,
) -> PlaybackAction | None:
    """Look up the verb and colour for a phase, or None if it is not announced."""
    if event_type is None:
        return None
    return NOTIFIABLE_PHASES.get(event_type)


def format_title(metadata: Metadata) -> str:
    """Render the headline title of a media item.

    Episodes and tracks use their show or artist name; everything else uses its own
    title followed by the release year when known.

    Examples:
        ``{title: "Arrival", year: 2016}`` -> ``"Arrival (2016)"``
    """
    if metadata.grandparentTitle:
        return metadata.grandparentTitle

    title = metadata.title or ""
    if metadata.year:
        title += f" ({metadata.year})"
    return title


def format_subtitle(metadata: Metadata) -> str:
    """Render the secondary line describing a media item.

    Examples:
        ``{grandparentTitle: "Show", parentIndex: 2, index: 5, title: "Ep"}``
        -> ``"S2 E5 - Ep"``
    """
    if metadata.grandparentTitle:
        subtitle = ""
        if metadata.type == "track":
            subtitle = metadata.parentTitle or ""
        elif metadata.index and metadata.parentIndex:
            subtitle = f"S{metadata.parentIndex} E{metadata.index}"
        elif metadata.originallyAvailableAt:
            subtitle = metadata.originallyAvailableAt

        if metadata.title:
            subtitle += f" - {metadata.title}"
        return subtitle

    if metadata.type == "movie":
        return metadata.tagline or ""

    return ""
