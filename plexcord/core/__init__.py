"""Core Module Initialization."""

from plexcord.core.discord import DiscordNotifier
from plexcord.core.dispatcher import NotificationDispatcher
from plexcord.core.geoip import LocationClient
from plexcord.core.pipeline import ImageServer, IngestResult, PlaybackPipeline
from plexcord.core.store import RedisImageStore

__all__ = [
    "DiscordNotifier",
    "ImageServer",
    "IngestResult",
    "LocationClient",
    "NotificationDispatcher",
    "PlaybackPipeline",
    "RedisImageStore",
]
