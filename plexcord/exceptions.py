"""PlexCord exception classes."""


class PlexCordError(Exception):
    """Base class for all PlexCord exceptions."""

    # Default HTTP status for API responses
    status_code: int = 500


# Webhook errors
class WebhookError(PlexCordError):
    """Base class for webhook-related errors."""

    status_code = 400


class InvalidWebhookPayloadError(WebhookError, ValueError):
    """Webhook payload is missing required fields or malformed."""

    status_code = 400


class UnsupportedMediaTypeError(InvalidWebhookPayloadError):
    """The webhook item is neither a video (movie/show) nor an audio (artist) item."""

    status_code = 400


# Image errors
class ImageError(PlexCordError):
    """Base class for thumbnail image failures."""

    status_code = 500


class ImageTransformError(ImageError, ValueError):
    """Image bytes could not be decoded or re-encoded."""

    status_code = 422


class ImageNotFoundError(ImageError, KeyError):
    """No cached image exists for the requested key."""

    status_code = 404

    def __str__(self) -> str:
        """Return the message without KeyError's repr quoting."""
        return str(self.args[0]) if self.args else ""


class CorruptImageError(ImageError):
    """A cached image entry exists but could not be decoded."""

    status_code = 500


class ImageStoreError(ImageError, ConnectionError):
    """The image cache store could not be reached or returned an error."""

    status_code = 503


# Collaborator errors
class LocationLookupError(PlexCordError):
    """The location lookup service failed or returned an unusable response."""

    status_code = 502


class NotificationDeliveryError(PlexCordError):
    """The notification could not be delivered to Discord."""

    status_code = 502
