"""Plex Webhook endpoint."""

from typing import Any

from fastapi.param_functions import Depends
from fastapi.routing import APIRouter
from pydantic import ValidationError
from starlette.datastructures import UploadFile
from starlette.requests import Request

from plexcord import log
from plexcord.exceptions import InvalidWebhookPayloadError
from plexcord.models.schemas.plex import PlexWebhook
from plexcord.web.state import get_app_state

__all__ = ["router"]

router = APIRouter()


class WebhookSubmission:
    """A parsed webhook request: the event payload and its optional thumbnail."""

    def __init__(self, payload: PlexWebhook, thumb: bytes | None) -> None:
        """Store the parsed parts of the request."""
        self.payload = payload
        self.thumb = thumb


async def parse_webhook_request(request: Request) -> WebhookSubmission:
    """Parse an incoming webhook in either multipart or JSON format.

    Plex sends ``multipart/form-data`` with a JSON ``payload`` field and, for
    most playback events, a ``thumb`` file field. A plain JSON body (without an
    image) is accepted as well.

    Args:
        request (Request): The incoming HTTP request.

    Returns:
        WebhookSubmission: The parsed payload and thumbnail bytes.

    Raises:
        InvalidWebhookPayloadError: If the request body or payload is invalid.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        payload_raw = form.get("payload")
        if not payload_raw or isinstance(payload_raw, UploadFile):
            raise InvalidWebhookPayloadError("Missing 'payload' form field")
        try:
            payload = PlexWebhook.model_validate_json(payload_raw)
        except ValidationError as e:
            raise InvalidWebhookPayloadError(f"Invalid payload JSON: {e}") from e

        thumb = None
        thumb_field = form.get("thumb")
        if isinstance(thumb_field, UploadFile):
            thumb = await thumb_field.read() or None
        return WebhookSubmission(payload, thumb)

    try:
        data = await request.json()
    except ValueError as e:
        raise InvalidWebhookPayloadError(f"Invalid JSON body: {e}") from e
    try:
        return WebhookSubmission(PlexWebhook.model_validate(data), None)
    except ValidationError as e:
        raise InvalidWebhookPayloadError(f"Invalid payload structure: {e}") from e


@router.post("/")
async def plex_webhook(
    submission: WebhookSubmission = Depends(parse_webhook_request),
) -> dict[str, Any]:
    """Receive a Plex webhook, cache its thumbnail and announce playback.

    Args:
        submission (WebhookSubmission): The parsed webhook request.

    Returns:
        A dictionary describing what was cached and whether a notification was
        dispatched.

    Raises:
        InvalidWebhookPayloadError: If the payload fails validation.
    """
    pipeline = get_app_state().pipeline
    if pipeline is None:
        raise RuntimeError("Playback pipeline is not initialized")

    log.debug(f"Webhook: Received Plex event $$'{submission.payload.event}'$$")
    result = await pipeline.ingest(submission.payload, submission.thumb)

    return {
        "ok": True,
        "event": result.event,
        "key": result.key,
        "media": result.media,
        "cached_image": result.cached_image,
        "notified": result.notified,
    }
