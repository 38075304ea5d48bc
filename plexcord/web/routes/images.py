"""Cached thumbnail endpoint."""

from fastapi.routing import APIRouter
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from plexcord.core.images import CANONICAL_MEDIA_TYPE
from plexcord.exceptions import ImageNotFoundError
from plexcord.web.state import get_app_state

__all__ = ["router"]

router = APIRouter()


@router.get("/{key}.jpg")
async def get_image(key: str) -> Response:
    """Serve the cached thumbnail stored under ``key``.

    Args:
        key (str): The cache key of the thumbnail.

    Returns:
        Response: The thumbnail as a JPEG image.

    Raises:
        StarletteHTTPException: 404 if no thumbnail is cached under ``key``.
        CorruptImageError: If the cached entry cannot be decoded.
    """
    image_server = get_app_state().image_server
    if image_server is None:
        raise RuntimeError("Image server is not initialized")

    try:
        image = await image_server.fetch(key)
    except ImageNotFoundError as e:
        # Fall through to the generic not-found response
        raise StarletteHTTPException(status_code=404) from e
    return Response(content=image, media_type=CANONICAL_MEDIA_TYPE)
