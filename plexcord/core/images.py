"""Thumbnail normalization.

Uploaded Plex thumbnails come in arbitrary sizes and formats. They are reduced to
a small square JPEG so every cached entry has the same shape and can be served
without further processing.
"""

from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from plexcord.exceptions import ImageTransformError

__all__ = [
    "CANONICAL_FORMAT",
    "CANONICAL_MEDIA_TYPE",
    "normalize_thumbnail",
    "reencode_jpeg",
]

CANONICAL_FORMAT = "JPEG"
CANONICAL_MEDIA_TYPE = "image/jpeg"
JPEG_QUALITY = 90

_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    ValueError,
)


def _open(data: bytes) -> Image.Image:
    if not data:
        raise ImageTransformError("Image data is empty")
    try:
        image = Image.open(BytesIO(data))
        image.load()
        return ImageOps.exif_transpose(image)
    except _DECODE_ERRORS as e:
        raise ImageTransformError(f"Could not decode image: {e}") from e


def _flatten(image: Image.Image, background: str) -> Image.Image:
    """Composite any transparency onto the background and convert to RGB."""
    if image.mode in ("RGBA", "LA") or (
        image.mode == "P" and "transparency" in image.info
    ):
        rgba = image.convert("RGBA")
        canvas = Image.new("RGBA", rgba.size, background)
        canvas.alpha_composite(rgba)
        return canvas.convert("RGB")
    return image.convert("RGB")


def _encode(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format=CANONICAL_FORMAT, quality=JPEG_QUALITY)
    return buffer.getvalue()


def normalize_thumbnail(
    data: bytes, size: int = 75, background: str = "white"
) -> bytes:
    """Fit an image inside a ``size`` x ``size`` square padded with ``background``.

    The image keeps its aspect ratio and is centred on the canvas; nothing is
    cropped. Images smaller than the square are scaled up to touch its edges.

    Args:
        data (bytes): Encoded image bytes in any format Pillow can decode.
        size (int): Edge length of the square output in pixels.
        background (str): Fill colour for the uncovered canvas area.

    Returns:
        bytes: The canonical thumbnail encoded as JPEG.

    Raises:
        ImageTransformError: If the input cannot be decoded or encoded.
    """
    image = _flatten(_open(data), background)

    scale = min(size / image.width, size / image.height)
    fitted = image.resize(
        (max(1, round(image.width * scale)), max(1, round(image.height * scale))),
        Image.Resampling.LANCZOS,
    )

    canvas = Image.new("RGB", (size, size), background)
    canvas.paste(fitted, ((size - fitted.width) // 2, (size - fitted.height) // 2))

    try:
        return _encode(canvas)
    except OSError as e:
        raise ImageTransformError(f"Could not encode thumbnail: {e}") from e


def reencode_jpeg(data: bytes) -> bytes:
    """Decode stored image bytes and re-encode them as JPEG.

    Raises:
        ImageTransformError: If the bytes are not a decodable image.
    """
    image = _flatten(_open(data), "white")
    try:
        return _encode(image)
    except OSError as e:
        raise ImageTransformError(f"Could not encode image: {e}") from e
