"""Tests for thumbnail normalization."""

from io import BytesIO

import pytest
from PIL import Image

from plexcord.core.images import normalize_thumbnail, reencode_jpeg
from plexcord.exceptions import ImageTransformError
from tests.fakes import make_image


def _open(data: bytes) -> Image.Image:
    image = Image.open(BytesIO(data))
    image.load()
    return image


def test_normalize_thumbnail_produces_square_jpeg():
    """Thumbnails are 75x75 JPEGs regardless of the input format."""
    thumbnail = normalize_thumbnail(make_image(300, 150, fmt="PNG"))

    image = _open(thumbnail)
    assert image.format == "JPEG"
    assert image.size == (75, 75)
    assert image.mode == "RGB"


def test_normalize_thumbnail_pads_wide_images_with_white():
    """Wide images keep their aspect ratio and are padded top and bottom."""
    image = _open(normalize_thumbnail(make_image(300, 150, color="red")))

    top = image.getpixel((37, 2))
    centre = image.getpixel((37, 37))
    assert all(channel > 240 for channel in top)
    assert centre[0] > 200 and centre[1] < 60 and centre[2] < 60


def test_normalize_thumbnail_pads_tall_images_with_white():
    """Tall images are padded left and right."""
    image = _open(normalize_thumbnail(make_image(100, 400, color="blue")))

    left = image.getpixel((2, 37))
    centre = image.getpixel((37, 37))
    assert all(channel > 240 for channel in left)
    assert centre[2] > 200 and centre[0] < 60


def test_normalize_thumbnail_upscales_small_images():
    """Images smaller than the square are scaled up to fill it."""
    image = _open(normalize_thumbnail(make_image(10, 10, color="green")))

    assert image.size == (75, 75)
    corner = image.getpixel((1, 1))
    assert corner[1] > 80 and corner[0] < 60


def test_normalize_thumbnail_flattens_transparency_onto_white():
    """Transparent areas become white rather than black."""
    data = make_image(50, 50, color=(0, 0, 0, 0), mode="RGBA")

    image = _open(normalize_thumbnail(data))

    assert all(channel > 240 for channel in image.getpixel((37, 37)))


def test_normalize_thumbnail_custom_size():
    """The square edge length is configurable."""
    image = _open(normalize_thumbnail(make_image(), size=32))

    assert image.size == (32, 32)


@pytest.mark.parametrize("data", [b"", b"not an image"])
def test_normalize_thumbnail_rejects_undecodable_input(data: bytes):
    """Garbage input raises a transformation error instead of crashing."""
    with pytest.raises(ImageTransformError):
        normalize_thumbnail(data)


def test_reencode_jpeg_converts_to_jpeg():
    """Stored images are served as JPEG whatever their stored format."""
    image = _open(reencode_jpeg(make_image(20, 20, fmt="PNG")))

    assert image.format == "JPEG"
    assert image.size == (20, 20)


def test_reencode_jpeg_rejects_corrupt_entries():
    """Corrupt stored bytes raise a transformation error."""
    with pytest.raises(ImageTransformError):
        reencode_jpeg(b"\x00\x01\x02")
