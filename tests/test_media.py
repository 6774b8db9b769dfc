"""Tests for photo data URI validation and thumbnail rendering."""

import base64
import io

import pytest
from PIL import Image

from services.thumbnail_generator import ThumbnailGenerator
from utils.media_validation import MAX_PHOTO_BYTES, decode_photo_data_uri


def _png_data_uri(size=(400, 200), mode="RGB"):
    buffer = io.BytesIO()
    Image.new(mode, size, (200, 30, 30) if mode == "RGB" else (200, 30, 30, 128)).save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def test_decode_photo_data_uri_returns_mime_and_bytes():
    mime, raw = decode_photo_data_uri(_png_data_uri())
    assert mime == "image/png"
    assert raw.startswith(b"\x89PNG")


@pytest.mark.parametrize(
    "value",
    ["", "https://example.com/photo.png", "data:text/plain;base64,aGVsbG8=", "data:image/png;base64,***"],
)
def test_decode_photo_data_uri_rejects_non_images(value):
    with pytest.raises(ValueError):
        decode_photo_data_uri(value)


def test_decode_photo_data_uri_rejects_oversized_photo():
    raw = b"\0" * (MAX_PHOTO_BYTES + 1)
    with pytest.raises(ValueError, match="over 1MB"):
        decode_photo_data_uri("data:image/jpeg;base64," + base64.b64encode(raw).decode("ascii"))


def test_thumbnail_fits_within_max_size():
    png = ThumbnailGenerator(max_size=(160, 160)).create_thumbnail_from_data_uri(_png_data_uri())
    image = Image.open(io.BytesIO(png))
    assert image.format == "PNG"
    assert image.size == (160, 80)


def test_thumbnail_flattens_alpha():
    png = ThumbnailGenerator().create_thumbnail_from_data_uri(_png_data_uri(size=(32, 32), mode="RGBA"))
    assert Image.open(io.BytesIO(png)).mode == "RGB"


def test_thumbnail_rejects_non_image_bytes():
    uri = "data:image/png;base64," + base64.b64encode(b"not an image").decode("ascii")
    with pytest.raises(ValueError):
        ThumbnailGenerator().create_thumbnail_from_data_uri(uri)
