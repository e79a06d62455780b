"""Helpers for base64 uploads coming from the browser form."""

from __future__ import annotations

import base64
import binascii
import io
import logging

from PIL import Image, UnidentifiedImageError

from core.errors import InvalidRequest

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME = "image/jpeg"
DEFAULT_AUDIO_MIME = "audio/wav"


def split_data_url(value: str) -> tuple[str, str | None]:
    """Strip a ``data:<mime>;base64,`` prefix. Returns ``(data, mime or None)``."""
    if value.startswith("data:") and "," in value:
        header, data = value.split(",", 1)
        mime = header[5:].split(";", 1)[0] or None
        return data, mime
    return value, None


def decode_base64(data: str, field_name: str) -> bytes:
    try:
        raw = base64.b64decode("".join(data.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidRequest(f"Field '{field_name}' is not valid base64") from exc
    if not raw:
        raise InvalidRequest(f"Field '{field_name}' is empty")
    return raw


def sniff_image_mime(raw: bytes) -> str:
    """Guess the mime type of image bytes with Pillow, falling back to JPEG."""
    try:
        with Image.open(io.BytesIO(raw)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError):
        logger.warning("Could not identify uploaded image, assuming %s", DEFAULT_IMAGE_MIME)
        return DEFAULT_IMAGE_MIME
    return Image.MIME.get(fmt or "", DEFAULT_IMAGE_MIME)


def prepare_image(value: object, field_name: str, mime_type: str | None = None) -> tuple[str, str]:
    """Validate an uploaded image field and return ``(base64 data, mime type)``."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequest(f"Missing required field '{field_name}'")

    data, url_mime = split_data_url(value.strip())
    raw = decode_base64(data, field_name)
    mime = mime_type or url_mime or sniff_image_mime(raw)
    return "".join(data.split()), mime


def prepare_audio(value: object, field_name: str, mime_type: str | None = None) -> tuple[str, str]:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequest(f"Missing required field '{field_name}'")

    data, url_mime = split_data_url(value.strip())
    decode_base64(data, field_name)
    return "".join(data.split()), mime_type or url_mime or DEFAULT_AUDIO_MIME
