"""Screenshot payload inspection.

Providers answer with base64 text (Browserless) or raw bytes (ScrapingBee).
Either way the gateway decodes the payload once, lets Pillow identify it and
keeps format and size next to the stored bytes.
"""

from __future__ import annotations

import base64
import binascii
import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from .errors import BackendError

_FORMAT_MIME = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}


@dataclass(frozen=True, slots=True)
class ImageInfo:
    mime_type: str
    width: int
    height: int


def encode_image(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def inspect_image(data_b64: str) -> ImageInfo:
    """Validate a base64 screenshot and report its MIME type and dimensions."""
    if not data_b64 or not data_b64.strip():
        raise BackendError("Screenshot data is empty")
    try:
        raw = base64.b64decode(data_b64.strip(), validate=False)
    except (binascii.Error, ValueError) as exc:
        raise BackendError(f"Screenshot is not valid base64: {exc}") from exc
    try:
        with Image.open(io.BytesIO(raw)) as img:
            fmt = (img.format or "").upper()
            width, height = img.size
            # open() only reads the header; decode fully so cut-off payloads fail here.
            img.load()
    except UnidentifiedImageError as exc:
        raise BackendError("Screenshot payload is not a recognizable image") from exc
    except (OSError, SyntaxError, ValueError) as exc:
        raise BackendError(f"Screenshot payload is truncated or corrupt: {exc}") from exc
    return ImageInfo(mime_type=_FORMAT_MIME.get(fmt, "application/octet-stream"), width=width, height=height)
