"""Turn an uploaded image into a reference the listings page can display."""
from __future__ import annotations

import base64
import logging
import mimetypes

from .errors import ValidationError

logger = logging.getLogger(__name__)


def to_data_url(
    content: bytes,
    *,
    content_type: str | None,
    filename: str | None = None,
    placeholder: str,
    max_bytes: int,
) -> str:
    """Return a ``data:`` URL for the upload, or the placeholder when it is empty."""

    if not content:
        return placeholder

    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if not media_type or media_type == "application/octet-stream":
        guessed, _ = mimetypes.guess_type(filename or "")
        media_type = guessed or ""

    if not media_type.startswith("image/"):
        raise ValidationError("images", "images: only image files can be uploaded")
    if len(content) > max_bytes:
        raise ValidationError("images", f"images: file exceeds {max_bytes} bytes")

    encoded = base64.b64encode(content).decode("ascii")
    logger.debug("Encoded %d byte %s upload", len(content), media_type)
    return f"data:{media_type};base64,{encoded}"


def max_data_url_length(max_bytes: int) -> int:
    """Longest ``data:`` URL an upload of ``max_bytes`` can encode to."""

    return 4 * ((max_bytes + 2) // 3) + len("data:;base64,") + 127
