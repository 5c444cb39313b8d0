"""Inline image encoding for reference images.

The codec is permissive: an image that cannot be read becomes
an ``UploadedImage`` with an empty payload instead of raising, and callers
decide whether to drop it (see ``UploadedImage.is_available``).
"""

import base64
import logging
from typing import TYPE_CHECKING, Any, BinaryIO

from core.models import UploadedImage

if TYPE_CHECKING:
    from fastapi import UploadFile

logger = logging.getLogger(__name__)

ImageSource = bytes | bytearray | memoryview | BinaryIO


def _to_payload(data: Any) -> str:
    if isinstance(data, (bytearray, memoryview)):
        data = bytes(data)
    if not isinstance(data, bytes):
        return ""
    return base64.b64encode(data).decode("ascii")


def encode_image(
    source: ImageSource,
    mime_type: str,
    *,
    filename: str | None = None,
) -> UploadedImage:
    """Encode an image into a base64 payload plus its MIME type.

    Args:
        source: Raw bytes or a binary file-like object.
        mime_type: MIME type declared by the source, copied verbatim.
        filename: Optional original file name.

    Returns:
        The encoded image. The payload is empty if the source was unreadable.
    """
    try:
        data = source.read() if hasattr(source, "read") else source
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Could not read image %s: %s", filename or "<unnamed>", e)
        data = None

    payload = _to_payload(data)
    if not payload:
        logger.warning("Image %s produced an empty payload", filename or "<unnamed>")
        return UploadedImage(filename=filename, mime_type=mime_type)

    return UploadedImage(
        filename=filename,
        raw_bytes=bytes(data),
        base64_payload=payload,
        mime_type=mime_type,
    )


async def encode_upload(upload: "UploadFile") -> UploadedImage:
    """Encode a FastAPI upload, applying the same permissive policy.

    Args:
        upload: The uploaded file.

    Returns:
        The encoded image.
    """
    mime_type = upload.content_type or ""
    try:
        data = await upload.read()
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Could not read upload %s: %s", upload.filename, e)
        return UploadedImage(filename=upload.filename, mime_type=mime_type)
    return encode_image(data, mime_type, filename=upload.filename)

