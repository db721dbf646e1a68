"""Conversion between raw image bytes, ImagePayload and data URL strings."""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import mimetypes
import re
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from studio.handlers.error_handler import FormatError, ReadError, ValidationError
from studio.models.image import DataUrl, ImagePayload
from studio.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

DATA_URL_PATTERN = re.compile(r"data:(.*?);base64,(.*)", re.DOTALL)
INVALID_DATA_URL = "Invalid data URL format"


def encode(payload: ImagePayload) -> DataUrl:
    """Format a payload as ``data:<mime>;base64,<payload>``."""
    return f"data:{payload.mime_type};base64,{payload.data_b64}"


def decode(url: DataUrl) -> ImagePayload:
    """
    Parse a data URL into its MIME type and base64 payload.

    The strict pattern is tried first. When it does not match, the MIME type
    is taken between the first ``:`` and the first ``;`` and the payload is
    everything after the first ``,``. Either path fails when a field is empty.
    """
    if not isinstance(url, str):
        raise FormatError(INVALID_DATA_URL)

    match = DATA_URL_PATTERN.fullmatch(url)
    if match:
        mime_type, data_b64 = match.group(1), match.group(2)
    else:
        colon = url.find(":")
        semicolon = url.find(";")
        comma = url.find(",")
        mime_type = url[colon + 1 : semicolon] if -1 < colon < semicolon else ""
        data_b64 = url[comma + 1 :] if comma != -1 else ""

    if not mime_type or not data_b64:
        raise FormatError(INVALID_DATA_URL)
    return ImagePayload(mime_type=mime_type, data_b64=data_b64)


def encode_bytes(data: bytes, mime_type: str = "image/png") -> DataUrl:
    """Base64-encode raw image bytes into a data URL."""
    return encode(
        ImagePayload(
            mime_type=mime_type,
            data_b64=base64.b64encode(data).decode("utf-8"),
        )
    )


def payload_bytes(payload: ImagePayload) -> bytes:
    """Return the raw bytes held by a payload."""
    try:
        return base64.b64decode(payload.data_b64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FormatError("Image payload is not valid base64.") from exc


def decode_bytes(url: DataUrl) -> Tuple[bytes, str]:
    """Decode a data URL straight to ``(bytes, mime_type)``."""
    payload = decode(url)
    return payload_bytes(payload), payload.mime_type


def sniff_mime_type(data: bytes) -> Optional[str]:
    """Guess an image MIME type from the bytes themselves."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError):
        return None
    return Image.MIME.get(fmt) if fmt else None


async def read_local_file(file: Union[str, Path, Any]) -> DataUrl:
    """
    Read an uploaded file (anything with ``async read()``, e.g. FastAPI's
    ``UploadFile``) or a filesystem path fully into memory and return it
    as a data URL.
    """
    filename: Optional[str]
    try:
        if isinstance(file, (str, Path)):
            path = Path(file)
            filename = path.name
            mime_type = mimetypes.guess_type(path.as_posix())[0]
            data = await asyncio.to_thread(path.read_bytes)
        else:
            filename = getattr(file, "filename", None)
            mime_type = getattr(file, "content_type", None)
            data = await file.read()
    except OSError as exc:
        logger.error(f"Could not read file {file!r}: {exc}")
        raise ReadError() from exc

    if not isinstance(data, (bytes, bytearray)) or not data:
        raise ReadError()

    if not mime_type or mime_type == "application/octet-stream":
        if filename:
            mime_type = mimetypes.guess_type(filename)[0]
        if not mime_type:
            mime_type = sniff_mime_type(bytes(data))

    if not mime_type or not mime_type.startswith("image/"):
        raise ValidationError(
            f"Unsupported file type '{mime_type or 'unknown'}'. Please upload an image.",
            status_code=415,
            error_type="unsupported_media_type",
        )

    logger.info(f"Read {len(data)} bytes of {mime_type}")
    return encode_bytes(bytes(data), mime_type)
