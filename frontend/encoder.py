# frontend/encoder.py

import asyncio
import base64
import binascii
import logging
import re
from typing import Sequence

from .errors import UnreadableFileError
from .model import EncodedImage, ImageSource

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:(?P<media_type>[^;,]+);base64,(?P<payload>.*)$", re.DOTALL)


def to_data_uri(data: bytes, media_type: str) -> EncodedImage:
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


async def encode(source: ImageSource) -> EncodedImage:
    """
    Read one file off the event loop and return it as a data URI.
    Raises UnreadableFileError if the read fails, whatever the handle raised.
    """
    try:
        data = await asyncio.to_thread(source.read)
    except Exception as e:
        logger.warning("[Encoder] Failed to read %s: %s", source.name, e)
        raise UnreadableFileError(source.name, str(e)) from e

    logger.debug("[Encoder] Encoded %s (%d bytes, %s)", source.name, len(data), source.media_type)
    return to_data_uri(data, source.media_type)


async def encode_all(sources: Sequence[ImageSource]) -> list[EncodedImage]:
    """
    Encode a batch concurrently. gather() keeps input order, so
    result[i] always belongs to sources[i].
    """
    return list(await asyncio.gather(*(encode(s) for s in sources)))


def decode(encoded: EncodedImage) -> tuple[bytes, str]:
    """Inverse of encode: returns (raw bytes, media type)."""
    m = _DATA_URI_RE.match(encoded)
    if not m:
        raise ValueError("Not a base64 data URI")
    try:
        data = base64.b64decode(m.group("payload"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return data, m.group("media_type")
