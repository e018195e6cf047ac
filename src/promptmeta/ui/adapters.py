"""Adapter functions for converting between UI payloads and codec bytes.

Browsers hand images around as base64 strings, often wrapped in a data URL
(``data:image/png;base64,...``). The codec in ``promptmeta.core.png_metadata``
only deals in raw bytes, so every base64 / data-URL concern lives here.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging

from PIL import Image

from promptmeta.core.png_metadata import embed_prompt, extract_prompt

logger = logging.getLogger(__name__)


def strip_data_url(value: str) -> str:
    """Drop a ``data:...;base64,`` header if present."""
    if "," in value:
        return value.split(",", 1)[1]
    return value


def decode_image_payload(value: str) -> bytes:
    """Decode a base64 string (optionally a data URL) to raw bytes.

    Raises:
        binascii.Error: If the payload is not valid base64
    """
    return base64.b64decode(strip_data_url(value), validate=True)


def encode_image_payload(data: bytes, mime_type: str | None = None) -> str:
    """Encode raw bytes as base64, as a full data URL when mime_type is given."""
    encoded = base64.b64encode(data).decode("ascii")
    if mime_type:
        return f"data:{mime_type};base64,{encoded}"
    return encoded


def embed_prompt_in_base64(value: str, prompt: str, software: str | None = None) -> str:
    """Embed a prompt into a base64 PNG payload.

    The result is plain base64 without a data-URL header. Payloads that are
    not PNG, or not base64 at all, come back stripped of their header but
    otherwise unchanged.

    Args:
        value: Base64 image, optionally a data URL
        prompt: Prompt text to embed
        software: Optional override for the Software chunk

    Returns:
        Base64 string of the tagged image
    """
    stripped = strip_data_url(value)
    try:
        data = base64.b64decode(stripped, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.error(f"Failed to decode image payload: {e}", exc_info=True)
        return stripped

    tagged = embed_prompt(data, prompt, software=software)
    if tagged is data:
        return stripped
    return encode_image_payload(tagged)


def extract_prompt_from_base64(value: str) -> str | None:
    """Extract an embedded prompt from a base64 (or data URL) PNG payload."""
    try:
        data = decode_image_payload(value)
    except (binascii.Error, ValueError) as e:
        logger.error(f"Failed to decode image payload: {e}", exc_info=True)
        return None

    return extract_prompt(data)


def image_to_png_bytes(image: Image.Image) -> bytes:
    """Serialize a PIL image to PNG bytes."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def embed_prompt_in_image(
    image: Image.Image, prompt: str, software: str | None = None
) -> bytes:
    """Render a PIL image to PNG and embed the prompt in one step.

    Args:
        image: Generated image
        prompt: Prompt used to generate it
        software: Optional override for the Software chunk

    Returns:
        PNG bytes ready to be written or sent to the browser
    """
    return embed_prompt(image_to_png_bytes(image), prompt, software=software)
