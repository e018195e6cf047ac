"""PNG text-chunk codec for embedding and recovering generation prompts.

This module reads and writes PNG ancillary text chunks (``tEXt`` and
``iTXt``) directly at the byte level. No pixel data is decoded: the codec only
walks the chunk framing, so it works on any PNG regardless of colour type or
compression.

Chunk Layout
------------
Every PNG chunk has the same framing::

    [4-byte big-endian length][4-byte ASCII type][data][4-byte big-endian CRC]

The CRC is CRC-32/ISO-HDLC over ``type || data``, the same checksum zlib
computes and every PNG decoder validates.

Text payloads:

- ``tEXt``: ``keyword \\0 text`` (both Latin-1)
- ``iTXt``: ``keyword \\0 flag method language \\0 translated \\0 text``
  where text is UTF-8. We always write flag=0, method=0 and empty
  language/translated keyword.

Embedding
---------
``embed_prompt`` splices four chunks immediately after ``IHDR``:

1. ``iTXt`` ``parameters`` (Stable Diffusion convention, read by prompt-aware
   viewers such as Eagle)
2. ``iTXt`` ``Description``
3. ``iTXt`` ``Comment``
4. ``tEXt`` ``Software`` with the configured product identifier

The prompt always goes into ``iTXt`` so multi-byte text (e.g. Chinese)
round-trips exactly. Embedding is not idempotent: a second call adds a second
set of chunks above the first, and since extraction returns the first match in
file order the newest prompt wins.

Extraction
----------
``extract_prompt_result`` scans chunks top to bottom and returns the first
text chunk whose keyword is one of ``parameters``, ``prompt``,
``Description`` or ``Comment``. The winner is decided by file order, not by
keyword preference. Both directions degrade gracefully: a non-PNG buffer is
passed through unchanged by ``embed_prompt`` and reported as ``NOT_PNG`` by
extraction, and a truncated chunk stream simply ends the scan.

Usage Example
-------------
    from promptmeta.core.png_metadata import embed_prompt, extract_prompt

    tagged = embed_prompt(png_bytes, "a lighthouse at dusk, 35mm")
    assert extract_prompt(tagged) == "a lighthouse at dusk, 35mm"
"""

from __future__ import annotations

import logging
import struct
import zlib
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from promptmeta.core.config import config

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# length(4) + type(4) + crc(4)
CHUNK_OVERHEAD = 12
MAX_CHUNK_LENGTH = 2**31 - 1
MAX_KEYWORD_LENGTH = 79

TEXT_CHUNK_TYPES = (b"tEXt", b"iTXt")

# Keywords consulted by extraction. Priority is file order, not list order.
PROMPT_KEYWORDS = ("parameters", "prompt", "Description", "Comment")

# Keywords written by embed_prompt, in insertion order.
EMBED_KEYWORDS = ("parameters", "Description", "Comment")

SOFTWARE_KEYWORD = "Software"


class PngChunkError(ValueError):
    """Raised by the strict helpers when a chunk cannot be built or read."""

    pass


def _make_crc_table() -> tuple[int, ...]:
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            c = (0xEDB88320 ^ (c >> 1)) if c & 1 else c >> 1
        table.append(c)
    return tuple(table)


# Built once at import.
CRC_TABLE = _make_crc_table()


def crc32(data: bytes) -> int:
    """Compute the CRC-32 used by PNG chunks.

    Args:
        data: Bytes to checksum (chunk type followed by chunk data)

    Returns:
        Unsigned 32-bit checksum, identical to ``zlib.crc32(data)``
    """
    crc = 0xFFFFFFFF
    for byte in data:
        crc = CRC_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ 0xFFFFFFFF


@dataclass(frozen=True)
class Chunk:
    """A single PNG chunk as found in (or written to) a byte stream.

    Attributes:
        length: Declared byte count of the data field
        chunk_type: 4-byte ASCII tag such as ``b"IHDR"`` or ``b"iTXt"``
        data: Chunk payload
        crc: Stored CRC-32 over ``chunk_type + data``
        offset: Position of the length field in the source buffer
    """

    length: int
    chunk_type: bytes
    data: bytes
    crc: int
    offset: int = 0

    @property
    def type_name(self) -> str:
        return self.chunk_type.decode("latin-1")

    @property
    def size(self) -> int:
        """Total bytes the chunk occupies in the stream."""
        return CHUNK_OVERHEAD + self.length

    def compute_crc(self) -> int:
        return crc32(self.chunk_type + self.data)

    @property
    def is_crc_valid(self) -> bool:
        return self.compute_crc() == self.crc

    def to_bytes(self) -> bytes:
        return (
            struct.pack(">I", self.length)
            + self.chunk_type
            + self.data
            + struct.pack(">I", self.crc)
        )


@dataclass(frozen=True)
class TextChunkPayload:
    """Decoded content of a ``tEXt`` or ``iTXt`` chunk."""

    keyword: str
    text: str
    chunk_type: bytes = b"tEXt"
    compression_flag: int = 0
    compression_method: int = 0
    language_tag: str = ""
    translated_keyword: str = ""


class ExtractionStatus(str, Enum):
    """Outcome of a prompt extraction."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    NOT_PNG = "not_png"


@dataclass(frozen=True)
class ExtractionResult:
    """Result of scanning an image for an embedded prompt.

    ``NOT_PNG`` (bad signature) and ``NOT_FOUND`` (valid PNG, no prompt chunk)
    are kept apart so callers can tell an unsupported upload from an
    untagged image.
    """

    status: ExtractionStatus
    text: str | None = None
    keyword: str | None = None

    @property
    def found(self) -> bool:
        return self.status is ExtractionStatus.FOUND


def is_png(data: bytes) -> bool:
    """Check whether a buffer starts with the 8-byte PNG signature."""
    return bytes(data[: len(PNG_SIGNATURE)]) == PNG_SIGNATURE


def build_chunk(chunk_type: bytes, data: bytes) -> bytes:
    """Frame a chunk payload with its length and CRC.

    Args:
        chunk_type: 4-byte ASCII chunk type
        data: Chunk payload

    Returns:
        Serialized chunk (12 + len(data) bytes)

    Raises:
        PngChunkError: If the type is not 4 ASCII letters or data is too large
    """
    if len(chunk_type) != 4 or not chunk_type.isalpha():
        raise PngChunkError(f"Invalid chunk type: {chunk_type!r}")
    if len(data) > MAX_CHUNK_LENGTH:
        raise PngChunkError(f"Chunk data too large: {len(data)} bytes")

    chunk = Chunk(
        length=len(data),
        chunk_type=chunk_type,
        data=data,
        crc=crc32(chunk_type + data),
    )
    return chunk.to_bytes()


def _encode_keyword(keyword: str) -> bytes:
    if not 1 <= len(keyword) <= MAX_KEYWORD_LENGTH:
        raise PngChunkError(
            f"Keyword must be 1-{MAX_KEYWORD_LENGTH} characters, got {len(keyword)}"
        )
    if "\x00" in keyword:
        raise PngChunkError("Keyword must not contain null bytes")
    try:
        return keyword.encode("latin-1")
    except UnicodeEncodeError as e:
        raise PngChunkError(f"Keyword is not Latin-1: {keyword!r}") from e


def build_text_chunk(keyword: str, text: str) -> bytes:
    """Build a ``tEXt`` chunk (Latin-1 keyword and text).

    Raises:
        PngChunkError: If keyword or text cannot be represented in ``tEXt``
    """
    keyword_bytes = _encode_keyword(keyword)
    if "\x00" in text:
        raise PngChunkError("tEXt text must not contain null bytes")
    try:
        text_bytes = text.encode("latin-1")
    except UnicodeEncodeError as e:
        raise PngChunkError("tEXt text is not Latin-1, use an iTXt chunk") from e

    return build_chunk(b"tEXt", keyword_bytes + b"\x00" + text_bytes)


def build_itxt_chunk(keyword: str, text: str) -> bytes:
    """Build an uncompressed ``iTXt`` chunk with UTF-8 text.

    Layout: keyword, NUL, compression flag 0, compression method 0,
    empty language tag, NUL, empty translated keyword, NUL, text.

    Raises:
        PngChunkError: If the keyword is invalid
    """
    keyword_bytes = _encode_keyword(keyword)
    data = keyword_bytes + b"\x00" + b"\x00\x00" + b"\x00" + b"\x00" + text.encode("utf-8")
    return build_chunk(b"iTXt", data)


def find_insert_position(data: bytes) -> int:
    """Return the offset just past the first chunk (IHDR).

    The first chunk of a valid PNG is always IHDR, so the position is
    ``8 + 4 + 4 + IHDR_length + 4``.

    Raises:
        PngChunkError: If the buffer is too short to hold the first chunk
    """
    pos = len(PNG_SIGNATURE)
    if len(data) < pos + 8:
        raise PngChunkError("Buffer too short to contain an IHDR chunk")

    (length,) = struct.unpack_from(">I", data, pos)
    insert_pos = pos + CHUNK_OVERHEAD + length
    if insert_pos > len(data):
        raise PngChunkError("First chunk runs past end of buffer")
    return insert_pos


def embed_prompt(image_bytes: bytes, prompt: str, software: str | None = None) -> bytes:
    """Embed a prompt into PNG bytes as text metadata.

    Non-PNG input (or a PNG too damaged to locate IHDR) is returned unchanged.

    Args:
        image_bytes: Raw PNG file contents
        prompt: Prompt text, any Unicode
        software: Value for the ``Software`` chunk (default: config.software_name)

    Returns:
        New PNG bytes with four text chunks inserted after IHDR, or the
        original object on passthrough
    """
    if not is_png(image_bytes):
        logger.warning("Not a valid PNG file, returning original")
        return image_bytes

    data = bytes(image_bytes)
    software = software if software is not None else config.software_name

    try:
        insert_pos = find_insert_position(data)
        chunks = [build_itxt_chunk(keyword, prompt) for keyword in EMBED_KEYWORDS]
        chunks.append(build_text_chunk(SOFTWARE_KEYWORD, software))
    except PngChunkError as e:
        logger.error(f"Failed to embed prompt in PNG: {e}", exc_info=True)
        return image_bytes

    inserted = b"".join(chunks)
    logger.debug(f"Embedding {len(inserted)} bytes of text chunks at offset {insert_pos}")
    return data[:insert_pos] + inserted + data[insert_pos:]


def iter_chunks(data: bytes, strict: bool = False) -> Iterator[Chunk]:
    """Walk the chunk stream of a PNG buffer.

    Scanning starts after the signature and stops after ``IEND``, or when the
    remaining bytes cannot hold a complete chunk. The signature itself is not
    checked here.

    Args:
        data: PNG bytes
        strict: Raise instead of stopping on truncation, and validate CRCs

    Yields:
        Chunk objects in file order

    Raises:
        PngChunkError: In strict mode, on truncation or CRC mismatch
    """
    pos = len(PNG_SIGNATURE)
    total = len(data)

    while total - pos >= CHUNK_OVERHEAD:
        length, chunk_type = struct.unpack_from(">I4s", data, pos)
        data_start = pos + 8
        data_end = data_start + length

        if length > MAX_CHUNK_LENGTH or data_end + 4 > total:
            if strict:
                raise PngChunkError(
                    f"Truncated {chunk_type!r} chunk at offset {pos} "
                    f"(declares {length} bytes)"
                )
            logger.debug(f"Chunk stream truncated at offset {pos}")
            return

        (crc,) = struct.unpack_from(">I", data, data_end)
        chunk = Chunk(
            length=length,
            chunk_type=chunk_type,
            data=bytes(data[data_start:data_end]),
            crc=crc,
            offset=pos,
        )

        if strict and not chunk.is_crc_valid:
            raise PngChunkError(f"CRC mismatch in {chunk.type_name} chunk at offset {pos}")

        yield chunk
        pos = data_end + 4

        if chunk_type == b"IEND":
            return

    if strict and pos < total:
        raise PngChunkError(f"Trailing {total - pos} bytes do not form a chunk")


def parse_text_payload(chunk: Chunk) -> TextChunkPayload | None:
    """Decode a ``tEXt``/``iTXt`` chunk into keyword and text.

    Returns:
        TextChunkPayload, or None for other chunk types and for compressed
        ``iTXt`` payloads that fail to inflate
    """
    if chunk.chunk_type == b"tEXt":
        keyword, _, text = chunk.data.partition(b"\x00")
        return TextChunkPayload(
            keyword=keyword.decode("latin-1"),
            text=text.decode("latin-1"),
            chunk_type=b"tEXt",
        )

    if chunk.chunk_type != b"iTXt":
        return None

    keyword, _, rest = chunk.data.partition(b"\x00")
    compression_flag = rest[0] if len(rest) > 0 else 0
    compression_method = rest[1] if len(rest) > 1 else 0
    language_tag, _, rest = rest[2:].partition(b"\x00")
    translated_keyword, _, text = rest.partition(b"\x00")

    if compression_flag == 1:
        # We never write compressed iTXt, but other tools do.
        try:
            text = zlib.decompress(text)
        except zlib.error as e:
            logger.warning(f"Skipping compressed iTXt chunk {keyword!r}: {e}")
            return None

    return TextChunkPayload(
        keyword=keyword.decode("latin-1"),
        text=text.decode("utf-8", errors="replace"),
        chunk_type=b"iTXt",
        compression_flag=compression_flag,
        compression_method=compression_method,
        language_tag=language_tag.decode("ascii", errors="replace"),
        translated_keyword=translated_keyword.decode("utf-8", errors="replace"),
    )


def read_text_chunks(image_bytes: bytes) -> list[TextChunkPayload]:
    """Return every text entry of a PNG in file order (empty for non-PNG)."""
    if not is_png(image_bytes):
        return []

    payloads = []
    for chunk in iter_chunks(image_bytes):
        payload = parse_text_payload(chunk)
        if payload is not None:
            payloads.append(payload)
    return payloads


def extract_prompt_result(
    image_bytes: bytes, verify_crc: bool | None = None
) -> ExtractionResult:
    """Find the first embedded prompt in a PNG, scanning top to bottom.

    Args:
        image_bytes: Raw PNG file contents
        verify_crc: Ignore text chunks whose CRC does not match
            (default: config.verify_crc)

    Returns:
        ExtractionResult with status FOUND, NOT_FOUND or NOT_PNG
    """
    if not is_png(image_bytes):
        return ExtractionResult(status=ExtractionStatus.NOT_PNG)

    if verify_crc is None:
        verify_crc = config.verify_crc

    for chunk in iter_chunks(image_bytes):
        if chunk.chunk_type not in TEXT_CHUNK_TYPES:
            continue

        if verify_crc and not chunk.is_crc_valid:
            logger.warning(f"Ignoring {chunk.type_name} chunk with bad CRC at {chunk.offset}")
            continue

        payload = parse_text_payload(chunk)
        if payload is not None and payload.keyword in PROMPT_KEYWORDS:
            return ExtractionResult(
                status=ExtractionStatus.FOUND,
                text=payload.text,
                keyword=payload.keyword,
            )

    return ExtractionResult(status=ExtractionStatus.NOT_FOUND)


def extract_prompt(image_bytes: bytes) -> str | None:
    """Return the embedded prompt text, or None if there is none."""
    return extract_prompt_result(image_bytes).text
