"""Core functionality for prompt metadata and prompt comparison.

This module provides the two pure components of promptmeta:

- **png_metadata**: Byte-level reader/writer for PNG ``tEXt``/``iTXt`` chunks
  that embeds a generation prompt into an image and recovers it later
- **prompt_diff**: Word-level LCS diff between two prompt versions
- **PromptmetaConfig**: Configuration management using Pydantic Settings
- **config**: Global configuration instance (loads from environment variables)

Both components are synchronous and hold no state between calls, so they can
be used from any thread. Transport concerns (base64, data URLs, PIL images)
live in ``promptmeta.ui.adapters``.

Usage Example
-------------
    from promptmeta.core import embed_prompt, extract_prompt, compute_word_diff

    tagged = embed_prompt(png_bytes, "a red fox in snow")
    extract_prompt(tagged)  # 'a red fox in snow'

    compute_word_diff("a red fox", "a grey fox")
"""

from promptmeta.core.config import PromptmetaConfig, config
from promptmeta.core.png_metadata import (
    Chunk,
    ExtractionResult,
    ExtractionStatus,
    PngChunkError,
    TextChunkPayload,
    embed_prompt,
    extract_prompt,
    extract_prompt_result,
    iter_chunks,
    read_text_chunks,
)
from promptmeta.core.prompt_diff import (
    DiffKind,
    DiffSegment,
    compute_word_diff,
    has_significant_diff,
    tokenize,
)

__all__ = [
    "Chunk",
    "DiffKind",
    "DiffSegment",
    "ExtractionResult",
    "ExtractionStatus",
    "PngChunkError",
    "PromptmetaConfig",
    "TextChunkPayload",
    "compute_word_diff",
    "config",
    "embed_prompt",
    "extract_prompt",
    "extract_prompt_result",
    "has_significant_diff",
    "iter_chunks",
    "read_text_chunks",
    "tokenize",
]
