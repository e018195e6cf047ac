"""promptmeta - prompt metadata and prompt diffing for generated images."""

__version__ = "0.1.0"

from promptmeta.core.config import PromptmetaConfig, config
from promptmeta.core.png_metadata import (
    ExtractionResult,
    ExtractionStatus,
    embed_prompt,
    extract_prompt,
    extract_prompt_result,
)
from promptmeta.core.prompt_diff import (
    DiffKind,
    DiffSegment,
    compute_word_diff,
    has_significant_diff,
)

__all__ = [
    "DiffKind",
    "DiffSegment",
    "ExtractionResult",
    "ExtractionStatus",
    "PromptmetaConfig",
    "compute_word_diff",
    "config",
    "embed_prompt",
    "extract_prompt",
    "extract_prompt_result",
    "has_significant_diff",
]
