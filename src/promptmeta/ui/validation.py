"""Validation utilities for promptmeta UI inputs."""

import logging

from promptmeta.core.config import config
from promptmeta.core.prompt_diff import tokenize

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def validate_diff_inputs(old_text: str, new_text: str, max_tokens: int | None = None) -> None:
    """Check that two prompts are small enough to diff.

    The diff table grows with the product of both token counts, so each side
    is capped before ``compute_word_diff`` is called on untrusted text.

    Args:
        old_text: Previous prompt
        new_text: Current prompt
        max_tokens: Token cap per side (default: config.max_diff_tokens)

    Raises:
        ValidationError: If either side has more tokens than allowed
    """
    if max_tokens is None:
        max_tokens = config.max_diff_tokens

    for label, text in (("Previous", old_text), ("Current", new_text)):
        count = len(tokenize(text or ""))
        if count > max_tokens:
            logger.warning(f"Rejected diff input: {label.lower()} prompt has {count} tokens")
            raise ValidationError(
                f"{label} prompt is too long to compare ({count} tokens). "
                f"Maximum is {max_tokens} tokens."
            )
