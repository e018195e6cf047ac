"""Formatting utilities for displaying prompt diffs in the UI."""

import html
from collections.abc import Sequence

from promptmeta.core.prompt_diff import DiffKind, DiffSegment, diff_stats

# CSS class per segment kind, styled by the frontend.
DIFF_CSS_CLASSES = {
    DiffKind.ADDED: "diff-added",
    DiffKind.REMOVED: "diff-removed",
    DiffKind.UNCHANGED: "diff-unchanged",
}


def format_diff_html(segments: Sequence[DiffSegment]) -> str:
    """Render diff segments as a sequence of HTML spans.

    Args:
        segments: Output of compute_word_diff

    Returns:
        HTML string, empty when there are no segments
    """
    return "".join(
        f'<span class="{DIFF_CSS_CLASSES[segment.kind]}">{html.escape(segment.text)}</span>'
        for segment in segments
    )


def format_diff_markdown(segments: Sequence[DiffSegment]) -> str:
    """Render diff segments as inline markdown.

    Added text is bold, removed text is struck through. Surrounding
    whitespace is kept outside the markers so they render.

    Args:
        segments: Output of compute_word_diff

    Returns:
        Markdown string
    """
    parts = []
    for segment in segments:
        if segment.kind is DiffKind.UNCHANGED or not segment.text.strip():
            parts.append(segment.text)
            continue

        marker = "**" if segment.kind is DiffKind.ADDED else "~~"
        core = segment.text.strip()
        leading = segment.text[: len(segment.text) - len(segment.text.lstrip())]
        trailing = segment.text[len(segment.text.rstrip()) :]
        parts.append(f"{leading}{marker}{core}{marker}{trailing}")

    return "".join(parts)


def format_diff_summary(segments: Sequence[DiffSegment]) -> str:
    """Summarize a diff as a one-line markdown string.

    Example: ``**Changes:** +3 / -1 words``
    """
    stats = diff_stats(segments)
    if not stats["added"] and not stats["removed"]:
        return "*No changes*"
    return f"**Changes:** +{stats['added']} / -{stats['removed']} words"
