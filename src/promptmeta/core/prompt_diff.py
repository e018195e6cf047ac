"""Word-level diff for comparing two versions of a prompt.

Prompts are short (tens to hundreds of tokens) and often mix English and
Chinese, so the diff works on tokens rather than lines:

- a run of whitespace is one token
- each character of the delimiter set ``，。！？、：；""''（）【】《》`` and
  newline is its own token
- everything between delimiters forms one token

The two token streams are aligned with a Longest Common Subsequence table and
then walked with three cursors (old, new, LCS) to emit added / removed /
unchanged segments. Adjacent segments of the same kind are merged, so the
output never has two neighbours with the same kind.

The DP table is O(m*n) in time and memory. That is fine for prompts; untrusted
or document-sized input should go through
``promptmeta.ui.validation.validate_diff_inputs`` first.

Usage Example
-------------
    >>> from promptmeta.core.prompt_diff import compute_word_diff
    >>> [(s.kind.value, s.text) for s in compute_word_diff("the cat sat", "the dog sat")]
    [('unchanged', 'the '), ('removed', 'cat'), ('added', 'dog'), ('unchanged', ' sat')]
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

TOKEN_DELIMITER_PATTERN = re.compile(r"(\s+|[，。！？、：；\"\"''（）【】《》\n])")


class DiffKind(str, Enum):
    """Classification of a diff segment."""

    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DiffSegment:
    """A run of one or more tokens sharing the same diff kind."""

    kind: DiffKind
    text: str


def tokenize(text: str) -> list[str]:
    """Split text into word, whitespace and punctuation tokens.

    Delimiters are kept as tokens so the original text can be rebuilt by
    joining the result. Empty tokens are dropped.

    Args:
        text: Text to split

    Returns:
        Ordered list of non-empty tokens
    """
    return [token for token in TOKEN_DELIMITER_PATTERN.split(text) if token]


def compute_lcs(a: Sequence[str], b: Sequence[str]) -> list[str]:
    """Compute the Longest Common Subsequence of two token sequences.

    When several LCS solutions exist the backtrack prefers moving up
    (dropping from ``a``) only if that strictly keeps a longer prefix,
    otherwise it moves left (dropping from ``b``).

    Args:
        a: Old tokens
        b: New tokens

    Returns:
        Matched tokens in their original order
    """
    m = len(a)
    n = len(b)

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if a[i - 1] == b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])

    lcs = []
    i, j = m, n
    while i > 0 and j > 0:
        if a[i - 1] == b[j - 1]:
            lcs.append(a[i - 1])
            i -= 1
            j -= 1
        elif dp[i - 1][j] > dp[i][j - 1]:
            i -= 1
        else:
            j -= 1

    lcs.reverse()
    return lcs


def merge_segments(segments: Sequence[DiffSegment]) -> list[DiffSegment]:
    """Concatenate consecutive segments that share a kind."""
    merged: list[DiffSegment] = []
    for segment in segments:
        if merged and merged[-1].kind is segment.kind:
            merged[-1] = DiffSegment(merged[-1].kind, merged[-1].text + segment.text)
        else:
            merged.append(segment)
    return merged


def compute_word_diff(old_text: str, new_text: str) -> list[DiffSegment]:
    """Compare two texts and return merged added/removed/unchanged segments.

    Either input being empty yields an empty list rather than an
    all-added or all-removed diff.

    Args:
        old_text: Previous version
        new_text: Current version

    Returns:
        Segments in display order, no two adjacent segments of the same kind
    """
    if not old_text or not new_text:
        return []

    old_tokens = tokenize(old_text)
    new_tokens = tokenize(new_text)
    lcs = compute_lcs(old_tokens, new_tokens)

    segments: list[DiffSegment] = []
    old_idx = new_idx = lcs_idx = 0
    old_len, new_len, lcs_len = len(old_tokens), len(new_tokens), len(lcs)

    while old_idx < old_len or new_idx < new_len:
        target = lcs[lcs_idx] if lcs_idx < lcs_len else None
        old_token = old_tokens[old_idx] if old_idx < old_len else None
        new_token = new_tokens[new_idx] if new_idx < new_len else None

        if target is not None and old_token == target:
            if new_token == target:
                segments.append(DiffSegment(DiffKind.UNCHANGED, old_token))
                old_idx += 1
                new_idx += 1
                lcs_idx += 1
            else:
                # Old side is parked on the next match; new side catches up.
                segments.append(DiffSegment(DiffKind.ADDED, new_token))
                new_idx += 1
        elif target is not None and new_token == target:
            segments.append(DiffSegment(DiffKind.REMOVED, old_token))
            old_idx += 1
        elif old_token is not None and new_token is not None:
            segments.append(DiffSegment(DiffKind.REMOVED, old_token))
            segments.append(DiffSegment(DiffKind.ADDED, new_token))
            old_idx += 1
            new_idx += 1
        elif old_token is not None:
            segments.append(DiffSegment(DiffKind.REMOVED, old_token))
            old_idx += 1
        else:
            segments.append(DiffSegment(DiffKind.ADDED, new_token))
            new_idx += 1

    return merge_segments(segments)


def has_significant_diff(old_text: str, new_text: str) -> bool:
    """Check whether two prompts differ by more than whitespace.

    Returns:
        False for empty input or texts equal after trimming, otherwise True
        if any added or removed segment has non-whitespace content
    """
    if not old_text or not new_text:
        return False
    if old_text.strip() == new_text.strip():
        return False

    return any(
        segment.kind is not DiffKind.UNCHANGED and segment.text.strip()
        for segment in compute_word_diff(old_text, new_text)
    )


def diff_stats(segments: Sequence[DiffSegment]) -> dict[str, int]:
    """Count non-whitespace tokens per diff kind.

    Returns:
        Dictionary keyed by ``added``, ``removed`` and ``unchanged``
    """
    stats = {kind.value: 0 for kind in DiffKind}
    for segment in segments:
        stats[segment.kind.value] += sum(1 for token in tokenize(segment.text) if token.strip())
    return stats
