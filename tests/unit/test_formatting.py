"""Unit tests for diff formatting utilities."""

from promptmeta.core.prompt_diff import DiffKind, DiffSegment, compute_word_diff
from promptmeta.ui.formatting import (
    format_diff_html,
    format_diff_markdown,
    format_diff_summary,
)


class TestFormatDiffHtml:
    """Tests for format_diff_html function."""

    def test_basic_diff(self):
        result = format_diff_html(compute_word_diff("the cat sat", "the dog sat"))
        assert result == (
            '<span class="diff-unchanged">the </span>'
            '<span class="diff-removed">cat</span>'
            '<span class="diff-added">dog</span>'
            '<span class="diff-unchanged"> sat</span>'
        )

    def test_escapes_text(self):
        result = format_diff_html([DiffSegment(DiffKind.ADDED, "<b>&</b>")])
        assert result == '<span class="diff-added">&lt;b&gt;&amp;&lt;/b&gt;</span>'

    def test_empty(self):
        assert format_diff_html([]) == ""


class TestFormatDiffMarkdown:
    """Tests for format_diff_markdown function."""

    def test_basic_diff(self):
        result = format_diff_markdown(compute_word_diff("the cat sat", "the dog sat"))
        assert result == "the ~~cat~~**dog** sat"

    def test_whitespace_kept_outside_markers(self):
        result = format_diff_markdown(compute_word_diff("a", "a b"))
        assert result == "a **b**"

    def test_whitespace_only_segment_unmarked(self):
        result = format_diff_markdown([DiffSegment(DiffKind.REMOVED, "  ")])
        assert result == "  "


class TestFormatDiffSummary:
    """Tests for format_diff_summary function."""

    def test_changes(self):
        result = format_diff_summary(compute_word_diff("the cat sat", "the dog sat"))
        assert result == "**Changes:** +1 / -1 words"

    def test_no_changes(self):
        assert format_diff_summary(compute_word_diff("same", "same")) == "*No changes*"
