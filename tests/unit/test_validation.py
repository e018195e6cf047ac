"""Unit tests for validation utilities."""

import pytest

from promptmeta.ui.validation import ValidationError, validate_diff_inputs


class TestValidationError:
    """Tests for ValidationError exception."""

    def test_validation_error_is_exception(self):
        """Test that ValidationError is an Exception."""
        assert issubclass(ValidationError, Exception)

    def test_validation_error_message(self):
        """Test that ValidationError preserves error message."""
        msg = "Custom validation error"
        with pytest.raises(ValidationError, match=msg):
            raise ValidationError(msg)


class TestValidateDiffInputs:
    """Tests for validate_diff_inputs function."""

    def test_small_inputs_pass(self):
        """Test that short prompts don't raise."""
        validate_diff_inputs("a red fox", "a grey fox")  # Should not raise

    def test_at_limit_passes(self):
        """Test that exactly max_tokens tokens is allowed."""
        validate_diff_inputs("a b", "c", max_tokens=3)

    def test_previous_too_long(self):
        """Test that an oversized old prompt is rejected."""
        with pytest.raises(ValidationError, match="Previous prompt is too long") as exc_info:
            validate_diff_inputs("a b c", "x", max_tokens=3)
        assert "5 tokens" in str(exc_info.value)

    def test_current_too_long(self):
        """Test that an oversized new prompt is rejected."""
        with pytest.raises(ValidationError, match="Current prompt is too long"):
            validate_diff_inputs("x", "一，二，三", max_tokens=3)

    def test_empty_inputs_pass(self):
        """Test that empty prompts are not a validation problem."""
        validate_diff_inputs("", "", max_tokens=1)

    def test_default_uses_config(self, monkeypatch):
        """Test that the configured cap applies when none is given."""
        from promptmeta.core.config import config

        monkeypatch.setattr(config, "max_diff_tokens", 2)
        with pytest.raises(ValidationError, match="Maximum is 2 tokens"):
            validate_diff_inputs("a b", "c")
