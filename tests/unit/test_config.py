"""Tests for promptmeta.core.config — configuration management.

Tests cover:
- Default values for all configuration fields.
- Environment variable overrides via the PROMPTMETA_ prefix.
- Pydantic validation constraints.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from promptmeta.core.config import PromptmetaConfig


class TestConfigDefaults:
    """Verify that PromptmetaConfig provides sensible defaults."""

    def test_default_software_name(self, test_config: PromptmetaConfig):
        """The Software chunk defaults to the product identifier."""
        assert test_config.software_name == "DB Visual Engine"

    def test_crc_verification_off_by_default(self, test_config: PromptmetaConfig):
        """Extraction trusts chunk framing unless told otherwise."""
        assert test_config.verify_crc is False

    def test_default_max_diff_tokens(self, test_config: PromptmetaConfig):
        assert test_config.max_diff_tokens == 2000


class TestConfigEnvironment:
    """Verify PROMPTMETA_ environment variable overrides."""

    def test_software_name_from_env(self, monkeypatch):
        monkeypatch.setenv("PROMPTMETA_SOFTWARE_NAME", "Studio Build 7")
        cfg = PromptmetaConfig(_env_file=None)
        assert cfg.software_name == "Studio Build 7"

    def test_verify_crc_from_env(self, monkeypatch):
        monkeypatch.setenv("PROMPTMETA_VERIFY_CRC", "true")
        cfg = PromptmetaConfig(_env_file=None)
        assert cfg.verify_crc is True

    def test_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("promptmeta_max_diff_tokens", "50")
        cfg = PromptmetaConfig(_env_file=None)
        assert cfg.max_diff_tokens == 50

    def test_env_file(self, tmp_path, monkeypatch):
        """Values can come from a .env file."""
        monkeypatch.delenv("PROMPTMETA_MAX_DIFF_TOKENS", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("PROMPTMETA_MAX_DIFF_TOKENS=123\n", encoding="utf-8")
        cfg = PromptmetaConfig(_env_file=env_file)
        assert cfg.max_diff_tokens == 123


class TestConfigValidation:
    """Verify Pydantic constraints."""

    @pytest.mark.parametrize("value", [0, -1, 100001])
    def test_max_diff_tokens_bounds(self, value):
        with pytest.raises(ValidationError):
            PromptmetaConfig(_env_file=None, max_diff_tokens=value)

    def test_empty_software_name_rejected(self):
        with pytest.raises(ValidationError):
            PromptmetaConfig(_env_file=None, software_name="")
