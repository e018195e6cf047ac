"""Configuration management for promptmeta.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the PROMPTMETA_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (PROMPTMETA_* prefix)
2. .env file in the project root
3. Default values defined in PromptmetaConfig

Example .env file:
    PROMPTMETA_SOFTWARE_NAME=DB Visual Engine
    PROMPTMETA_VERIFY_CRC=false
    PROMPTMETA_MAX_DIFF_TOKENS=2000

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
The codec and the diff guards read their defaults from it when callers do not
pass explicit values.

Usage Example
-------------
    from promptmeta.core.config import config

    print(config.software_name)
    print(config.max_diff_tokens)
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PromptmetaConfig(BaseSettings):
    """Main configuration for promptmeta.

    Attributes
    ----------
    PNG Metadata:
        software_name : str
            Product identifier written into the ``tEXt`` ``Software`` chunk
        verify_crc : bool
            Skip text chunks whose CRC does not match when extracting prompts.
            Off by default: extraction trusts the chunk framing.

    Prompt Diff:
        max_diff_tokens : int
            Upper bound on tokens per side accepted by the diff input guard.
            The LCS table is O(m*n), so untrusted input should be capped.

    Examples
    --------
        >>> custom_config = PromptmetaConfig(software_name="My Tool", verify_crc=True)
        >>> custom_config.verify_crc
        True
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROMPTMETA_",
        case_sensitive=False,
    )

    # PNG metadata settings
    software_name: str = Field(
        default="DB Visual Engine",
        description="Product identifier stored in the tEXt Software chunk",
        min_length=1,
    )
    verify_crc: bool = Field(
        default=False,
        description="Ignore text chunks with a bad CRC when extracting prompts",
    )

    # Diff settings
    max_diff_tokens: int = Field(
        default=2000,
        description="Maximum tokens per side accepted by validate_diff_inputs",
        ge=1,
        le=100000,
    )


# Global configuration instance
config = PromptmetaConfig()
