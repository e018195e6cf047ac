"""Shared pytest fixtures for promptmeta tests."""

import io

import pytest
from PIL import Image

from promptmeta.core.config import PromptmetaConfig


@pytest.fixture
def test_config(monkeypatch) -> PromptmetaConfig:
    """Create a configuration isolated from the environment and .env files.

    Returns:
        PromptmetaConfig instance with default values
    """
    for name in ("SOFTWARE_NAME", "VERIFY_CRC", "MAX_DIFF_TOKENS"):
        monkeypatch.delenv(f"PROMPTMETA_{name}", raising=False)
    return PromptmetaConfig(_env_file=None)


@pytest.fixture
def sample_image() -> Image.Image:
    """Create a small RGB image with a recognizable pixel pattern.

    Returns:
        8x8 PIL image
    """
    image = Image.new("RGB", (8, 8), (200, 30, 30))
    image.putpixel((0, 0), (0, 255, 0))
    image.putpixel((7, 7), (0, 0, 255))
    return image


@pytest.fixture
def png_bytes(sample_image: Image.Image) -> bytes:
    """Encode the sample image as a PNG without any text chunks.

    Returns:
        Raw PNG file contents
    """
    buffer = io.BytesIO()
    sample_image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def sample_prompts() -> list[str]:
    """Sample prompts for testing.

    Returns:
        List of test prompts, including multi-byte text
    """
    return [
        "a lighthouse at dusk, 35mm, film grain",
        "一只橘猫在窗台上晒太阳，电影感，柔光",
        "Portrait: café owner, “warm” light 🌅",
        "line one\nline two\n\tindented",
        "A very long prompt " * 200,
    ]
