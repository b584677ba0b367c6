"""Shared pytest fixtures for the search pipeline tests."""

from __future__ import annotations

import random
from io import BytesIO

import pytest
from PIL import Image
from pydantic import SecretStr

from find_vintage.config import SearchConfig


def make_image_bytes(
    size: tuple[int, int] = (64, 48), *, mode: str = "RGB", fmt: str = "PNG", seed: int = 7
) -> bytes:
    rng = random.Random(seed)
    image = Image.new(mode, size)
    channels = len(mode)
    pixels = [
        tuple(rng.randrange(256) for _ in range(channels)) if channels > 1 else rng.randrange(256)
        for _ in range(size[0] * size[1])
    ]
    image.putdata(pixels)
    buffer = BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


class PassthroughEncoder:
    """Skips Pillow so request bodies identify which search they belong to."""

    def encode(self, image, quality: float = 0.7) -> bytes:
        return bytes(image)


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def web_config() -> SearchConfig:
    return SearchConfig(
        mode="web_detection",
        api_key=SecretStr("vision-key"),
        endpoint="https://vision.example/v1/images:annotate",
    )


@pytest.fixture
def custom_config() -> SearchConfig:
    return SearchConfig(
        mode="custom_search",
        api_key=SecretStr("cse-key"),
        engine_id="engine-1",
        endpoint="https://cse.example/customsearch/v1",
    )
