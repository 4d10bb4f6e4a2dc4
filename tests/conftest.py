from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from watermark_eraser.models.image_model import ImageData


def png_bytes(width: int, height: int, color: tuple[int, int, int] = (200, 120, 40)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    return png_bytes


@pytest.fixture
def make_image_data() -> Callable[..., ImageData]:
    def _make(width: int = 800, height: int = 600) -> ImageData:
        raw = png_bytes(width, height)
        pil_image = Image.open(io.BytesIO(raw)).convert("RGBA")
        return ImageData(
            path=Path(f"sample_{width}x{height}.png"),
            pil_image=pil_image,
            raw_bytes=raw,
            mime_type="image/png",
            width=width,
            height=height,
            mode=pil_image.mode,
            size_bytes=len(raw),
        )

    return _make
