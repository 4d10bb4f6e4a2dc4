"""Построение бинарной маски для сервиса инпейнтинга.

Маска того же размера, что и исходное изображение, в режиме "L":
- `PRESERVE` (чёрный) — пиксели, которые модель не трогает;
- `EDIT` (белый) — область, которую нужно перерисовать.
"""
from __future__ import annotations

import io
from typing import Optional

import numpy as np
from PIL import Image

from watermark_eraser.models.image_model import ImageDimensions
from watermark_eraser.models.selection_model import SelectionRect

PRESERVE = 0
EDIT = 255


class MaskService:
    def build_mask(self, dims: ImageDimensions, selection: Optional[SelectionRect]) -> Image.Image:
        """
        Растеризует прямоугольник выделения в маску.

        Пиксель (c, r) попадает в выделение, если x <= c < x + width
        и y <= r < y + height. Пустое или отсутствующее выделение даёт
        маску целиком из `PRESERVE`.
        """
        out = np.full((dims.height, dims.width), PRESERVE, dtype=np.uint8)
        if selection is not None and not selection.is_empty:
            cols = np.arange(dims.width)
            rows = np.arange(dims.height)
            in_cols = (cols >= selection.x) & (cols < selection.x + selection.width)
            in_rows = (rows >= selection.y) & (rows < selection.y + selection.height)
            out[np.ix_(in_rows, in_cols)] = EDIT
        return Image.fromarray(out)

    def encode_png(self, mask: Image.Image) -> bytes:
        buffer = io.BytesIO()
        mask.save(buffer, format="PNG")
        return buffer.getvalue()

    def build_mask_png(self, dims: ImageDimensions, selection: Optional[SelectionRect]) -> bytes:
        """Маска сразу в PNG-байтах, в том виде, в каком её ждёт внешний API."""
        return self.encode_png(self.build_mask(dims, selection))
