"""Модели данных для изображений.

Принципы:
- SRP: только структура данных, без логики загрузки и обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class ImageDimensions:
    """Натуральный размер изображения в пикселях.

    Заменяется целиком при загрузке нового изображения, никогда не мутирует.
    """
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Некорректный размер изображения: {self.width}x{self.height}")

    def as_tuple(self) -> tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель загруженного изображения и его метаданные.

    Fields:
        path: Путь к исходному файлу.
        pil_image: Декодированное изображение PIL.
        raw_bytes: Байты файла без перекодирования (уходят во внешний сервис).
        mime_type: MIME-тип исходного файла, например "image/png".
        width: Ширина, px.
        height: Высота, px.
        mode: Режим PIL, например "RGBA".
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    pil_image: Image.Image
    raw_bytes: bytes
    mime_type: str
    width: int
    height: int
    mode: str
    size_bytes: Optional[int]

    @property
    def dimensions(self) -> ImageDimensions:
        return ImageDimensions(self.width, self.height)
