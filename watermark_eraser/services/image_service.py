"""Загрузка изображений с диска, декодирование результата и сохранение.

Принципы:
- SRP: класс отвечает только за ввод-вывод изображений и базовые проверки.
- Размеры изображения извлекаются синхронно при загрузке, поэтому выделение
  включается только после того, как они известны.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from watermark_eraser.config import DEFAULT_MAX_UPLOAD_MB
from watermark_eraser.models.image_model import ImageData

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("PNG", "JPEG", "GIF", "WEBP", "BMP")
RESULT_FILENAME = "watermark_removed.png"


class ImageService:
    def __init__(self, max_upload_bytes: int = DEFAULT_MAX_UPLOAD_MB * 1024 * 1024) -> None:
        self._max_upload_bytes = max_upload_bytes

    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` с декодированным `PIL.Image.Image` (в режиме RGBA),
            исходными байтами файла, MIME-типом и размерами.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValueError: если файл слишком большой, не распознан как изображение,
                повреждён или имеет неподдерживаемый формат.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None
        if size_bytes is not None and size_bytes > self._max_upload_bytes:
            limit_mb = self._max_upload_bytes / (1024 * 1024)
            raise ValueError(f"Размер файла не должен превышать {limit_mb:g} МБ: {path.name}")

        raw_bytes = path.read_bytes()
        try:
            with Image.open(io.BytesIO(raw_bytes)) as decoded:
                image_format = decoded.format
                pil_image = decoded.convert("RGBA")
        except UnidentifiedImageError as exc:
            raise ValueError(f"Файл не является изображением: {path}") from exc
        except (OSError, Image.DecompressionBombError) as exc:
            raise ValueError(f"Не удалось декодировать изображение {path.name}: {exc}") from exc

        if image_format not in SUPPORTED_FORMATS:
            raise ValueError(f"Неподдерживаемый формат {image_format}: {path.name}")

        width, height = pil_image.size
        logger.info("Loaded %s (%dx%d, %s, %d bytes)", path.name, width, height, image_format, len(raw_bytes))
        return ImageData(
            path=path,
            pil_image=pil_image,
            raw_bytes=raw_bytes,
            mime_type=Image.MIME.get(image_format, "image/png"),
            width=width,
            height=height,
            mode=pil_image.mode,
            size_bytes=size_bytes,
        )

    def decode_result(self, data: bytes) -> Image.Image:
        """Декодирует байты ответа сервиса в RGBA-изображение.

        Raises:
            ValueError: если байты не являются изображением.
        """
        try:
            with Image.open(io.BytesIO(data)) as decoded:
                return decoded.convert("RGBA")
        except UnidentifiedImageError as exc:
            raise ValueError("Сервис вернул данные, которые не являются изображением") from exc
        except (OSError, Image.DecompressionBombError) as exc:
            raise ValueError(f"Не удалось декодировать ответ сервиса: {exc}") from exc

    def save_image(self, image: Image.Image, file_path: str | Path) -> Path:
        """Сохраняет изображение; формат определяется по расширению (по умолчанию PNG)."""
        path = Path(file_path)
        if not path.suffix:
            path = path.with_suffix(".png")
        to_save = image
        if path.suffix.lower() in (".jpg", ".jpeg") and image.mode != "RGB":
            to_save = image.convert("RGB")
        to_save.save(path)
        logger.info("Saved result to %s", path)
        return path
