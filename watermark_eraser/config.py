"""Настройки приложения из переменных окружения (и файла `.env`, если он есть)."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-2.5-flash-image"
DEFAULT_MAX_UPLOAD_MB = 10
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """
    Fields:
        api_key: Ключ Gemini API; может отсутствовать при запуске,
            обязателен только при отправке запроса.
        model: Имя модели генерации изображений.
        max_upload_bytes: Предельный размер открываемого файла.
        log_level: Уровень логирования ("DEBUG", "INFO", ...).
    """
    api_key: Optional[str]
    model: str = DEFAULT_MODEL
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_MB * 1024 * 1024
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(env_file: Optional[str | Path] = None) -> Settings:
    """Читает настройки; значения из окружения имеют приоритет над `.env`.

    Raises:
        ValueError: если WATERMARK_ERASER_MAX_UPLOAD_MB не положительное число.
    """
    load_dotenv(dotenv_path=env_file)

    raw_limit = os.getenv("WATERMARK_ERASER_MAX_UPLOAD_MB", str(DEFAULT_MAX_UPLOAD_MB))
    try:
        limit_mb = float(raw_limit)
    except ValueError as exc:
        raise ValueError(f"WATERMARK_ERASER_MAX_UPLOAD_MB должно быть числом: {raw_limit!r}") from exc
    if limit_mb <= 0:
        raise ValueError(f"WATERMARK_ERASER_MAX_UPLOAD_MB должно быть больше нуля: {raw_limit!r}")

    return Settings(
        api_key=os.getenv("GEMINI_API_KEY") or None,
        model=os.getenv("WATERMARK_ERASER_MODEL", DEFAULT_MODEL),
        max_upload_bytes=int(limit_mb * 1024 * 1024),
        log_level=os.getenv("WATERMARK_ERASER_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
