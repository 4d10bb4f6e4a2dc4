from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Настраивает корневой логгер: вывод в stdout, уровень по имени."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    logging.basicConfig(stream=sys.stdout, level=numeric_level, format=LOG_FORMAT)
    # PIL подробно пишет о разборе PNG-чанков на DEBUG
    logging.getLogger("PIL").setLevel(logging.WARNING)
