"""Точка входа в приложение."""
import logging

from watermark_eraser.config import load_settings
from watermark_eraser.log_config import configure_logging


def main() -> None:
    """Читает настройки, настраивает логирование, создаёт и запускает главное окно."""
    settings = load_settings()
    configure_logging(settings.log_level)
    if not settings.api_key:
        logging.getLogger(__name__).warning("GEMINI_API_KEY is not set; requests will fail until it is configured")

    # imported here so that configuration errors surface before Tk starts
    from watermark_eraser.app import WatermarkEraserApp

    app = WatermarkEraserApp(settings)
    app.mainloop()


if __name__ == "__main__":
    main()
