"""Клиент внешнего сервиса инпейнтинга (Gemini).

Сервис собирает тройку (исходное изображение, маска, подсказка), отправляет её
модели генерации изображений и возвращает байты результата. Транспорт и
кодирование берёт на себя `google-genai`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from google import genai
from google.genai import errors, types

from watermark_eraser.models.image_model import ImageData
from watermark_eraser.models.selection_model import SelectionRect
from watermark_eraser.services.mask_service import MaskService

logger = logging.getLogger(__name__)

BASE_PROMPT = """
You are performing precise image inpainting.

You are given:
1) An original image
2) A binary mask image of the same size

MASK RULE:
- WHITE pixels mark the watermark area that must be removed completely
- BLACK pixels must not be altered in any way

TASK:
- Remove the watermark inside the WHITE area
- Reconstruct the area from the surrounding content so that no trace remains
- Keep resolution, colors and everything outside the WHITE area unchanged

Return ONLY the edited image.
""".strip()


class InpaintError(RuntimeError):
    """Сервис не смог обработать запрос."""


@dataclass(frozen=True)
class InpaintRequest:
    """Полный запрос к сервису; маска совпадает по размеру с изображением."""
    image_bytes: bytes
    image_mime_type: str
    mask_bytes: bytes
    prompt: str


class InpaintService:
    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        mask_service: Optional[MaskService] = None,
        client: Any = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._mask_service = mask_service or MaskService()
        self._client = client

    def build_request(self, image: ImageData, selection: SelectionRect, prompt: str = "") -> InpaintRequest:
        """Строит маску по выделению и упаковывает её вместе с исходными байтами."""
        mask_bytes = self._mask_service.build_mask_png(image.dimensions, selection)
        return InpaintRequest(
            image_bytes=image.raw_bytes,
            image_mime_type=image.mime_type,
            mask_bytes=mask_bytes,
            prompt=(prompt or "").strip(),
        )

    def compose_prompt(self, guidance: str) -> str:
        if not guidance:
            return BASE_PROMPT
        return f"{BASE_PROMPT}\n\nAdditional guidance for the filled area: {guidance}"

    def remove_watermark(self, request: InpaintRequest) -> bytes:
        """Отправляет запрос и возвращает байты обработанного изображения.

        Raises:
            InpaintError: нет ключа API, ошибка API или ответ без изображения.
        """
        client = self._get_client()
        contents = [
            self.compose_prompt(request.prompt),
            types.Part.from_bytes(data=request.image_bytes, mime_type=request.image_mime_type),
            types.Part.from_bytes(data=request.mask_bytes, mime_type="image/png"),
        ]
        logger.info("Calling %s (image %d bytes, mask %d bytes)", self._model, len(request.image_bytes), len(request.mask_bytes))
        try:
            response = client.models.generate_content(
                model=self._model,
                contents=contents,
                config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
            )
        except errors.APIError as exc:
            raise InpaintError(f"Ошибка API: {exc}") from exc

        data = self._extract_image(response)
        if data is None:
            raise InpaintError("Модель не вернула изображение")
        return data

    # ---- Helpers ----
    def _get_client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise InpaintError("Не задан ключ API (переменная окружения GEMINI_API_KEY)")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def _extract_image(self, response: Any) -> Optional[bytes]:
        for candidate in getattr(response, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            for part in getattr(content, "parts", None) or []:
                inline = getattr(part, "inline_data", None)
                if inline is not None and inline.data:
                    return inline.data
        return None
