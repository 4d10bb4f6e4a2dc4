from __future__ import annotations

import io
from types import SimpleNamespace

import numpy as np
import pytest
from google.genai import errors
from PIL import Image

from watermark_eraser.models.selection_model import SelectionRect
from watermark_eraser.services.inpaint_service import BASE_PROMPT, InpaintError, InpaintService
from watermark_eraser.services.mask_service import EDIT


class FakeModels:
    def __init__(self, response=None, error=None) -> None:
        self.response = response
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def _response(*parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


def _service(models: FakeModels) -> InpaintService:
    return InpaintService(api_key=None, model="test-model", client=SimpleNamespace(models=models))


def test_build_request_contains_original_bytes_and_same_size_mask(make_image_data) -> None:
    image = make_image_data(800, 600)
    request = _service(FakeModels()).build_request(image, SelectionRect(100, 100, 200, 150), "  blue sky  ")

    assert request.image_bytes == image.raw_bytes
    assert request.image_mime_type == "image/png"
    assert request.prompt == "blue sky"
    mask = Image.open(io.BytesIO(request.mask_bytes))
    assert mask.size == (800, 600)
    assert int(np.count_nonzero(np.asarray(mask) == EDIT)) == 200 * 150


def test_compose_prompt_appends_guidance_only_when_given() -> None:
    service = _service(FakeModels())
    assert service.compose_prompt("") == BASE_PROMPT
    assert service.compose_prompt("match the wood texture").endswith("match the wood texture")


def test_remove_watermark_returns_first_inline_image(make_image_data) -> None:
    models = FakeModels(
        response=_response(
            SimpleNamespace(inline_data=None, text="Here you go"),
            SimpleNamespace(inline_data=SimpleNamespace(data=b"result-bytes", mime_type="image/png")),
        )
    )
    service = _service(models)
    request = service.build_request(make_image_data(40, 30), SelectionRect(1, 1, 5, 5), "")

    assert service.remove_watermark(request) == b"result-bytes"

    call = models.calls[0]
    assert call["model"] == "test-model"
    prompt, image_part, mask_part = call["contents"]
    assert prompt == BASE_PROMPT
    assert image_part.inline_data.data == request.image_bytes
    assert mask_part.inline_data.data == request.mask_bytes
    assert mask_part.inline_data.mime_type == "image/png"


def test_response_without_image_raises(make_image_data) -> None:
    service = _service(FakeModels(response=_response(SimpleNamespace(inline_data=None, text="Sorry"))))
    request = service.build_request(make_image_data(10, 10), SelectionRect(0, 0, 5, 5))
    with pytest.raises(InpaintError):
        service.remove_watermark(request)


def test_api_error_is_wrapped(make_image_data) -> None:
    error = errors.APIError(500, {"error": {"code": 500, "message": "boom", "status": "INTERNAL"}})
    service = _service(FakeModels(error=error))
    request = service.build_request(make_image_data(10, 10), SelectionRect(0, 0, 5, 5))
    with pytest.raises(InpaintError) as excinfo:
        service.remove_watermark(request)
    assert excinfo.value.__cause__ is error


def test_missing_api_key_raises_before_any_call(make_image_data) -> None:
    service = InpaintService(api_key=None, model="test-model")
    request = service.build_request(make_image_data(10, 10), SelectionRect(0, 0, 5, 5))
    with pytest.raises(InpaintError, match="GEMINI_API_KEY"):
        service.remove_watermark(request)
