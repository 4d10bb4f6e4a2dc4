from __future__ import annotations

import io

import numpy as np
from PIL import Image

from watermark_eraser.models.image_model import ImageDimensions
from watermark_eraser.models.selection_model import SelectionRect
from watermark_eraser.services.mask_service import EDIT, PRESERVE, MaskService


def test_scenario_mask_marks_only_selected_rows_and_columns() -> None:
    mask = MaskService().build_mask(ImageDimensions(800, 600), SelectionRect(100, 100, 200, 150))
    arr = np.asarray(mask)

    assert mask.mode == "L"
    assert mask.size == (800, 600)
    assert np.all(arr[100:250, 100:300] == EDIT)
    assert int(np.count_nonzero(arr == EDIT)) == 200 * 150
    assert arr[99, 100] == PRESERVE
    assert arr[250, 100] == PRESERVE
    assert arr[100, 99] == PRESERVE
    assert arr[100, 300] == PRESERVE


def test_full_image_selection_is_all_edit() -> None:
    arr = np.asarray(MaskService().build_mask(ImageDimensions(64, 48), SelectionRect(0, 0, 64, 48)))
    assert np.all(arr == EDIT)


def test_missing_or_empty_selection_is_all_preserve() -> None:
    service = MaskService()
    dims = ImageDimensions(32, 16)
    assert np.all(np.asarray(service.build_mask(dims, None)) == PRESERVE)
    assert np.all(np.asarray(service.build_mask(dims, SelectionRect(5, 5, 0, 10))) == PRESERVE)
    assert np.all(np.asarray(service.build_mask(dims, SelectionRect(5, 5, 10, 0))) == PRESERVE)


def test_fractional_bounds_use_half_open_interval() -> None:
    arr = np.asarray(MaskService().build_mask(ImageDimensions(20, 20), SelectionRect(10.5, 3.0, 2.0, 1.5)))
    rows, cols = np.nonzero(arr == EDIT)
    assert sorted(set(cols.tolist())) == [11, 12]
    assert sorted(set(rows.tolist())) == [3, 4]


def test_png_encoding_is_deterministic_and_keeps_size() -> None:
    service = MaskService()
    dims = ImageDimensions(120, 90)
    selection = SelectionRect(7.25, 11.0, 40.5, 33.0)

    first = service.build_mask_png(dims, selection)
    second = service.build_mask_png(dims, selection)

    assert first == second
    decoded = Image.open(io.BytesIO(first))
    assert decoded.format == "PNG"
    assert decoded.size == (120, 90)
    assert set(np.unique(np.asarray(decoded)).tolist()) == {PRESERVE, EDIT}
