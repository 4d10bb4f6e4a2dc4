"""Состояние сеанса редактирования как явный конечный автомат.

Один `AppState` вместо набора независимых флагов («есть картинка», «есть
выделение», «есть результат»), поэтому противоречивые комбинации невозможны.

Переходы:
    EMPTY -> IMAGE_LOADED -> SELECTING -> SUBMITTING -> RESULT_READY
    SUBMITTING -> SELECTING (ошибка сервиса, можно повторить)
    * -> EMPTY (reset)
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from PIL import Image

from watermark_eraser.models.image_model import ImageData, ImageDimensions
from watermark_eraser.models.selection_model import Point, SelectionRect, SelectionTracker

logger = logging.getLogger(__name__)


class AppState(Enum):
    EMPTY = "empty"
    IMAGE_LOADED = "image_loaded"
    SELECTING = "selecting"
    SUBMITTING = "submitting"
    RESULT_READY = "result_ready"


class StateError(RuntimeError):
    """Переход не разрешён в текущем состоянии (ошибка программы, не пользователя)."""


class SubmissionError(ValueError):
    """Запрос нельзя отправить; сообщение предназначено для пользователя."""


class AppSession:
    """Единственный источник правды для изображения, выделения и результата."""

    def __init__(self) -> None:
        self._state: AppState = AppState.EMPTY
        self._image: Optional[ImageData] = None
        self._result: Optional[Image.Image] = None
        self.tracker = SelectionTracker()

    # ---- Read-only state ----
    @property
    def state(self) -> AppState:
        return self._state

    @property
    def image(self) -> Optional[ImageData]:
        return self._image

    @property
    def dimensions(self) -> Optional[ImageDimensions]:
        return self._image.dimensions if self._image is not None else None

    @property
    def selection(self) -> Optional[SelectionRect]:
        return self.tracker.selection

    @property
    def result(self) -> Optional[Image.Image]:
        """Декодированный результат; декодируется один раз и переиспользуется при перерисовке."""
        return self._result

    @property
    def can_submit(self) -> bool:
        selection = self.tracker.selection
        return (
            self._state is AppState.SELECTING
            and not self.tracker.is_dragging
            and selection is not None
            and not selection.is_empty
        )

    @property
    def accepts_gestures(self) -> bool:
        return self._state in (AppState.IMAGE_LOADED, AppState.SELECTING)

    # ---- Transitions ----
    def load_image(self, image: ImageData) -> None:
        if self._state is AppState.SUBMITTING:
            raise StateError("Нельзя загрузить изображение во время обработки")
        self._image = image
        self._result = None
        self.tracker.reset(image.dimensions)
        self._set_state(AppState.IMAGE_LOADED)

    def begin_gesture(self, point: Point) -> bool:
        if not self.accepts_gestures:
            return False
        if not self.tracker.start(point):
            return False
        self._set_state(AppState.SELECTING)
        return True

    def update_gesture(self, point: Point) -> Optional[SelectionRect]:
        return self.tracker.move(point)

    def end_gesture(self) -> Optional[SelectionRect]:
        return self.tracker.end()

    def clear_selection(self) -> None:
        if not self.accepts_gestures:
            return
        self.tracker.clear()
        self._set_state(AppState.IMAGE_LOADED)

    def begin_submit(self) -> tuple[ImageData, SelectionRect]:
        """Проверяет готовность и переводит сеанс в SUBMITTING.

        Raises:
            SubmissionError: нет изображения, нет выделения или оно пустое,
                либо запрос уже отправлен / результат уже получен.
        """
        if self._image is None:
            raise SubmissionError("Сначала загрузите изображение и выделите водяной знак.")
        if self._state is AppState.SUBMITTING:
            raise SubmissionError("Изображение уже обрабатывается.")
        if self._state is AppState.RESULT_READY:
            raise SubmissionError("Результат уже получен. Начните заново, чтобы обработать снова.")
        selection = self.tracker.selection
        if selection is None or selection.is_empty or self.tracker.is_dragging:
            raise SubmissionError("Выделите область водяного знака на изображении.")
        self.tracker.lock()
        self._set_state(AppState.SUBMITTING)
        return self._image, selection

    def complete_submit(self, result: Image.Image) -> None:
        if self._state is not AppState.SUBMITTING:
            raise StateError(f"Результат получен в состоянии {self._state.value}")
        self._result = result
        self._set_state(AppState.RESULT_READY)

    def fail_submit(self) -> None:
        """Ошибка сервиса: выделение сохраняется, можно повторить запрос."""
        if self._state is not AppState.SUBMITTING:
            raise StateError(f"Ошибка запроса в состоянии {self._state.value}")
        self.tracker.unlock()
        self._set_state(AppState.SELECTING)

    def reset(self) -> None:
        if self._state is AppState.SUBMITTING:
            raise StateError("Нельзя сбросить сеанс во время обработки")
        self._image = None
        self._result = None
        self.tracker.reset(None)
        self._set_state(AppState.EMPTY)

    def _set_state(self, state: AppState) -> None:
        if state is not self._state:
            logger.debug("Session state: %s -> %s", self._state.value, state.value)
        self._state = state
