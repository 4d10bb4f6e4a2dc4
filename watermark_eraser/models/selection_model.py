"""Прямоугольное выделение и конечный автомат жеста перетаскивания.

Трекер получает точки уже в координатах изображения (см.
`services.coordinate_mapper`) и сам прижимает их к границам картинки, поэтому
прямоугольник никогда не выходит за пределы изображения.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from watermark_eraser.models.image_model import ImageDimensions
from watermark_eraser.services.coordinate_mapper import clamp_point

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True)
class SelectionRect:
    """Прямоугольник в координатах изображения (px, float)."""
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_points(cls, a: Point, b: Point) -> "SelectionRect":
        """Нормализованный прямоугольник по двум противоположным углам."""
        ax, ay = a
        bx, by = b
        return cls(x=min(ax, bx), y=min(ay, by), width=abs(ax - bx), height=abs(ay - by))

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


class GestureState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTED = "committed"


class SelectionTracker:
    """Накопление жеста «нажал → тянул → отпустил» в один `SelectionRect`.

    Состояния:
        IDLE: жеста нет; выделение пустое (или сброшено).
        DRAGGING: якорь записан, прямоугольник обновляется на каждом движении.
        COMMITTED: жест завершён, прямоугольник заморожен до следующего жеста.

    Пока трекер заблокирован (`lock`), новые жесты отклоняются: так UI
    запрещает выделение, когда показан результат или идёт запрос.
    """

    def __init__(self, bounds: Optional[ImageDimensions] = None) -> None:
        self._bounds: Optional[ImageDimensions] = bounds
        self._state: GestureState = GestureState.IDLE
        self._anchor: Optional[Point] = None
        self._selection: Optional[SelectionRect] = None
        self._locked: bool = False

        self.on_change: Optional[Callable[[Optional[SelectionRect]], None]] = None

    # ---- Read-only state ----
    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def selection(self) -> Optional[SelectionRect]:
        return self._selection

    @property
    def anchor(self) -> Optional[Point]:
        return self._anchor

    @property
    def bounds(self) -> Optional[ImageDimensions]:
        return self._bounds

    @property
    def is_dragging(self) -> bool:
        return self._state is GestureState.DRAGGING

    @property
    def is_locked(self) -> bool:
        return self._locked

    # ---- Transitions ----
    def start(self, point: Point) -> bool:
        """Начинает жест в точке `point`. Возвращает False, если жест отклонён."""
        if self._locked or self._bounds is None:
            logger.debug("Gesture start rejected (locked=%s)", self._locked)
            return False
        anchor = clamp_point(point, self._bounds)
        self._anchor = anchor
        self._state = GestureState.DRAGGING
        # new gesture always discards the previous selection
        self._set_selection(SelectionRect(x=anchor[0], y=anchor[1], width=0.0, height=0.0))
        return True

    def move(self, point: Point) -> Optional[SelectionRect]:
        if self._state is not GestureState.DRAGGING or self._anchor is None or self._bounds is None:
            return self._selection
        current = clamp_point(point, self._bounds)
        self._set_selection(SelectionRect.from_points(self._anchor, current))
        return self._selection

    def end(self) -> Optional[SelectionRect]:
        """Отпускание кнопки и уход указателя с холста завершают жест одинаково."""
        if self._state is not GestureState.DRAGGING:
            return self._selection
        self._state = GestureState.COMMITTED
        self._anchor = None
        logger.debug("Selection committed: %s", self._selection)
        return self._selection

    def clear(self) -> None:
        self._state = GestureState.IDLE
        self._anchor = None
        self._set_selection(None)

    def reset(self, bounds: Optional[ImageDimensions]) -> None:
        """Новое изображение: безусловный возврат в IDLE с новыми границами."""
        self._bounds = bounds
        self._locked = False
        self.clear()

    def lock(self) -> None:
        if self._state is GestureState.DRAGGING:
            self.end()
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    # ---- Helpers ----
    def _set_selection(self, selection: Optional[SelectionRect]) -> None:
        self._selection = selection
        if self.on_change:
            self.on_change(selection)
