"""Преобразование координат между экраном (холстом) и изображением.

Чистые функции без состояния. Масштаб по осям считается независимо: при
отображении с сохранением пропорций он совпадает, но функции на это не
полагаются.
"""
from __future__ import annotations

from typing import Tuple

from watermark_eraser.models.image_model import ImageDimensions

Point = Tuple[float, float]
Size = Tuple[float, float]


def display_to_image(
    pointer: Point,
    displayed_size: Size,
    native_size: Size,
    origin: Point = (0.0, 0.0),
) -> Point:
    """Переводит позицию указателя на холсте в пиксели изображения.

    `native = (pointer - origin) * native_size / displayed_size` по каждой оси.
    Точка может лежать за пределами изображения: функция не прижимает
    результат к границам, это делает вызывающий код.

    Precondition: обе стороны `displayed_size` больше нуля. При нулевой
    стороне возникнет `ZeroDivisionError`; вызывающий код не должен
    обращаться к функции, пока холст не получил размер.
    """
    px, py = pointer
    ox, oy = origin
    dw, dh = displayed_size
    nw, nh = native_size
    return (px - ox) * (nw / dw), (py - oy) * (nh / dh)


def image_to_display(
    point: Point,
    displayed_size: Size,
    native_size: Size,
    origin: Point = (0.0, 0.0),
) -> Point:
    """Обратное преобразование: пиксели изображения → координаты холста."""
    ix, iy = point
    ox, oy = origin
    dw, dh = displayed_size
    nw, nh = native_size
    return ox + ix * (dw / nw), oy + iy * (dh / nh)


def clamp_point(point: Point, bounds: ImageDimensions) -> Point:
    """Прижимает точку к прямоугольнику [0, width] x [0, height]."""
    x, y = point
    return max(0.0, min(float(bounds.width), x)), max(0.0, min(float(bounds.height), y))
