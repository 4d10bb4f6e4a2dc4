"""Холст изображения: вписывание в окно, рамка выделения и события указателя.

Принципы:
- SRP: отвечает только за представление и интеракции с изображением;
  состояние выделения хранит сеанс, холст лишь сообщает о жестах.
- Координаты событий переводятся в пиксели изображения через
  `services.coordinate_mapper` до передачи наружу.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

from watermark_eraser.models.selection_model import SelectionRect
from watermark_eraser.services.coordinate_mapper import display_to_image, image_to_display

ImagePoint = Tuple[float, float]

SELECTION_TAG = "selection"
SELECTION_COLOR = "#1a73e8"


class ImageCanvas(ctk.CTkFrame):
    """Канва с исходным изображением (или результатом) и рамкой выделения."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg(), cursor="crosshair")
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._original_image: Optional[Image.Image] = None
        self._result_image: Optional[Image.Image] = None
        self._selection: Optional[SelectionRect] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None
        # (id источника, ширина, высота) для закэшированного PhotoImage
        self._tk_cache_key: Optional[Tuple[int, int, int]] = None

        self._scale_factor: float = 1.0
        self._image_top_left: Optional[Tuple[int, int]] = None
        self._is_pressed: bool = False

        self.on_gesture_start: Optional[Callable[[ImagePoint], None]] = None
        self.on_gesture_move: Optional[Callable[[ImagePoint], None]] = None
        self.on_gesture_end: Optional[Callable[[], None]] = None
        self.on_cursor_move: Optional[Callable[[Optional[int], Optional[int]], None]] = None

        self._canvas.bind("<Configure>", self._on_canvas_resize)
        self._canvas.bind("<Motion>", self._on_mouse_move)
        self._canvas.bind("<Leave>", self._on_mouse_leave)

        self._canvas.bind("<ButtonPress-1>", self._on_press)
        self._canvas.bind("<B1-Motion>", self._on_drag)
        self._canvas.bind("<ButtonRelease-1>", self._on_release)

    # ---- Public API ----
    def set_image(self, image: Optional[Image.Image]) -> None:
        """Устанавливает исходное изображение и сбрасывает результат и рамку."""
        self._original_image = image
        self._result_image = None
        self._selection = None
        self._is_pressed = False
        self._image_top_left = None
        self._tk_image = None
        self._render_image()

    def set_result_image(self, image: Optional[Image.Image]) -> None:
        """Показывает результат (уже декодированный) вместо исходника; None возвращает исходник."""
        self._result_image = image
        self._tk_image = None
        self._render_image()

    def set_selection(self, selection: Optional[SelectionRect]) -> None:
        """Перерисовывает только рамку, не трогая изображение."""
        self._selection = selection
        self._draw_selection()

    def set_interactive(self, enabled: bool) -> None:
        self._canvas.configure(cursor="crosshair" if enabled else "arrow")

    # ---- Internals ----
    def _on_canvas_resize(self, _event: tk.Event) -> None:
        if self._original_image is None:
            return
        self._image_top_left = None
        self._render_image()

    def _render_image(self) -> None:
        self._canvas.delete("all")
        if self._original_image is None:
            self._draw_placeholder()
            return

        self._compute_fit_scale()
        canvas_w = int(self._canvas.winfo_width())
        canvas_h = int(self._canvas.winfo_height())

        img_w, img_h = self._original_image.size
        scaled_w = max(1, int(img_w * self._scale_factor))
        scaled_h = max(1, int(img_h * self._scale_factor))

        x = (canvas_w - scaled_w) // 2 if scaled_w <= canvas_w else 0
        y = (canvas_h - scaled_h) // 2 if scaled_h <= canvas_h else 0
        self._image_top_left = (x, y)

        source = self._result_image if self._result_image is not None else self._original_image
        cache_key = (id(source), scaled_w, scaled_h)
        if self._tk_image is None or self._tk_cache_key != cache_key:
            resized = source.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)
            self._tk_image = ImageTk.PhotoImage(resized)
            self._tk_cache_key = cache_key
        self._canvas.create_image(x, y, image=self._tk_image, anchor="nw")
        self._draw_selection()

    def _draw_selection(self) -> None:
        self._canvas.delete(SELECTION_TAG)
        selection = self._selection
        # the frame is hidden once a result is shown
        if selection is None or self._result_image is not None:
            return
        geometry = self._display_geometry()
        if geometry is None:
            return
        displayed_size, native_size, origin = geometry
        x0, y0 = image_to_display((selection.x, selection.y), displayed_size, native_size, origin)
        x1, y1 = image_to_display(
            (selection.x + selection.width, selection.y + selection.height), displayed_size, native_size, origin
        )
        self._canvas.create_rectangle(
            x0, y0, x1, y1,
            outline=SELECTION_COLOR, width=3, fill=SELECTION_COLOR, stipple="gray25", tags=SELECTION_TAG,
        )

    def _draw_placeholder(self) -> None:
        canvas_w = int(self._canvas.winfo_width())
        canvas_h = int(self._canvas.winfo_height())
        self._canvas.create_text(
            canvas_w // 2, canvas_h // 2,
            text="Откройте изображение, чтобы начать",
            fill="#8a8a8a", font=("Arial", 14),
        )

    def _compute_fit_scale(self) -> None:
        if self._original_image is None:
            self._scale_factor = 1.0
            return
        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))
        img_w, img_h = self._original_image.size
        if img_w == 0 or img_h == 0:
            self._scale_factor = 1.0
            return
        self._scale_factor = min(canvas_w / img_w, canvas_h / img_h)

    def _display_geometry(self) -> Optional[Tuple[Tuple[int, int], Tuple[int, int], Tuple[int, int]]]:
        """Отображаемый размер, натуральный размер и смещение; None, пока холст не готов."""
        if self._original_image is None or self._image_top_left is None:
            return None
        img_w, img_h = self._original_image.size
        scaled_w = max(1, int(img_w * self._scale_factor))
        scaled_h = max(1, int(img_h * self._scale_factor))
        return (scaled_w, scaled_h), (img_w, img_h), self._image_top_left

    def _canvas_to_image_coords(self, cx: int, cy: int) -> Optional[ImagePoint]:
        geometry = self._display_geometry()
        if geometry is None:
            return None
        displayed_size, native_size, origin = geometry
        return display_to_image((cx, cy), displayed_size, native_size, origin)

    def _get_canvas_bg(self) -> str:
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"

    # ---- Pointer ----
    def _on_press(self, event: tk.Event) -> None:
        point = self._canvas_to_image_coords(event.x, event.y)
        if point is None:
            return
        self._is_pressed = True
        if self.on_gesture_start:
            self.on_gesture_start(point)

    def _on_drag(self, event: tk.Event) -> None:
        if not self._is_pressed:
            return
        point = self._canvas_to_image_coords(event.x, event.y)
        if point is not None and self.on_gesture_move:
            self.on_gesture_move(point)
        self._emit_cursor(point)

    def _on_release(self, _event: tk.Event) -> None:
        if not self._is_pressed:
            return
        self._is_pressed = False
        if self.on_gesture_end:
            self.on_gesture_end()

    def _on_mouse_move(self, event: tk.Event) -> None:
        self._emit_cursor(self._canvas_to_image_coords(event.x, event.y))

    def _on_mouse_leave(self, event: tk.Event) -> None:
        # leaving the canvas while pressed ends the gesture like a release
        if self._is_pressed:
            self._on_release(event)
        if self.on_cursor_move:
            self.on_cursor_move(None, None)

    def _emit_cursor(self, point: Optional[ImagePoint]) -> None:
        if self.on_cursor_move is None:
            return
        if point is None or self._original_image is None:
            self.on_cursor_move(None, None)
            return
        img_w, img_h = self._original_image.size
        x, y = int(point[0]), int(point[1])
        if 0 <= x < img_w and 0 <= y < img_h:
            self.on_cursor_move(x, y)
        else:
            self.on_cursor_move(None, None)
