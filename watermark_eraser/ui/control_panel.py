"""Боковая панель: открытие файла, информация, подсказка для модели и действия.

Принципы:
- SRP: управляет только виджетами; доступность кнопок вычисляется из
  `AppState`, который передаёт контроллер.
- ISP: выдаёт данные через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from watermark_eraser.models.image_model import ImageData
from watermark_eraser.models.session_model import AppState


def _format_size(size_bytes: Optional[int]) -> str:
    if size_bytes is None:
        return "—"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.2f} MB"


class ControlPanel(ctk.CTkFrame):
    """Панель с блоками: файл, информация, выделение, подсказка, действия."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=300, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_remove_watermark: Optional[Callable[[], None]] = None
        self.on_clear_selection: Optional[Callable[[], None]] = None
        self.on_reset: Optional[Callable[[], None]] = None
        self.on_save_result: Optional[Callable[[], None]] = None

        # 1. File
        self._title = ctk.CTkLabel(self, text="1. Изображение", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._open_btn = ctk.CTkButton(self, text="Открыть изображение…", command=lambda: self._emit(self.on_open_file))
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 4), sticky="ew")

        self._hint_formats = ctk.CTkLabel(self, text="PNG, JPG, GIF, WEBP, BMP", text_color="gray", anchor="w")
        self._hint_formats.grid(row=2, column=0, padx=8, pady=(0, 8), sticky="ew")

        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")

        self._info_path = ctk.CTkLabel(self, textvariable=self._path_val, wraplength=270, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")
        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left")

        self._info_path.grid(row=3, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=4, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_dims.grid(row=5, column=0, padx=8, pady=(0, 10), sticky="ew")

        # 2. Selection
        self._sel_title = ctk.CTkLabel(self, text="2. Выделение", font=ctk.CTkFont(size=16, weight="bold"))
        self._sel_title.grid(row=6, column=0, padx=8, pady=(8, 4), sticky="w")
        self._sel_hint = ctk.CTkLabel(
            self,
            text="Зажмите кнопку мыши и протяните рамку вокруг водяного знака.",
            wraplength=270, anchor="w", justify="left", text_color="gray",
        )
        self._sel_hint.grid(row=7, column=0, padx=8, pady=(0, 8), sticky="ew")

        # 3. Guidance
        self._prompt_title = ctk.CTkLabel(
            self, text="3. Подсказка (необязательно)", font=ctk.CTkFont(size=16, weight="bold")
        )
        self._prompt_title.grid(row=8, column=0, padx=8, pady=(8, 4), sticky="w")
        self._prompt_box = ctk.CTkTextbox(self, height=80, wrap="word")
        self._prompt_box.grid(row=9, column=0, padx=8, pady=(0, 8), sticky="ew")

        # Error message (hidden until set)
        self._error_val = ctk.StringVar(value="")
        self._error_label = ctk.CTkLabel(
            self, textvariable=self._error_val, text_color="#e53935", wraplength=270, anchor="w", justify="left"
        )

        # filler
        self.grid_rowconfigure(20, weight=1)

        # Actions
        self._remove_btn = ctk.CTkButton(
            self, text="Удалить водяной знак", command=lambda: self._emit(self.on_remove_watermark)
        )
        self._remove_btn.grid(row=21, column=0, padx=8, pady=(8, 4), sticky="ew")

        self._clear_btn = ctk.CTkButton(
            self, text="Снять выделение", fg_color="gray40", command=lambda: self._emit(self.on_clear_selection)
        )
        self._clear_btn.grid(row=22, column=0, padx=8, pady=4, sticky="ew")

        self._save_btn = ctk.CTkButton(
            self, text="Сохранить результат…", fg_color="#2e7d32", command=lambda: self._emit(self.on_save_result)
        )
        self._save_btn.grid(row=23, column=0, padx=8, pady=4, sticky="ew")

        self._reset_btn = ctk.CTkButton(
            self, text="Начать заново", fg_color="gray30", command=lambda: self._emit(self.on_reset)
        )
        self._reset_btn.grid(row=24, column=0, padx=8, pady=(4, 8), sticky="ew")

        self.update_controls(AppState.EMPTY, can_submit=False)

    # ---- Public API ----
    def set_image_info(self, image_data: Optional[ImageData]) -> None:
        if image_data is None:
            self._path_val.set("—")
            self._size_val.set("—")
            self._dims_val.set("—")
            return
        self._path_val.set(f"Файл: {image_data.path.name}")
        self._size_val.set(f"Размер файла: {_format_size(image_data.size_bytes)}")
        self._dims_val.set(f"Размеры: {image_data.width} × {image_data.height}px")

    def update_controls(self, state: AppState, can_submit: bool) -> None:
        """Включает/выключает кнопки в соответствии с состоянием сеанса."""
        busy = state is AppState.SUBMITTING
        has_image = state is not AppState.EMPTY
        has_result = state is AppState.RESULT_READY

        self._set_enabled(self._open_btn, not busy)
        self._set_enabled(self._remove_btn, can_submit)
        self._remove_btn.configure(text="Обработка…" if busy else "Удалить водяной знак")
        self._set_enabled(self._clear_btn, state is AppState.SELECTING)
        self._set_enabled(self._save_btn, has_result)
        self._set_enabled(self._reset_btn, has_image and not busy)
        self._prompt_box.configure(state="disabled" if busy or has_result else "normal")

    def get_prompt(self) -> str:
        return self._prompt_box.get("1.0", "end").strip()

    def clear_prompt(self) -> None:
        previous = self._prompt_box.cget("state")
        self._prompt_box.configure(state="normal")
        self._prompt_box.delete("1.0", "end")
        self._prompt_box.configure(state=previous)

    def show_error(self, message: Optional[str]) -> None:
        if message:
            self._error_val.set(message)
            self._error_label.grid(row=10, column=0, padx=8, pady=(4, 8), sticky="ew")
        else:
            self._error_val.set("")
            self._error_label.grid_remove()

    # ---- Helpers ----
    @staticmethod
    def _set_enabled(widget: ctk.CTkBaseClass, enabled: bool) -> None:
        widget.configure(state="normal" if enabled else "disabled")

    @staticmethod
    def _emit(callback: Optional[Callable[[], None]]) -> None:
        if callback:
            callback()
