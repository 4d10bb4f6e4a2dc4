from __future__ import annotations

from typing import Optional

import customtkinter as ctk

from watermark_eraser.models.selection_model import SelectionRect
from watermark_eraser.models.session_model import AppState

_STATE_LABELS = {
    AppState.EMPTY: "Нет изображения",
    AppState.IMAGE_LOADED: "Выделите водяной знак",
    AppState.SELECTING: "Выделение",
    AppState.SUBMITTING: "Обработка…",
    AppState.RESULT_READY: "Готово",
}


class StatusBar(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=40, **kwargs)

        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._state_val = ctk.StringVar(value=_STATE_LABELS[AppState.EMPTY])
        self._cursor_val = ctk.StringVar(value="—")
        self._selection_val = ctk.StringVar(value="—")

        self._state_label = ctk.CTkLabel(self, textvariable=self._state_val, anchor="w")
        self._state_label.grid(row=0, column=0, padx=(10, 6), pady=6, sticky="w")

        self._cursor_label = ctk.CTkLabel(self, textvariable=self._cursor_val, width=120, anchor="w")
        self._cursor_label.grid(row=0, column=1, padx=6, pady=6, sticky="e")

        self._selection_label = ctk.CTkLabel(self, textvariable=self._selection_val, width=220, anchor="w")
        self._selection_label.grid(row=0, column=2, padx=(6, 12), pady=6, sticky="e")

    # public API (sync from controller)
    def set_state(self, state: AppState) -> None:
        self._state_val.set(_STATE_LABELS.get(state, state.value))

    def set_cursor(self, x: Optional[int], y: Optional[int]) -> None:
        if x is None or y is None:
            self._cursor_val.set("—")
            return
        self._cursor_val.set(f"X: {x}  Y: {y}")

    def set_selection(self, selection: Optional[SelectionRect]) -> None:
        if selection is None:
            self._selection_val.set("—")
            return
        self._selection_val.set(
            f"Рамка: {int(selection.x)}, {int(selection.y)}  "
            f"{int(round(selection.width))} × {int(round(selection.height))}"
        )
