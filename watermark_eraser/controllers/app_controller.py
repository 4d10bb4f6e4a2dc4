"""Контроллер приложения: оркестрация UI, сеанса и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики выделения и маски).
- DIP: сервисы передаются снаружи; по умолчанию создаются из настроек.
Clean Code:
- Обработчики компактны; состояние живёт в `AppSession`, вычисления в сервисах.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from tkinter import filedialog, TclError
from typing import Optional

import customtkinter as ctk
from PIL import Image

from watermark_eraser.config import Settings
from watermark_eraser.models.selection_model import Point, SelectionRect
from watermark_eraser.models.session_model import AppSession, AppState, SubmissionError
from watermark_eraser.services.image_service import RESULT_FILENAME, ImageService
from watermark_eraser.services.inpaint_service import InpaintRequest, InpaintService
from watermark_eraser.ui.control_panel import ControlPanel
from watermark_eraser.ui.image_canvas import ImageCanvas
from watermark_eraser.ui.status_bar import StatusBar

logger = logging.getLogger(__name__)

INPAINT_FAILED_MESSAGE = (
    "Не удалось удалить водяной знак: модель не смогла обработать запрос. "
    "Попробуйте другое выделение или изображение."
)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Загрузка изображений через `ImageService`.
    - Жесты выделения через `AppSession` и перерисовка рамки.
    - Отправка запроса через `InpaintService` в фоновом потоке.
    """
    canvas: ImageCanvas
    panel: ControlPanel
    status: StatusBar
    window: ctk.CTk
    settings: Settings

    session: AppSession = field(default_factory=AppSession)
    _image_service: Optional[ImageService] = None
    _inpaint_service: Optional[InpaintService] = None

    def __post_init__(self) -> None:
        if self._image_service is None:
            self._image_service = ImageService(max_upload_bytes=self.settings.max_upload_bytes)
        if self._inpaint_service is None:
            self._inpaint_service = InpaintService(api_key=self.settings.api_key, model=self.settings.model)

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами.

        Компоненты UI ничего не знают друг о друге, общаются через контроллер.
        """
        self.panel.on_open_file = self._handle_open_file
        self.panel.on_remove_watermark = self._handle_remove_watermark
        self.panel.on_clear_selection = self._handle_clear_selection
        self.panel.on_reset = self._handle_reset
        self.panel.on_save_result = self._handle_save_result

        self.canvas.on_gesture_start = self._handle_gesture_start
        self.canvas.on_gesture_move = self._handle_gesture_move
        self.canvas.on_gesture_end = self._handle_gesture_end
        self.canvas.on_cursor_move = self.status.set_cursor

        self.session.tracker.on_change = self._handle_selection_change
        self._sync_controls()

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите изображение",
                filetypes=(
                    ("Images", "*.png *.jpg *.jpeg *.gif *.webp *.bmp"),
                    ("All files", "*.*"),
                ),
            )
        except TclError:
            logger.warning("File dialog could not be opened")
            return

        if not file_path:
            return

        try:
            image_data = self._image_service.load_image(file_path)
        except (FileNotFoundError, ValueError) as exc:
            logger.warning("Rejected %s: %s", file_path, exc)
            self.panel.show_error(str(exc))
            return

        # dimensions are known at this point, gestures are enabled only after load
        self.session.load_image(image_data)
        self.canvas.set_image(image_data.pil_image)
        self.panel.set_image_info(image_data)
        self.panel.show_error(None)
        self._sync_controls()

    def _handle_gesture_start(self, point: Point) -> None:
        if self.session.begin_gesture(point):
            self.panel.show_error(None)
        self._sync_controls()

    def _handle_gesture_move(self, point: Point) -> None:
        self.session.update_gesture(point)

    def _handle_gesture_end(self) -> None:
        self.session.end_gesture()
        self._sync_controls()

    def _handle_selection_change(self, selection: Optional[SelectionRect]) -> None:
        self.canvas.set_selection(selection)
        self.status.set_selection(selection)

    def _handle_clear_selection(self) -> None:
        self.session.clear_selection()
        self._sync_controls()

    def _handle_remove_watermark(self) -> None:
        try:
            image_data, selection = self.session.begin_submit()
        except SubmissionError as exc:
            self.panel.show_error(str(exc))
            return

        self.panel.show_error(None)
        request = self._inpaint_service.build_request(image_data, selection, self.panel.get_prompt())
        logger.info("Submitting selection %s of %s", selection, image_data.path.name)
        self._sync_controls()

        threading.Thread(target=self._run_inpaint, args=(request,), daemon=True).start()

    def _handle_reset(self) -> None:
        if self.session.state is AppState.SUBMITTING:
            return
        self.session.reset()
        self.canvas.set_image(None)
        self.panel.set_image_info(None)
        self.panel.clear_prompt()
        self.panel.show_error(None)
        self.status.set_selection(None)
        self._sync_controls()

    def _handle_save_result(self) -> None:
        result = self.session.result
        if result is None:
            return
        try:
            file_path = filedialog.asksaveasfilename(
                title="Сохранить результат",
                initialfile=RESULT_FILENAME,
                defaultextension=".png",
                filetypes=(("PNG", "*.png"), ("JPEG", "*.jpg *.jpeg"), ("All files", "*.*")),
            )
        except TclError:
            logger.warning("Save dialog could not be opened")
            return
        if not file_path:
            return
        try:
            self._image_service.save_image(result, file_path)
        except (OSError, ValueError) as exc:
            logger.error("Saving %s failed: %s", file_path, exc)
            self.panel.show_error(f"Не удалось сохранить файл: {exc}")

    # ---- Background request ----
    def _run_inpaint(self, request: InpaintRequest) -> None:
        """Выполняется в фоновом потоке; UI обновляется только через `after`."""
        try:
            data = self._inpaint_service.remove_watermark(request)
            result = self._image_service.decode_result(data)
        except Exception as exc:
            logger.exception("Inpainting failed")
            self.window.after(0, lambda message=str(exc): self._on_inpaint_failed(message))
            return
        self.window.after(0, lambda: self._on_inpaint_done(result))

    def _on_inpaint_done(self, result: Image.Image) -> None:
        self.session.complete_submit(result)
        self.canvas.set_result_image(result)
        logger.info("Result ready (%dx%d)", *result.size)
        self._sync_controls()

    def _on_inpaint_failed(self, message: str) -> None:
        self.session.fail_submit()
        logger.debug("Failure detail: %s", message)
        self.panel.show_error(INPAINT_FAILED_MESSAGE)
        self._sync_controls()

    # ---- Helpers ----
    def _sync_controls(self) -> None:
        state = self.session.state
        self.panel.update_controls(state, self.session.can_submit)
        self.status.set_state(state)
        self.canvas.set_interactive(self.session.accepts_gestures)
