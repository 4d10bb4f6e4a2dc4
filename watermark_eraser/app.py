import customtkinter as ctk

from watermark_eraser.config import Settings
from watermark_eraser.controllers.app_controller import AppController
from watermark_eraser.ui.control_panel import ControlPanel
from watermark_eraser.ui.image_canvas import ImageCanvas
from watermark_eraser.ui.status_bar import StatusBar


class WatermarkEraserApp(ctk.CTk):
    def __init__(self, settings: Settings) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title("Watermark Eraser")
        self.minsize(900, 600)

        # root layout: left canvas, right control panel
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._canvas = ImageCanvas(self)
        self._canvas.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._panel = ControlPanel(self)
        self._panel.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        self._status = StatusBar(self)
        self._status.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))

        self._controller = AppController(
            canvas=self._canvas, panel=self._panel, status=self._status, window=self, settings=settings
        )
        self._controller.bind_events()
