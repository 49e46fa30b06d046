"""
Image window hosting.

A worker owns exactly one ``ImageWindow``: frameless, fixed to the image's
natural size, placed at an explicit screen position. The window forwards
key presses to a ``DismissOnKey`` handler, which stops the event loop the
window is running in. Closing the window or losing focus does not dismiss.
"""
from __future__ import annotations

import sys
from typing import Callable, Optional

from PySide6.QtCore import QCoreApplication, QEventLoop, Qt
from PySide6.QtGui import QKeyEvent, QPainter, QPaintEvent, QPixmap
from PySide6.QtWidgets import QApplication, QWidget

from core.logging.logger import get_logger
from core.logging.tags import TAG_WORKER
from core.process.types import WindowPosition
from utils.image_loader import LoadedImage

logger = get_logger(__name__)


class DismissOnKey:
    """Key handler that stops its host loop on the first key press."""

    def __init__(self, stop: Callable[[], None]):
        self._stop = stop
        self.triggered = False

    def on_key_event(self, event: Optional[QKeyEvent] = None) -> bool:
        """Handle a key press. Returns True when the loop was told to stop."""
        if self.triggered:
            return True
        self.triggered = True
        key = event.key() if event is not None else None
        logger.debug("%s Dismiss key received (key=%s)", TAG_WORKER, key)
        self._stop()
        return True


class ImageWindow(QWidget):
    """Frameless, non-resizable window showing a single image."""

    def __init__(
        self,
        loaded: LoadedImage,
        position: WindowPosition,
        key_handler: Optional[DismissOnKey] = None,
        always_on_top: bool = True,
    ):
        super().__init__()
        self._pixmap = QPixmap.fromImage(loaded.image)
        self._key_handler = key_handler

        flags = Qt.WindowType.Window | Qt.WindowType.FramelessWindowHint
        if always_on_top:
            flags |= Qt.WindowType.WindowStaysOnTopHint
        self.setWindowFlags(flags)
        self.setWindowTitle(loaded.source)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent, True)

        self.setFixedSize(loaded.width, loaded.height)
        self.move(int(round(position.x)), int(round(position.y)))

    def set_key_handler(self, handler: Optional[DismissOnKey]) -> None:
        self._key_handler = handler

    def paintEvent(self, event: QPaintEvent) -> None:  # type: ignore[override]
        painter = QPainter(self)
        try:
            painter.drawPixmap(0, 0, self._pixmap)
        finally:
            painter.end()

    def keyPressEvent(self, event: QKeyEvent) -> None:  # type: ignore[override]
        """Forward every key press to the dismiss handler."""
        if self._key_handler is not None and self._key_handler.on_key_event(event):
            event.accept()
            return
        super().keyPressEvent(event)


def prepare_application(app_name: str = "imshow", app_version: str = "") -> QApplication:
    """
    One-time application setup for a worker process.

    Creates the QApplication if needed and disables quit-on-last-window-
    closed so only the key handler ends the window's lifetime.
    """
    app = QApplication.instance()
    if app is None:
        QApplication.setHighDpiScaleFactorRoundingPolicy(
            Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
        )
        app = QApplication(sys.argv[:1])
    app.setApplicationName(app_name)
    if app_version:
        app.setApplicationVersion(app_version)
    app.setQuitOnLastWindowClosed(False)
    return app


class QtDisplaySurface:
    """Hosts an image window and blocks until it is dismissed."""

    def __init__(self, always_on_top: bool = True, app_name: str = "imshow", app_version: str = ""):
        self._always_on_top = always_on_top
        self._app_name = app_name
        self._app_version = app_version
        self.window: Optional[ImageWindow] = None

    def prepare(self) -> QApplication:
        """Application activation; must run before screen queries or windows."""
        return prepare_application(self._app_name, self._app_version)

    def show(self, loaded: LoadedImage, position: WindowPosition) -> ImageWindow:
        """Create, place and activate the window without entering a loop."""
        window = ImageWindow(loaded, position, always_on_top=self._always_on_top)
        window.show()
        window.raise_()
        window.activateWindow()
        self.window = window
        logger.debug(
            "%s Window shown at (%s) size=%dx%d",
            TAG_WORKER,
            position,
            loaded.width,
            loaded.height,
        )
        return window

    def host(self, loaded: LoadedImage, position: WindowPosition) -> int:
        """
        Show the image and run an event loop until the first key press.

        Returns:
            The event loop's exit code.
        """
        if QCoreApplication.instance() is None:
            raise RuntimeError("QApplication must exist before hosting a window")

        loop = QEventLoop()
        window = self.show(loaded, position)
        window.set_key_handler(DismissOnKey(loop.quit))
        try:
            code = loop.exec()
        finally:
            window.hide()
            window.deleteLater()
            self.window = None
        logger.debug("%s Event loop returned (code=%s)", TAG_WORKER, code)
        return code
