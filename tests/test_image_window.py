"""
Tests for the image window and key-to-dismiss handling.
"""
import pytest
from PySide6.QtCore import QTimer, Qt

from core.process.types import WindowPosition
from rendering.image_window import DismissOnKey, ImageWindow, QtDisplaySurface
from utils.image_loader import ImageLoader


@pytest.fixture
def loaded(png_bytes):
    return ImageLoader().load_bytes(png_bytes)


class TestDismissOnKey:

    def test_first_key_stops(self):
        stops = []
        handler = DismissOnKey(lambda: stops.append(1))
        assert handler.on_key_event() is True
        assert handler.triggered is True
        assert stops == [1]

    def test_only_first_key_stops(self):
        stops = []
        handler = DismissOnKey(lambda: stops.append(1))
        handler.on_key_event()
        handler.on_key_event()
        assert stops == [1]


@pytest.mark.qt
class TestImageWindow:

    def test_fixed_to_image_size(self, qt_app, qtbot, loaded):
        window = ImageWindow(loaded, WindowPosition(10.0, 20.0))
        qtbot.addWidget(window)
        assert window.minimumSize() == window.maximumSize()
        assert (window.width(), window.height()) == (64, 48)
        assert window.windowFlags() & Qt.WindowType.FramelessWindowHint

    def test_always_on_top_optional(self, qt_app, qtbot, loaded):
        window = ImageWindow(loaded, WindowPosition(0.0, 0.0), always_on_top=False)
        qtbot.addWidget(window)
        assert not (window.windowFlags() & Qt.WindowType.WindowStaysOnTopHint)

    def test_key_press_reaches_handler(self, qt_app, qtbot, loaded):
        stops = []
        window = ImageWindow(loaded, WindowPosition(0.0, 0.0), key_handler=DismissOnKey(lambda: stops.append(1)))
        qtbot.addWidget(window)
        window.show()
        qtbot.keyClick(window, Qt.Key.Key_Space)
        assert stops == [1]

    def test_close_does_not_dismiss(self, qt_app, qtbot, loaded):
        stops = []
        window = ImageWindow(loaded, WindowPosition(0.0, 0.0), key_handler=DismissOnKey(lambda: stops.append(1)))
        qtbot.addWidget(window)
        window.show()
        window.close()
        assert stops == []


@pytest.mark.qt
def test_host_returns_after_key(qt_app, loaded):
    surface = QtDisplaySurface(always_on_top=False)
    surface.prepare()
    assert qt_app.quitOnLastWindowClosed() is False

    def press_key():
        from PySide6.QtTest import QTest

        QTest.keyClick(surface.window, Qt.Key.Key_Escape)

    QTimer.singleShot(50, press_key)
    assert surface.host(loaded, WindowPosition(5.0, 5.0)) == 0
    assert surface.window is None
