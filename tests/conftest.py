"""
Shared pytest fixtures for imshow tests.
"""
import os
import sys

# Must be set before the first QApplication is created.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QBuffer, QIODevice, QSize
from PySide6.QtGui import QColor, QImage
from PySide6.QtWidgets import QApplication


def make_image(width: int = 100, height: int = 100, color=QColor(255, 0, 0)) -> QImage:
    image = QImage(QSize(width, height), QImage.Format.Format_RGB32)
    image.fill(color)
    return image


def encode_image(image: QImage, fmt: str = "PNG") -> bytes:
    buffer = QBuffer()
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    image.save(buffer, fmt)
    buffer.close()
    return bytes(buffer.data().data())


@pytest.fixture(scope='session')
def qt_app():
    """Create QApplication instance for tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv[:1])
    yield app
    # Don't quit - causes issues with pytest


@pytest.fixture
def temp_image(tmp_path):
    """Create a temporary 100x100 PNG on disk."""
    image_path = tmp_path / "test_image.png"
    make_image(100, 100).save(str(image_path))
    return image_path


@pytest.fixture
def make_image_file(tmp_path):
    """Factory writing a solid image of the given size to disk."""
    def _make(name: str, width: int, height: int) -> str:
        path = tmp_path / name
        make_image(width, height, QColor(0, 128, 255)).save(str(path))
        return str(path)
    return _make


@pytest.fixture
def png_bytes():
    """Encoded 64x48 PNG."""
    return encode_image(make_image(64, 48, QColor(0, 255, 0)))


@pytest.fixture
def bmp_bytes():
    """Encoded 32x16 BMP."""
    return encode_image(make_image(32, 16, QColor(0, 0, 255)), "BMP")
