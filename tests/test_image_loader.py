"""
Tests for ImageLoader.

Tests cover:
- Loading from disk and from bytes
- Error taxonomy for missing, unreadable and undecodable sources
- Transport payload rules (pass-through vs. re-encode)
"""
import logging

import pytest
from PySide6.QtGui import QImage

from core.errors import (
    ImageNotFoundError,
    ImageUndecodableError,
    ImageUnreadableError,
    ImageUnrepresentableError,
    LoadError,
)
from utils.image_loader import ImageLoader, supported_transport_format


@pytest.fixture
def loader():
    return ImageLoader()


class TestLoadPath:

    def test_loads_size(self, loader, temp_image):
        loaded = loader.load_path(temp_image)
        assert loaded.size == (100, 100)
        assert loaded.source == str(temp_image)
        assert loaded.payload == b""

    def test_debug_log_names_format(self, loader, temp_image, caplog):
        caplog.set_level(logging.DEBUG, logger="utils.image_loader")
        loader.load_path(temp_image)
        assert "format=png" in caplog.text

    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(ImageNotFoundError) as exc_info:
            loader.load_path(tmp_path / "nope.png")
        assert exc_info.value.source == str(tmp_path / "nope.png")

    def test_directory_is_unreadable(self, loader, tmp_path):
        with pytest.raises(ImageUnreadableError):
            loader.load_path(tmp_path)

    def test_garbage_file_is_unreadable(self, loader, tmp_path):
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"definitely not an image")
        with pytest.raises(ImageUnreadableError):
            loader.load_path(bad)

    def test_errors_share_base(self, loader, tmp_path):
        with pytest.raises(LoadError):
            loader.load(str(tmp_path / "missing.png"))


class TestLoadBytes:

    def test_png_bytes(self, loader, png_bytes):
        loaded = loader.load_bytes(png_bytes)
        assert loaded.size == (64, 48)
        assert loaded.source == "<stdin>"

    def test_payload_is_passed_through(self, loader, bmp_bytes):
        loaded = loader.load(bmp_bytes)
        assert loaded.size == (32, 16)
        assert loaded.payload == bmp_bytes

    def test_empty_bytes(self, loader):
        with pytest.raises(ImageUndecodableError):
            loader.load_bytes(b"")

    def test_unknown_bytes(self, loader):
        with pytest.raises(ImageUndecodableError):
            loader.load_bytes(b"hello, this is plain text and not an image\n" * 8)

    def test_bytearray_source(self, loader, png_bytes):
        loaded = loader.load(bytearray(png_bytes))
        assert loaded.size == (64, 48)
        assert isinstance(loaded.payload, bytes)


class TestTransport:

    def test_path_source_is_reencoded(self, loader, temp_image):
        loaded = loader.load(str(temp_image))
        assert loaded.payload.startswith(b"\x89PNG")

    def test_encode_then_decode_keeps_size(self, loader, make_image_file):
        loaded = loader.load(make_image_file("wide.png", 123, 45))
        decoded = loader.load_bytes(loaded.payload)
        assert decoded.size == loaded.size == (123, 45)

    def test_bmp_transport_format(self, temp_image):
        loader = ImageLoader("bmp")
        assert loader.transport_format == "BMP"
        loaded = loader.load(str(temp_image))
        assert loaded.payload.startswith(b"BM")

    def test_null_image_is_unrepresentable(self, loader):
        with pytest.raises(ImageUnrepresentableError):
            loader.encode_for_transport(QImage())

    def test_unknown_encoder_is_unrepresentable(self, temp_image):
        loader = ImageLoader("NOT-A-FORMAT")
        image = loader.load_path(temp_image).image
        with pytest.raises(ImageUnrepresentableError):
            loader.encode_for_transport(image)


def test_supported_transport_format_falls_back():
    assert supported_transport_format("png") == "PNG"
    assert supported_transport_format(None) == "PNG"
    assert supported_transport_format("NOT-A-FORMAT") == "PNG"
