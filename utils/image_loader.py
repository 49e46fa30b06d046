"""Image loading and transport encoding.

Turns a file path or a raw byte buffer into a decoded ``QImage`` plus its
natural size, and produces the encoded bytes a worker process receives on
its stdin. Byte sources are passed through unchanged; file sources are
re-encoded to the canonical transport format so the worker never needs
access to the original file.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

from PySide6.QtCore import QBuffer, QByteArray, QIODevice
from PySide6.QtGui import QImage, QImageReader, QImageWriter

from core.constants.transport import DEFAULT_TRANSPORT_FORMAT, TRANSPORT_QUALITY
from core.errors import (
    ImageNotFoundError,
    ImageUndecodableError,
    ImageUnreadableError,
    ImageUnrepresentableError,
)
from core.logging.logger import get_logger
from core.logging.tags import TAG_FALLBACK, TAG_IMAGE

logger = get_logger(__name__)

ImageSource = Union[str, os.PathLike, bytes, bytearray, memoryview]


@dataclass
class LoadedImage:
    """A decoded image owned by the process that decoded it."""
    image: QImage = field(repr=False)
    source: str
    payload: bytes = field(default=b"", repr=False)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.image.width(), self.image.height())

    @property
    def width(self) -> int:
        return self.image.width()

    @property
    def height(self) -> int:
        return self.image.height()


def supported_transport_format(fmt: Optional[str]) -> str:
    """Return *fmt* if Qt can write it, otherwise the default transport format."""
    wanted = (fmt or DEFAULT_TRANSPORT_FORMAT).upper()
    writable = {bytes(f.data()).decode("ascii", "ignore").upper() for f in QImageWriter.supportedImageFormats()}
    if wanted in writable:
        return wanted
    logger.warning(
        "%s %s Transport format %s not writable, using %s",
        TAG_FALLBACK,
        TAG_IMAGE,
        wanted,
        DEFAULT_TRANSPORT_FORMAT,
    )
    return DEFAULT_TRANSPORT_FORMAT


class ImageLoader:
    """Unified image loading interface."""

    def __init__(self, transport_format: str = DEFAULT_TRANSPORT_FORMAT):
        self._transport_format = transport_format.upper()

    @property
    def transport_format(self) -> str:
        return self._transport_format

    def load(self, source: ImageSource) -> LoadedImage:
        """Load from a path or from raw bytes, preparing the transport payload.

        Raises:
            LoadError: one of its subclasses, depending on what failed.
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            return self.load_bytes(bytes(source))
        loaded = self.load_path(source)
        loaded.payload = self.encode_for_transport(loaded.image, source=loaded.source)
        return loaded

    def load_path(self, path: Union[str, os.PathLike]) -> LoadedImage:
        """Decode an image file.

        Args:
            path: Path to the image file

        Returns:
            LoadedImage without a transport payload.
        """
        label = os.fspath(path)
        file_path = Path(label)
        if not file_path.exists():
            raise ImageNotFoundError(label)
        if not file_path.is_file():
            raise ImageUnreadableError(label, "not a regular file")

        reader = QImageReader(label)
        # format() is only reliable before read() consumes the device.
        image_format = bytes(reader.format().data()).decode("ascii", "ignore")
        image = reader.read()
        if image.isNull():
            raise ImageUnreadableError(label, reader.errorString())

        logger.debug(
            "%s Loaded %s (%dx%d, format=%s)",
            TAG_IMAGE,
            label,
            image.width(),
            image.height(),
            image_format or "?",
        )
        return LoadedImage(image=image, source=label)

    def load_bytes(self, data: bytes, source: str = "<stdin>") -> LoadedImage:
        """Decode an in-memory encoded image.

        The original bytes become the transport payload unchanged.
        """
        if not data:
            raise ImageUndecodableError(source, "no data")

        image = QImage()
        if not image.loadFromData(QByteArray(data)) or image.isNull():
            raise ImageUndecodableError(source, f"{len(data)} bytes")

        logger.debug(
            "%s Loaded %s (%dx%d, %d bytes)",
            TAG_IMAGE,
            source,
            image.width(),
            image.height(),
            len(data),
        )
        return LoadedImage(image=image, source=source, payload=bytes(data))

    def encode_for_transport(self, image: QImage, source: str = "<image>") -> bytes:
        """Serialize a decoded image to the canonical transport container."""
        if image is None or image.isNull():
            raise ImageUnrepresentableError(source, "null image")

        buffer = QBuffer()
        if not buffer.open(QIODevice.OpenModeFlag.WriteOnly):
            raise ImageUnrepresentableError(source, "buffer unavailable")
        try:
            if not image.save(buffer, self._transport_format, TRANSPORT_QUALITY):
                raise ImageUnrepresentableError(source, f"{self._transport_format} encoder failed")
        finally:
            buffer.close()

        payload = bytes(buffer.data().data())
        if not payload:
            raise ImageUnrepresentableError(source, "empty encoding")
        logger.debug(
            "%s Encoded %s as %s (%d bytes)",
            TAG_IMAGE,
            source,
            self._transport_format,
            len(payload),
        )
        return payload
