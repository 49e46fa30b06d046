"""
Worker entry point.

A worker is the same program started with the background flag. It reads
its whole stdin (the orchestrator closes the pipe when the payload is
complete), decodes it, and hosts one window until a key is pressed.

States: AWAITING_INPUT -> DISPLAYING -> TERMINATED. A decode failure goes
straight to TERMINATED with exit code 1 and never requests a window.
"""
from __future__ import annotations

import sys
from typing import BinaryIO, Callable, Optional

from PySide6.QtCore import QRectF

from core.errors import LoadError
from core.logging.logger import get_logger
from core.logging.tags import TAG_FALLBACK, TAG_WORKER
from core.mode_router import WorkerMode
from core.process.types import WindowPosition, WorkerState
from rendering.cascade_layout import center_position
from utils.image_loader import ImageLoader, LoadedImage
from utils.monitors import get_visible_rect

logger = get_logger(__name__)

ScreenProvider = Callable[[], Optional[QRectF]]


class WorkerEntryPoint:
    """Runs one worker from stdin to window dismissal."""

    def __init__(
        self,
        mode: WorkerMode,
        stdin: Optional[BinaryIO] = None,
        loader: Optional[ImageLoader] = None,
        surface=None,
        screen_provider: ScreenProvider = get_visible_rect,
    ):
        self._mode = mode
        self._stdin = stdin
        self._loader = loader or ImageLoader()
        self._surface = surface
        self._screen_provider = screen_provider
        self.state = WorkerState.AWAITING_INPUT
        self.position: Optional[WindowPosition] = None

    def _transition(self, state: WorkerState) -> None:
        logger.debug("%s %s -> %s", TAG_WORKER, self.state.name, state.name)
        self.state = state

    def read_payload(self) -> bytes:
        """Block until the orchestrator closes the pipe."""
        stream = self._stdin if self._stdin is not None else sys.stdin.buffer
        data = stream.read()
        logger.debug("%s Read %d bytes from stdin", TAG_WORKER, len(data))
        return data

    def resolve_position(self, loaded: LoadedImage) -> WindowPosition:
        """Explicit position, else centred on screen, else the origin."""
        if self._mode.position is not None:
            logger.info("%s Using provided position: %s", TAG_WORKER, self._mode.position)
            return self._mode.position

        screen_rect = self._screen_provider()
        position = center_position(loaded.size, screen_rect)
        if screen_rect is None:
            logger.info("%s %s No screen found, using position: %s", TAG_FALLBACK, TAG_WORKER, position)
        else:
            logger.info("%s %s Using default centered position: %s", TAG_FALLBACK, TAG_WORKER, position)
        return position

    def _get_surface(self):
        if self._surface is None:
            from rendering.image_window import QtDisplaySurface

            self._surface = QtDisplaySurface()
        return self._surface

    def run(self) -> int:
        """
        Execute the worker lifecycle.

        Returns:
            Process exit code: 0 after dismissal, 1 if the payload did not
            decode.
        """
        logger.info("%s Running in blocking mode", TAG_WORKER)
        data = self.read_payload()

        try:
            loaded = self._loader.load_bytes(data)
        except LoadError as e:
            logger.error("Could not load image: %s", e)
            self._transition(WorkerState.TERMINATED)
            return 1
        logger.info(
            "%s Successfully loaded image in background mode, size: %dx%d",
            TAG_WORKER,
            loaded.width,
            loaded.height,
        )

        surface = self._get_surface()
        surface.prepare()
        self.position = self.resolve_position(loaded)

        self._transition(WorkerState.DISPLAYING)
        try:
            surface.host(loaded, self.position)
        finally:
            self._transition(WorkerState.TERMINATED)
        return 0
