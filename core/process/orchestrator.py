"""
Orchestrator: load, lay out and fan out.

The orchestrator is short-lived and single-threaded. It decodes every input
once (to validate it and learn its size), plans window positions from the
first good image, then starts one worker per good image and returns without
waiting for any of them.
"""
from __future__ import annotations

from typing import BinaryIO, Callable, List, Optional, Sequence

from PySide6.QtCore import QRectF

from core.errors import LoadError, SpawnError
from core.logging.logger import get_logger
from core.logging.tags import TAG_IMAGE, TAG_LAYOUT, TAG_SPAWN
from core.process.launcher import ProcessLauncher
from core.process.types import LaunchSpec, RunResult, WindowPosition
from rendering.cascade_layout import plan_positions
from utils.image_loader import ImageLoader, LoadedImage
from utils.monitors import get_visible_rect

logger = get_logger(__name__)

ScreenProvider = Callable[[], Optional[QRectF]]


class Orchestrator:
    """Runs one batch of images through load -> plan -> launch."""

    def __init__(
        self,
        loader: Optional[ImageLoader] = None,
        launcher: Optional[ProcessLauncher] = None,
        screen_provider: ScreenProvider = get_visible_rect,
        diagnostic: bool = False,
    ):
        self._loader = loader or ImageLoader()
        self._launcher = launcher or ProcessLauncher()
        self._screen_provider = screen_provider
        self._diagnostic = diagnostic

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_paths(self, paths: Sequence[str], result: RunResult) -> List[LoadedImage]:
        loaded: List[LoadedImage] = []
        for path in paths:
            try:
                image = self._loader.load(path)
            except LoadError as e:
                logger.error("Error: Could not load image from %s: %s", path, e)
                result.record_load_failure(path)
                continue
            logger.debug(
                "%s Successfully loaded image from %s, size: %dx%d",
                TAG_IMAGE,
                path,
                image.width,
                image.height,
            )
            loaded.append(image)
        return loaded

    def load_stream(self, stream: BinaryIO, result: RunResult) -> List[LoadedImage]:
        data = stream.read()
        try:
            image = self._loader.load(data)
        except LoadError as e:
            logger.error("Error: Could not load image from stdin: %s", e)
            result.record_load_failure("<stdin>")
            return []
        logger.debug(
            "%s Successfully loaded image from stdin, size: %dx%d",
            TAG_IMAGE,
            image.width,
            image.height,
        )
        return [image]

    # ------------------------------------------------------------------
    # Planning and launching
    # ------------------------------------------------------------------

    def plan(self, images: Sequence[LoadedImage]) -> List[WindowPosition]:
        """Positions for *images*, all spaced by the first image's size."""
        if not images:
            return []
        screen_rect = self._screen_provider()
        if screen_rect is None:
            logger.debug("%s No screen found, every window goes to the origin", TAG_LAYOUT)
        return plan_positions(len(images), images[0].size, screen_rect)

    def build_specs(self, images: Sequence[LoadedImage]) -> List[LaunchSpec]:
        positions = self.plan(images)
        return [
            LaunchSpec(
                payload=image.payload,
                position=position,
                diagnostic=self._diagnostic,
                label=image.source,
            )
            for image, position in zip(images, positions)
        ]

    def launch_all(self, specs: Sequence[LaunchSpec], result: RunResult) -> None:
        for spec in specs:
            try:
                process = self._launcher.launch(spec)
            except SpawnError as e:
                logger.error("%s Failed to spawn background process: %s", TAG_SPAWN, e)
                result.record_spawn_failure(spec.label)
                continue
            result.record_spawn(getattr(process, "pid", None))

    # ------------------------------------------------------------------

    def run(self, paths: Sequence[str], stdin: Optional[BinaryIO] = None) -> RunResult:
        """
        Process one batch.

        Args:
            paths: Image files; when empty, one image is read from *stdin*.
            stdin: Binary stream used when *paths* is empty.

        Returns:
            RunResult with counts and the aggregate exit code.
        """
        result = RunResult()

        if paths:
            images = self.load_paths(paths, result)
        elif stdin is not None:
            images = self.load_stream(stdin, result)
        else:
            images = []
            result.record_load_failure("<stdin>")

        result.loaded = len(images)
        if not images:
            logger.debug("No valid images found to display")
            return result

        self.launch_all(self.build_specs(images), result)
        logger.debug(
            "%s Batch done: loaded=%d spawned=%d load_failures=%d spawn_failures=%d",
            TAG_SPAWN,
            result.loaded,
            result.spawned,
            len(result.load_failures),
            len(result.spawn_failures),
        )
        return result
