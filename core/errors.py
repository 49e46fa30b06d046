"""Error taxonomy for image loading, worker spawning and input discovery.

Load and spawn errors are per-image: the orchestrator catches them, logs
them and folds them into the aggregate exit status. ``InputError`` is soft
and only ever results in a fallback.
"""
from __future__ import annotations

import os
from typing import Optional, Union


class ImshowError(Exception):
    """Base class for all imshow errors."""


# =============================================================================
# Image loading
# =============================================================================

class LoadError(ImshowError):
    """An image source could not be turned into a usable image."""

    reason = "load failed"

    def __init__(self, source: Union[str, os.PathLike, None] = None, detail: str = ""):
        self.source = source
        self.detail = detail
        message = self.reason
        if source is not None:
            message = f"{message}: {source}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ImageNotFoundError(LoadError):
    reason = "image file not found"


class ImageUnreadableError(LoadError):
    reason = "image file could not be read"


class ImageUndecodableError(LoadError):
    reason = "no image decoder recognized the data"


class ImageUnrepresentableError(LoadError):
    reason = "image could not be encoded for transport"


# =============================================================================
# Worker spawning
# =============================================================================

class SpawnError(ImshowError):
    """A worker process could not be started or fed its payload."""

    def __init__(self, message: str, pid: Optional[int] = None):
        self.pid = pid
        super().__init__(message)


class ProcessStartFailedError(SpawnError):
    """The operating system refused to create the worker process."""


class PayloadDeliveryError(SpawnError):
    """The worker exited before its payload was fully written."""


# =============================================================================
# Input discovery
# =============================================================================

class InputError(ImshowError):
    """Soft environment errors that always resolve to a fallback."""


class NoScreenError(InputError):
    """No screen geometry is available."""


__all__ = [
    "ImshowError",
    "LoadError",
    "ImageNotFoundError",
    "ImageUnreadableError",
    "ImageUndecodableError",
    "ImageUnrepresentableError",
    "SpawnError",
    "ProcessStartFailedError",
    "PayloadDeliveryError",
    "InputError",
    "NoScreenError",
]
