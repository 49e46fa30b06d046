"""
Command-line mode routing.

The orchestrator and the worker are one program with two personalities.
All flag handling lives here; ``main`` only dispatches on the returned
variant. Parsing never fails: malformed coordinates are treated as absent.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union

from core.constants.transport import (
    BACKGROUND_FLAG,
    DIAGNOSTIC_FLAG,
    HELP_FLAGS,
    POSITION_X_PREFIX,
    POSITION_Y_PREFIX,
    VERSION_FLAG,
)
from core.process.types import WindowPosition

USAGE = """\
Usage: imshow [image_path...] [-d]

Display one or more images in separate windows.
If no image paths are provided, reads image data from stdin.
Press any key in a window to close it.
-d: Enable diagnostic mode
"""


class RunMode(Enum):
    """Which personality the running process takes."""
    ORCHESTRATOR = "orchestrator"
    WORKER = "worker"
    HELP = "help"
    VERSION = "version"


@dataclass(frozen=True)
class OrchestratorMode:
    paths: List[str] = field(default_factory=list)
    diagnostic: bool = False
    mode: RunMode = RunMode.ORCHESTRATOR

    @property
    def reads_stdin(self) -> bool:
        return not self.paths


@dataclass(frozen=True)
class WorkerMode:
    position: Optional[WindowPosition] = None
    diagnostic: bool = False
    mode: RunMode = RunMode.WORKER


@dataclass(frozen=True)
class InfoMode:
    mode: RunMode = RunMode.HELP
    diagnostic: bool = False


ParsedMode = Union[OrchestratorMode, WorkerMode, InfoMode]


def parse_float(text: Optional[str]) -> Optional[float]:
    """Parse a finite float, returning None for anything else."""
    if text is None:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _find_value(args: Sequence[str], prefix: str) -> Optional[str]:
    for arg in args:
        if arg.startswith(prefix):
            return arg[len(prefix):]
    return None


def parse_position(args: Sequence[str]) -> Optional[WindowPosition]:
    """Extract ``-x=``/``-y=``; both must be present and numeric."""
    x = parse_float(_find_value(args, POSITION_X_PREFIX))
    y = parse_float(_find_value(args, POSITION_Y_PREFIX))
    if x is None or y is None:
        return None
    return WindowPosition(x, y)


def parse_arguments(argv: Sequence[str]) -> ParsedMode:
    """
    Decide the process mode from its arguments.

    Args:
        argv: Arguments without the program name.

    Returns:
        OrchestratorMode, WorkerMode or InfoMode (help/version).
    """
    args = list(argv)
    diagnostic = DIAGNOSTIC_FLAG in args

    if BACKGROUND_FLAG in args:
        return WorkerMode(position=parse_position(args), diagnostic=diagnostic)

    if any(arg in HELP_FLAGS for arg in args):
        return InfoMode(mode=RunMode.HELP, diagnostic=diagnostic)
    if VERSION_FLAG in args:
        return InfoMode(mode=RunMode.VERSION, diagnostic=diagnostic)

    paths = [arg for arg in args if not arg.startswith("-")]
    return OrchestratorMode(paths=paths, diagnostic=diagnostic)


def build_worker_arguments(position: WindowPosition, diagnostic: bool) -> List[str]:
    """Inverse of the worker branch of ``parse_arguments``."""
    args = [BACKGROUND_FLAG, *position.to_args()]
    if diagnostic:
        args.append(DIAGNOSTIC_FLAG)
    return args
