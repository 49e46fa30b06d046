"""
Worker process launcher.

Spawns one detached worker per image. Each worker gets its position on the
command line and its encoded image on a private stdin pipe; closing the
pipe is the end-of-message signal. The launcher never waits for a worker.
"""
from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from core.errors import PayloadDeliveryError, ProcessStartFailedError
from core.logging.logger import get_logger
from core.logging.tags import TAG_SPAWN
from core.mode_router import build_worker_arguments
from core.process.types import LaunchSpec

logger = get_logger(__name__)

_ENTRY_SCRIPT = Path(__file__).resolve().parent.parent.parent / "main.py"

# Windows: detach from the console and our process group so closing the
# invoking terminal does not take the windows down with it.
_DETACHED_FLAGS = (
    getattr(subprocess, "DETACHED_PROCESS", 0)
    | getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0)
)


def is_frozen() -> bool:
    """True for bundled executables (PyInstaller, Nuitka)."""
    import builtins

    return bool(getattr(sys, "frozen", False)) or bool(getattr(builtins, "__compiled__", False))


def resolve_self_command(entry_script: Optional[os.PathLike] = None) -> List[str]:
    """
    Command that re-launches this program.

    Bundled builds are their own executable; script runs re-enter through
    the interpreter and the entry script.
    """
    if is_frozen():
        return [sys.executable]
    script = Path(entry_script) if entry_script is not None else _ENTRY_SCRIPT
    return [sys.executable, str(script)]


class ProcessLauncher:
    """
    Spawns worker processes from LaunchSpecs.

    Every call is independent: a failure is raised to the caller, which
    records it and carries on with the next spec.
    """

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ):
        self._command = list(command) if command else resolve_self_command()
        self._popen = popen

    @property
    def command(self) -> List[str]:
        return list(self._command)

    def build_argv(self, spec: LaunchSpec) -> List[str]:
        return self._command + build_worker_arguments(spec.position, spec.diagnostic)

    def _popen_kwargs(self, spec: LaunchSpec) -> dict:
        kwargs = {
            "stdin": subprocess.PIPE,
            "close_fds": True,
        }
        if not spec.diagnostic:
            kwargs["stdout"] = subprocess.DEVNULL
            kwargs["stderr"] = subprocess.DEVNULL
        if os.name == "nt":
            kwargs["creationflags"] = _DETACHED_FLAGS
        else:
            kwargs["start_new_session"] = True
        return kwargs

    def launch(self, spec: LaunchSpec) -> subprocess.Popen:
        """
        Start one worker and hand it its payload.

        Returns:
            The Popen handle. It is not waited on.

        Raises:
            ProcessStartFailedError: the process could not be created.
            PayloadDeliveryError: the worker went away mid-write.
        """
        argv = self.build_argv(spec)
        logger.debug("%s Spawning worker for %s at position: %s", TAG_SPAWN, spec.label, spec.position)
        logger.debug("%s Command: %s", TAG_SPAWN, " ".join(argv))

        try:
            process = self._popen(argv, **self._popen_kwargs(spec))
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            raise ProcessStartFailedError(f"could not start worker for {spec.label}: {e}") from e

        self._deliver(process, spec)
        logger.info(
            "%s Worker started for %s (PID: %s, %d bytes)",
            TAG_SPAWN,
            spec.label,
            process.pid,
            spec.payload_size,
        )
        return process

    def _deliver(self, process: subprocess.Popen, spec: LaunchSpec) -> None:
        pipe = process.stdin
        if pipe is None:
            raise PayloadDeliveryError(f"worker for {spec.label} has no stdin pipe", pid=process.pid)
        try:
            pipe.write(spec.payload)
            pipe.flush()
        except OSError as e:
            raise PayloadDeliveryError(
                f"worker for {spec.label} stopped reading its payload: {e}",
                pid=process.pid,
            ) from e
        finally:
            try:
                pipe.close()
            except OSError:
                # Closing a broken pipe can fail again; the reader is gone either way.
                logger.debug("%s Pipe close failed for PID %s", TAG_SPAWN, process.pid, exc_info=True)
