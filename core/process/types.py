"""
Type definitions for the orchestrator/worker protocol.

Defines the window position value, the per-worker launch contract, worker
lifecycle states and the orchestrator's aggregate result. No Qt objects
live here; only encoded bytes ever cross a process boundary.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional


class WorkerState(Enum):
    """Worker process lifecycle states."""
    AWAITING_INPUT = auto()
    DISPLAYING = auto()
    TERMINATED = auto()


@dataclass(frozen=True)
class WindowPosition:
    """Top-left anchor of a window in screen coordinates."""
    x: float
    y: float

    def to_args(self) -> List[str]:
        """Encode as worker arguments (``-x=<x>``, ``-y=<y>``)."""
        from core.constants.transport import POSITION_X_PREFIX, POSITION_Y_PREFIX

        return [f"{POSITION_X_PREFIX}{self.x!r}", f"{POSITION_Y_PREFIX}{self.y!r}"]

    def __str__(self) -> str:
        return f"x={self.x:g}, y={self.y:g}"


@dataclass(frozen=True)
class LaunchSpec:
    """
    Complete input contract for spawning one worker.

    Built once per successfully loaded image and consumed exactly once by
    the process launcher.
    """
    payload: bytes = field(repr=False)
    position: WindowPosition
    diagnostic: bool = False
    label: str = "<stdin>"

    @property
    def payload_size(self) -> int:
        return len(self.payload)


@dataclass
class RunResult:
    """
    Aggregate outcome of one orchestrator run.

    Failures are additive: any load or spawn failure forces exit code 1,
    but none of them stops the rest of the batch.
    """
    loaded: int = 0
    spawned: int = 0
    load_failures: List[str] = field(default_factory=list)
    spawn_failures: List[str] = field(default_factory=list)
    pids: List[int] = field(default_factory=list)

    def record_load_failure(self, source: str) -> None:
        self.load_failures.append(source)

    def record_spawn(self, pid: Optional[int]) -> None:
        self.spawned += 1
        if pid is not None:
            self.pids.append(pid)

    def record_spawn_failure(self, label: str) -> None:
        self.spawn_failures.append(label)

    @property
    def ok(self) -> bool:
        return (
            self.loaded > 0
            and not self.load_failures
            and not self.spawn_failures
        )

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1
