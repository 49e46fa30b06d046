"""
Process orchestration for imshow.

One orchestrator process loads and lays out the images, then starts one
detached worker process per image:
- launcher.ProcessLauncher: spawns a worker and writes its payload to a private pipe
- orchestrator.Orchestrator: load -> plan -> launch, with per-image failure bookkeeping
- worker.WorkerEntryPoint: read stdin to EOF, decode, host the window

Only encoded image bytes cross process boundaries.
"""
from .types import (
    LaunchSpec,
    RunResult,
    WindowPosition,
    WorkerState,
)

__all__ = [
    "LaunchSpec",
    "RunResult",
    "WindowPosition",
    "WorkerState",
]
