"""
imshow - Main Entry Point

Shows images in separate windows. The same program runs in two modes:
the orchestrator (default) validates the inputs and starts one background
worker per image, a worker (``-b``) reads one image from stdin and keeps
its window open until a key is pressed.
"""
import sys
from pathlib import Path

from core.logging.logger import get_logger, setup_logging
from core.mode_router import (
    USAGE,
    InfoMode,
    OrchestratorMode,
    RunMode,
    WorkerMode,
    parse_arguments,
)
from core.process.launcher import ProcessLauncher, resolve_self_command
from core.process.orchestrator import Orchestrator
from core.process.worker import WorkerEntryPoint
from core.settings.runtime_config import RuntimeConfig
from versioning import APP_EXE_NAME, APP_VERSION

logger = get_logger(__name__)


def run_orchestrator(mode: OrchestratorMode, config: RuntimeConfig, stdin=None) -> int:
    """
    Load, lay out and spawn.

    Args:
        mode: Parsed orchestrator arguments
        config: Runtime configuration
        stdin: Text stream for the tty check (its ``buffer`` is read)

    Returns:
        Exit code
    """
    from utils.image_loader import ImageLoader, supported_transport_format
    from utils.monitors import ensure_gui_application

    stdin = stdin if stdin is not None else sys.stdin

    if mode.reads_stdin and (stdin is None or stdin.isatty()):
        print(USAGE, end="")
        return 1

    # Screen geometry needs a GUI application; without one every window
    # goes to the origin.
    ensure_gui_application()

    loader = ImageLoader(supported_transport_format(config.transport_format))
    launcher = ProcessLauncher(resolve_self_command(Path(__file__).resolve()))
    orchestrator = Orchestrator(loader=loader, launcher=launcher, diagnostic=mode.diagnostic)

    stream = getattr(stdin, "buffer", stdin) if mode.reads_stdin else None
    result = orchestrator.run(mode.paths, stream)
    return result.exit_code


def run_worker(mode: WorkerMode, config: RuntimeConfig) -> int:
    """
    Host one window for the image on stdin.

    Returns:
        Exit code
    """
    from rendering.image_window import QtDisplaySurface
    from utils.monitors import has_display_server

    if not has_display_server():
        logger.error("No display available for the image window")
        return 1

    surface = QtDisplaySurface(
        always_on_top=config.always_on_top,
        app_name=APP_EXE_NAME,
        app_version=APP_VERSION,
    )
    return WorkerEntryPoint(mode, surface=surface).run()


def main(argv=None) -> int:
    """Main entry point for imshow."""
    args = sys.argv[1:] if argv is None else list(argv)
    parsed = parse_arguments(args)

    if isinstance(parsed, InfoMode):
        if parsed.mode == RunMode.VERSION:
            print(f"{APP_EXE_NAME} {APP_VERSION}")
        else:
            print(USAGE, end="")
        return 0

    config = RuntimeConfig.from_environ()
    is_worker = isinstance(parsed, WorkerMode)
    setup_logging(
        debug=parsed.diagnostic,
        log_dir=config.log_dir,
        log_name="worker.log" if is_worker else "imshow.log",
        rotate=not is_worker,
    )

    logger.debug("=" * 60)
    logger.debug("%s %s starting (%s mode)", APP_EXE_NAME, APP_VERSION, parsed.mode.value)
    logger.debug("Command-line arguments: %s", args)
    logger.debug("=" * 60)

    try:
        if is_worker:
            exit_code = run_worker(parsed, config)
        else:
            exit_code = run_orchestrator(parsed, config)
    except KeyboardInterrupt:
        exit_code = 130
    except Exception as e:
        logger.exception("Fatal error in main: %s", e)
        exit_code = 1

    logger.debug("%s exiting (code=%s)", APP_EXE_NAME, exit_code)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
