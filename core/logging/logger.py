"""
Centralized logging configuration for imshow.

Console output goes to stderr: warnings and errors always, debug detail only
in diagnostic mode. A file log is added when a log directory is configured,
so detached workers (whose console is discarded) can still be traced.
Workers share one append-only file; only the orchestrator rotates its own.
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


_DIAGNOSTIC: bool = False
_LOG_DIR: Optional[Path] = None

LOG_FORMAT = '%(asctime)s - %(name)-24s - %(levelname)-8s - %(message)s'
FILE_LOG_FORMAT = '%(asctime)s - %(process)d - %(name)-24s - %(levelname)-8s - %(message)s'
CONSOLE_DATEFMT = '%H:%M:%S'
FILE_DATEFMT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',       # Cyan
        'INFO': '\033[32m',        # Green
        'WARNING': '\033[33m',     # Yellow
        'ERROR': '\033[31m',       # Red
        'CRITICAL': '\033[35m',    # Magenta
    }
    FALLBACK_COLOR = '\033[38;5;208m'
    RESET = '\033[0m'
    BOLD = '\033[1m'

    def format(self, record):
        original_levelname = record.levelname

        # Fallback paths get their own color regardless of level.
        if '[FALLBACK]' in str(record.msg):
            color = self.FALLBACK_COLOR
        else:
            color = self.COLORS.get(record.levelname)

        if color is None:
            return super().format(record)

        record.levelname = f"{self.BOLD}{color}{record.levelname}{self.RESET}"
        try:
            message = super().format(record)
        finally:
            record.levelname = original_levelname
        return f"{color}{message}{self.RESET}"


class SafeStreamHandler(logging.StreamHandler):
    """Stream handler that degrades unencodable characters instead of failing.

    File handlers always receive the original record; when the console
    encoding cannot represent a path or message (e.g. cp1252 vs. non-Latin
    file names) the console line is written with replacement characters.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            stream = self.stream
            if stream is None:
                return
            text = msg + self.terminator
            try:
                stream.write(text)
            except UnicodeEncodeError:
                encoding = getattr(stream, "encoding", None) or "ascii"
                stream.write(
                    text.encode(encoding, errors="replace").decode(encoding, errors="replace")
                )
            self.flush()
        except Exception:
            self.handleError(record)


def get_log_dir() -> Optional[Path]:
    """Return the directory used for log files, or None if file logging is off."""

    return _LOG_DIR


def setup_logging(
    debug: bool = False,
    log_dir: Union[str, os.PathLike, None] = None,
    log_name: str = "imshow.log",
    stream=None,
    rotate: bool = True,
) -> None:
    """
    Configure application logging.

    Args:
        debug: Diagnostic mode. Lowers the console threshold to DEBUG.
        log_dir: Optional directory for a log file.
        log_name: File name inside ``log_dir`` (workers use their own).
        stream: Console stream, defaults to ``sys.stderr``.
        rotate: Rotate the file. Off for workers, which share one file
            across processes.
    """
    global _DIAGNOSTIC, _LOG_DIR

    _DIAGNOSTIC = bool(debug)
    # The file log always captures debug detail; the console follows -d.
    level = logging.DEBUG if (_DIAGNOSTIC or log_dir) else logging.INFO
    console_level = logging.DEBUG if _DIAGNOSTIC else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Re-running setup (tests, repeated main() calls) must not stack handlers.
    for handler in list(root_logger.handlers):
        if getattr(handler, "_imshow_handler", False):
            root_logger.removeHandler(handler)
            handler.close()

    console_stream = stream if stream is not None else sys.stderr
    console_handler = SafeStreamHandler(console_stream)
    isatty = getattr(console_stream, "isatty", None)
    if _DIAGNOSTIC and callable(isatty) and isatty():
        console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt=CONSOLE_DATEFMT))
    else:
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=CONSOLE_DATEFMT))
    console_handler.setLevel(console_level)
    console_handler._imshow_handler = True
    root_logger.addHandler(console_handler)

    _LOG_DIR = None
    if log_dir:
        try:
            path = Path(log_dir)
            path.mkdir(parents=True, exist_ok=True)
            if rotate:
                # File handler with rotation (1MB max, keep 5 backups)
                file_handler = RotatingFileHandler(
                    path / log_name,
                    maxBytes=1 * 1024 * 1024,
                    backupCount=5,
                    encoding='utf-8',
                )
            else:
                file_handler = logging.FileHandler(path / log_name, mode='a', encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=FILE_DATEFMT))
            file_handler.setLevel(logging.DEBUG)
            file_handler._imshow_handler = True
            root_logger.addHandler(file_handler)
            _LOG_DIR = path
        except OSError as e:
            root_logger.warning("Could not open log directory %s: %s", log_dir, e)

    root_logger.debug(
        "Logging initialized (diagnostic=%s, log_dir=%s, pid=%d)",
        _DIAGNOSTIC,
        _LOG_DIR,
        os.getpid(),
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def is_diagnostic_logging() -> bool:
    """Return True when diagnostic console logging is enabled."""

    return _DIAGNOSTIC
