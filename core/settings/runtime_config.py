"""
Runtime configuration for imshow.

Nothing is persisted between runs; configuration is a handful of
environment overrides read once at startup into an immutable snapshot.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from core.constants.transport import DEFAULT_TRANSPORT_FORMAT
from core.logging.logger import get_logger

logger = get_logger(__name__)

ENV_LOG_DIR = "IMSHOW_LOG_DIR"
ENV_TRANSPORT_FORMAT = "IMSHOW_TRANSPORT_FORMAT"
ENV_ALWAYS_ON_TOP = "IMSHOW_ALWAYS_ON_TOP"

_FALSE_VALUES = ("0", "false", "off", "no")
_TRUE_VALUES = ("1", "true", "on", "yes")


def to_bool(value, default: bool = False) -> bool:
    """Convert an environment-style value to bool, falling back to *default*."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return default


@dataclass(frozen=True)
class RuntimeConfig:
    """Immutable snapshot of environment-driven settings."""

    log_dir: Optional[Path] = None
    transport_format: str = DEFAULT_TRANSPORT_FORMAT
    always_on_top: bool = True

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "RuntimeConfig":
        env = os.environ if environ is None else environ

        raw_dir = (env.get(ENV_LOG_DIR) or "").strip()
        log_dir = Path(raw_dir).expanduser() if raw_dir else None

        fmt = (env.get(ENV_TRANSPORT_FORMAT) or "").strip().upper() or DEFAULT_TRANSPORT_FORMAT

        return cls(
            log_dir=log_dir,
            transport_format=fmt,
            always_on_top=to_bool(env.get(ENV_ALWAYS_ON_TOP), True),
        )


__all__ = ["RuntimeConfig", "to_bool", "ENV_LOG_DIR", "ENV_TRANSPORT_FORMAT", "ENV_ALWAYS_ON_TOP"]
