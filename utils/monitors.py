"""
Screen geometry discovery.

Only the primary screen's available geometry (excluding taskbars/docks) is
used. Every failure path answers "unknown" (None) so callers fall back to
the origin instead of failing.
"""
import os
import sys
from typing import List, Mapping, Optional

from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QGuiApplication, QScreen

from core.errors import NoScreenError
from core.logging.logger import get_logger
from core.logging.tags import TAG_FALLBACK, TAG_SCREEN

logger = get_logger(__name__)

# Platforms that report a virtual screen rather than a real desktop.
HEADLESS_PLATFORMS = ("offscreen", "minimal")


def has_display_server() -> bool:
    """
    Check whether a GUI platform is plausibly reachable.

    On Linux/BSD a Qt GUI application aborts when neither X11 nor Wayland
    is available, so this is checked before constructing one. An explicit
    QT_QPA_PLATFORM (e.g. ``offscreen``) always counts as available.
    """
    if os.environ.get("QT_QPA_PLATFORM"):
        return True
    if sys.platform.startswith(("win", "darwin")):
        return True
    return bool(os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"))


def platform_arguments(environ: Optional[Mapping[str, str]] = None,
                       platform: Optional[str] = None) -> List[str]:
    """
    Extra ``-platform`` arguments for the orchestrator's GUI application.

    A set DISPLAY does not guarantee a running X server. Qt tries each
    plugin of a ``;`` list in order, so the native plugins are followed by
    ``offscreen`` and a dead display degrades to "no screen" instead of
    aborting. Passed as arguments, not through the environment, so workers
    never inherit the fallback.
    """
    env = os.environ if environ is None else environ
    platform = sys.platform if platform is None else platform
    if env.get("QT_QPA_PLATFORM") or platform.startswith(("win", "darwin")):
        return []
    plugins = []
    if env.get("WAYLAND_DISPLAY"):
        plugins.append("wayland")
    plugins.extend(["xcb", "offscreen"])
    return ["-platform", ";".join(plugins)]


def ensure_gui_application() -> Optional[QGuiApplication]:
    """
    Return the running GUI application, creating one if a display exists.

    The orchestrator only needs screen geometry, so a bare QGuiApplication
    is enough. Returns None when no display server is reachable.
    """
    app = QGuiApplication.instance()
    if app is not None:
        return app
    if not has_display_server():
        logger.debug("%s %s No display server detected", TAG_FALLBACK, TAG_SCREEN)
        return None
    QGuiApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )
    return QGuiApplication(sys.argv[:1] + platform_arguments())


def is_headless_fallback() -> bool:
    """True when Qt ended up on a virtual platform nobody asked for."""
    if os.environ.get("QT_QPA_PLATFORM"):
        return False
    return QGuiApplication.platformName() in HEADLESS_PLATFORMS


def get_primary_screen() -> QScreen:
    """
    Get the primary screen.

    Raises:
        NoScreenError: no GUI application exists, it reports no screen, or
            the display was unusable and Qt fell back to a virtual platform.
    """
    if QGuiApplication.instance() is None:
        raise NoScreenError("no GUI application instance")
    if is_headless_fallback():
        raise NoScreenError(f"display unusable, running on '{QGuiApplication.platformName()}'")
    primary = QGuiApplication.primaryScreen()
    if primary is None:
        raise NoScreenError("no primary screen")
    return primary


def get_visible_rect() -> Optional[QRectF]:
    """
    Get the available geometry of the primary screen.

    Returns:
        QRectF of the visible area, or None when no screen is known.
    """
    try:
        screen = get_primary_screen()
    except NoScreenError as e:
        logger.debug("%s %s No screen geometry (%s)", TAG_FALLBACK, TAG_SCREEN, e)
        return None

    geometry = screen.availableGeometry()
    if geometry.isEmpty():
        logger.debug("%s %s Screen %s has empty geometry", TAG_FALLBACK, TAG_SCREEN, screen.name())
        return None

    logger.debug("%s Screen %s available geometry: %s", TAG_SCREEN, screen.name(), geometry)
    return QRectF(geometry)
