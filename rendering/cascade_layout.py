"""
Cascade layout for multiple image windows.

Windows are laid out as a diagonal cascade: each window is shifted by a
fixed offset from the previous one and the group as a whole is centred on
the screen's visible area. With a single window it is centred exactly.
"""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple, Union

from PySide6.QtCore import QRect, QRectF, QSize, QSizeF

from core.constants.layout import CASCADE_OFFSET_X, CASCADE_OFFSET_Y, ORIGIN_X, ORIGIN_Y
from core.logging.logger import get_logger
from core.logging.tags import TAG_LAYOUT
from core.process.types import WindowPosition

logger = get_logger(__name__)

SizeLike = Union[QSize, QSizeF, Sequence[float]]
RectLike = Union[QRect, QRectF]


def _size_components(window_size: SizeLike) -> Tuple[float, float]:
    if isinstance(window_size, (QSize, QSizeF)):
        return float(window_size.width()), float(window_size.height())
    width, height = window_size
    return float(width), float(height)


def _midpoint(screen_rect: RectLike) -> Tuple[float, float]:
    # QRect.center() rounds to integers and is off by one for even sizes.
    rect = QRectF(screen_rect)
    return rect.x() + rect.width() / 2.0, rect.y() + rect.height() / 2.0


def plan_positions(
    count: int,
    window_size: SizeLike,
    screen_rect: Optional[RectLike],
    offset_x: float = CASCADE_OFFSET_X,
    offset_y: float = CASCADE_OFFSET_Y,
) -> List[WindowPosition]:
    """
    Compute one window position per image.

    Args:
        count: Number of windows
        window_size: Reference window size (the first loaded image)
        screen_rect: Visible screen area, or None if unknown
        offset_x: Horizontal cascade step
        offset_y: Vertical cascade step

    Returns:
        List of ``count`` positions. Without a screen every position is
        the origin.
    """
    if count <= 0:
        return []

    if screen_rect is None:
        return [WindowPosition(ORIGIN_X, ORIGIN_Y) for _ in range(count)]

    width, height = _size_components(window_size)
    mid_x, mid_y = _midpoint(screen_rect)

    total_offset_x = (count - 1) * offset_x
    total_offset_y = (count - 1) * offset_y

    start_x = mid_x - width / 2.0 - total_offset_x
    start_y = mid_y - height / 2.0 + total_offset_y

    positions = [
        WindowPosition(start_x + i * offset_x, start_y - i * offset_y)
        for i in range(count)
    ]
    logger.debug(
        "%s Planned %d position(s) for %gx%g starting at (%g, %g)",
        TAG_LAYOUT,
        count,
        width,
        height,
        start_x,
        start_y,
    )
    return positions


def center_position(window_size: SizeLike, screen_rect: Optional[RectLike]) -> WindowPosition:
    """Position that centres a single window, or the origin with no screen."""
    return plan_positions(1, window_size, screen_rect)[0]
