"""Layout constants for window placement.

All values are in screen units (logical pixels).
"""

# =============================================================================
# Cascade Layout
# =============================================================================

CASCADE_OFFSET_X = 20.0
"""Horizontal step between consecutive windows in a cascade."""

CASCADE_OFFSET_Y = 20.0
"""Vertical step between consecutive windows in a cascade."""

ORIGIN_X = 0.0
"""Fallback x coordinate when no screen geometry is known."""

ORIGIN_Y = 0.0
"""Fallback y coordinate when no screen geometry is known."""
