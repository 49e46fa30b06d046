"""Standard logging tags for consistent log filtering.

Usage:
    from core.logging.tags import TAG_SPAWN
    logger.info("%s Spawned worker pid=%d", TAG_SPAWN, pid)
"""

# =============================================================================
# Operation Tags
# =============================================================================

TAG_IMAGE = "[IMAGE]"
"""Image loading, decoding and transport encoding."""

TAG_LAYOUT = "[LAYOUT]"
"""Window position planning."""

TAG_SPAWN = "[SPAWN]"
"""Worker process creation and payload delivery."""

TAG_WORKER = "[WORKER]"
"""Worker-side lifecycle (read, decode, display, exit)."""

TAG_SCREEN = "[SCREEN]"
"""Screen geometry discovery."""

# =============================================================================
# Status Tags
# =============================================================================

TAG_FALLBACK = "[FALLBACK]"
"""A default was used because the preferred input was unavailable."""


__all__ = [
    "TAG_IMAGE",
    "TAG_LAYOUT",
    "TAG_SPAWN",
    "TAG_WORKER",
    "TAG_SCREEN",
    "TAG_FALLBACK",
]
