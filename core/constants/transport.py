"""Constants for the orchestrator/worker handshake.

The orchestrator and the worker are the same program; these flags and
formats are the whole contract between the two personalities.
"""

# =============================================================================
# Command-line Flags
# =============================================================================

BACKGROUND_FLAG = "-b"
"""Selects worker mode (host one window, read the image from stdin)."""

DIAGNOSTIC_FLAG = "-d"
"""Enables diagnostic console output in either mode."""

POSITION_X_PREFIX = "-x="
"""Prefix of the worker's x coordinate argument."""

POSITION_Y_PREFIX = "-y="
"""Prefix of the worker's y coordinate argument."""

HELP_FLAGS = ("-h", "--help")
"""Flags that print usage and exit."""

VERSION_FLAG = "--version"
"""Flag that prints the version string and exits."""

# =============================================================================
# Payload Encoding
# =============================================================================

DEFAULT_TRANSPORT_FORMAT = "PNG"
"""Container used when a file-sourced image is re-encoded for a worker."""

TRANSPORT_QUALITY = -1
"""Qt encoder quality for transport payloads (-1 = format default)."""
