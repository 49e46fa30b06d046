"""Centralised version and naming information for imshow.

Single source of truth for the application version and executable name.
The packaging metadata reads ``APP_VERSION`` from here.
"""

APP_EXE_NAME: str = "imshow"
APP_VERSION: str = "1.0.0"
