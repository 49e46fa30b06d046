"""Logging setup and tags."""
