"""Image loading and screen geometry helpers."""
