"""Core orchestration, logging and configuration for imshow."""
