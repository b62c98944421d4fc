"""Shared infrastructure: logging, progress bars, configuration and errors."""
