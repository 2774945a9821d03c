"""Timestamp formatting utilities."""

from datetime import datetime


def now() -> str:
    """Compact timestamp for directory names, e.g. ``20251114_183045``."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def today() -> str:
    """Date stamp for dated output directories, e.g. ``2025-11-14``."""
    return datetime.now().strftime("%Y-%m-%d")
