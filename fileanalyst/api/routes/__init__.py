"""API routes package."""

from . import analysis, files, health

__all__ = ["analysis", "files", "health"]
