"""API endpoints package."""

from . import health
from . import progress
from . import layout

__all__ = ["health", "progress", "layout"]
