"""Blueprint exports."""

from . import goals

__all__ = ["goals"]
