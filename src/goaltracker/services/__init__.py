"""Service module exports."""

from . import batch, completion, dates, occurrences, stats, tracker

__all__ = [
    "batch",
    "completion",
    "dates",
    "occurrences",
    "stats",
    "tracker",
]
