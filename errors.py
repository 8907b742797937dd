# errors.py
# Exception types shared by the solver, cache and worker

from __future__ import annotations


class CalendarPuzzleError(Exception):
    """Base class for every error raised by this package."""


class InvalidQueryError(CalendarPuzzleError, ValueError):
    """The (month, day) query does not name cells on the board."""


class OffloadError(CalendarPuzzleError, RuntimeError):
    """The background solve process failed to start, crashed or timed out."""


class CacheError(CalendarPuzzleError):
    """A cached payload could not be decoded. Always treated as a miss."""
