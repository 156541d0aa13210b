from __future__ import annotations


class TriviaError(Exception):
    """Base class for errors raised by the game engine."""


class InvalidDataError(TriviaError, ValueError):
    """Malformed question data (bad answer count, out-of-range correct index, empty deck)."""


class StateError(TriviaError, RuntimeError):
    """An operation was invoked in a phase that forbids it.

    The session is left untouched, so callers can treat this as a rejected no-op.
    """


class InvalidArgumentError(TriviaError, ValueError):
    """Malformed scoring/movement input (negative counts, non-finite coordinates)."""


class DivisionByZeroError(TriviaError, ZeroDivisionError):
    """A journey fraction was requested over a zero-length move."""
