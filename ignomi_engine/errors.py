"""
Exception types raised by the Ignomi engine.

Provider failures never escape a session as exceptions; they are turned
into Outcome.error(...) by the executor. These types cover the cases that
are rejected before any provider runs, and the backend failures providers
catch and convert.
"""


class IgnomiError(Exception):
    """Base class for all engine errors."""


class InvalidHandleError(IgnomiError):
    """A session handle was never issued or has already been freed."""


class SessionClosedError(IgnomiError):
    """An operation was attempted on a closed session."""


class LaunchError(IgnomiError):
    """An application or command could not be started."""


class ClipboardError(IgnomiError):
    """The system clipboard could not be read or written."""
