"""
Exception types raised by the gnuplot bridge.

Resource-acquisition failures (engine lookup, spawn, staging) are raised to
the caller and never retried. Pipe-close failures are only recorded on the
session; see GnuplotSession.close().
"""


class GnuplotError(Exception):
    """Base class for every bridge failure."""


class EngineNotFoundError(GnuplotError):
    """The plotting engine binary is not reachable on the search path."""

    def __init__(self, name: str):
        super().__init__(f"cannot find {name} in your PATH")
        self.name = name


class SpawnFailedError(GnuplotError):
    """The engine was found but the process could not be started."""


class TempFileCreateError(GnuplotError):
    """A staging file could not be created in the transient directory."""


class TooManyTempFilesError(GnuplotError):
    """The staged-file registry is full; nothing was created."""

    def __init__(self, limit: int):
        super().__init__(
            f"maximum # of temporary files reached ({limit}): cannot open more"
        )
        self.limit = limit


class PartialWriteError(GnuplotError):
    """Sample data could not be fully written to a staged file."""

    def __init__(self, path: str, expected: int, written: int):
        super().__init__(
            f"short write to {path}: {written} of {expected} bytes"
        )
        self.path = path
        self.expected = expected
        self.written = written


class PipeWriteError(GnuplotError):
    """A command could not be written to the engine's stdin."""


class PipeCloseError(GnuplotError):
    """The engine pipe did not close cleanly. Recorded, never raised by close()."""
