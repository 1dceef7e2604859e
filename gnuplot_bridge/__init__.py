"""Pipe-driven gnuplot sessions."""

from .commands import GnuplotSession, open_session, plot_once
from .errors import (
    GnuplotError,
    EngineNotFoundError,
    SpawnFailedError,
    TempFileCreateError,
    TooManyTempFilesError,
    PartialWriteError,
    PipeWriteError,
    PipeCloseError,
)
from .locator import locate
from .styles import PlotStyle, DEFAULT_STYLE, normalize_style

__all__ = [
    "GnuplotSession",
    "open_session",
    "plot_once",
    "GnuplotError",
    "EngineNotFoundError",
    "SpawnFailedError",
    "TempFileCreateError",
    "TooManyTempFilesError",
    "PartialWriteError",
    "PipeWriteError",
    "PipeCloseError",
    "locate",
    "PlotStyle",
    "DEFAULT_STYLE",
    "normalize_style",
]
