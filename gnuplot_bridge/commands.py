"""
gnuplot session controller and plot-request builders.

Usage:
    from gnuplot_bridge.commands import open_session
    with open_session() as gp:
        gp.set_style("lines")
        gp.plot_x([1, 4, 9, 16], title="squares")
        gp.plot_slope(2.0, 1.0, title="2x+1")

The pipe to the engine is write-only. A successful send() means the bytes
were written, never that gnuplot accepted the command.

Staged files and asynchronous rendering: gnuplot reads a data file when it
renders, which may happen after send() has returned. reset() and close()
delete staged files immediately, so a plot whose rendering is still pending
(or a later interactive ``replot``) can fail to find its data. The pipe
offers no completion signal to wait for.

A session is not thread-safe. Callers sharing one across threads must hold
their own lock around send(), stage_file(), reset() and close().
"""

from __future__ import annotations

import os
import subprocess
import uuid
from datetime import datetime
from typing import Callable, Optional

import numpy as np

from config import CLOSE_TIMEOUT, ENGINE_NAME, MAX_TEMP_FILES
from data_ops.histogram import BinSet, OverflowPolicy

from .command_text import (
    Command,
    PlotEquation,
    PlotFile,
    PlotSlope,
    Raw,
    SetLabel,
    SetTitle,
    render,
)
from .connection import start_engine, stop_engine
from .errors import PartialWriteError, PipeCloseError, PipeWriteError
from .logging import get_logger, log_command, set_session_id
from .staging import StagedFileRegistry
from .styles import DEFAULT_STYLE, PlotStyle, normalize_style

logger = get_logger()


def _as_samples(values) -> Optional[np.ndarray]:
    """Flatten ``values`` to a float64 array, or None for missing/empty input."""
    if values is None:
        return None
    arr = np.asarray(values, dtype=np.float64).ravel()
    if arr.size < 1:
        return None
    return arr


class GnuplotSession:
    """One conversation with a spawned gnuplot process.

    State:
        process: the engine process; its stdin is the command pipe. None once
            the session is closed.
        style: current PlotStyle, never unset.
        overlay_count: plots issued since the last reset. Zero means the next
            plot starts a new canvas (``plot``), otherwise it overlays
            (``replot``).
        staged: registry of data files written for the current plots.
    """

    def __init__(
        self,
        process: subprocess.Popen,
        engine: str = ENGINE_NAME,
        max_temp_files: int = MAX_TEMP_FILES,
        tmp_dir: Optional[str] = None,
        close_timeout: float = CLOSE_TIMEOUT,
    ):
        self.process = process
        self.engine = engine
        self.close_timeout = close_timeout
        self.style: PlotStyle = DEFAULT_STYLE
        self.overlay_count = 0
        self.staged = StagedFileRegistry(max_files=max_temp_files, directory=tmp_dir)
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S") + "_" + uuid.uuid4().hex[:8]
        self.last_close_error: Optional[PipeCloseError] = None

    @classmethod
    def open(cls, engine: Optional[str] = None, **kwargs) -> "GnuplotSession":
        """Spawn the engine and return a fresh session.

        Raises:
            EngineNotFoundError, SpawnFailedError: see connection.start_engine().
        """
        engine = engine or ENGINE_NAME
        process = start_engine(engine)
        session = cls(process, engine=engine, **kwargs)
        set_session_id(session.session_id)
        logger.info(f"Session opened: {engine} (pid {process.pid})")
        return session

    def __enter__(self) -> "GnuplotSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return (
            f"<GnuplotSession {self.session_id} {state} style={self.style} "
            f"plots={self.overlay_count} staged={len(self.staged)}>"
        )

    @property
    def is_open(self) -> bool:
        return self.process is not None

    # ---- Pipe ----------------------------------------------------------------

    def send(self, command: Command | str) -> str:
        """Write one command line to the engine and flush.

        Args:
            command: A command value from command_text, or raw command text.

        Returns:
            The rendered command text (without the newline).

        Raises:
            PipeWriteError: the session is closed or the pipe write failed.
        """
        if isinstance(command, str):
            command = Raw(command)
        text = render(command)

        if self.process is None or self.process.stdin is None:
            raise PipeWriteError(f"session is closed; cannot send: {text}")
        try:
            self.process.stdin.write((text + "\n").encode("utf-8"))
            self.process.stdin.flush()
        except (OSError, ValueError) as e:
            raise PipeWriteError(f"could not write to {self.engine}: {e}") from e

        log_command(text)
        return text

    # ---- Session state -------------------------------------------------------

    def set_style(self, name) -> PlotStyle:
        """Select the plot style; unknown names fall back to ``points``."""
        self.style = normalize_style(name)
        return self.style

    def set_title(self, text: str) -> str:
        return self.send(SetTitle(text))

    def set_xlabel(self, text: str) -> str:
        return self.send(SetLabel("x", text))

    def set_ylabel(self, text: str) -> str:
        return self.send(SetLabel("y", text))

    def set_axis_label(self, axis: str, text: str) -> str:
        """Set the label of axis ``"x"`` or ``"y"``."""
        return self.send(SetLabel(axis.lower(), text))

    def reset(self) -> int:
        """Delete staged files and make the next plot start a new canvas.

        The engine process, style and labels are untouched.

        Returns:
            Number of staged files removed.
        """
        removed = self.staged.clear()
        self.overlay_count = 0
        logger.debug(f"Reset: removed {removed} staged file(s)")
        return removed

    def close(self) -> bool:
        """End the session: close the pipe, then delete every staged file.

        Local cleanup always runs, whether or not the engine cooperates. A
        failed pipe close is logged and kept in ``last_close_error``. Calling
        close() again only re-checks that nothing is staged.

        Returns:
            True if the engine pipe closed cleanly.
        """
        if self.process is None:
            self.staged.clear()
            return self.last_close_error is None

        process, self.process = self.process, None
        try:
            stop_engine(process, timeout=self.close_timeout)
        except PipeCloseError as e:
            self.last_close_error = e
            logger.warning(str(e))
        finally:
            removed = self.staged.clear()
            self.overlay_count = 0
            logger.info(f"Session closed ({removed} staged file(s) removed)")
            set_session_id("")
        return self.last_close_error is None

    # ---- Staging -------------------------------------------------------------

    def stage_file(self) -> tuple[int, str]:
        """Create and register a data file for the engine to read.

        Returns:
            (fd, path); the caller must close ``fd``.

        Raises:
            TooManyTempFilesError: the registry is full (nothing created).
            TempFileCreateError: the file could not be created.
        """
        return self.staged.create()

    def _stage_data(self, payload: str) -> str:
        """Write ``payload`` to a new staged file and return its path.

        A short or failed write removes the file again and raises
        PartialWriteError; the session stays usable. Nothing is created on
        a closed session.
        """
        if not self.is_open:
            raise PipeWriteError("session is closed; cannot stage plot data")
        data = payload.encode("ascii")
        fd, path = self.stage_file()
        try:
            try:
                written = os.write(fd, data)
            except OSError as e:
                raise PartialWriteError(path, len(data), 0) from e
            if written != len(data):
                raise PartialWriteError(path, len(data), written)
        except PartialWriteError:
            os.close(fd)
            self.staged.discard(path)
            raise
        os.close(fd)
        return path

    # ---- Plot builders -------------------------------------------------------

    def _emit_plot(self, command: Command, path: Optional[str] = None) -> dict:
        try:
            text = self.send(command)
        except PipeWriteError:
            if path is not None:
                self.staged.discard(path)
            raise
        self.overlay_count += 1
        return {"status": "success", "command": text, "path": path}

    @staticmethod
    def _skipped(message: str) -> dict:
        logger.info(f"Plot skipped: {message}")
        return {"status": "skipped", "message": message}

    @property
    def _overlay(self) -> bool:
        return self.overlay_count > 0

    def plot_x(self, values, title: Optional[str] = None) -> dict:
        """Plot values against their index (0..n-1).

        Args:
            values: Sequence of numbers; one line ``%g`` per value is staged.
            title: Legend title; omitted from the command when None.

        Returns:
            dict with status, the command sent and the staged path. Missing or
            empty input is skipped without touching the engine.
        """
        samples = _as_samples(values)
        if samples is None:
            return self._skipped("plot_x needs at least one value")

        path = self._stage_data("".join("%g\n" % v for v in samples))
        return self._emit_plot(
            PlotFile(path, self.style, title, overlay=self._overlay), path
        )

    def plot_xy(self, x, y, title: Optional[str] = None) -> dict:
        """Plot points given as separate x and y sequences of equal length.

        Raises:
            ValueError: x and y differ in length.
            PartialWriteError: staging was cut short; nothing was sent.
        """
        xs = _as_samples(x)
        ys = _as_samples(y)
        if xs is None or ys is None:
            return self._skipped("plot_xy needs at least one point")
        if xs.size != ys.size:
            raise ValueError(f"x and y lengths differ: {xs.size} != {ys.size}")

        path = self._stage_data("".join("%g %g\n" % (a, b) for a, b in zip(xs, ys)))
        return self._emit_plot(
            PlotFile(path, self.style, title, overlay=self._overlay), path
        )

    def plot_equation(self, equation: str, title: Optional[str] = None) -> dict:
        """Plot y = f(x); pass only the f(x) side, e.g. ``"sin(x) * cos(2*x)"``."""
        if not equation or not equation.strip():
            return self._skipped("plot_equation needs an equation")
        return self._emit_plot(
            PlotEquation(equation.strip(), self.style, title, overlay=self._overlay)
        )

    def plot_slope(self, a: float, b: float, title: Optional[str] = None) -> dict:
        """Plot the line y = a*x + b."""
        return self._emit_plot(
            PlotSlope(float(a), float(b), self.style, title, overlay=self._overlay)
        )

    def plot_histogram(
        self,
        edges,
        samples,
        overflow=OverflowPolicy.CLAMP,
        title: Optional[str] = None,
    ) -> dict:
        """Bin ``samples`` against ``edges`` and plot the counts as boxes.

        The session style is switched to ``boxes`` and stays so afterwards.
        """
        if samples is None:
            return self._skipped("plot_histogram needs samples")
        bins = BinSet.from_samples(edges, samples, overflow)
        if len(bins) == 0:
            return self._skipped("plot_histogram needs at least one bin edge")
        self.set_style(PlotStyle.BOXES)
        result = self.plot_xy(bins.edges, bins.counts, title)
        result["counts"] = bins.counts.tolist()
        return result


def open_session(engine: Optional[str] = None, **kwargs) -> GnuplotSession:
    """Open a new gnuplot session. Same as GnuplotSession.open()."""
    return GnuplotSession.open(engine, **kwargs)


def _wait_for_enter() -> None:
    input("press ENTER to continue")


def plot_once(
    x,
    y=None,
    title: Optional[str] = None,
    style: Optional[str] = None,
    xlabel: Optional[str] = None,
    ylabel: Optional[str] = None,
    confirm: Optional[Callable[[], object]] = None,
    engine: Optional[str] = None,
) -> Optional[dict]:
    """Open a session, plot one signal, wait for the operator, close.

    Plots ``x`` by index when ``y`` is None, otherwise x/y points. Empty
    style or labels get the defaults ``lines``, ``X`` and ``Y``. Blocks on
    ``confirm`` (default: wait for ENTER on stdin) before closing, so it
    must not be called while something else owns the terminal.

    Returns:
        The plot result dict, or None if ``x`` is empty (no session opened).
    """
    if _as_samples(x) is None:
        logger.info("plot_once: nothing to plot")
        return None

    session = GnuplotSession.open(engine)
    try:
        session.set_style(style or PlotStyle.LINES)
        session.set_xlabel(xlabel or "X")
        session.set_ylabel(ylabel or "Y")
        if y is None:
            result = session.plot_x(x, title)
        else:
            result = session.plot_xy(x, y, title)
        (confirm or _wait_for_enter)()
    finally:
        session.close()
    return result
