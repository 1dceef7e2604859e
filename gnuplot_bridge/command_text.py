"""
Engine command values and the single serializer that renders them.

Every line the session writes to gnuplot is built as one of the frozen
dataclasses below and turned into text by render(). Quoting of titles,
labels and paths happens only here.

Grammar produced:
    set title '<text>'
    set xlabel "<text>"            set ylabel "<text>"
    plot "<path>" [title "<text>"] with <style>
    plot <a> * x + <b> title "<text>" with <style>
    plot <equation> title "<text>" with <style>
The plot forms use ``replot`` instead of ``plot`` when overlaying.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .styles import PlotStyle

DEFAULT_TITLE = "no title"

_AXES = ("x", "y")


def _one_line(text: str) -> str:
    """Collapse CR/LF so one command can never span two engine lines."""
    return str(text).replace("\r\n", " ").replace("\r", " ").replace("\n", " ")


def quote_double(text: str) -> str:
    """Render ``text`` as a gnuplot double-quoted string."""
    escaped = _one_line(text).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def quote_single(text: str) -> str:
    """Render ``text`` as a gnuplot single-quoted string (quotes are doubled)."""
    escaped = _one_line(text).replace("'", "''")
    return f"'{escaped}'"


def format_number(value: float) -> str:
    """printf ``%g`` rendering used for every number sent to the engine."""
    return "%g" % float(value)


def plot_verb(overlay: bool) -> str:
    return "replot" if overlay else "plot"


@dataclass(frozen=True)
class SetTitle:
    text: str


@dataclass(frozen=True)
class SetLabel:
    axis: str
    text: str

    def __post_init__(self):
        if self.axis not in _AXES:
            raise ValueError(f"axis must be one of {_AXES}, got {self.axis!r}")


@dataclass(frozen=True)
class PlotFile:
    """Plot a staged data file. ``title`` is omitted from the command when None."""
    path: str
    style: PlotStyle
    title: Optional[str] = None
    overlay: bool = False


@dataclass(frozen=True)
class PlotSlope:
    a: float
    b: float
    style: PlotStyle
    title: Optional[str] = None
    overlay: bool = False


@dataclass(frozen=True)
class PlotEquation:
    """Plot ``y = equation(x)``; the equation is passed through unquoted."""
    equation: str
    style: PlotStyle
    title: Optional[str] = None
    overlay: bool = False


@dataclass(frozen=True)
class Raw:
    """Verbatim command text, for anything the typed commands do not cover."""
    text: str


Command = Union[SetTitle, SetLabel, PlotFile, PlotSlope, PlotEquation, Raw]


def render(command: Command) -> str:
    """Render a command value to one line of engine text (no terminator)."""
    if isinstance(command, SetTitle):
        return f"set title {quote_single(command.text)}"

    if isinstance(command, SetLabel):
        return f"set {command.axis}label {quote_double(command.text)}"

    if isinstance(command, PlotFile):
        parts = [plot_verb(command.overlay), quote_double(command.path)]
        if command.title is not None:
            parts.append(f"title {quote_double(command.title)}")
        parts.append(f"with {command.style}")
        return " ".join(parts)

    if isinstance(command, PlotSlope):
        title = command.title if command.title is not None else DEFAULT_TITLE
        return (
            f"{plot_verb(command.overlay)} {format_number(command.a)} * x + "
            f"{format_number(command.b)} title {quote_double(title)} "
            f"with {command.style}"
        )

    if isinstance(command, PlotEquation):
        title = command.title if command.title is not None else DEFAULT_TITLE
        return (
            f"{plot_verb(command.overlay)} {_one_line(command.equation)} "
            f"title {quote_double(title)} with {command.style}"
        )

    if isinstance(command, Raw):
        return _one_line(command.text)

    raise TypeError(f"not a gnuplot command: {command!r}")
