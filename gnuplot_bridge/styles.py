"""
Plot styles understood by the engine's ``with <style>`` clause.

Style validation is a total function: any input maps to a PlotStyle, and
anything unrecognised maps to DEFAULT_STYLE with a warning.
"""

from enum import Enum

from .logging import get_logger

logger = get_logger()


class PlotStyle(str, Enum):
    LINES = "lines"
    POINTS = "points"
    LINESPOINTS = "linespoints"
    IMPULSES = "impulses"
    DOTS = "dots"
    STEPS = "steps"
    HISTOGRAM = "histogram"
    ERRORBARS = "errorbars"
    BOXES = "boxes"
    BOXERRORBARS = "boxerrorbars"

    def __str__(self) -> str:
        return self.value


DEFAULT_STYLE = PlotStyle.POINTS

STYLE_NAMES = tuple(s.value for s in PlotStyle)


def normalize_style(value) -> PlotStyle:
    """Map ``value`` to a PlotStyle, falling back to ``points``.

    Accepts PlotStyle members and strings (case and surrounding whitespace
    are ignored). Never raises.
    """
    if isinstance(value, PlotStyle):
        return value
    if isinstance(value, str):
        try:
            return PlotStyle(value.strip().lower())
        except ValueError:
            pass
    logger.warning(f"unknown requested style {value!r}: using {DEFAULT_STYLE}")
    return DEFAULT_STYLE
