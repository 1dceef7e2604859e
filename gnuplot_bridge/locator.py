"""
Find out where a command lives in the search path.

The equivalent of ``which`` that returns the directory rather than the full
path, e.g. ``locate("ls") -> "/bin"`` or ``locate("hello") -> "."`` when an
executable ``hello`` sits in the current directory.
"""

import os
from typing import Optional

from .logging import get_logger

logger = get_logger()


def _is_executable(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def locate(name: str, search_path: Optional[str] = None) -> Optional[str]:
    """Return the directory holding executable ``name``, or None.

    The current directory is always tried first, then every segment of
    ``search_path`` (defaults to the ``PATH`` environment variable) split on
    ``os.pathsep``. An empty segment means the current directory.

    Args:
        name: Bare command name. Names containing a directory separator are
            never searched and yield None.
        search_path: Explicit search path, mainly for tests.

    Returns:
        The first matching directory (``"."`` for the current directory),
        or None if nothing matches.
    """
    if not name or os.sep in name or (os.altsep and os.altsep in name):
        return None

    if _is_executable(os.path.join(".", name)):
        return "."

    if search_path is None:
        search_path = os.environ.get("PATH")
    if search_path is None:
        logger.warning("PATH variable not set")
        return None

    for segment in search_path.split(os.pathsep):
        directory = segment or "."
        if _is_executable(os.path.join(directory, name)):
            return directory
    return None


def locate_executable(name: str, search_path: Optional[str] = None) -> Optional[str]:
    """Like locate(), but return the full path to the executable."""
    directory = locate(name, search_path)
    if directory is None:
        return None
    return os.path.join(directory, name)
