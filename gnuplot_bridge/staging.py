"""
Registry of temporary data files staged for the engine.

The engine reads sample data by path, so every data plot writes a file
first. The registry owns those files until reset() or close() of the
session removes them.
"""

import os
import tempfile

from config import MAX_TEMP_FILES, TMP_PREFIX, get_tmp_dir

from .errors import TempFileCreateError, TooManyTempFilesError
from .logging import get_logger

logger = get_logger()


class StagedFileRegistry:
    """Ordered, capacity-checked collection of staged file paths.

    Holds at most ``max_files - 1`` entries; the check happens before a file
    is created, so a refused request leaves nothing on disk.
    """

    def __init__(self, max_files: int = MAX_TEMP_FILES, directory: str | None = None):
        if max_files < 2:
            raise ValueError("max_files must be at least 2")
        self.max_files = max_files
        self.directory = directory
        self._paths: list[str] = []

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self):
        return iter(list(self._paths))

    def __contains__(self, path) -> bool:
        return path in self._paths

    @property
    def paths(self) -> list[str]:
        return list(self._paths)

    @property
    def is_full(self) -> bool:
        return len(self._paths) >= self.max_files - 1

    def create(self) -> tuple[int, str]:
        """Create and register a uniquely named file.

        Returns:
            (fd, path): an open OS-level file descriptor, owned by the
            caller, and the registered path.

        Raises:
            TooManyTempFilesError: registry already at capacity.
            TempFileCreateError: the file could not be created.
        """
        if self.is_full:
            raise TooManyTempFilesError(self.max_files)

        directory = self.directory or get_tmp_dir()
        try:
            fd, path = tempfile.mkstemp(prefix=TMP_PREFIX, dir=directory)
        except OSError as e:
            raise TempFileCreateError(
                f"cannot create temporary file in {directory}: {e}"
            ) from e

        self._paths.append(path)
        logger.debug(f"Staged {path} ({len(self._paths)}/{self.max_files - 1})")
        return fd, path

    def discard(self, path: str) -> None:
        """Delete one staged file and forget it."""
        if path in self._paths:
            self._paths.remove(path)
        self._remove(path)

    def clear(self) -> int:
        """Delete every staged file and empty the registry.

        Returns:
            Number of entries that were registered.
        """
        paths, self._paths = self._paths, []
        for path in paths:
            self._remove(path)
        return len(paths)

    @staticmethod
    def _remove(path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"could not remove staged file {path}: {e}")
