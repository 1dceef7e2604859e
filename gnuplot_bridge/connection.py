"""
gnuplot process connection over a write-only stdin pipe.
Run this file directly to test: python -m gnuplot_bridge.connection
"""
import os
import subprocess
import sys

from config import CLOSE_TIMEOUT, DISPLAY_VAR, ENGINE_NAME

from .errors import EngineNotFoundError, PipeCloseError, SpawnFailedError
from .locator import locate, locate_executable
from .logging import get_logger

logger = get_logger()


def has_display() -> bool:
    """Return True if a display/output target is configured."""
    return bool(os.environ.get(DISPLAY_VAR))


def start_engine(name: str = None) -> subprocess.Popen:
    """Spawn the plotting engine with a writable stdin pipe.

    A missing display only produces a warning: the engine may still be
    configured to render to a file terminal.

    Args:
        name: Engine binary name, looked up on PATH. Defaults to config ``engine``.

    Returns:
        The running process; its ``stdin`` is the command pipe.

    Raises:
        EngineNotFoundError: the binary is not on the search path.
        SpawnFailedError: the process could not be started.
    """
    name = name or ENGINE_NAME

    if not has_display():
        logger.warning(f"cannot find {DISPLAY_VAR} variable: is it set?")

    executable = locate_executable(name)
    if executable is None:
        raise EngineNotFoundError(name)

    logger.debug(f"Starting engine: {executable}")
    try:
        process = subprocess.Popen(
            [executable],
            stdin=subprocess.PIPE,
        )
    except OSError as e:
        raise SpawnFailedError(f"error starting {name}: {e}") from e

    logger.debug(f"Engine started (pid {process.pid})")
    return process


def stop_engine(process: subprocess.Popen, timeout: float = CLOSE_TIMEOUT) -> None:
    """Close the command pipe (EOF to the engine) and wait for it to exit.

    Raises:
        PipeCloseError: the pipe could not be closed, the engine did not exit
            within ``timeout`` seconds (it is then killed), or it exited with
            a non-zero status.
    """
    try:
        if process.stdin is not None and not process.stdin.closed:
            process.stdin.close()
    except OSError as e:
        process.kill()
        process.wait()
        raise PipeCloseError(f"problem closing communication to engine: {e}") from e

    try:
        returncode = process.wait(timeout=timeout)
    except subprocess.TimeoutExpired as e:
        process.kill()
        process.wait()
        raise PipeCloseError(
            f"engine did not exit within {timeout:g}s after end of input; killed"
        ) from e

    if returncode != 0:
        raise PipeCloseError(f"engine exited with status {returncode}")


if __name__ == "__main__":
    import argparse as _ap
    _parser = _ap.ArgumentParser(description="Test gnuplot connection")
    _parser.add_argument("--engine", default=ENGINE_NAME, help="Engine binary name")
    _cli_args = _parser.parse_args()

    print("Testing gnuplot connection...")
    print(f"Engine:   {_cli_args.engine}")
    print(f"Found in: {locate(_cli_args.engine)}")
    print(f"Display:  {os.environ.get(DISPLAY_VAR)}")
    print()

    try:
        proc = start_engine(_cli_args.engine)
        proc.stdin.write(b"print 'connection ok'\n")
        proc.stdin.flush()
        stop_engine(proc)
        print("SUCCESS")
        sys.exit(0)
    except Exception as e:
        print(f"FAILED: {e}")
        sys.exit(1)
