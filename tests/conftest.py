"""Shared fixtures: an isolated data directory and a fake engine process."""

import os
import subprocess
import tempfile

# Keep log files out of the real home directory. Must run before config is imported.
os.environ["GNUPLOT_PIPE_DIR"] = tempfile.mkdtemp(prefix="gnuplot-pipe-tests-")

import pytest


class FakeStdin:
    """Write-only pipe stand-in that records the bytes written."""

    def __init__(self, fail_write: bool = False, fail_close: bool = False):
        self.data = bytearray()
        self.closed = False
        self.fail_write = fail_write
        self.fail_close = fail_close

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ValueError("write to closed file")
        if self.fail_write:
            raise BrokenPipeError(32, "Broken pipe")
        self.data += data
        return len(data)

    def flush(self) -> None:
        if self.closed:
            raise ValueError("flush of closed file")

    def close(self) -> None:
        if self.fail_close:
            raise OSError(5, "Input/output error")
        self.closed = True

    @property
    def lines(self) -> list[str]:
        return self.data.decode("utf-8").splitlines()


class FakeProcess:
    """Minimal subprocess.Popen stand-in for the engine."""

    pid = 4242

    def __init__(self, returncode: int = 0, hang: bool = False, **stdin_kwargs):
        self.stdin = FakeStdin(**stdin_kwargs)
        self.returncode = returncode
        self.hang = hang
        self.killed = False

    def wait(self, timeout=None) -> int:
        if self.hang and not self.killed:
            raise subprocess.TimeoutExpired("gnuplot", timeout)
        return -9 if self.killed else self.returncode

    def kill(self) -> None:
        self.killed = True


@pytest.fixture
def fake_process():
    return FakeProcess()


@pytest.fixture
def session(tmp_path, fake_process):
    """A GnuplotSession on a fake engine, staging into tmp_path."""
    from gnuplot_bridge.commands import GnuplotSession
    return GnuplotSession(fake_process, tmp_dir=str(tmp_path), max_temp_files=8)


@pytest.fixture
def make_process():
    """Factory for FakeProcess with custom failure modes."""
    return FakeProcess
