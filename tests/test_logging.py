"""
Tests for gnuplot_bridge.logging: file log format, session ids, error scan.

Run with: python -m pytest tests/test_logging.py -v
"""

import pytest

from gnuplot_bridge import logging as gp_logging


@pytest.fixture
def fresh_log():
    logger = gp_logging.setup_logging(verbose=False)
    yield logger
    gp_logging.set_session_id("")
    for handler in logger.handlers:
        handler.flush()


def _flush(logger):
    for handler in logger.handlers:
        handler.flush()


class TestLogFile:
    def test_file_created_in_data_dir(self, fresh_log):
        path = gp_logging.get_current_log_path()
        assert path.parent == gp_logging.LOG_DIR
        assert path.name.startswith("gnuplot_")
        assert path.exists()

    def test_session_id_in_each_line(self, fresh_log):
        gp_logging.set_session_id("20260101_000000_abcd1234")
        gp_logging.log_command("plot x")
        _flush(fresh_log)

        text = gp_logging.get_current_log_path().read_text(encoding="utf-8")
        line = next(l for l in text.splitlines() if "gnuplot> plot x" in l)
        assert " | DEBUG    | gnuplot-pipe | 20260101_000000_abcd1234 | " in line

    def test_missing_session_id_shown_as_dash(self, fresh_log):
        gp_logging.set_session_id("")
        fresh_log.info("no session yet")
        _flush(fresh_log)
        text = gp_logging.get_current_log_path().read_text(encoding="utf-8")
        assert " | - | no session yet" in text


class TestErrors:
    def test_log_error_includes_context(self, fresh_log):
        try:
            raise RuntimeError("pipe gone")
        except RuntimeError as e:
            gp_logging.log_error("send failed", exc=e, context={"command": "plot x"})
        _flush(fresh_log)

        text = gp_logging.get_current_log_path().read_text(encoding="utf-8")
        assert "send failed" in text
        assert "  command: plot x" in text
        assert "Exception type: RuntimeError" in text

    def test_recent_errors_found(self, fresh_log):
        gp_logging.set_session_id("sess-1")
        fresh_log.warning("staged file vanished: marker-7f3a")
        _flush(fresh_log)

        errors = gp_logging.get_recent_errors(days=1, limit=10000)
        match = [e for e in errors if "marker-7f3a" in e["message"]]
        assert match
        assert match[0]["level"] == "WARNING"
        assert match[0]["session_id"] == "sess-1"

    def test_print_recent_errors(self, fresh_log, capsys):
        fresh_log.error("something broke")
        _flush(fresh_log)
        gp_logging.print_recent_errors(days=1, limit=10000)
        assert "something broke" in capsys.readouterr().out
