"""Tests for logging setup."""

import pytest

from pgbridge.core.logging import get_logger, setup_logging


@pytest.mark.unit
class TestSetupLogging:
    def test_setup_without_errors(self):
        setup_logging()

    def test_setup_verbose(self):
        setup_logging(verbose=True)


@pytest.mark.unit
class TestGetLogger:
    def test_get_logger_without_name(self):
        setup_logging()
        assert get_logger() is not None

    def test_get_logger_with_name(self):
        setup_logging()
        assert get_logger("test_module") is not None


@pytest.mark.unit
class TestLogOutput:
    def test_log_to_stderr(self, capsys):
        """Log output goes to stderr, not stdout."""
        setup_logging(verbose=True)
        get_logger().info("test message")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "test message" in captured.err

    def test_debug_hidden_unless_verbose(self, capsys):
        setup_logging(verbose=False)
        get_logger().debug("hidden message")

        captured = capsys.readouterr()
        assert "hidden message" not in captured.err


@pytest.mark.unit
def test_json_logs(capsys):
    import json

    setup_logging(json_logs=True)
    get_logger("params").warning("unsupported parameter type", position=2)

    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "unsupported parameter type"
    assert record["level"] == "warning"
    assert record["logger"] == "params"
    assert record["position"] == 2
    setup_logging()
