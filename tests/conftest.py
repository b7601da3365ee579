"""Shared test fixtures for pgbridge."""

from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from pgbridge.cli.main import app

_ENV_VARS = (
    "PGHOST",
    "PGPORT",
    "PGDATABASE",
    "PGUSER",
    "PGPASSWORD",
    "PGBRIDGE_PROFILE",
    "PGBRIDGE_SENTRY_DSN",
)


@pytest.fixture
def runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_runner(runner, temp_dir):
    """Invoke the CLI app with an empty config file."""

    def invoke(*args: str, **kwargs):
        config_args = ["--config", str(temp_dir / "missing.toml")]
        return runner.invoke(app, [*config_args, *args], **kwargs)

    return invoke


@pytest.fixture
def temp_dir():
    """Temporary directory for test files."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove connection-related environment variables."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def fake_conn():
    """Patch psycopg.connect with a mock connection.

    Set ``fake_conn.pgconn.exec_.return_value`` (or side_effect) to the
    raw results a test needs.
    """
    conn = MagicMock()
    conn.closed = False
    conn.info.encoding = "utf-8"
    conn.pgconn.error_message = b"ERROR:  something went wrong\n"
    with patch("psycopg.connect", return_value=conn) as connect:
        conn.connect_mock = connect
        yield conn
