"""Tests for the CLI entry point and commands."""

import json
from unittest.mock import patch

import pytest

from pgbridge import __version__
from pgbridge.cli.commands._shared import parse_cli_value
from pgbridge.cli.commands.schema import load_type
from pgbridge.cli.main import app, run
from pgbridge.core.exceptions import InputError, PrimaryKeyDuplicate, QueryFailed
from pgbridge.core.exit_codes import ExitCode
from tests.fakes import FakeResult, command_ok, fatal_error
from tests.fixtures.records import Users

pytestmark = pytest.mark.usefixtures("clean_env")


@pytest.mark.unit
class TestCliHelp:
    def test_help_flag(self, runner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "pgbridge" in result.stdout

    def test_version_flag(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"pgbridge {__version__}" in result.stdout

    def test_unknown_command_fails(self, runner):
        result = runner.invoke(app, ["nonexistent-command"])
        assert result.exit_code != 0


@pytest.mark.unit
class TestParamsCommand:
    def test_mixed_values(self, cli_runner):
        result = cli_runner("params", "1", "John", "30")
        assert result.exit_code == 0
        assert result.stdout == "1, 'John', 30\n"

    def test_injection_is_escaped(self, cli_runner):
        result = cli_runner("params", "'; DROP TABLE users; --")
        assert result.stdout == "'''; DROP TABLE users; --'\n"

    def test_float(self, cli_runner):
        assert cli_runner("params", "2.5").stdout == "2.5\n"


@pytest.mark.unit
class TestCreateTableCommand:
    def test_dry_run_prints_ddl(self, cli_runner):
        result = cli_runner("create-table", "tests.fixtures.records:Users", "--dry-run")
        assert result.exit_code == 0
        assert result.stdout == (
            "CREATE TABLE IF NOT EXISTS Users "
            "(id INTEGER, name VARCHAR(255), age INTEGER);\n"
        )

    def test_executes_ddl(self, cli_runner, fake_conn):
        fake_conn.pgconn.exec_.return_value = command_ok()
        result = cli_runner("create-table", "tests.fixtures.records:Users")
        assert result.exit_code == 0
        sent = fake_conn.pgconn.exec_.call_args.args[0]
        assert sent.startswith(b"CREATE TABLE IF NOT EXISTS Users (")

    def test_bad_reference(self, cli_runner):
        result = cli_runner("create-table", "no_colon_here", "--dry-run")
        assert isinstance(result.exception, InputError)


@pytest.mark.unit
class TestDatabaseCommands:
    def test_select_json(self, cli_runner, fake_conn):
        fake_conn.pgconn.exec_.return_value = FakeResult(["id", "name"], [["1", "Alice"]])
        result = cli_runner("--format", "json", "select", "users")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == [{"id": "1", "name": "Alice"}]

    def test_select_csv(self, cli_runner, fake_conn):
        fake_conn.pgconn.exec_.return_value = FakeResult(["id"], [["1"], ["2"]])
        result = cli_runner("--format", "csv", "select", "users")
        assert result.stdout == "id\n1\n2\n"

    def test_exec_inline(self, cli_runner, fake_conn):
        fake_conn.pgconn.exec_.return_value = FakeResult(["n"], [["1"]])
        result = cli_runner("--format", "csv", "exec", "-e", "SELECT 1 AS n")
        assert result.stdout == "n\n1\n"
        assert fake_conn.pgconn.exec_.call_args.args[0] == b"SELECT 1 AS n"

    def test_exec_missing_file(self, cli_runner):
        result = cli_runner("exec", "/nonexistent/file.sql")
        assert result.exit_code == ExitCode.INPUT_ERROR

    def test_insert_parses_values(self, cli_runner, fake_conn):
        fake_conn.pgconn.exec_.return_value = command_ok()
        result = cli_runner("insert", "users", "1", "O'Brien", "2.5")
        assert result.exit_code == 0
        assert fake_conn.pgconn.exec_.call_args.args[0] == (
            b"INSERT INTO users VALUES (1, 'O''Brien', 2.5)"
        )

    def test_insert_duplicate(self, cli_runner, fake_conn):
        fake_conn.pgconn.exec_.return_value = fatal_error("23505")
        result = cli_runner("insert", "users", "1")
        assert isinstance(result.exception, PrimaryKeyDuplicate)

    def test_join(self, cli_runner, fake_conn):
        fake_conn.pgconn.exec_.return_value = FakeResult(["name"], [["Alice"]])
        result = cli_runner(
            "--format", "csv", "join", "users", "orders", "id", "--columns", "name"
        )
        assert result.stdout == "name\nAlice\n"
        assert fake_conn.pgconn.exec_.call_args.args[0] == (
            b"SELECT name FROM users INNER JOIN orders ON users.id = orders.id"
        )

    def test_connection_options_reach_client(self, cli_runner, fake_conn):
        fake_conn.pgconn.exec_.return_value = FakeResult()
        cli_runner("--host", "db", "--port", "6000", "-d", "app", "select", "t")
        fake_conn.connect_mock.assert_called_once_with(
            "dbname=app host=db port=6000", autocommit=True
        )


@pytest.mark.unit
class TestRun:
    def test_bridge_error_maps_to_exit_code(self, capsys):
        with (
            patch("pgbridge.cli.main.app", side_effect=QueryFailed("bad query")),
            pytest.raises(SystemExit) as exc_info,
        ):
            run()
        assert exc_info.value.code == ExitCode.QUERY_ERROR
        assert "Error: bad query" in capsys.readouterr().err

    def test_unexpected_error_exits_1(self, capsys):
        with (
            patch("pgbridge.cli.main.app", side_effect=RuntimeError("oops")),
            pytest.raises(SystemExit) as exc_info,
        ):
            run()
        assert exc_info.value.code == 1


@pytest.mark.unit
@pytest.mark.parametrize(
    ("text", "expected"),
    [("1", 1), ("-3", -3), ("2.5", 2.5), ("abc", "abc"), ("nan", "nan"), ("", "")],
)
def test_parse_cli_value(text, expected):
    assert parse_cli_value(text) == expected


@pytest.mark.unit
def test_load_type():
    assert load_type("tests.fixtures.records:Users") is Users


@pytest.mark.unit
@pytest.mark.parametrize(
    "target",
    ["tests.fixtures.records", "no_such_module_xyz:Thing", "tests.fixtures.records:Nope"],
)
def test_load_type_errors(target):
    with pytest.raises(InputError):
        load_type(target)
