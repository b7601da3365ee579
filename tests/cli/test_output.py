"""Tests for output format selection and TTY detection."""

import pytest

from pgbridge.cli.output import OutputFormat, get_formatter, resolve_format, write_output
from pgbridge.core.results import ResultTable
from pgbridge.formatters.csv import CSVFormatter
from pgbridge.formatters.json import JSONFormatter
from pgbridge.formatters.table import TableFormatter


@pytest.mark.unit
def test_output_format_enum_values():
    assert OutputFormat.TABLE.value == "table"
    assert OutputFormat.JSON.value == "json"
    assert OutputFormat.CSV.value == "csv"


@pytest.mark.unit
def test_resolve_format_explicit():
    assert resolve_format("json") == "json"
    assert resolve_format("csv") == "csv"


@pytest.mark.unit
def test_resolve_format_tty_defaults_to_table(monkeypatch):
    monkeypatch.setattr("pgbridge.cli.output.detect_tty", lambda: True)
    assert resolve_format(None) == "table"


@pytest.mark.unit
def test_resolve_format_non_tty_defaults_to_csv(monkeypatch):
    monkeypatch.setattr("pgbridge.cli.output.detect_tty", lambda: False)
    assert resolve_format(None) == "csv"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("name", "cls"),
    [("table", TableFormatter), ("json", JSONFormatter), ("csv", CSVFormatter)],
)
def test_get_formatter(name, cls):
    assert isinstance(get_formatter(name), cls)


@pytest.mark.unit
def test_get_formatter_passes_options():
    assert get_formatter("json", compact=True).compact is True
    assert get_formatter("csv", no_header=True).no_header is True
    assert get_formatter("table", width=12).width == 12


@pytest.mark.unit
def test_write_output(capsys):
    write_output(CSVFormatter(), ResultTable(["id"], [["1"]]))
    assert capsys.readouterr().out == "id\n1\n"
