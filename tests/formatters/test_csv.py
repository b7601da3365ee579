"""Tests for CSVFormatter."""

import csv
from io import StringIO

import pytest

from pgbridge.core.results import ResultTable
from pgbridge.formatters.base import Formatter
from pgbridge.formatters.csv import CSVFormatter


def _make_table(rows=None, columns=("id", "name")):
    if rows is None:
        rows = [["1", "alice"], ["2", "bob"]]
    return ResultTable(columns, rows)


@pytest.mark.unit
def test_csv_formatter_implements_protocol():
    assert isinstance(CSVFormatter(), Formatter)


@pytest.mark.unit
def test_csv_formatter_outputs_header_and_data():
    lines = list(CSVFormatter().format(_make_table()))
    assert lines == ["id,name", "1,alice", "2,bob"]


@pytest.mark.unit
def test_csv_formatter_no_header():
    lines = list(CSVFormatter(no_header=True).format(_make_table()))
    assert lines == ["1,alice", "2,bob"]


@pytest.mark.unit
def test_csv_formatter_escapes_quotes():
    lines = list(CSVFormatter().format(_make_table([["1", 'he said "hi"']])))
    assert lines[1] == '1,"he said ""hi"""'


@pytest.mark.unit
def test_csv_formatter_empty_result_header_only():
    assert list(CSVFormatter().format(_make_table([]))) == ["id,name"]


@pytest.mark.unit
def test_csv_formatter_empty_cell():
    lines = list(CSVFormatter().format(_make_table([["1", ""]])))
    assert lines[1] == "1,"


@pytest.mark.unit
def test_csv_formatter_rfc4180_valid():
    table = _make_table([["1", "alice"], ["2", "bob, jr"], ["3", 'say "hi"']])
    output = "\n".join(CSVFormatter().format(table))
    rows = list(csv.reader(StringIO(output)))
    assert rows == [
        ["id", "name"],
        ["1", "alice"],
        ["2", "bob, jr"],
        ["3", 'say "hi"'],
    ]
