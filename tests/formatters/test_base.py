"""Tests for Formatter protocol and registry."""

import pytest

from pgbridge.core.results import ResultTable
from pgbridge.formatters.base import Formatter, FormatterRegistry


class _StubFormatter:
    def format(self, table):
        for row in table.rows:
            yield ",".join(row)


class _BadFormatter:
    """Missing format method."""


@pytest.mark.unit
def test_stub_formatter_implements_protocol():
    assert isinstance(_StubFormatter(), Formatter)


@pytest.mark.unit
def test_bad_formatter_does_not_implement_protocol():
    assert not isinstance(_BadFormatter(), Formatter)


@pytest.mark.unit
def test_formatter_yields_strings():
    table = ResultTable(["id"], [["1"], ["2"]])
    assert list(_StubFormatter().format(table)) == ["1", "2"]


@pytest.mark.unit
def test_registry_register_and_get():
    reg = FormatterRegistry()
    reg.register("stub", _StubFormatter)
    assert isinstance(reg.get("stub"), _StubFormatter)


@pytest.mark.unit
def test_registry_get_unknown_lists_available():
    reg = FormatterRegistry()
    reg.register("csv", _StubFormatter)
    reg.register("json", _StubFormatter)
    with pytest.raises(KeyError, match="Unknown format 'nope'. Available: csv, json"):
        reg.get("nope")


@pytest.mark.unit
def test_registry_available_returns_sorted_names():
    reg = FormatterRegistry()
    reg.register("json", _StubFormatter)
    reg.register("csv", _StubFormatter)
    reg.register("table", _StubFormatter)
    assert reg.available == ["csv", "json", "table"]


@pytest.mark.unit
def test_registry_passes_kwargs_to_constructor():
    class _WidthFormatter:
        def __init__(self, width=40):
            self.width = width

        def format(self, table):
            yield f"width={self.width}"

    reg = FormatterRegistry()
    reg.register("width", _WidthFormatter)
    fmt = reg.get("width", width=80)
    assert list(fmt.format(ResultTable())) == ["width=80"]
