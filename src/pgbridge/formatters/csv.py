"""CSV formatter for ResultTable output (RFC 4180 compliant)."""

from __future__ import annotations

import csv
from io import StringIO
from typing import TYPE_CHECKING

from pgbridge.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pgbridge.core.results import ResultTable


def _write_row(values: list[str]) -> str:
    buf = StringIO()
    writer = csv.writer(buf)
    writer.writerow(values)
    return buf.getvalue().rstrip("\r\n")


class CSVFormatter:
    def __init__(self, no_header: bool = False) -> None:
        self.no_header = no_header

    def format(self, table: ResultTable) -> Iterator[str]:
        if not self.no_header:
            yield _write_row(table.columns)

        for row in table.rows:
            yield _write_row(row)


registry.register("csv", CSVFormatter)
