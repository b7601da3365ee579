"""Rich table formatter for ResultTable output."""

from __future__ import annotations

import shutil
from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from pgbridge.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pgbridge.core.results import ResultTable

_NO_RESULTS = "No results"


def _truncate(value: str, width: int) -> str:
    if len(value) <= width:
        return value
    return value[: width - 1] + "…"


class TableFormatter:
    def __init__(self, width: int = 40) -> None:
        self.width = width

    def format(self, table: ResultTable) -> Iterator[str]:
        if not table.rows:
            yield _NO_RESULTS
            return

        rich_table = Table(show_edge=True, pad_edge=True)
        for name in table.columns:
            rich_table.add_column(name, no_wrap=True)

        for row in table.rows:
            rich_table.add_row(*(_truncate(cell, self.width) for cell in row))

        buf = StringIO()
        term_width = shutil.get_terminal_size((120, 24)).columns
        console = Console(file=buf, force_terminal=True, width=term_width)
        console.print(rich_table)
        yield buf.getvalue().rstrip("\n")


registry.register("table", TableFormatter)
