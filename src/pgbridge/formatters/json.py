"""JSON formatter for ResultTable output."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from pgbridge.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pgbridge.core.results import ResultTable


class JSONFormatter:
    def __init__(self, compact: bool = False) -> None:
        self.compact = compact

    def format(self, table: ResultTable) -> Iterator[str]:
        rows_as_dicts = [
            dict(zip(table.columns, row, strict=True)) for row in table.rows
        ]

        if self.compact:
            yield json.dumps(rows_as_dicts)
        else:
            yield json.dumps(rows_as_dicts, indent=2)


registry.register("json", JSONFormatter)
