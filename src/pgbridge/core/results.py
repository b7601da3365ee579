"""Materialization of raw libpq results into owned ResultTables.

A raw result (psycopg.pq.PGresult or anything exposing the same accessors)
is copied into plain Python strings and cleared in the same call, so no
table ever refers to memory held by the client library.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pgbridge.core.exceptions import ResultReleasedError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


@runtime_checkable
class RawResult(Protocol):
    """The subset of libpq's result accessors used for materialization."""

    @property
    def nfields(self) -> int: ...

    @property
    def ntuples(self) -> int: ...

    def fname(self, column_number: int) -> bytes | None: ...

    def get_value(self, row_number: int, column_number: int) -> bytes | None: ...

    def clear(self) -> None: ...


class ResultTable:
    """Column names plus rows of text cells, owned by this object.

    Call release() exactly once when done, or use the table as a context
    manager. Any access after release raises ResultReleasedError.
    """

    def __init__(
        self,
        columns: Iterable[str] = (),
        rows: Iterable[Iterable[str]] = (),
    ) -> None:
        self._columns: list[str] = []
        self._rows: list[list[str]] = []
        self._released = False
        for name in columns:
            self.add_column(name)
        for row in rows:
            self.add_row(row)

    def _check(self) -> None:
        if self._released:
            raise ResultReleasedError("ResultTable has already been released")

    @property
    def released(self) -> bool:
        return self._released

    @property
    def columns(self) -> list[str]:
        """A copy of the column names."""
        self._check()
        return list(self._columns)

    @property
    def rows(self) -> list[list[str]]:
        """A copy of the rows; mutating it leaves the table unchanged."""
        self._check()
        return [list(row) for row in self._rows]

    @property
    def column_count(self) -> int:
        self._check()
        return len(self._columns)

    @property
    def row_count(self) -> int:
        self._check()
        return len(self._rows)

    def add_column(self, name: str) -> None:
        self._check()
        if self._rows:
            raise ValueError("Cannot add a column once rows have been added")
        self._columns.append(name)

    def add_row(self, cells: Iterable[str]) -> None:
        self._check()
        row = list(cells)
        if len(row) != len(self._columns):
            msg = f"Row has {len(row)} cells, expected {len(self._columns)}"
            raise ValueError(msg)
        self._rows.append(row)

    def release(self) -> None:
        """Drop every cell, every column name, then the containers."""
        self._check()
        for row in self._rows:
            row.clear()
        self._rows.clear()
        self._columns.clear()
        self._released = True

    def __enter__(self) -> ResultTable:
        self._check()
        return self

    def __exit__(self, *exc: object) -> None:
        if not self._released:
            self.release()

    def __iter__(self) -> Iterator[list[str]]:
        return iter(self.rows)

    def __len__(self) -> int:
        return self.row_count

    def __repr__(self) -> str:
        if self._released:
            return "ResultTable(<released>)"
        return f"ResultTable(columns={self._columns!r}, rows={len(self._rows)})"


def _decode(value: bytes | str | None, encoding: str) -> str:
    if value is None:
        # libpq reports NULL cells as empty strings
        return ""
    if isinstance(value, str):
        return value
    return bytes(value).decode(encoding)


def materialize(raw: RawResult, encoding: str = "utf-8") -> ResultTable:
    """Copy a raw result into a new ResultTable and clear the raw result.

    The raw result is cleared whether or not materialization succeeds; a
    partially built table is released before the error propagates.
    """
    table = ResultTable()
    try:
        n_fields = raw.nfields
        n_rows = raw.ntuples
        for i in range(n_fields):
            table.add_column(_decode(raw.fname(i), encoding))
        for r in range(n_rows):
            table.add_row(_decode(raw.get_value(r, i), encoding) for i in range(n_fields))
    except BaseException:
        table.release()
        raise
    finally:
        raw.clear()
    return table
