"""PostgreSQL command façade for pgbridge.

Wraps a psycopg v3 connection and talks to it through the libpq-level
``psycopg.pq`` interface, so results arrive as raw text cells that the
Result Materializer copies into ResultTables. Failures are mapped onto the
PgBridgeError hierarchy.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import psycopg
import sentry_sdk
import structlog
from psycopg import pq

from pgbridge.core.exceptions import (
    ConnectionFailed,
    InsertionFailed,
    PgBridgeError,
    PrimaryKeyDuplicate,
    QueryFailed,
    SelectJoinFailed,
)
from pgbridge.core.params import serialize
from pgbridge.core.results import ResultTable, materialize
from pgbridge.core.schema import TypePolicy, describe_type, generate_create_table

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pgbridge.core.config import ConnectionParams, ResolvedConfig
    from pgbridge.core.schema import FieldDescriptor

# SQLSTATE class 23, unique_violation
UNIQUE_VIOLATION = "23505"

_OK_STATUSES = frozenset({pq.ExecStatus.COMMAND_OK, pq.ExecStatus.TUPLES_OK})


class PgClient:
    """Synchronous command façade over one psycopg connection.

    Not thread-safe: use one client per worker.
    """

    def __init__(
        self,
        params: ConnectionParams,
        *,
        strict_params: bool = False,
        policy: TypePolicy | None = None,
    ) -> None:
        self.params = params
        self.strict_params = strict_params
        self.policy = policy or TypePolicy()
        self._connection: psycopg.Connection[Any] | None = None

    @classmethod
    def from_config(cls, config: ResolvedConfig) -> PgClient:
        return cls(
            config.connection_params(),
            strict_params=config.strict_params,
            policy=TypePolicy(config.column_types),
        )

    def __enter__(self) -> PgClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _connect(self) -> psycopg.Connection[Any]:
        if self._connection is not None and not self._connection.closed:
            return self._connection

        log = structlog.get_logger()
        try:
            self._connection = psycopg.connect(self.params.conninfo, autocommit=True)
        except psycopg.OperationalError as e:
            msg = (
                f"Connection failed to {self.params.host}:{self.params.port} "
                f"database '{self.params.database}': {e}"
            )
            log.error("connection failed", host=self.params.host, error=str(e))
            raise ConnectionFailed(msg) from e

        log.debug("connection initialized", host=self.params.host)
        return self._connection

    @property
    def _encoding(self) -> str:
        if self._connection is None:
            return "utf-8"
        return self._connection.info.encoding

    def _last_error(self) -> str:
        if self._connection is None:
            return ""
        raw = self._connection.pgconn.error_message or b""
        return raw.decode(self._encoding, errors="replace").strip()

    def _run(self, command: str) -> pq.abc.PGresult:
        """Send one command and return the raw result. Caller clears it."""
        log = structlog.get_logger()
        conn = self._connect()

        sql_normalized = " ".join(command.split())
        log.debug("executing command", sql=sql_normalized)
        with sentry_sdk.start_span(
            op="db.query", name=sql_normalized[:100]
        ) as span:
            start_time = time.monotonic()
            try:
                result = conn.pgconn.exec_(command.encode(self._encoding))
            except psycopg.OperationalError as e:
                span.set_status("unavailable")
                log.error("database error", sql=sql_normalized, error=str(e))
                raise QueryFailed(f"Query execution failed: {e}") from e

            duration_ms = (time.monotonic() - start_time) * 1000
            status = pq.ExecStatus(result.status)
            span.set_data("duration_ms", duration_ms)
            span.set_data("exec_status", status.name)
            if status in _OK_STATUSES:
                span.set_data("row_count", result.ntuples)
                span.set_status("ok")
            else:
                span.set_status("internal_error")
            log.debug(
                "command complete",
                duration_ms=f"{duration_ms:.1f}",
                status=status.name,
            )
        return result

    def _failure(
        self,
        exc_class: type[PgBridgeError],
        prefix: str,
        result: pq.abc.PGresult,
    ) -> PgBridgeError:
        log = structlog.get_logger()
        message = self._last_error()
        log.error(prefix.lower(), error=message, sqlstate=_sqlstate(result))
        return exc_class(f"{prefix}: {message}" if message else prefix)

    def _tuples(
        self,
        result: pq.abc.PGresult,
        exc_class: type[PgBridgeError],
        prefix: str,
    ) -> ResultTable:
        if result.status != pq.ExecStatus.TUPLES_OK:
            try:
                raise self._failure(exc_class, prefix, result)
            finally:
                result.clear()
        return materialize(result, self._encoding)

    def exec_command(self, command: str) -> None:
        """Run any command, discarding tuples it may return."""
        result = self._run(command)
        try:
            if result.status not in _OK_STATUSES:
                raise self._failure(QueryFailed, "Query execution failed", result)
        finally:
            result.clear()

    def execute(self, command: str) -> ResultTable:
        """Run any command and materialize its tuples (empty for DDL/DML)."""
        result = self._run(command)
        if result.status == pq.ExecStatus.COMMAND_OK:
            result.clear()
            return ResultTable()
        return self._tuples(result, QueryFailed, "Query execution failed")

    def select_all(self, table: str) -> ResultTable:
        result = self._run(f"SELECT * FROM {table}")
        return self._tuples(result, QueryFailed, "Query execution failed")

    def insert_row(self, table: str, values_fragment: str) -> None:
        """Insert one row from an already serialized VALUES fragment.

        A unique_violation surfaces as PrimaryKeyDuplicate, any other
        failure as InsertionFailed.
        """
        log = structlog.get_logger()
        result = self._run(f"INSERT INTO {table} VALUES ({values_fragment})")
        try:
            if result.status == pq.ExecStatus.COMMAND_OK:
                log.debug("insertion executed", table=table)
                return
            if _sqlstate(result) == UNIQUE_VIOLATION:
                log.warning("duplicate key", table=table)
                raise PrimaryKeyDuplicate(table)
            raise self._failure(InsertionFailed, "Insertion failed", result)
        finally:
            result.clear()

    def insert(self, table: str, values: Iterable[Any]) -> None:
        """Serialize values and insert them as one row."""
        self.insert_row(table, serialize(values, strict=self.strict_params))

    def inner_join(
        self,
        main_table: str,
        join_table: str,
        join_column: str,
        columns: str | None = None,
    ) -> ResultTable:
        """SELECT from main_table INNER JOIN join_table on a shared column.

        columns is a ready-made select list such as ``"a, b"``; None selects *.
        """
        sql = (
            f"SELECT {columns or '*'} FROM {main_table} "
            f"INNER JOIN {join_table} "
            f"ON {main_table}.{join_column} = {join_table}.{join_column}"
        )
        result = self._run(sql)
        return self._tuples(result, SelectJoinFailed, "Select join failed")

    def create_table_for(
        self, type_name: str, fields: Iterable[FieldDescriptor]
    ) -> None:
        log = structlog.get_logger()
        ddl = generate_create_table(type_name, fields, self.policy)
        log.info("creating table", sql=ddl)
        self.exec_command(ddl)

    def create_table_from_type(self, tp: Any) -> None:
        """Create the table for a dataclass, pydantic model or similar."""
        type_name, fields = describe_type(tp)
        self.create_table_for(type_name, fields)

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None


def _sqlstate(result: pq.abc.PGresult) -> str | None:
    code = result.error_field(pq.DiagnosticField.SQLSTATE)
    return code.decode("ascii") if code else None
