"""Table-level commands: select, insert, join."""

from __future__ import annotations

from typing import Annotated

import typer

from pgbridge.cli.commands._shared import get_client, output_result, parse_cli_value


def select_command(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table to read")],
) -> None:
    """Print every row of a table."""
    with get_client(ctx) as client:
        result = client.select_all(table)
    output_result(ctx, result)


def insert_command(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table to insert into")],
    values: Annotated[
        list[str],
        typer.Argument(help="Column values, in table column order"),
    ],
) -> None:
    """Insert one row. Numbers are sent as numbers, everything else as text."""
    with get_client(ctx) as client:
        client.insert(table, [parse_cli_value(v) for v in values])
    typer.echo(f"Inserted 1 row into {table}", err=True)


def join_command(
    ctx: typer.Context,
    main_table: Annotated[str, typer.Argument(help="Left-hand table")],
    join_table: Annotated[str, typer.Argument(help="Right-hand table")],
    join_column: Annotated[str, typer.Argument(help="Column present in both tables")],
    columns: Annotated[
        str | None,
        typer.Option("--columns", "-c", help="Select list, e.g. 'a, b' (default *)"),
    ] = None,
) -> None:
    """INNER JOIN two tables on a shared column."""
    with get_client(ctx) as client:
        result = client.inner_join(main_table, join_table, join_column, columns)
    output_result(ctx, result)
