"""Schema and parameter commands: create-table, params."""

from __future__ import annotations

import importlib
from typing import Annotated, Any

import typer

from pgbridge.cli.commands._shared import get_client, get_config, parse_cli_value
from pgbridge.core.exceptions import InputError
from pgbridge.core.params import serialize
from pgbridge.core.schema import TypePolicy, create_table_statement


def load_type(target: str) -> Any:
    """Import ``package.module:Type`` and return the type object."""
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        msg = f"Invalid type reference: {target!r}. Expected 'module:Type'"
        raise InputError(msg)
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise InputError(f"Cannot import module '{module_name}': {e}") from e
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise InputError(f"'{module_name}' has no attribute '{attr_path}'") from e
    return obj


def create_table_command(
    ctx: typer.Context,
    target: Annotated[str, typer.Argument(help="Record type as module:Type")],
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print the DDL without executing it"),
    ] = False,
) -> None:
    """Create the table for a dataclass, pydantic model, NamedTuple or TypedDict."""
    tp = load_type(target)
    if dry_run:
        policy = TypePolicy(get_config(ctx).column_types)
        typer.echo(create_table_statement(tp, policy))
        return
    with get_client(ctx) as client:
        client.create_table_from_type(tp)
    typer.echo(f"Created table for {target}", err=True)


def params_command(
    ctx: typer.Context,
    values: Annotated[list[str], typer.Argument(help="Values to serialize")],
) -> None:
    """Print the escaped VALUES fragment for the given values."""
    strict = get_config(ctx).strict_params
    typer.echo(serialize([parse_cli_value(v) for v in values], strict=strict))
