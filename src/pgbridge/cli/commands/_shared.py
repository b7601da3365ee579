"""Shared CLI plumbing for command modules.

Client creation, format-option handling, and output helpers.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from pgbridge.cli.output import get_formatter, write_output
from pgbridge.core.client import PgClient
from pgbridge.core.config import load_config, resolve_config
from pgbridge.core.monitoring import setup_sentry

if TYPE_CHECKING:
    import typer

    from pgbridge.core.config import ResolvedConfig
    from pgbridge.core.results import ResultTable


def get_config(ctx: typer.Context) -> ResolvedConfig:
    obj = ctx.ensure_object(dict)
    config = load_config(obj.get("config_file"))

    cli_overrides: dict[str, Any] = {}
    for key in ("host", "port", "database", "user", "password", "strict"):
        val = obj.get(key)
        if val is not None:
            cli_overrides[key] = val

    resolved = resolve_config(
        config,
        profile_name=obj.get("profile"),
        dsn=obj.get("dsn"),
        **cli_overrides,
    )
    if resolved.sentry_dsn:
        setup_sentry(resolved.sentry_dsn)
    return resolved


def get_client(ctx: typer.Context) -> PgClient:
    return PgClient.from_config(get_config(ctx))


def format_options(ctx: typer.Context) -> dict[str, Any]:
    obj = ctx.ensure_object(dict)
    return {
        "format_flag": obj.get("format"),
        "compact": obj.get("compact", False),
        "width": obj.get("width", 40),
        "no_header": obj.get("no_header", False),
    }


def output_result(ctx: typer.Context, table: ResultTable) -> None:
    """Print a table, then release it."""
    with table:
        formatter = get_formatter(**format_options(ctx))
        write_output(formatter, table)


def parse_cli_value(text: str) -> int | float | str:
    """Read a command-line value as int, then finite float, else text."""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        return text
    return value if math.isfinite(value) else text
