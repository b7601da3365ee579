"""pgbridge main entry point and command registration."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003
from typing import Annotated

import sentry_sdk
import typer

from pgbridge.__about__ import __version__
from pgbridge.cli.commands.query import exec_command
from pgbridge.cli.commands.schema import create_table_command, params_command
from pgbridge.cli.commands.table import insert_command, join_command, select_command
from pgbridge.cli.output import OutputFormat  # noqa: TC001
from pgbridge.core.exceptions import PgBridgeError
from pgbridge.core.logging import setup_logging
from pgbridge.core.monitoring import setup_sentry

app = typer.Typer(
    help="pgbridge - build, run and materialize PostgreSQL commands",
    no_args_is_help=True,
)

app.command("exec")(exec_command)
app.command("select")(select_command)
app.command("insert")(insert_command)
app.command("join")(join_command)
app.command("create-table")(create_table_command)
app.command("params")(params_command)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"pgbridge {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable verbose logging"),
    ] = False,
    log_json: Annotated[
        bool,
        typer.Option("--log-json", help="Write logs to stderr as JSON lines"),
    ] = False,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-P", help="Named connection profile"),
    ] = None,
    host: Annotated[
        str | None,
        typer.Option("--host", "-H", help="PostgreSQL host"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="PostgreSQL port"),
    ] = None,
    database: Annotated[
        str | None,
        typer.Option("--database", "-d", help="Database name"),
    ] = None,
    user: Annotated[
        str | None,
        typer.Option("--user", "-U", help="User name"),
    ] = None,
    password: Annotated[
        str | None,
        typer.Option("--password", "-W", help="Password"),
    ] = None,
    dsn: Annotated[
        str | None,
        typer.Option("--dsn", help="Connection DSN"),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config file"),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Fail on values that cannot be serialized"),
    ] = False,
    format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format: table|json|csv"),
    ] = None,
    compact: Annotated[
        bool,
        typer.Option("--compact", help="Compact JSON output (no indentation)"),
    ] = False,
    width: Annotated[
        int,
        typer.Option("--width", help="Column width for table format"),
    ] = 40,
    no_header: Annotated[
        bool,
        typer.Option("--no-header", help="Suppress header row in CSV output"),
    ] = False,
) -> None:
    """pgbridge - build, run and materialize PostgreSQL commands."""
    setup_logging(verbose, json_logs=log_json)
    setup_sentry()

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["profile"] = profile
    ctx.obj["host"] = host
    ctx.obj["port"] = port
    ctx.obj["database"] = database
    ctx.obj["user"] = user
    ctx.obj["password"] = password
    ctx.obj["dsn"] = dsn
    ctx.obj["config_file"] = config_file
    ctx.obj["strict"] = strict or None

    ctx.obj["format"] = format.value if format else None
    ctx.obj["compact"] = compact
    ctx.obj["width"] = width
    ctx.obj["no_header"] = no_header


def run() -> None:
    """Entry point with global error handling."""
    try:
        app()
    except PgBridgeError as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e.message}", err=True)
        raise SystemExit(e.exit_code) from None
    except SystemExit:
        raise
    except KeyboardInterrupt:
        raise SystemExit(130) from None
    except Exception as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None
