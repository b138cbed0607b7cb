"""CLI entry point for chaosctl's debugging and completion commands."""

from __future__ import annotations

import json
import sys

import click
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from chaosctl.config import CtrlConfig
from chaosctl.console import console, err_console, setup_logging, truncate
from chaosctl.ctrl.errors import CtrlError

load_dotenv()


@click.group()
@click.version_option(version="0.1.0", prog_name="chaosctl")
@click.option("--url", default=None, help="Query service URL (env: CHAOSCTL_URL)")
@click.option("--timeout", type=float, default=None, help="Request timeout in seconds (env: CHAOSCTL_TIMEOUT)")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log queries sent to the service")
@click.pass_context
def cli(ctx: click.Context, url: str | None, timeout: float | None, verbose: bool):
    """Inspect a chaos control plane through its query service."""
    setup_logging(verbose)
    try:
        ctx.obj = CtrlConfig.from_env(url=url, timeout=timeout)
    except ValidationError as e:
        err_console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        sys.exit(1)


def _connect(config: CtrlConfig):
    """Create a client, exiting with an error message if introspection fails."""
    from chaosctl.ctrl.client import CtrlClient

    try:
        return CtrlClient(config)
    except CtrlError as e:
        err_console.print(f"[red]Error connecting to {config.url}: {escape(str(e))}[/red]")
        sys.exit(1)


def _split_path(path: str) -> list[str]:
    return [seg for seg in path.split("/") if seg]


@cli.command()
@click.argument("namespace")
@click.option("--leaves", "complete_leaves", is_flag=True, default=False, help="Also offer comma-joined leaf combinations")
@click.pass_obj
def complete(config: CtrlConfig, namespace: str, complete_leaves: bool):
    """Print every query path available under a namespace, one per line.

    \b
    Examples:
      chaosctl complete default
      chaosctl complete chaos-testing --leaves
    """
    client = _connect(config)
    try:
        completions = client.complete_query(namespace, complete_leaves)
    except CtrlError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    for completion in completions:
        click.echo(completion)


@cli.command()
@click.argument("path")
@click.argument("argument")
@click.option("--prefix", default="", help="Only values starting with this prefix")
@click.pass_obj
def args(config: CtrlConfig, path: str, argument: str, prefix: str):
    """List live values of ARGUMENT for the resource at PATH.

    \b
    Examples:
      chaosctl args namespace/default/pod name
      chaosctl args namespace/default/stresschaos name --prefix burn-
    """
    client = _connect(config)
    try:
        values = client.list_arguments(_split_path(path), argument, prefix)
    except CtrlError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    for value in values:
        click.echo(value)


@cli.command()
@click.argument("path")
@click.pass_obj
def query(config: CtrlConfig, path: str):
    """Run the field selection described by PATH and print the result.

    \b
    Example:
      chaosctl query namespace/default/pods/name
    """
    client = _connect(config)
    try:
        data = client.query_path(_split_path(path))
    except CtrlError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    console.print_json(json.dumps(data, default=str))


@cli.command()
@click.argument("name", required=False)
@click.pass_obj
def types(config: CtrlConfig, name: str | None):
    """Show the schema's object types, or the fields of type NAME."""
    client = _connect(config)

    if name is None:
        table = Table(title="Types")
        table.add_column("Name", style="cyan")
        table.add_column("Kind")
        table.add_column("Fields", justify="right")
        for schema_type in client.schema.types:
            if schema_type.name.startswith("__"):
                continue
            table.add_row(schema_type.name, schema_type.kind.value, str(len(schema_type.fields)))
        console.print(table)
        return

    try:
        schema_type = client.schema.get_type(name)
    except CtrlError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    table = Table(title=f"{schema_type.name} ({schema_type.kind.value})")
    table.add_column("Field", style="cyan")
    table.add_column("Type")
    table.add_column("Arguments")
    for field_def in schema_type.fields:
        arguments = ", ".join(f"{a.name}: {a.type}" for a in field_def.args)
        table.add_row(field_def.name, escape(str(field_def.type)), escape(truncate(arguments, 60)))
    console.print(table)


if __name__ == "__main__":
    cli()
