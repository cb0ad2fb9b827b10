"""CLI entry point for cluster-plugins.

Invoked as::

    cluster-plugins [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m cluster_plugins.cli.main

Commands
--------
- ``list``      Show the plugins registered in the cluster document.
- ``add``       Register a plugin from a JSON descriptor file.
- ``update``    Replace a registered plugin's descriptor.
- ``remove``    Remove a plugin by name.
- ``validate``  Validate a descriptor without touching the store.
- ``version``   Show version information.

The CLI talks to a :class:`FileCoordinationStore` rooted at ``--store-dir``.
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import IO, TYPE_CHECKING

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cluster_plugins import __version__

if TYPE_CHECKING:
    from cluster_plugins.api import ClusterPluginsService

console = Console()

DEFAULT_STORE_DIR = ".cluster-plugins"


@click.group()
@click.version_option(version=__version__, prog_name="cluster-plugins")
@click.option(
    "--store-dir",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=DEFAULT_STORE_DIR,
    envvar="CLUSTER_PLUGINS_STORE_DIR",
    show_default=True,
    help="Directory of the local file-backed coordination store.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML settings file. Defaults to $CLUSTER_PLUGINS_CONFIG if set.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
@click.pass_context
def cli(ctx: click.Context, store_dir: Path, config_path: Path | None, log_level: str) -> None:
    """Manage the cluster-wide plugin registry"""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"store_dir": store_dir, "config_path": config_path}


def _service(ctx: click.Context) -> ClusterPluginsService:
    from cluster_plugins.api import ClusterPluginsService
    from cluster_plugins.config import ClusterPluginsConfig
    from cluster_plugins.store.file import FileCoordinationStore

    config = ClusterPluginsConfig.load(ctx.obj["config_path"])
    return ClusterPluginsService(FileCoordinationStore(ctx.obj["store_dir"]), config=config)


def _read_descriptor(source: IO[str]) -> dict[str, object]:
    try:
        descriptor = json.load(source)
    except json.JSONDecodeError as exc:
        console.print(f"[red]Error:[/red] descriptor is not valid JSON: {exc}")
        sys.exit(1)
    if not isinstance(descriptor, dict):
        console.print("[red]Error:[/red] descriptor must be a JSON object.")
        sys.exit(1)
    return descriptor


def _submit(ctx: click.Context, body: dict[str, object]) -> None:
    from cluster_plugins.errors import ContentionError, OperationCancelledError, StoreError

    service = _service(ctx)
    try:
        response = service.handle_post(body)
    except (ContentionError, StoreError, OperationCancelledError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    if not response.ok:
        console.print("[bold red]Request rejected:[/bold red]")
        for error in response.errors:
            console.print(f"  [red]x[/red] {error}")
        sys.exit(1)

    outcome = response.outcome
    command_name = next(iter(body))
    if outcome is not None and not outcome.written:
        console.print(f"[yellow]{command_name}:[/yellow] no change.")
    else:
        console.print(f"[green]{command_name}:[/green] done.")


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    console.print(f"[bold]cluster-plugins[/bold] v{__version__}")


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


@cli.command(name="list")
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output the registry as JSON.",
)
@click.pass_context
def list_command(ctx: click.Context, json_output: bool) -> None:
    """Show the plugins registered in the cluster document.

    Examples:

    \b
        cluster-plugins list
        cluster-plugins --store-dir /var/lib/cluster list --json-output
    """
    from cluster_plugins.errors import OperationCancelledError, StoreError

    service = _service(ctx)
    try:
        plugins = service.list_plugins()
    except (StoreError, OperationCancelledError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    if json_output:
        console.print_json(json.dumps({"plugin": plugins}))
        return

    if not plugins:
        console.print("[dim]No plugins registered.[/dim]")
        return

    table = Table(title="Cluster Plugins", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Class")
    table.add_column("Version", style="yellow")
    table.add_column("Path prefix")
    for name, descriptor in plugins.items():
        if not isinstance(descriptor, dict):
            table.add_row(name, "[red]<not a JSON object>[/red]", "-", "-")
            continue
        table.add_row(
            name,
            str(descriptor.get("class", "")),
            str(descriptor.get("version") or "-"),
            str(descriptor.get("path-prefix") or "-"),
        )
    console.print(table)


# ---------------------------------------------------------------------------
# add / update / remove
# ---------------------------------------------------------------------------


@cli.command(name="add")
@click.argument("descriptor_file", type=click.File("r", encoding="utf-8"))
@click.pass_context
def add_command(ctx: click.Context, descriptor_file: IO[str]) -> None:
    """Register a plugin from DESCRIPTOR_FILE (JSON; '-' reads stdin).

    Examples:

    \b
        cluster-plugins add my-plugin.json
        echo '{"name": "p1", "class": "my_mod.P1"}' | cluster-plugins add -
    """
    _submit(ctx, {"add": _read_descriptor(descriptor_file)})


@cli.command(name="update")
@click.argument("descriptor_file", type=click.File("r", encoding="utf-8"))
@click.pass_context
def update_command(ctx: click.Context, descriptor_file: IO[str]) -> None:
    """Replace a registered plugin's descriptor with DESCRIPTOR_FILE."""
    _submit(ctx, {"update": _read_descriptor(descriptor_file)})


@cli.command(name="remove")
@click.argument("name")
@click.pass_context
def remove_command(ctx: click.Context, name: str) -> None:
    """Remove the plugin called NAME."""
    _submit(ctx, {"remove": name})


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("descriptor_file", type=click.File("r", encoding="utf-8"))
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output results as JSON.",
)
def validate_command(descriptor_file: IO[str], json_output: bool) -> None:
    """Validate DESCRIPTOR_FILE without reading or writing the store."""
    from cluster_plugins.validation.validator import PluginValidator

    descriptor = _read_descriptor(descriptor_file)
    report = PluginValidator().validate(descriptor)

    if json_output:
        console.print_json(json.dumps({"is_valid": report.is_valid, "errors": report.errors}))
        sys.exit(0 if report.is_valid else 1)

    valid_str = "[green]VALID[/green]" if report.is_valid else "[red]INVALID[/red]"
    console.print(
        Panel(
            f"Descriptor {descriptor.get('name', '?')!s}: {valid_str}",
            title="Plugin Validation",
            expand=False,
        )
    )
    for error in report.errors:
        console.print(f"  [red]x[/red] {error}")

    sys.exit(0 if report.is_valid else 1)


if __name__ == "__main__":
    cli()
