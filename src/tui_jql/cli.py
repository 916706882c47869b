"""CLI entry point using Click."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import click

from tui_jql.errors import JQLError


class _DefaultGroup(click.Group):
    """Insert 'run' when the first arg is not a registered subcommand."""

    def resolve_command(self, ctx, args):
        cmd_name = args[0] if args else None
        if cmd_name and cmd_name in self.commands:
            return super().resolve_command(ctx, args)
        return super().resolve_command(ctx, ["run"] + list(args))


@click.group(cls=_DefaultGroup)
@click.option("--no-color", is_flag=True, help="Disable color output")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write debug logs to this file",
)
@click.version_option(package_name="tui-jql")
@click.pass_context
def main(ctx, no_color: bool, log_file: str | None) -> None:
    """tui-jql - edit JSON and YAML tables in the terminal."""
    ctx.ensure_object(dict)
    ctx.obj["no_color"] = no_color
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


@main.command()
@click.argument("path", type=click.Path())
@click.argument("table", required=False)
@click.pass_context
def run(ctx, path: str, table: str | None) -> None:
    """Open the dataset at PATH, showing TABLE (the first table by default)."""
    from tui_jql.app import JQLApp
    from tui_jql.config import load_config
    from tui_jql.controller import MainController

    dataset = Path(path)
    try:
        controller = MainController.open(dataset, table, load_config(dataset))
    except (JQLError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    JQLApp(controller, no_color=ctx.obj["no_color"]).run()


@main.command("tables")
@click.argument("path", type=click.Path())
def tables_cmd(path: str) -> None:
    """List the tables stored in PATH with their row counts."""
    from tui_jql.parser import load_database

    try:
        database = load_database(Path(path))
    except (JQLError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    for name, table in database.tables.items():
        click.echo(f"{name}\t{len(table.entries)}")


def _sample_database():
    from tui_jql.models import (
        ColumnSchema,
        Database,
        Date,
        EnumEntry,
        Integer,
        String,
        Table,
    )

    statuses = ("new", "active", "done")
    people = Table(
        name="people",
        columns=[
            ColumnSchema("name", "string", primary=True),
            ColumnSchema("age", "int"),
            ColumnSchema("status", "enum", values=statuses),
            ColumnSchema("joined", "date"),
        ],
    )
    today = date.today()
    for name, age, status in (("Al", 30, "new"), ("Bo", 25, "active")):
        people.entries[name] = [
            String(name),
            Integer(age),
            EnumEntry(status, statuses),
            Date(today),
        ]
    return Database(tables={"people": people})


@main.command("init")
@click.argument("path", type=click.Path())
def init_cmd(path: str) -> None:
    """Create a sample dataset at PATH (.json, .yaml or .yml) and its config."""
    from tui_jql.config import save_config
    from tui_jql.models import EditorConfig
    from tui_jql.storage import get_store
    from tui_jql.writer import write_database

    dataset = Path(path)
    if dataset.exists():
        click.echo(f"Already exists: {dataset}", err=True)
        raise SystemExit(1)
    try:
        get_store(dataset)
        write_database(_sample_database(), dataset)
        config_path = save_config(dataset, EditorConfig())
    except (JQLError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Created {dataset}")
    click.echo(f"Created {config_path}")
    click.echo(f"\nRun 'tui-jql {dataset}' to open it.")
