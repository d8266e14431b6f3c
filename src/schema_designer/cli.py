#!/usr/bin/env python3
"""
Command-line interface for Schema Designer.

Edits a schema stored in a KuzuDB database: tables, fields and the
foreign-key relations inferred from field names.
"""

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from .console_styles import (
    create_data_table,
    create_header_panel,
    create_summary_table,
    format_count,
    format_options,
    format_position,
    get_status_icon,
)
from .exceptions import SchemaDesignerError
from .graph import FieldType, SchemaGraph
from .manager import SchemaGraphManager

console = Console()

DEFAULT_DB_PATH = Path(".schema-designer") / "schema.db"


@contextmanager
def open_manager(ctx: click.Context) -> Iterator[SchemaGraphManager]:
    """Open the schema database for one command and report designer errors."""
    db_path: Path = ctx.obj["db_path"]
    try:
        graph = SchemaGraph(db_path=db_path)
    except Exception as e:
        console.print(f"[red]Error:[/red] Failed to open schema database: {e}")
        console.print(f"[dim]Location: {db_path}[/dim]")
        sys.exit(1)

    try:
        yield SchemaGraphManager(graph)
    except SchemaDesignerError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    finally:
        graph.close()


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--db-path",
    type=click.Path(),
    default=None,
    help=f"Path to KuzuDB database (default: {DEFAULT_DB_PATH})",
)
@click.option("-v", "--verbose", is_flag=True, help="Log inference decisions")
@click.pass_context
def cli(ctx: click.Context, db_path: Optional[str], verbose: bool) -> None:
    """Schema Designer - tables, fields and inferred foreign keys.

    A field named <table>_id is linked to the table of that name: user_id
    refers to User. Relations follow renames, additions and removals.

    Examples:
        schema-designer add-table --name User
        schema-designer add-field tbl_1a2b3c4d5e6f --name user_id
        schema-designer show
        schema-designer check
    """
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path) if db_path else Path.cwd() / DEFAULT_DB_PATH

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


@cli.command("add-table")
@click.option("--x", "x", type=float, default=0.0, help="Pointer x position")
@click.option("--y", "y", type=float, default=0.0, help="Pointer y position")
@click.option("--name", default=None, help="Rename the new table right away")
@click.pass_context
def add_table(ctx: click.Context, x: float, y: float, name: Optional[str]) -> None:
    """Add a table near the given pointer position.

    The table gets one default field. Its position is shifted when another
    table already sits exactly there.
    """
    with open_manager(ctx) as manager:
        manager.set_pointer(x, y)
        table = manager.create_table()
        if name:
            table = manager.rename_table(table.id, name)
        console.print(
            f"{get_status_icon(True)} Created table [cyan]{table.name}[/cyan] "
            f"({table.id}) at {format_position(table.position)}"
        )


@cli.command("remove-table")
@click.argument("table_id")
@click.pass_context
def remove_table(ctx: click.Context, table_id: str) -> None:
    """Remove a table with its fields and relations."""
    with open_manager(ctx) as manager:
        manager.remove_table(table_id)
        console.print(f"{get_status_icon(True)} Removed table {table_id}")


@cli.command("rename-table")
@click.argument("table_id")
@click.argument("name")
@click.pass_context
def rename_table(ctx: click.Context, table_id: str, name: str) -> None:
    """Rename a table and re-link fields named after it."""
    with open_manager(ctx) as manager:
        table = manager.rename_table(table_id, name)
        relations = manager.relations_for_table(table.id)
        console.print(
            f"{get_status_icon(True)} Renamed table {table.id} to "
            f"[cyan]{table.name}[/cyan] ({format_count(len(relations))} relations)"
        )


@cli.command("move-table")
@click.argument("table_id")
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.pass_context
def move_table(ctx: click.Context, table_id: str, x: float, y: float) -> None:
    """Move a table to a new canvas position."""
    with open_manager(ctx) as manager:
        table = manager.reposition_table(table_id, (x, y))
        console.print(
            f"{get_status_icon(True)} Moved table {table.id} to "
            f"{format_position(table.position)}"
        )


@cli.command("set-option")
@click.argument("table_id")
@click.argument("option")
@click.argument("state", type=click.Choice(["on", "off"]))
@click.pass_context
def set_option(ctx: click.Context, table_id: str, option: str, state: str) -> None:
    """Turn a table option (id, rememberToken, softDeletes, timestamps) on or off."""
    with open_manager(ctx) as manager:
        table = manager.set_table_option(table_id, option, state == "on")
        console.print(
            f"{get_status_icon(True)} Options of {table.id}: "
            f"{format_options(table.options)}"
        )


@cli.command("add-field")
@click.argument("table_id")
@click.option("--name", default=None, help="Rename the new field right away")
@click.option(
    "--type",
    "field_type",
    type=click.Choice([t.value for t in FieldType], case_sensitive=False),
    default=None,
    help="Field type (default: INTEGER)",
)
@click.pass_context
def add_field(
    ctx: click.Context, table_id: str, name: Optional[str], field_type: Optional[str]
) -> None:
    """Add a field to a table."""
    with open_manager(ctx) as manager:
        field = manager.add_field(table_id)
        if name:
            field = manager.update_field(field.id, "name", name)
        if field_type:
            field = manager.update_field(field.id, "type", field_type)
        console.print(
            f"{get_status_icon(True)} Added field [cyan]{field.name}[/cyan] "
            f"({field.id}) {field.type.value}"
        )


@cli.command("rename-field")
@click.argument("field_id")
@click.argument("name")
@click.pass_context
def rename_field(ctx: click.Context, field_id: str, name: str) -> None:
    """Rename a field; <table>_id names link it to that table."""
    with open_manager(ctx) as manager:
        field = manager.update_field(field_id, "name", name)
        linked = [r for r in manager.relations if r.field_id == field.id]
        if linked:
            target = manager.get_table(linked[0].to_table_id)
            console.print(
                f"{get_status_icon(True)} Renamed field to [cyan]{field.name}[/cyan] "
                f"-> {target.name}"
            )
        else:
            console.print(
                f"{get_status_icon(True)} Renamed field to [cyan]{field.name}[/cyan]"
            )


@cli.command("set-type")
@click.argument("field_id")
@click.argument(
    "field_type",
    type=click.Choice([t.value for t in FieldType], case_sensitive=False),
)
@click.pass_context
def set_type(ctx: click.Context, field_id: str, field_type: str) -> None:
    """Change the type of a field."""
    with open_manager(ctx) as manager:
        field = manager.update_field(field_id, "type", field_type)
        console.print(
            f"{get_status_icon(True)} Field {field.id} is now {field.type.value}"
        )


@cli.command("remove-field")
@click.argument("field_id")
@click.pass_context
def remove_field(ctx: click.Context, field_id: str) -> None:
    """Remove a field and its relation."""
    with open_manager(ctx) as manager:
        manager.remove_field(field_id)
        console.print(f"{get_status_icon(True)} Removed field {field_id}")


@cli.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """Show tables, fields and relations of the stored schema."""
    with open_manager(ctx) as manager:
        snapshot = manager.snapshot()
        names = {table.id: table.name for table in snapshot.tables}
        targets = {
            relation.field_id: names.get(relation.to_table_id, relation.to_table_id)
            for relation in snapshot.relations
        }

        console.print()
        console.print(create_header_panel("Schema", str(ctx.obj["db_path"])))
        console.print()

        stats_data = manager.graph.get_statistics()
        overview = create_summary_table("Overview")
        overview.add_row("Tables", format_count(stats_data.get("total_tables", 0)))
        overview.add_row("Fields", format_count(stats_data.get("total_fields", 0)))
        overview.add_row(
            "Relations", format_count(stats_data.get("total_relations", 0))
        )
        console.print(overview)

        for table in snapshot.tables:
            data = create_data_table(
                f"{table.name} ({table.id}) at {format_position(table.position)}",
                [
                    ("Field", "left", "cyan"),
                    ("Type", "left", "yellow"),
                    ("References", "left", "green"),
                    ("ID", "left", "dim"),
                ],
            )
            for field in manager.fields_for_table(table.id):
                data.add_row(
                    field.name,
                    field.type.value,
                    targets.get(field.id, ""),
                    field.id,
                )
            data.caption = f"options: {format_options(table.options)}"
            console.print()
            console.print(data)


@cli.command()
@click.confirmation_option(prompt="Remove every table, field and relation?")
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Remove every table, field and relation from the stored schema."""
    with open_manager(ctx) as manager:
        console.print("[yellow]Clearing existing database...[/yellow]")
        manager.clear()
        console.print(f"{get_status_icon(True)} Database cleared")


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Verify that stored relations match field and table names."""
    with open_manager(ctx) as manager:
        problems = manager.check_invariants()

    if not problems:
        console.print(f"{get_status_icon(True)} Schema is consistent")
        return

    for problem in problems:
        console.print(f"{get_status_icon(False)} {problem}")
    sys.exit(1)


if __name__ == "__main__":
    cli()
