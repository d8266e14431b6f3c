"""Console styling utilities for consistent Rich output formatting.

This module provides the table builders and formatting helpers the CLI uses
to print designed tables, their fields and inferred relations.

Example:
    >>> from schema_designer.console_styles import create_summary_table, format_count
    >>> table = create_summary_table("Schema")
    >>> table.add_row("Tables", format_count(3))
    >>> console.print(table)
"""

from typing import Tuple

from rich.box import ROUNDED
from rich.panel import Panel
from rich.table import Table

from schema_designer.graph.models import Position, TableOptions


def get_status_icon(success: bool) -> str:
    """Get colored status icon.

    Args:
        success: Whether operation was successful

    Returns:
        str: Colored status icon (✓ or ✗)
    """
    return "[green]✓[/green]" if success else "[red]✗[/red]"


def format_count(count: int) -> str:
    """Format a count with thousands separator."""
    return f"{count:,}"


def format_position(position: Position) -> str:
    """Format a canvas position as ``(x, y)`` without trailing zeros."""
    return f"({position.x:g}, {position.y:g})"


def format_options(options: TableOptions) -> str:
    """List the enabled option flags of a table.

    Args:
        options: Table option flags

    Returns:
        str: Comma-separated enabled flags, or a dimmed dash when none are set
    """
    enabled = [
        label
        for label, value in (
            ("id", options.has_auto_id),
            ("rememberToken", options.remember_token),
            ("softDeletes", options.soft_deletes),
            ("timestamps", options.timestamps),
        )
        if value
    ]
    return ", ".join(enabled) if enabled else "[dim]-[/dim]"


def create_summary_table(title: str, header_style: str = "bold cyan") -> Table:
    """Create a styled summary table.

    Args:
        title: Table title
        header_style: Rich style for header (default: "bold cyan")

    Returns:
        Table: Configured Rich Table
    """
    table = Table(
        title=title,
        show_header=True,
        header_style=header_style,
        box=ROUNDED,
    )
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right", style="green")
    return table


def create_data_table(title: str, columns: list[Tuple[str, str, str]]) -> Table:
    """Create a configurable data display table.

    Args:
        title: Table title
        columns: List of (column_name, justify, style) tuples

    Returns:
        Table: Configured Rich Table
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold cyan",
        box=ROUNDED,
    )

    for col_name, justify, style in columns:
        table.add_column(col_name, justify=justify, style=style)

    return table


def create_header_panel(
    title: str,
    subtitle: str = "",
    border_style: str = "cyan"
) -> Panel:
    """Create a styled header panel.

    Args:
        title: Panel title
        subtitle: Optional subtitle
        border_style: Rich style for border

    Returns:
        Panel: Configured Rich Panel
    """
    if subtitle:
        content = f"[bold cyan]{title}[/bold cyan]\n{subtitle}"
    else:
        content = f"[bold cyan]{title}[/bold cyan]"

    return Panel.fit(
        content,
        border_style=border_style,
        padding=(0, 1),
    )
