"""Schema Designer - table/field graph with inferred foreign keys."""

from .cli import cli


def main() -> None:
    """Entry point for the CLI application."""
    cli()
