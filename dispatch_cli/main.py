#!/usr/bin/env python3
"""
Dispatch CLI - shared doctor dispatch board

Main entrypoint for the dispatch command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from dispatch_cli.commands import serve, snapshot

app = typer.Typer(
    name="dispatch",
    help="Shared doctor dispatch board: sync server and snapshot tools",
    add_completion=False,
)

console = Console()

app.add_typer(snapshot.app, name="snapshot", help="Board snapshot operations")
app.command(name="serve")(serve.serve_command)


@app.command()
def version():
    """Show version information."""
    from dispatch_cli import __version__
    from dispatch_engine import __version__ as engine_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Dispatch CLI[/bold]", f"v{__version__}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
