"""
Snapshot commands: show, check, reset
"""

import json

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dispatch_engine.query import board_rows, find_violations, unassigned_doctors
from dispatch_engine.snapshot import SnapshotStore, compute_state_hash

app = typer.Typer()
console = Console()

DATA_FILE_OPTION = typer.Option(
    "data.json",
    "--data-file",
    "-d",
    envvar="DISPATCH_DATA_FILE",
    help="Path to board snapshot",
)


def _doctor_label(doctor: dict) -> str:
    return escape(f"{doctor.get('name', '?')} ({doctor.get('specialty', '?')})")


@app.command()
def show(
    data_file: str = DATA_FILE_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the board stored in a snapshot.

    A missing or corrupt snapshot shows the default board, as the server
    would load it.

    Examples:
        dispatch snapshot show
        dispatch snapshot show --data-file /var/lib/dispatch/data.json --json
    """
    store = SnapshotStore(data_file)
    if not store.exists() and not json_output:
        console.print(f"[yellow]Snapshot not found, showing default board:[/yellow] {data_file}")
    state = store.load()

    if json_output:
        print(json.dumps(state.to_dict(), indent=2))
        return

    table = Table(title=f"Board: {data_file}")
    table.add_column("Location", style="cyan")
    table.add_column("Type", style="yellow")
    table.add_column("Doctors", style="green")

    for row in board_rows(state):
        location = row["location"]
        table.add_row(
            escape(str(location.get("name", location["id"]))),
            escape(str(location.get("type", ""))),
            ", ".join(_doctor_label(d) for d in row["doctors"]) or "-",
        )
    free = unassigned_doctors(state)
    table.add_row("[dim]Unassigned[/dim]", "", ", ".join(_doctor_label(d) for d in free) or "-")

    console.print(table)
    console.print(f"\n[bold]Doctors:[/bold] {len(state.doctors)}  [bold]Locations:[/bold] {len(state.locations)}")
    console.print(f"[bold]State hash:[/bold] {compute_state_hash(state)[:16]}")


@app.command()
def check(data_file: str = DATA_FILE_OPTION):
    """
    Check a snapshot for invariant violations, without repairing it.

    Exit codes: 0 valid, 1 violations or unparsable, 2 file not found.
    """
    try:
        with open(data_file, "r", encoding="utf-8") as f:
            raw = f.read()
    except FileNotFoundError:
        console.print(f"[red]Error: Snapshot not found:[/red] {data_file}")
        raise typer.Exit(2)
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error: cannot read snapshot:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    try:
        data = json.loads(raw)
    except ValueError as e:
        console.print(f"[red]Invalid JSON:[/red] {e}")
        raise typer.Exit(1)

    problems = find_violations(data)
    if problems:
        for problem in problems:
            console.print(f"[red]✗[/red] {escape(problem)}")
        console.print(f"\n[bold red]{len(problems)} problem(s) found[/bold red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Snapshot is valid:[/green] {data_file}")


@app.command()
def reset(
    data_file: str = DATA_FILE_OPTION,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """
    Overwrite the snapshot with the default board (no doctors, built-in locations).

    Do not run this against the snapshot of a live server: the server keeps
    its in-memory state and overwrites the file on the next action.
    """
    if not yes:
        typer.confirm(f"Overwrite {data_file} with the default board?", abort=True)

    if not SnapshotStore(data_file).reset():
        console.print(f"[red]Error: could not write[/red] {data_file}")
        raise typer.Exit(1)
    console.print(f"[green]✓ Reset[/green] {data_file}")
