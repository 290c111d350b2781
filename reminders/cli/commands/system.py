"""
FILE: reminders/cli/commands/system.py
PURPOSE: System commands (version, export, import, clear)
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..main import app, console, error_console, get_store, print_plain, __version__


@app.command()
def version():
    """Show reminders version."""
    console.print(f"Reminders v{__version__}")


@app.command()
def export(
    ctx: typer.Context,
    output: Optional[Path] = typer.Argument(None, help="File to write (default: print to stdout)"),
):
    """
    Export every activity as a JSON backup document.

    Example:
        reminders export backup.json
        reminders export > backup.json
    """
    document = get_store(ctx).export_data()

    if output is None:
        print_plain(document)
        return

    try:
        output.write_text(document, encoding="utf-8")
    except OSError as e:
        error_console.print(f"[red]Error:[/red] Could not write {escape(str(output))}: {escape(str(e))}")
        raise typer.Exit(1)

    count = len(json.loads(document)["activities"])
    console.print(f"[green]✓ Exported {count} activities to[/green] {escape(str(output))}")


@app.command(name="import")
def import_data(
    ctx: typer.Context,
    source: Path = typer.Argument(..., help="Backup file created by 'reminders export'"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Replace all activities with the contents of a backup file.

    Existing activities are discarded (this is not a merge).

    Example:
        reminders import backup.json
    """
    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        error_console.print(f"[red]Error:[/red] Could not read {escape(str(source))}: {escape(str(e))}")
        raise typer.Exit(1)

    store = get_store(ctx)
    if not yes and store.stats.total > 0:
        console.print(f"[yellow]This replaces your {store.stats.total} current activities[/yellow]")
        if not typer.confirm("Continue?", default=False):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    result = store.import_data(text)

    if json_output:
        print_plain(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    elif result.success:
        console.print(f"[green]✓[/green] {escape(result.message)}")
    else:
        error_console.print(f"[red]Error:[/red] {escape(result.message)}")

    if not result.success:
        raise typer.Exit(1)


@app.command()
def clear(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete every activity.

    Example:
        reminders clear --yes
    """
    store = get_store(ctx)
    total = store.stats.total

    if not yes:
        console.print(f"[yellow]About to delete all {total} activities[/yellow]")
        if not typer.confirm("Continue?", default=False):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    store.clear_all()
    console.print(f"[green]✓ Deleted {total} activities[/green]")
