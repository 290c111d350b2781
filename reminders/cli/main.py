"""
FILE: reminders/cli/main.py
PURPOSE: Typer-based CLI and composition root for the activity store
EXPORTS:
  - app (Typer application)
  - main() (entry point)
  - get_store(ctx) -> ActivityStore
  - add(), ls(), show(), edit(), done(), rm() - Activity commands
  - stats(), notify(), upcoming(), day(), calendar(), watch() - Overview commands
  - version(), export(), import_data(), clear() - System commands
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output, log handler)
  - logging (stdlib)
  - reminders.core.store (ActivityStore)
  - reminders.core.repository (ActivityRepository)
NOTES:
  - One ActivityStore per invocation, created lazily by get_store() and
    closed when the command finishes
  - Most commands support --json and --raw flags
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
"""

import logging
import sys
from pathlib import Path
from typing import Optional

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import typer
from rich.console import Console
from rich.logging import RichHandler

from .. import __version__
from ..core.repository import ActivityRepository
from ..core.store import ActivityStore

# Typer app setup
app = typer.Typer(
    name="reminders",
    help="Personal activity and reminder manager",
    add_completion=False,
)

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)


def print_plain(text: str) -> None:
    """Print machine-readable output (JSON, raw lines) without markup or wrapping."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich. WARNING by default, DEBUG with --verbose."""
    root = logging.getLogger("reminders")
    root.handlers.clear()
    root.addHandler(RichHandler(console=error_console, show_path=False, show_time=False))
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def default_command(
    ctx: typer.Context,
    db: Optional[Path] = typer.Option(None, "--db", help="Database file (default: ~/.reminders/reminders.db)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """
    Personal activity and reminder manager.

    Activities are stored locally; overdue activities are flagged automatically.
    """
    configure_logging(verbose)
    ctx.obj = {"db": db, "store": None}


def get_store(ctx: typer.Context) -> ActivityStore:
    """
    Return the invocation's store, creating and loading it on first use.

    The store is closed automatically when the command finishes.
    """
    obj = ctx.find_root().obj
    if obj.get("store") is None:
        store = ActivityStore(repository=ActivityRepository(db_path=obj.get("db")))
        store.load()
        ctx.call_on_close(store.close)
        obj["store"] = store
    return obj["store"]


# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (  # noqa: E402
    # Activity commands
    add,
    ls,
    show,
    edit,
    done,
    rm,
    # Overview commands
    stats,
    notify,
    upcoming,
    day,
    calendar,
    watch,
    # System commands
    version,
    export,
    import_data,
    clear,
)


def main():
    """Main entry point for CLI."""
    app()

