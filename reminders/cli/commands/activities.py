"""
FILE: reminders/cli/commands/activities.py
PURPOSE: Activity management commands (add, ls, show, edit, done, rm)
"""

import json
from datetime import date
from typing import Optional

import typer
from rich.markup import escape
from rich.panel import Panel

from ..main import app, console, error_console, get_store, print_plain
from ...core import forms
from ...core.constants import (
    CATEGORIES,
    DEFAULT_TIME,
    FILTER_ALL,
    PRIORITIES,
    PRIORITY_MEDIUM,
    SORT_DATE_ASC,
    STATUSES,
)
from ...core.dates import format_activity_datetime, format_relative_time, combine_date_and_time
from ...core.exceptions import (
    RemindersError,
    ActivityNotFoundError,
    InvalidInputError,
)
from ...core.filters import filter_activities, sort_activities
from ...core.models import ActivityFilter
from ...formatting import ActivityFormatter, parse_activity_ids, resolve_activity_id


@app.command()
def add(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Activity title (max 100 characters)"),
    on: Optional[str] = typer.Option(None, "--date", "-d", help="Date as YYYY-MM-DD (default: today)"),
    at: str = typer.Option(DEFAULT_TIME, "--time", "-t", help="Time as HH:MM"),
    priority: str = typer.Option(PRIORITY_MEDIUM, "--priority", "-p", help="alta, media or baja"),
    category: str = typer.Option("personal", "--category", "-c", help="trabajo, personal, salud, estudio or hogar"),
    description: Optional[str] = typer.Option(None, "--desc", help="Optional description"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new activity.

    Example:
        reminders add "Dentist" --date 2025-03-14 --time 16:30 -c salud -p alta
        reminders add "Call mum"
    """
    try:
        form_data = forms.parse_form_data(
            title=title,
            date=on if on is not None else date.today(),
            time=at,
            priority=priority,
            category=category,
            description=description,
        )
        activity = get_store(ctx).create(form_data)

        if json_output:
            print_plain(activity.to_json())
        elif raw:
            print_plain(f"{activity.id}: {activity.title}")
        else:
            console.print(
                f"[green]✓ Created activity [bold]{activity.id[:8]}[/bold]:[/green] {escape(activity.title)}"
            )

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except RemindersError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def ls(
    ctx: typer.Context,
    status: str = typer.Option(FILTER_ALL, "--status", "-s", help="pendiente, completado, vencido or all"),
    category: str = typer.Option(FILTER_ALL, "--category", "-c", help="Category or all"),
    priority: str = typer.Option(FILTER_ALL, "--priority", "-p", help="Priority or all"),
    search: str = typer.Option("", "--search", "-q", help="Search title and description"),
    sort_by: str = typer.Option(SORT_DATE_ASC, "--sort", help="date-asc, date-desc, priority or title"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List activities with optional filters.

    Example:
        reminders ls
        reminders ls --status pendiente --sort priority
        reminders ls -q dentist --json
    """
    try:
        activity_filter = ActivityFilter(
            status=forms.validate_choice(status, STATUSES + (FILTER_ALL,), "status"),
            category=forms.validate_choice(category, CATEGORIES + (FILTER_ALL,), "category"),
            priority=forms.validate_choice(priority, PRIORITIES + (FILTER_ALL,), "priority"),
            search_term=search.strip(),
        )
        store = get_store(ctx)
        all_activities = store.activities
        activities = sort_activities(filter_activities(all_activities, activity_filter), sort_by)

        if json_output:
            print_plain(ActivityFormatter.to_json_array(activities))
        elif raw:
            for line in ActivityFormatter.to_raw_lines(activities):
                print_plain(line)
        else:
            if not activities:
                console.print("[dim]No activities found[/dim]")
                return

            console.print(ActivityFormatter.create_table(activities, store.clock()))
            console.print(
                f"\n[dim]Showing {len(activities)} of {len(all_activities)} activities[/dim]"
            )

    except RemindersError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def show(
    ctx: typer.Context,
    activity_id: str = typer.Argument(..., help="Activity ID (or unique prefix)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    View full activity details.

    Example:
        reminders show 3f2a9c1e
    """
    try:
        store = get_store(ctx)
        activity = resolve_activity_id(store.activities, activity_id)
        now = store.clock()

        if json_output:
            print_plain(activity.to_json())
            return

        due = combine_date_and_time(activity.date, activity.time)
        lines = [
            f"[bold]ID:[/bold] {activity.id}",
            f"[bold]When:[/bold] {format_activity_datetime(activity.date, activity.time, now)}"
            f" [dim]({format_relative_time(due, now)})[/dim]",
            f"[bold]Priority:[/bold] {activity.priority}",
            f"[bold]Category:[/bold] {activity.category}",
            f"[bold]Status:[/bold] {activity.status}",
            f"[bold]Created:[/bold] {activity.created_at:%Y-%m-%d %H:%M}",
            f"[bold]Updated:[/bold] {activity.updated_at:%Y-%m-%d %H:%M}",
        ]
        if activity.description:
            lines.append("")
            lines.append(escape(activity.description))

        console.print(Panel("\n".join(lines), title=escape(activity.title), expand=False))

    except (ActivityNotFoundError, InvalidInputError) as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def edit(
    ctx: typer.Context,
    activity_id: str = typer.Argument(..., help="Activity ID (or unique prefix)"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    on: Optional[str] = typer.Option(None, "--date", "-d", help="New date (YYYY-MM-DD)"),
    at: Optional[str] = typer.Option(None, "--time", "-t", help="New time (HH:MM)"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="New priority"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="New category"),
    description: Optional[str] = typer.Option(None, "--desc", help="New description ('' to clear)"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="New status"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Update one or more fields of an activity.

    Example:
        reminders edit 3f2a --time 18:00 --priority alta
        reminders edit 3f2a --desc ""
    """
    try:
        store = get_store(ctx)
        activity = resolve_activity_id(store.activities, activity_id)
        patch = forms.parse_patch(
            title=title,
            date=on,
            time=at,
            priority=priority,
            category=category,
            description=description,
            status=status,
        )
        updated = store.update_partial(activity.id, patch)

        if json_output:
            print_plain(updated.to_json())
        elif raw:
            print_plain(f"Updated activity {updated.id}: {updated.title}")
        else:
            console.print(f"[blue]✎[/blue] Updated activity {updated.id[:8]}: {escape(updated.title)}")

    except (ActivityNotFoundError, InvalidInputError) as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def done(
    ctx: typer.Context,
    activity_ids: str = typer.Argument(..., help="Activity ID(s) to toggle (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Toggle activities between completed and pending.

    Overdue activities become completed.

    Example:
        reminders done 3f2a
        reminders done 3f2a,91bc
    """
    store = get_store(ctx)
    toggled = []
    errors = []

    for id_str in parse_activity_ids(activity_ids):
        try:
            activity = resolve_activity_id(store.activities, id_str)
            toggled.append(store.toggle_status(activity.id))
        except (ActivityNotFoundError, InvalidInputError) as e:
            errors.append(str(e))

    if json_output:
        data = [{"id": a.id, "title": a.title, "status": a.status} for a in toggled]
        print_plain(json.dumps(data, indent=2, ensure_ascii=False))
    elif raw:
        for activity in toggled:
            print_plain(f"{activity.status}: {activity.title}")
    else:
        for activity in toggled:
            if activity.is_completed:
                console.print(f"[green]✓[/green] Completed: {escape(activity.title)}")
            else:
                console.print(f"[yellow]○[/yellow] Reopened: {escape(activity.title)}")

    if errors:
        for error in errors:
            error_console.print(f"[red]Error:[/red] {escape(str(error))}")
        if not toggled:
            raise typer.Exit(1)


@app.command()
def rm(
    ctx: typer.Context,
    activity_ids: str = typer.Argument(..., help="Activity ID(s) to delete (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete one or more activities permanently.

    Confirms before deleting multiple activities (use -y to skip).
    Use 'reminders clear' to delete everything.

    Example:
        reminders rm 3f2a
        reminders rm 3f2a,91bc --yes
    """
    store = get_store(ctx)
    targets = []
    errors = []

    for id_str in parse_activity_ids(activity_ids):
        try:
            targets.append(resolve_activity_id(store.activities, id_str))
        except (ActivityNotFoundError, InvalidInputError) as e:
            errors.append(str(e))

    if not targets:
        for error in errors:
            error_console.print(f"[red]Error:[/red] {escape(str(error))}")
        raise typer.Exit(1)

    if not yes and len(targets) > 1:
        console.print(f"[yellow]About to delete {len(targets)} activities[/yellow]")
        if not typer.confirm("Continue?", default=False):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    for activity in targets:
        store.delete(activity.id)

    deleted = [{"id": a.id, "title": a.title} for a in targets]
    if json_output:
        print_plain(json.dumps(deleted, indent=2, ensure_ascii=False))
    elif raw:
        for item in deleted:
            print_plain(f"Deleted activity {item['id']}: {item['title']}")
    else:
        for item in deleted:
            console.print(f"[red]✗[/red] Deleted activity {item['id'][:8]}: {escape(item['title'])}")

    for error in errors:
        error_console.print(f"[red]Error:[/red] {escape(str(error))}")
