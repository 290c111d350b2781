"""
FILE: reminders/cli/commands/overview.py
PURPOSE: Dashboard-style commands (stats, notify, upcoming, day, calendar, watch)
"""

import json
import time
from typing import Optional

import typer
from rich.markup import escape

from ..main import app, console, error_console, get_store, print_plain
from ...core.constants import PRIORITY_LIMIT, UPCOMING_DAYS
from ...core.dates import (
    activities_for_date,
    overdue_activities,
    upcoming_activities,
    combine_date_and_time,
)
from ...core.exceptions import InvalidInputError
from ...core.forms import validate_date
from ...core.notifications import (
    notification_badge_count,
    notification_message,
    pending_today_activities,
    priority_activities,
    should_notify,
)
from ...formatting import ActivityFormatter


@app.command()
def stats(
    ctx: typer.Context,
    limit: int = typer.Option(PRIORITY_LIMIT, "--limit", "-n", help="Number of priority activities to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show summary counts and the most important pending activities.

    Example:
        reminders stats
        reminders stats --json
    """
    store = get_store(ctx)
    top = priority_activities(store.activities, limit)

    if json_output:
        data = store.stats.to_dict()
        data["priority"] = [a.to_dict() for a in top]
        print_plain(json.dumps(data, indent=2, ensure_ascii=False))
        return

    console.print(ActivityFormatter.create_stats_table(store.stats))
    if top:
        console.print(ActivityFormatter.create_table(top, store.clock(), title="Priority activities"))
    elif store.stats.total == 0:
        console.print("[dim]No activities yet. Use 'reminders add' to create one[/dim]")


@app.command()
def notify(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show what needs attention: overdue activities and pending ones due today.

    Example:
        reminders notify
    """
    store = get_store(ctx)
    now = store.clock()
    activities = store.activities
    overdue = overdue_activities(activities, now)
    due_today = pending_today_activities(activities, now)

    if json_output:
        data = {
            "badge": notification_badge_count(activities, now),
            "message": notification_message(activities, now),
            "overdue": [a.to_dict() for a in overdue],
            "today": [a.to_dict() for a in due_today],
        }
        print_plain(json.dumps(data, indent=2, ensure_ascii=False))
        return

    if not should_notify(activities, now):
        console.print("[green]Nothing needs your attention[/green]")
        return

    badge = notification_badge_count(activities, now)
    console.print(f"[bold red]({badge})[/bold red] {notification_message(activities, now)}")
    if overdue:
        console.print(ActivityFormatter.create_table(overdue, now, title="Overdue"))
    if due_today:
        console.print(ActivityFormatter.create_table(due_today, now, title="Due today"))


@app.command()
def upcoming(
    ctx: typer.Context,
    days: int = typer.Option(UPCOMING_DAYS, "--days", help="Window size in days"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List activities due within the next few days.

    Example:
        reminders upcoming
        reminders upcoming --days 30
    """
    store = get_store(ctx)
    now = store.clock()
    activities = sorted(
        upcoming_activities(store.activities, now, days),
        key=lambda a: combine_date_and_time(a.date, a.time),
    )

    if json_output:
        print_plain(ActivityFormatter.to_json_array(activities))
    elif raw:
        for line in ActivityFormatter.to_raw_lines(activities):
            print_plain(line)
    elif not activities:
        console.print(f"[dim]Nothing due in the next {days} days[/dim]")
    else:
        console.print(ActivityFormatter.create_table(activities, now, title=f"Next {days} days"))


@app.command()
def day(
    ctx: typer.Context,
    on: Optional[str] = typer.Argument(None, help="Date as YYYY-MM-DD (default: today)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List the activities scheduled on one day.

    Example:
        reminders day
        reminders day 2025-03-14
    """
    try:
        store = get_store(ctx)
        now = store.clock()
        target = validate_date(on) if on else now.date()
        activities = sorted(activities_for_date(store.activities, target), key=lambda a: a.time)

        if json_output:
            print_plain(ActivityFormatter.to_json_array(activities))
        elif raw:
            for line in ActivityFormatter.to_raw_lines(activities):
                print_plain(line)
        elif not activities:
            console.print(f"[dim]Nothing scheduled on {target.isoformat()}[/dim]")
        else:
            console.print(ActivityFormatter.create_table(activities, now, title=target.strftime("%A %d %B %Y")))

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def calendar(
    ctx: typer.Context,
    month: Optional[str] = typer.Argument(None, help="Month as YYYY-MM (default: current month)"),
):
    """
    Show a month grid with the number of activities on each day.

    Example:
        reminders calendar
        reminders calendar 2025-03
    """
    try:
        store = get_store(ctx)
        today = store.clock().date()
        target = validate_date(f"{month}-01") if month else today
        console.print(ActivityFormatter.create_calendar(target, store.activities, today))

    except InvalidInputError:
        error_console.print(f"[red]Error:[/red] Invalid month '{escape(str(month))}'. Use YYYY-MM")
        raise typer.Exit(1)


@app.command()
def watch(
    ctx: typer.Context,
    interval: float = typer.Option(60.0, "--interval", "-i", help="Seconds between screen updates"),
):
    """
    Keep running and print a notice whenever activities need attention.

    The store refreshes every minute in the background, flagging (and
    saving) activities that become overdue.
    Stop with Ctrl+C.

    Example:
        reminders watch
    """
    store = get_store(ctx)
    store.start()
    last_message = None

    console.print("[dim]Watching activities. Press Ctrl+C to stop[/dim]")
    try:
        while True:
            now = store.clock()
            message = notification_message(store.activities, now)
            if message and message != last_message:
                badge = notification_badge_count(store.activities, now)
                console.print(f"[{now:%H:%M}] [bold red]({badge})[/bold red] {message}")
            last_message = message
            time.sleep(interval)
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped[/dim]")
    finally:
        store.close()
