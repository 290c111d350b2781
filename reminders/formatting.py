"""
FILE: reminders/formatting.py
PURPOSE: Shared formatting utilities for CLI output
EXPORTS:
  - ActivityFormatter: Class for formatting activities
  - parse_activity_ids: Parse comma-separated activity IDs
  - resolve_activity_id: Match a full or abbreviated ID against a collection
DEPENDENCIES:
  - rich (for table formatting)
  - json (for JSON serialization)
  - reminders.core.models (Activity, ActivityStats)
  - reminders.core.dates (date labels, calendar grid)
NOTES:
  - Centralized formatting logic for consistency across commands
  - IDs are UUIDs; tables show the first SHORT_ID_LENGTH characters and
    commands accept any unambiguous prefix
"""

import json
from datetime import date, datetime
from typing import Dict, Iterable, List

from rich.markup import escape
from rich.table import Table

from .core.constants import STATUS_COMPLETED, STATUS_OVERDUE
from .core.dates import calendar_days, format_activity_datetime
from .core.exceptions import ActivityNotFoundError, InvalidInputError
from .core.models import Activity, ActivityStats


SHORT_ID_LENGTH = 8

PRIORITY_STYLES = {"alta": "red", "media": "yellow", "baja": "green"}
STATUS_STYLES = {"pendiente": "white", "completado": "green", "vencido": "red"}
CATEGORY_STYLES = {
    "trabajo": "blue",
    "personal": "magenta",
    "salud": "green",
    "estudio": "bright_yellow",
    "hogar": "bright_magenta",
}


def _styled(value: str, styles: Dict[str, str]) -> str:
    style = styles.get(value, "white")
    return f"[{style}]{value}[/{style}]"


def status_marker(activity: Activity) -> str:
    if activity.status == STATUS_COMPLETED:
        return "✓"
    if activity.status == STATUS_OVERDUE:
        return "!"
    return " "


class ActivityFormatter:
    """Centralized activity display formatting."""

    @staticmethod
    def create_table(activities: List[Activity], now: datetime, title: str = "Activities") -> Table:
        """
        Create Rich table for activities.

        Args:
            activities: Activities to display, in display order
            now: Used for relative date labels (Today, Tomorrow, ...)
            title: Table title

        Returns:
            Rich Table object ready for display
        """
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=SHORT_ID_LENGTH, no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("When", style="dim")
        table.add_column("Priority", width=8)
        table.add_column("Category", width=10)
        table.add_column("Status", width=11)

        for activity in activities:
            table.add_row(
                activity.id[:SHORT_ID_LENGTH],
                escape(activity.title),
                format_activity_datetime(activity.date, activity.time, now),
                _styled(activity.priority, PRIORITY_STYLES),
                _styled(activity.category, CATEGORY_STYLES),
                _styled(activity.status, STATUS_STYLES),
            )

        return table

    @staticmethod
    def create_stats_table(stats: ActivityStats) -> Table:
        table = Table(title="Summary", show_header=False)
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")

        table.add_row("Total", str(stats.total))
        table.add_row("Pending", f"[yellow]{stats.pending}[/yellow]")
        table.add_row("Completed", f"[green]{stats.completed}[/green]")
        table.add_row("Overdue", f"[red]{stats.overdue}[/red]")
        table.add_row("Today", f"[cyan]{stats.today_count}[/cyan]")
        table.add_row("Completion", f"{stats.completion_rate:.0f}%")

        return table

    @staticmethod
    def create_calendar(month: date, activities: Iterable[Activity], today: date) -> Table:
        """
        Month grid (Sunday first) with the number of activities per day.

        Days outside the month are dimmed; today is highlighted.
        """
        counts: Dict[date, int] = {}
        for activity in activities:
            counts[activity.date] = counts.get(activity.date, 0) + 1

        table = Table(title=month.strftime("%B %Y"), show_lines=True)
        for name in ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"):
            table.add_column(name, justify="center", width=6)

        days = calendar_days(month)
        for week_start in range(0, len(days), 7):
            cells = []
            for day in days[week_start:week_start + 7]:
                label = str(day.day)
                if counts.get(day):
                    label = f"{label} [bold cyan]({counts[day]})[/bold cyan]"
                if day.month != month.month:
                    label = f"[dim]{label}[/dim]"
                elif day == today:
                    label = f"[reverse]{label}[/reverse]"
                cells.append(label)
            table.add_row(*cells)

        return table

    @staticmethod
    def to_json_array(activities: List[Activity]) -> str:
        """Convert activity list to JSON array string (persisted field names)."""
        return json.dumps([a.to_dict() for a in activities], indent=2, ensure_ascii=False)

    @staticmethod
    def to_raw_lines(activities: List[Activity]) -> List[str]:
        """
        Convert activity list to plain text lines.

        Format: "<id>: [<marker>] <title> (<date> <time>, <priority>)"
        """
        return [
            f"{a.id}: [{status_marker(a)}] {a.title} ({a.date.isoformat()} {a.time}, {a.priority})"
            for a in activities
        ]


def parse_activity_ids(id_string: str) -> List[str]:
    """
    Parse comma-separated activity IDs.

    Args:
        id_string: Comma-separated string of IDs or ID prefixes

    Returns:
        List of non-empty, stripped IDs
    """
    ids = [part.strip() for part in id_string.split(",")]
    return [part for part in ids if part]


def resolve_activity_id(activities: Iterable[Activity], prefix: str) -> Activity:
    """
    Find the activity whose ID is `prefix` or starts with it.

    Raises:
        ActivityNotFoundError: If nothing matches
        InvalidInputError: If the prefix matches more than one activity
    """
    matches = [a for a in activities if a.id.startswith(prefix)]
    exact = [a for a in matches if a.id == prefix]
    if exact:
        return exact[0]
    if not matches:
        raise ActivityNotFoundError(prefix)
    if len(matches) > 1:
        raise InvalidInputError(
            f"ID '{prefix}' is ambiguous ({len(matches)} activities match). Use more characters"
        )
    return matches[0]
