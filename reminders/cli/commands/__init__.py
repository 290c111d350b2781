"""
FILE: reminders/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .activities import (
    add,
    ls,
    show,
    edit,
    done,
    rm,
)
from .overview import (
    stats,
    notify,
    upcoming,
    day,
    calendar,
    watch,
)
from .system import (
    version,
    export,
    import_data,
    clear,
)

__all__ = [
    "add",
    "ls",
    "show",
    "edit",
    "done",
    "rm",
    "stats",
    "notify",
    "upcoming",
    "day",
    "calendar",
    "watch",
    "version",
    "export",
    "import_data",
    "clear",
]
