"""
FILE: reminders/core/forms.py
PURPOSE: Input validation for activity forms (the boundary in front of the store)
EXPORTS:
  - validate_title(title) -> str
  - validate_time(time) -> str
  - validate_date(value) -> date
  - validate_choice(value, choices, label) -> str
  - parse_form_data(title, date, time, priority, category, description) -> ActivityFormData
  - parse_patch(**fields) -> Dict[str, Any]
DEPENDENCIES:
  - reminders.core.models (ActivityFormData, TIME_PATTERN)
  - reminders.core.exceptions (InvalidInputError)
NOTES:
  - The store trusts its input; everything user-typed goes through here first
  - Trims whitespace from title and description
  - Times are normalised to zero-padded HH:MM
"""

from datetime import date
from typing import Any, Dict, Optional

from .constants import (
    PRIORITIES,
    CATEGORIES,
    STATUSES,
    TITLE_MAX_LENGTH,
    DEFAULT_TIME,
    PRIORITY_MEDIUM,
)
from .exceptions import InvalidInputError
from .models import ActivityFormData, TIME_PATTERN


def validate_title(title: str) -> str:
    title = title.strip()
    if not title:
        raise InvalidInputError("Activity title cannot be empty")
    if len(title) > TITLE_MAX_LENGTH:
        raise InvalidInputError(
            f"Activity title is too long ({len(title)} characters, max {TITLE_MAX_LENGTH})"
        )
    return title


def validate_time(time: str) -> str:
    """Check HH:MM (24-hour) and return it zero-padded, e.g. '9:05' -> '09:05'."""
    time = time.strip()
    if not TIME_PATTERN.match(time):
        raise InvalidInputError(f"Invalid time '{time}'. Use HH:MM (24-hour)")
    hours, minutes = time.split(":")
    return f"{int(hours):02d}:{minutes}"


def validate_date(value) -> date:
    """Accept a date or a YYYY-MM-DD string."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise InvalidInputError(f"Invalid date '{value}'. Use YYYY-MM-DD")


def validate_choice(value: str, choices, label: str) -> str:
    value = value.strip().lower()
    if value not in choices:
        raise InvalidInputError(
            f"Invalid {label} '{value}'. Must be one of: {', '.join(choices)}"
        )
    return value


def _clean_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    return description.strip() or None


def parse_form_data(
    title: str,
    date,
    time: str = DEFAULT_TIME,
    priority: str = PRIORITY_MEDIUM,
    category: str = "personal",
    description: Optional[str] = None,
) -> ActivityFormData:
    """
    Validate raw form input for a new activity.

    Raises:
        InvalidInputError: On the first invalid field
    """
    return ActivityFormData(
        title=validate_title(title),
        date=validate_date(date),
        time=validate_time(time),
        priority=validate_choice(priority, PRIORITIES, "priority"),
        category=validate_choice(category, CATEGORIES, "category"),
        description=_clean_description(description),
    )


def parse_patch(**fields) -> Dict[str, Any]:
    """
    Validate the fields of a partial update. None means "leave unchanged".

    An empty description clears it.

    Raises:
        InvalidInputError: On the first invalid field, or if nothing would change
    """
    validators = {
        "title": validate_title,
        "date": validate_date,
        "time": validate_time,
        "priority": lambda v: validate_choice(v, PRIORITIES, "priority"),
        "category": lambda v: validate_choice(v, CATEGORIES, "category"),
        "status": lambda v: validate_choice(v, STATUSES, "status"),
        "description": _clean_description,
    }

    patch = {}
    for key, value in fields.items():
        if key not in validators:
            raise InvalidInputError(f"Unknown field '{key}'")
        if value is None:
            continue
        patch[key] = validators[key](value)

    if not patch:
        raise InvalidInputError("Nothing to update")
    return patch
