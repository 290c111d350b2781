"""
FILE: reminders/core/models.py
PURPOSE: Domain models for activities, derived statistics, filters and import results
EXPORTS:
  - Activity (dataclass)
  - ActivityFormData (dataclass)
  - ActivityStats (dataclass)
  - ActivityFilter (dataclass)
  - ImportResult (dataclass)
  - parse_date(value) -> date
  - parse_instant(value) -> datetime
DEPENDENCIES:
  - dataclasses (stdlib)
  - datetime (stdlib)
  - json (stdlib)
  - re (stdlib)
  - reminders.core.constants (domain values)
  - reminders.core.exceptions (InvalidDocumentError)
NOTES:
  - Activity.from_dict() is the schema check for persisted/imported data
  - Activity.to_dict() produces the persisted wire shape (camelCase keys)
  - Dates are stored as YYYY-MM-DD, instants as ISO-8601 strings
  - Instants are naive local wall-clock datetimes in memory
"""

import json
import re
from dataclasses import dataclass, asdict, replace
from datetime import date, datetime
from typing import Any, Dict, Optional

from .constants import (
    PRIORITIES,
    CATEGORIES,
    STATUSES,
    STATUS_PENDING,
    STATUS_COMPLETED,
    STATUS_OVERDUE,
    FILTER_ALL,
)
from .exceptions import InvalidDocumentError


TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


def parse_instant(value: str) -> datetime:
    """
    Parse an ISO-8601 instant into a naive local datetime.

    Accepts a trailing 'Z' and explicit offsets; aware values are
    converted to local time before the offset is dropped.

    Raises:
        ValueError: If the value is not a valid ISO-8601 string
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_date(value: str) -> date:
    """
    Parse a calendar date from either YYYY-MM-DD or a full ISO instant.

    Raises:
        ValueError: If the value is not a valid ISO-8601 string
    """
    if len(value) == 10:
        return date.fromisoformat(value)
    return parse_instant(value).date()


def _require_text(data: Dict[str, Any], key: str, index: Optional[int]) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidDocumentError(f"field '{key}' must be a non-empty string", index)
    return value


def _require_choice(data: Dict[str, Any], key: str, choices, index: Optional[int]) -> str:
    value = data.get(key)
    if value not in choices:
        raise InvalidDocumentError(
            f"field '{key}' must be one of: {', '.join(choices)}", index
        )
    return value


def _require_parsed(data: Dict[str, Any], key: str, parser, index: Optional[int]):
    value = _require_text(data, key, index)
    try:
        return parser(value)
    except ValueError:
        raise InvalidDocumentError(f"field '{key}' is not a valid ISO-8601 value", index)


@dataclass
class Activity:
    """A scheduled activity with priority, category and status tracking."""

    id: str
    title: str
    date: date
    time: str
    priority: str
    category: str
    created_at: datetime
    updated_at: datetime
    status: str = STATUS_PENDING
    description: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == STATUS_PENDING

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    @property
    def is_marked_overdue(self) -> bool:
        """True when the stored status is 'vencido' (see dates.is_overdue for the clock check)."""
        return self.status == STATUS_OVERDUE

    def with_changes(self, **changes) -> "Activity":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: Optional[int] = None) -> "Activity":
        """
        Build an Activity from its persisted dict form, validating every field.

        Args:
            data: Dict with camelCase keys as written by to_dict()
            index: Position in the enclosing document (for error messages)

        Raises:
            InvalidDocumentError: If any field is missing or malformed
        """
        if not isinstance(data, dict):
            raise InvalidDocumentError("entry must be an object", index)

        time_value = _require_text(data, "time", index)
        if not TIME_PATTERN.match(time_value):
            raise InvalidDocumentError("field 'time' must use HH:MM format", index)

        description = data.get("description")
        if description is not None and not isinstance(description, str):
            raise InvalidDocumentError("field 'description' must be a string", index)

        created_at = _require_parsed(data, "createdAt", parse_instant, index)
        updated_at = _require_parsed(data, "updatedAt", parse_instant, index)
        if updated_at < created_at:
            # Clock skew on the exporting side; keep the invariant
            updated_at = created_at

        return cls(
            id=_require_text(data, "id", index),
            title=_require_text(data, "title", index),
            description=description,
            date=_require_parsed(data, "date", parse_date, index),
            time=time_value,
            priority=_require_choice(data, "priority", PRIORITIES, index),
            category=_require_choice(data, "category", CATEGORIES, index),
            status=_require_choice(data, "status", STATUSES, index),
            created_at=created_at,
            updated_at=updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert activity to its persisted dict form."""
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "date": self.date.isoformat(),
            "time": self.time,
            "priority": self.priority,
            "category": self.category,
            "status": self.status,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
        if self.description is None:
            del data["description"]
        return data

    def to_json(self) -> str:
        """Serialize activity to JSON string."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


@dataclass
class ActivityFormData:
    """Validated input for creating an activity (see forms.parse_form_data)."""

    title: str
    date: date
    time: str
    priority: str
    category: str
    description: Optional[str] = None


@dataclass
class ActivityStats:
    """Aggregate counts derived from an activity collection. Never persisted."""

    total: int = 0
    pending: int = 0
    completed: int = 0
    overdue: int = 0
    today_count: int = 0

    @property
    def completion_rate(self) -> float:
        """Percentage of completed activities (0 when there are none)."""
        if self.total == 0:
            return 0.0
        return self.completed / self.total * 100

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["completion_rate"] = round(self.completion_rate, 1)
        return data


@dataclass
class ActivityFilter:
    """List view filter. 'all' disables a field; search_term matches title or description."""

    status: str = FILTER_ALL
    category: str = FILTER_ALL
    priority: str = FILTER_ALL
    search_term: str = ""

    @property
    def is_active(self) -> bool:
        return (
            self.status != FILTER_ALL
            or self.category != FILTER_ALL
            or self.priority != FILTER_ALL
            or bool(self.search_term)
        )


@dataclass
class ImportResult:
    """Outcome of an import, safe to show to the user directly."""

    success: bool
    message: str
    count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"success": self.success, "message": self.message}
        if self.count is not None:
            data["count"] = self.count
        return data
