"""
FILE: reminders/core/notifications.py
PURPOSE: Statistics and notification summaries derived from an activity collection
EXPORTS:
  - compute_stats(activities, now) -> ActivityStats
  - pending_today_activities(activities, now) -> List[Activity]
  - notification_badge_count(activities, now) -> int
  - notification_message(activities, now) -> Optional[str]
  - priority_activities(activities, limit) -> List[Activity]
  - should_notify(activities, now) -> bool
DEPENDENCIES:
  - reminders.core.dates (today/overdue filters)
  - reminders.core.models (Activity, ActivityStats)
NOTES:
  - Pure functions, recomputed from scratch on every call
  - Nothing here mutates activity status; promotion lives in the store
  - The badge count sums overdue and pending-today without de-duplication
"""

from datetime import datetime
from typing import Iterable, List, Optional

from .constants import (
    PRIORITY_RANK,
    PRIORITY_LIMIT,
    STATUS_PENDING,
    STATUS_COMPLETED,
    STATUS_OVERDUE,
)
from .dates import is_overdue, is_today, overdue_activities, today_activities
from .models import Activity, ActivityStats


def compute_stats(activities: Iterable[Activity], now: datetime) -> ActivityStats:
    """
    Aggregate counts for a collection at a given instant.

    Args:
        activities: Activity collection
        now: Evaluation instant

    Returns:
        ActivityStats where:
          - pending / completed count stored status
          - overdue counts stored 'vencido' plus pending activities that are
            already past due at now (observed, not written back)
          - today_count counts activities dated today regardless of status
    """
    activities = list(activities)
    stats = ActivityStats(total=len(activities))

    for activity in activities:
        if activity.status == STATUS_PENDING:
            stats.pending += 1
            if is_overdue(activity.date, activity.time, now):
                stats.overdue += 1
        elif activity.status == STATUS_COMPLETED:
            stats.completed += 1
        elif activity.status == STATUS_OVERDUE:
            stats.overdue += 1

        if is_today(activity.date, now):
            stats.today_count += 1

    return stats


def pending_today_activities(activities: Iterable[Activity], now: datetime) -> List[Activity]:
    return [a for a in today_activities(activities, now) if a.status == STATUS_PENDING]


def notification_badge_count(activities: Iterable[Activity], now: datetime) -> int:
    """
    Number shown on the notification badge.

    overdue + pending-today. An activity that is both (due earlier today)
    is counted twice.
    """
    activities = list(activities)
    return len(overdue_activities(activities, now)) + len(pending_today_activities(activities, now))


def notification_message(activities: Iterable[Activity], now: datetime) -> Optional[str]:
    """Toast text summarising what needs attention, or None if nothing does."""
    activities = list(activities)
    overdue_count = len(overdue_activities(activities, now))
    today_count = len(pending_today_activities(activities, now))

    if overdue_count > 0 and today_count > 0:
        return f"You have {overdue_count} overdue activities and {today_count} due today"
    if overdue_count > 0:
        return f"You have {overdue_count} overdue activities"
    if today_count > 0:
        return f"You have {today_count} activities due today"
    return None


def priority_activities(activities: Iterable[Activity], limit: int = PRIORITY_LIMIT) -> List[Activity]:
    """
    Pending activities ordered by priority (alta first), then by date.

    sorted() is stable, so ties keep their original relative order.
    """
    pending = [a for a in activities if a.status == STATUS_PENDING]
    ordered = sorted(pending, key=lambda a: (-PRIORITY_RANK[a.priority], a.date))
    return ordered[:limit]


def should_notify(activities: Iterable[Activity], now: datetime) -> bool:
    activities = list(activities)
    return bool(overdue_activities(activities, now)) or bool(pending_today_activities(activities, now))
