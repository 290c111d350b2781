"""
FILE: reminders/core/dates.py
PURPOSE: Date/time helpers for due instants, overdue detection and calendar views
EXPORTS:
  - combine_date_and_time(day, time) -> datetime
  - is_overdue(day, time, now) -> bool
  - is_today(day, now) -> bool
  - today_activities(activities, now) -> List[Activity]
  - overdue_activities(activities, now) -> List[Activity]
  - upcoming_activities(activities, now, days) -> List[Activity]
  - activities_for_date(activities, day) -> List[Activity]
  - calendar_days(day) -> List[date]
  - format_activity_date(day, now) -> str
  - format_activity_datetime(day, time, now) -> str
  - format_relative_time(instant, now) -> str
DEPENDENCIES:
  - datetime (stdlib)
  - reminders.core.models (Activity)
NOTES:
  - Everything here is pure: callers pass 'now' explicitly
  - All instants are local wall-clock time (no timezone handling)
  - Overdue comparison is strict: due == now is not overdue
"""

from datetime import date, datetime, time as dt_time, timedelta
from typing import Iterable, List

from .constants import STATUS_PENDING, UPCOMING_DAYS
from .models import Activity


CALENDAR_GRID_DAYS = 42  # 6 weeks x 7 days


def combine_date_and_time(day: date, time: str) -> datetime:
    """
    Combine a calendar day and an HH:MM string into one instant.

    Seconds and microseconds are always zero.
    """
    hours, minutes = (int(part) for part in time.split(":"))
    return datetime.combine(day, dt_time(hour=hours, minute=minutes))


def is_overdue(day: date, time: str, now: datetime) -> bool:
    """True if the due instant is strictly before now."""
    return combine_date_and_time(day, time) < now


def is_today(day: date, now: datetime) -> bool:
    return day == now.date()


def today_activities(activities: Iterable[Activity], now: datetime) -> List[Activity]:
    """Activities dated today, whatever their status."""
    return [a for a in activities if is_today(a.date, now)]


def overdue_activities(activities: Iterable[Activity], now: datetime) -> List[Activity]:
    """
    Pending activities whose due instant has already passed.

    Activities already stored as 'vencido' are not included; this is the
    set that still needs promotion (and the set notifications count).
    """
    return [
        a for a in activities
        if a.status == STATUS_PENDING and is_overdue(a.date, a.time, now)
    ]


def upcoming_activities(
    activities: Iterable[Activity],
    now: datetime,
    days: int = UPCOMING_DAYS,
) -> List[Activity]:
    """
    Activities due after now and no later than now + days.

    The window excludes now and includes its end instant.
    """
    window_end = now + timedelta(days=days)
    result = []
    for activity in activities:
        due = combine_date_and_time(activity.date, activity.time)
        if now < due <= window_end:
            result.append(activity)
    return result


def activities_for_date(activities: Iterable[Activity], day: date) -> List[Activity]:
    """Activities scheduled on a given calendar day (calendar day view)."""
    return [a for a in activities if a.date == day]


def calendar_days(day: date) -> List[date]:
    """
    Days shown in a month grid for the month containing 'day'.

    The grid starts on the Sunday on or before the 1st and always
    spans 42 days, so it covers every month layout.
    """
    first = day.replace(day=1)
    # date.weekday(): Monday=0 ... Sunday=6
    offset = (first.weekday() + 1) % 7
    start = first - timedelta(days=offset)
    return [start + timedelta(days=i) for i in range(CALENDAR_GRID_DAYS)]


def format_activity_date(day: date, now: datetime) -> str:
    """Human label for a date: Today, Tomorrow, Yesterday or dd/mm/YYYY."""
    today = now.date()
    if day == today:
        return "Today"
    if day == today + timedelta(days=1):
        return "Tomorrow"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return day.strftime("%d/%m/%Y")


def format_activity_datetime(day: date, time: str, now: datetime) -> str:
    return f"{format_activity_date(day, now)} at {time}"


def format_relative_time(instant: datetime, now: datetime) -> str:
    """
    Describe an instant relative to now ("in 3 hours", "2 days ago").

    Hours are floored, so anything within the coming hour reads "in 0 hours".
    """
    seconds = (instant - now).total_seconds()
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if hours < 0:
        if -hours < 24:
            return f"{-hours} hours ago"
        return f"{-days} days ago"

    if hours < 24:
        return f"in {hours} hours"

    return f"in {days} days"
