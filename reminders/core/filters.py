"""
FILE: reminders/core/filters.py
PURPOSE: Filtering and sorting for activity list views
EXPORTS:
  - filter_activities(activities, activity_filter) -> List[Activity]
  - sort_activities(activities, sort_by) -> List[Activity]
DEPENDENCIES:
  - reminders.core.models (Activity, ActivityFilter)
  - reminders.core.exceptions (InvalidInputError)
NOTES:
  - Filtering happens in Python over the in-memory collection
  - Search is a case-insensitive substring match on title or description
  - Sorting is stable for every option
"""

from typing import Iterable, List

from .constants import (
    FILTER_ALL,
    PRIORITY_RANK,
    SORT_DATE_ASC,
    SORT_DATE_DESC,
    SORT_PRIORITY,
    SORT_TITLE,
    SORT_OPTIONS,
)
from .exceptions import InvalidInputError
from .models import Activity, ActivityFilter


def _matches_search(activity: Activity, term: str) -> bool:
    if term in activity.title.lower():
        return True
    return bool(activity.description) and term in activity.description.lower()


def filter_activities(activities: Iterable[Activity], activity_filter: ActivityFilter) -> List[Activity]:
    """
    Apply a list view filter.

    Args:
        activities: Activity collection
        activity_filter: Fields set to 'all' (or an empty search) are ignored

    Returns:
        Matching activities in their original order
    """
    result = list(activities)

    if activity_filter.status != FILTER_ALL:
        result = [a for a in result if a.status == activity_filter.status]

    if activity_filter.category != FILTER_ALL:
        result = [a for a in result if a.category == activity_filter.category]

    if activity_filter.priority != FILTER_ALL:
        result = [a for a in result if a.priority == activity_filter.priority]

    if activity_filter.search_term:
        term = activity_filter.search_term.lower()
        result = [a for a in result if _matches_search(a, term)]

    return result


def sort_activities(activities: Iterable[Activity], sort_by: str = SORT_DATE_ASC) -> List[Activity]:
    """
    Sort activities for display.

    Args:
        activities: Activity collection
        sort_by: 'date-asc', 'date-desc', 'priority' (alta first) or 'title'

    Raises:
        InvalidInputError: If sort_by is not a known option
    """
    if sort_by == SORT_DATE_ASC:
        return sorted(activities, key=lambda a: a.date)
    if sort_by == SORT_DATE_DESC:
        return sorted(activities, key=lambda a: a.date, reverse=True)
    if sort_by == SORT_PRIORITY:
        return sorted(activities, key=lambda a: -PRIORITY_RANK[a.priority])
    if sort_by == SORT_TITLE:
        return sorted(activities, key=lambda a: a.title.casefold())

    raise InvalidInputError(
        f"Invalid sort option '{sort_by}'. Must be one of: {', '.join(SORT_OPTIONS)}"
    )
