"""
FILE: reminders/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - PRIORITIES, CATEGORIES, STATUSES: Valid domain values
  - PRIORITY_RANK: Ordering weight for priorities
  - STORAGE_KEY, EXPORT_VERSION: Persisted document contract
  - REFRESH_INTERVAL_SECONDS, PRIORITY_LIMIT, UPCOMING_DAYS: Tunables
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - Domain values are part of the persisted format, do not translate them
  - Single source of truth for status and priority strings
"""

# Priority constants
PRIORITY_HIGH = "alta"
PRIORITY_MEDIUM = "media"
PRIORITY_LOW = "baja"
PRIORITIES = (PRIORITY_HIGH, PRIORITY_MEDIUM, PRIORITY_LOW)
PRIORITY_RANK = {PRIORITY_HIGH: 3, PRIORITY_MEDIUM: 2, PRIORITY_LOW: 1}

# Category constants
CATEGORIES = ("trabajo", "personal", "salud", "estudio", "hogar")

# Status constants
STATUS_PENDING = "pendiente"
STATUS_COMPLETED = "completado"
STATUS_OVERDUE = "vencido"
STATUSES = (STATUS_PENDING, STATUS_COMPLETED, STATUS_OVERDUE)

# Filter wildcard
FILTER_ALL = "all"

# Sort options for list views
SORT_DATE_ASC = "date-asc"
SORT_DATE_DESC = "date-desc"
SORT_PRIORITY = "priority"
SORT_TITLE = "title"
SORT_OPTIONS = (SORT_DATE_ASC, SORT_DATE_DESC, SORT_PRIORITY, SORT_TITLE)

# Persistence
STORAGE_KEY = "activity-reminders-app"
EXPORT_VERSION = "1.0"

# Form limits
TITLE_MAX_LENGTH = 100
DEFAULT_TIME = "09:00"

# Derived views
REFRESH_INTERVAL_SECONDS = 60
PRIORITY_LIMIT = 5
UPCOMING_DAYS = 7
