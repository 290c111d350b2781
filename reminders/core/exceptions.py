"""
FILE: reminders/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - RemindersError (base exception)
  - ActivityNotFoundError
  - InvalidInputError
  - InvalidDocumentError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from RemindersError for easy catching
  - Exceptions include context (IDs, field names) for helpful error messages
  - The store never raises these for unknown ids; the CLI uses
    ActivityNotFoundError to report a lookup miss to the user
  - InvalidDocumentError is converted to an ImportResult at the repository
"""


class RemindersError(Exception):
    """Base exception for all reminders errors."""
    pass


class ActivityNotFoundError(RemindersError):
    """Activity with given ID doesn't exist."""

    def __init__(self, activity_id: str):
        self.activity_id = activity_id
        super().__init__(f"Activity {activity_id} not found")


class InvalidInputError(RemindersError):
    """Input validation failed."""

    def __init__(self, message: str):
        super().__init__(message)


class InvalidDocumentError(RemindersError):
    """A persisted or imported document does not match the expected shape."""

    def __init__(self, message: str, index: int = None):
        self.index = index
        if index is not None:
            message = f"Activity #{index + 1}: {message}"
        super().__init__(message)
