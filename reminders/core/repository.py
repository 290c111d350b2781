"""
FILE: reminders/core/repository.py
PURPOSE: Persistence gateway - the only code that reads or writes durable storage
EXPORTS:
  - get_connection(db_path) -> Connection
  - init_database(conn) -> None
  - parse_document(text) -> List[Activity]
  - ActivityRepository (class)
      load() -> List[Activity]
      save_all(activities) -> bool
      add(activity) -> None
      update(activity) -> Activity | None
      delete(activity_id) -> bool
      export_all() -> str
      import_all(text) -> ImportResult
      clear_all() -> None
DEPENDENCIES:
  - sqlite3 (stdlib)
  - json (stdlib)
  - logging (stdlib)
  - pathlib (stdlib)
  - datetime (stdlib)
  - reminders.core.models (Activity, ImportResult)
  - reminders.core.exceptions (InvalidDocumentError)
NOTES:
  - Database stored at ~/.reminders/reminders.db
  - Storage is a key-value table holding one JSON document under STORAGE_KEY
  - The stored document is a bare array of activities; exports wrap it
    as {exportDate, version, activities}
  - Storage failures are logged and swallowed: reads return [], writes no-op
  - Every write is a full replace (load-modify-save_all)
"""

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from .constants import STORAGE_KEY, EXPORT_VERSION
from .exceptions import InvalidDocumentError
from .models import Activity, ImportResult


logger = logging.getLogger(__name__)

# Database file location (cross-platform)
DATA_DIR = Path.home() / ".reminders"
DB_PATH = DATA_DIR / "reminders.db"

# Failures treated as "storage unavailable"
STORAGE_ERRORS = (sqlite3.Error, OSError)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS storage (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
)
"""

INVALID_FORMAT_MESSAGE = "Invalid data format. No activities were found."
INVALID_JSON_MESSAGE = "Could not process the file. Make sure it is a valid JSON backup."


def get_connection(db_path: Path) -> sqlite3.Connection:
    """
    Get SQLite connection to the reminders database.

    Creates the parent directory if it doesn't exist.
    Enables row_factory for dict-like row access.
    Initializes the storage table on first connection.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row

    init_database(conn)

    return conn


def init_database(conn: sqlite3.Connection) -> None:
    """Create the key-value table. Safe to call multiple times."""
    conn.execute(SCHEMA_SQL)
    conn.commit()


def parse_document(text: str) -> List[Activity]:
    """
    Parse and validate a backup document.

    Args:
        text: JSON text shaped like {"activities": [...], ...}

    Returns:
        Validated activities in document order

    Raises:
        InvalidDocumentError: If the text is not JSON, has no activities list,
            contains a malformed activity or repeats an id
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        raise InvalidDocumentError(INVALID_JSON_MESSAGE)

    if not isinstance(data, dict) or not isinstance(data.get("activities"), list):
        raise InvalidDocumentError(INVALID_FORMAT_MESSAGE)

    activities = []
    seen_ids = set()
    for index, entry in enumerate(data["activities"]):
        activity = Activity.from_dict(entry, index)
        if activity.id in seen_ids:
            raise InvalidDocumentError(f"duplicate id '{activity.id}'", index)
        seen_ids.add(activity.id)
        activities.append(activity)

    return activities


class ActivityRepository:
    """
    Gateway to the persisted activity document.

    Args:
        db_path: SQLite file to use (defaults to DB_PATH at call time)
        clock: Returns the current local time; used for updatedAt and exportDate
    """

    def __init__(
        self,
        db_path: Optional[Path] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._db_path = db_path
        self.clock = clock

    @property
    def db_path(self) -> Path:
        return self._db_path or DB_PATH

    # --- Raw document access ---

    def _read_document(self) -> Optional[str]:
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(
                "SELECT value FROM storage WHERE key = ?", (STORAGE_KEY,)
            ).fetchone()
        finally:
            conn.close()
        return row["value"] if row else None

    def _write_document(self, text: str) -> None:
        conn = get_connection(self.db_path)
        try:
            with conn:
                conn.execute(
                    "INSERT OR REPLACE INTO storage (key, value) VALUES (?, ?)",
                    (STORAGE_KEY, text),
                )
        finally:
            conn.close()

    # --- Gateway operations ---

    def load(self) -> List[Activity]:
        """
        Load every stored activity.

        Returns:
            Stored activities, or [] if nothing is stored or storage is unreadable

        Notes:
            - Never raises; failures are logged
            - Individual malformed entries are skipped with a warning; the next
              save_all() writes the collection without them
        """
        try:
            text = self._read_document()
        except STORAGE_ERRORS as e:
            logger.error(f"Error loading activities from {self.db_path}: {e}")
            return []

        if text is None:
            return []

        try:
            raw = json.loads(text)
        except ValueError as e:
            logger.error(f"Stored activity document is not valid JSON: {e}")
            return []

        if not isinstance(raw, list):
            logger.error("Stored activity document is not a list, ignoring it")
            return []

        activities = []
        for index, entry in enumerate(raw):
            try:
                activities.append(Activity.from_dict(entry, index))
            except InvalidDocumentError as e:
                logger.warning(f"Skipping stored activity, it will be dropped on the next save: {e}")

        return activities

    def save_all(self, activities: List[Activity]) -> bool:
        """
        Replace the whole stored collection.

        Returns:
            True if written, False if storage failed (failure is logged, not raised)
        """
        text = json.dumps([a.to_dict() for a in activities], ensure_ascii=False)
        try:
            self._write_document(text)
        except STORAGE_ERRORS as e:
            logger.error(f"Error saving activities to {self.db_path}: {e}")
            return False

        logger.debug(f"Saved {len(activities)} activities")
        return True

    def add(self, activity: Activity) -> None:
        activities = self.load()
        activities.append(activity)
        self.save_all(activities)

    def update(self, activity: Activity) -> Optional[Activity]:
        """
        Replace the stored activity with the same id.

        Returns:
            The stored version (updated_at set to now), or None if the id is not stored

        Notes:
            - updated_at is always overwritten, whatever the caller passed
        """
        activities = self.load()
        for index, existing in enumerate(activities):
            if existing.id == activity.id:
                stored = activity.with_changes(updated_at=self.clock())
                activities[index] = stored
                self.save_all(activities)
                return stored
        return None

    def delete(self, activity_id: str) -> bool:
        """Remove an activity by id. Returns False if it was not stored."""
        activities = self.load()
        remaining = [a for a in activities if a.id != activity_id]
        if len(remaining) == len(activities):
            return False
        self.save_all(remaining)
        return True

    def export_all(self) -> str:
        """
        Produce a backup document as JSON text (2-space indentation).

        Format:
            {"exportDate": <ISO instant, UTC>, "version": "1.0", "activities": [...]}
        """
        export_date = self.clock().astimezone(timezone.utc)
        document = {
            "exportDate": export_date.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "version": EXPORT_VERSION,
            "activities": [a.to_dict() for a in self.load()],
        }
        return json.dumps(document, indent=2, ensure_ascii=False)

    def import_all(self, text: str) -> ImportResult:
        """
        Replace the stored collection with the activities of a backup document.

        Returns:
            ImportResult with a message that can be shown to the user as-is

        Notes:
            - Full replace, not merge
            - The document is validated completely before anything is written
            - Never raises
        """
        try:
            activities = parse_document(text)
        except InvalidDocumentError as e:
            logger.warning(f"Rejected import: {e}")
            message = str(e)
            if e.index is not None:
                message = f"Invalid activity data. {message}"
            return ImportResult(success=False, message=message)

        if not self.save_all(activities):
            return ImportResult(
                success=False,
                message="Could not save the imported activities. Storage is unavailable.",
            )

        logger.info(f"Imported {len(activities)} activities")
        return ImportResult(
            success=True,
            message=f"{len(activities)} activities imported successfully.",
            count=len(activities),
        )

    def clear_all(self) -> None:
        """Remove the stored document entirely."""
        try:
            conn = get_connection(self.db_path)
            try:
                with conn:
                    conn.execute("DELETE FROM storage WHERE key = ?", (STORAGE_KEY,))
            finally:
                conn.close()
        except STORAGE_ERRORS as e:
            logger.error(f"Error clearing activities in {self.db_path}: {e}")
