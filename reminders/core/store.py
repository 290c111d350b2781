"""
FILE: reminders/core/store.py
PURPOSE: Authoritative in-memory activity state with persistence and derived stats
EXPORTS:
  - ActivityState (dataclass)
  - SetLoading, LoadActivities, AddActivity, UpdateActivity, DeleteActivity,
    UpdateStats (action dataclasses)
  - reduce(state, action, now) -> ActivityState
  - next_status(status) -> str
  - RefreshTimer (class)
  - ActivityStore (class)
DEPENDENCIES:
  - dataclasses (stdlib)
  - threading (stdlib)
  - uuid (stdlib)
  - logging (stdlib)
  - reminders.core.repository (ActivityRepository)
  - reminders.core.notifications (compute_stats)
  - reminders.core.dates (overdue_activities)
  - reminders.core.models (Activity, ActivityFormData, ImportResult)
NOTES:
  - One store per application, created and closed by the composition root
  - reduce() is pure; the store is the only place that dispatches actions
  - Stats are recomputed on every state change and never drift from activities
  - Overdue promotion (pendiente -> vencido) is persisted both on load and
    on every refresh tick; both reload from storage before promoting
  - Unknown ids are silent no-ops for update/toggle/delete
  - Mutations hold the store lock because the refresh tick runs on a
    background thread
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .constants import (
    REFRESH_INTERVAL_SECONDS,
    STATUS_PENDING,
    STATUS_COMPLETED,
    STATUS_OVERDUE,
)
from .dates import overdue_activities
from .models import Activity, ActivityFormData, ActivityStats, ImportResult
from .notifications import compute_stats
from .repository import ActivityRepository


logger = logging.getLogger(__name__)

# Fields a patch may not change
IMMUTABLE_FIELDS = ("id", "created_at", "updated_at")
PATCHABLE_FIELDS = tuple(f.name for f in fields(Activity) if f.name not in IMMUTABLE_FIELDS)


# --- State and actions ---


@dataclass(frozen=True)
class ActivityState:
    """Snapshot of the store as seen by the presentation layer."""

    activities: Tuple[Activity, ...] = ()
    stats: ActivityStats = field(default_factory=ActivityStats)
    loading: bool = True


@dataclass(frozen=True)
class SetLoading:
    loading: bool


@dataclass(frozen=True)
class LoadActivities:
    activities: Tuple[Activity, ...]


@dataclass(frozen=True)
class AddActivity:
    activity: Activity


@dataclass(frozen=True)
class UpdateActivity:
    activity: Activity


@dataclass(frozen=True)
class DeleteActivity:
    activity_id: str


@dataclass(frozen=True)
class UpdateStats:
    stats: ActivityStats


Action = Union[SetLoading, LoadActivities, AddActivity, UpdateActivity, DeleteActivity, UpdateStats]


def _with_activities(state: ActivityState, activities, now: datetime) -> ActivityState:
    activities = tuple(activities)
    return replace(state, activities=activities, stats=compute_stats(activities, now))


def reduce(state: ActivityState, action: Action, now: datetime) -> ActivityState:
    """
    Apply one action to a state and return the new state.

    Args:
        state: Current state (not modified)
        action: What happened
        now: Evaluation instant for recomputed stats

    Returns:
        New ActivityState; stats are recomputed whenever activities change
    """
    if isinstance(action, SetLoading):
        return replace(state, loading=action.loading)

    if isinstance(action, LoadActivities):
        return replace(_with_activities(state, action.activities, now), loading=False)

    if isinstance(action, AddActivity):
        return _with_activities(state, state.activities + (action.activity,), now)

    if isinstance(action, UpdateActivity):
        updated = (
            action.activity if a.id == action.activity.id else a
            for a in state.activities
        )
        return _with_activities(state, updated, now)

    if isinstance(action, DeleteActivity):
        remaining = (a for a in state.activities if a.id != action.activity_id)
        return _with_activities(state, remaining, now)

    if isinstance(action, UpdateStats):
        return replace(state, stats=action.stats)

    raise TypeError(f"Unknown action: {action!r}")


def next_status(status: str) -> str:
    """Toggle rule: completado -> pendiente, anything else -> completado."""
    if status == STATUS_COMPLETED:
        return STATUS_PENDING
    return STATUS_COMPLETED


# --- Periodic refresh ---


class RefreshTimer:
    """
    Calls a function every `interval` seconds on a daemon thread until stopped.

    Errors raised by the callback are logged and the timer keeps running.
    """

    def __init__(self, interval: float, callback: Callable[[], Any]):
        self.interval = interval
        self.callback = callback
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stopped.clear()
        self._thread = threading.Thread(
            target=self._run, name="reminders-refresh", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            try:
                self.callback()
            except Exception:
                logger.exception("Periodic refresh failed")

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stopped.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None


# --- Store ---


class ActivityStore:
    """
    The application's activity state.

    Args:
        repository: Persistence gateway (defaults to ActivityRepository() with the same clock)
        clock: Returns the current local time
        refresh_interval: Seconds between refresh ticks once start() is called

    Usage:
        with ActivityStore() as store:
            store.create(form_data)
            print(store.stats.pending)
    """

    def __init__(
        self,
        repository: Optional[ActivityRepository] = None,
        clock: Callable[[], datetime] = datetime.now,
        refresh_interval: float = REFRESH_INTERVAL_SECONDS,
    ):
        self.clock = clock
        self.repository = repository or ActivityRepository(clock=clock)
        self._state = ActivityState()
        self._lock = threading.RLock()
        self._timer = RefreshTimer(refresh_interval, self.refresh)

    # --- Read access ---

    @property
    def state(self) -> ActivityState:
        return self._state

    @property
    def activities(self) -> List[Activity]:
        return list(self._state.activities)

    @property
    def stats(self) -> ActivityStats:
        return self._state.stats

    @property
    def loading(self) -> bool:
        return self._state.loading

    def get(self, activity_id: str) -> Optional[Activity]:
        return next((a for a in self._state.activities if a.id == activity_id), None)

    def _dispatch(self, action: Action) -> None:
        self._state = reduce(self._state, action, self.clock())

    # --- Lifecycle ---

    def start(self) -> "ActivityStore":
        """Load state and start the periodic refresh."""
        self.load()
        self._timer.start()
        return self

    def close(self) -> None:
        """Stop the periodic refresh. Safe to call more than once."""
        self._timer.stop()

    def __enter__(self) -> "ActivityStore":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- Operations ---

    def _promote_overdue(self, activities: List[Activity], now: datetime) -> List[Activity]:
        """
        Mark every pending, past-due activity as 'vencido' and persist the change.

        Returns:
            The promoted activities (already persisted)
        """
        due = {a.id for a in overdue_activities(activities, now)}
        if not due:
            return []

        promoted = []
        for index, activity in enumerate(activities):
            if activity.id in due:
                activities[index] = activity.with_changes(status=STATUS_OVERDUE, updated_at=now)
                promoted.append(activities[index])

        self.repository.save_all(activities)
        logger.info(f"Marked {len(promoted)} activities as overdue")
        return promoted

    def load(self) -> None:
        """
        Reload activities from storage.

        Promotes and persists overdue activities, then replaces the in-memory
        collection. Calling it twice in a row gives the same state.
        """
        with self._lock:
            self._dispatch(SetLoading(True))
            activities = self.repository.load()
            self._promote_overdue(activities, self.clock())
            self._dispatch(LoadActivities(tuple(activities)))
            logger.debug(f"Loaded {len(activities)} activities")

    def refresh(self) -> None:
        """
        Periodic tick: persist newly overdue activities and recompute stats.

        Re-reads storage first, so changes written by another process since
        the last tick are picked up rather than overwritten.
        """
        with self._lock:
            now = self.clock()
            activities = self.repository.load()
            self._promote_overdue(activities, now)
            self._dispatch(LoadActivities(tuple(activities)))

    def create(self, form_data: ActivityFormData) -> Activity:
        """
        Create a new pending activity.

        Returns:
            The created Activity (fresh UUID, created_at == updated_at == now)
        """
        with self._lock:
            now = self.clock()
            activity = Activity(
                id=str(uuid.uuid4()),
                title=form_data.title,
                description=form_data.description,
                date=form_data.date,
                time=form_data.time,
                priority=form_data.priority,
                category=form_data.category,
                status=STATUS_PENDING,
                created_at=now,
                updated_at=now,
            )
            self.repository.add(activity)
            self._dispatch(AddActivity(activity))
            logger.debug(f"Created activity {activity.id}: {activity.title}")
            return activity

    def update_partial(self, activity_id: str, patch: Dict[str, Any]) -> Optional[Activity]:
        """
        Merge a patch into an existing activity.

        Args:
            activity_id: Activity to change
            patch: Field name -> new value (id, created_at and updated_at are ignored)

        Returns:
            The updated Activity, or None if the id is unknown (no-op)
        """
        with self._lock:
            existing = self.get(activity_id)
            if existing is None:
                return None

            ignored = [key for key in patch if key not in PATCHABLE_FIELDS]
            if ignored:
                logger.warning(f"Ignoring non-editable fields in update: {', '.join(ignored)}")
            changes = {key: value for key, value in patch.items() if key in PATCHABLE_FIELDS}

            updated = existing.with_changes(**changes, updated_at=self.clock())
            stored = self.repository.update(updated)
            if stored is not None:
                updated = stored

            self._dispatch(UpdateActivity(updated))
            return updated

    def toggle_status(self, activity_id: str) -> Optional[Activity]:
        """Flip completado <-> pendiente; vencido becomes completado. Unknown id is a no-op."""
        with self._lock:
            existing = self.get(activity_id)
            if existing is None:
                return None
            return self.update_partial(activity_id, {"status": next_status(existing.status)})

    def delete(self, activity_id: str) -> None:
        """Delete an activity from storage and memory. Unknown id is a no-op."""
        with self._lock:
            if self.get(activity_id) is None:
                return
            self.repository.delete(activity_id)
            self._dispatch(DeleteActivity(activity_id))

    def clear_all(self) -> None:
        """Remove every activity from storage and memory."""
        with self._lock:
            self.repository.clear_all()
            self._dispatch(LoadActivities(()))

    def export_data(self) -> str:
        return self.repository.export_all()

    def import_data(self, text: str) -> ImportResult:
        """
        Replace all activities with the contents of a backup document.

        On success the store reloads (including the overdue pass).
        On failure nothing changes.
        """
        with self._lock:
            result = self.repository.import_all(text)
            if result.success:
                self.load()
            return result
