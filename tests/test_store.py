"""
Test suite for the activity store

Tests the reducer, overdue promotion on load and refresh, CRUD operations,
the toggle rule, and import/export through the store.
"""

import json
import time
from datetime import date, datetime

import pytest

from reminders.core.models import ActivityFormData, ActivityStats
from reminders.core.repository import ActivityRepository
from reminders.core.store import (
    ActivityState,
    ActivityStore,
    AddActivity,
    DeleteActivity,
    LoadActivities,
    RefreshTimer,
    SetLoading,
    UpdateActivity,
    UpdateStats,
    next_status,
    reduce,
)


NOW = datetime(2024, 1, 10, 12, 0)


@pytest.fixture
def repo(clock):
    return ActivityRepository(clock=clock)


@pytest.fixture
def store(repo, clock):
    store = ActivityStore(repository=repo, clock=clock)
    store.load()
    return store


def form(**overrides):
    fields = {
        "title": "Dentist",
        "date": date(2024, 1, 15),
        "time": "16:30",
        "priority": "alta",
        "category": "salud",
        "description": None,
    }
    fields.update(overrides)
    return ActivityFormData(**fields)


# --- Reducer ---

def test_reduce_load_clears_loading(make_activity):
    """Test that loading flips off once activities arrive."""
    activity = make_activity()
    state = reduce(ActivityState(), LoadActivities((activity,)), NOW)

    assert state.activities == (activity,)
    assert state.loading is False
    assert state.stats.total == 1


def test_reduce_recomputes_stats(make_activity):
    """Test that add, update and delete keep stats in sync."""
    activity = make_activity()
    state = reduce(ActivityState(loading=False), AddActivity(activity), NOW)
    assert state.stats.pending == 1

    state = reduce(state, UpdateActivity(activity.with_changes(status="completado")), NOW)
    assert (state.stats.pending, state.stats.completed) == (0, 1)

    state = reduce(state, DeleteActivity(activity.id), NOW)
    assert state.stats.total == 0
    assert state.activities == ()


def test_reduce_does_not_modify_input(make_activity):
    original = ActivityState()

    reduce(original, AddActivity(make_activity()), NOW)

    assert original.activities == ()


def test_reduce_set_loading_and_stats():
    state = reduce(ActivityState(), SetLoading(False), NOW)
    assert state.loading is False

    stats = ActivityStats(total=9)
    assert reduce(state, UpdateStats(stats), NOW).stats is stats


def test_reduce_unknown_action():
    with pytest.raises(TypeError):
        reduce(ActivityState(), object(), NOW)


def test_next_status():
    """Test the toggle rule including the vencido case."""
    assert next_status("pendiente") == "completado"
    assert next_status("completado") == "pendiente"
    assert next_status("vencido") == "completado"


# --- Load ---

def test_new_store_is_loading(repo, clock):
    assert ActivityStore(repository=repo, clock=clock).loading


def test_load_is_idempotent(repo, clock, make_activity):
    """Test that two loads in a row give equal state."""
    repo.save_all([make_activity(), make_activity(date=date(2024, 1, 1))])
    store = ActivityStore(repository=repo, clock=clock)

    store.load()
    first = store.state
    store.load()

    assert store.state == first
    assert store.loading is False


def test_load_promotes_and_persists_overdue(repo, clock, make_activity):
    """Test that past-due pending activities become vencido on disk too."""
    past = make_activity(id="past", date=date(2024, 1, 9))
    done = make_activity(id="done", date=date(2024, 1, 9), status="completado")
    future = make_activity(id="future")
    repo.save_all([past, done, future])

    store = ActivityStore(repository=repo, clock=clock)
    store.load()

    assert store.get("past").status == "vencido"
    assert store.get("past").updated_at == NOW
    assert store.get("done").status == "completado"
    assert store.get("future").status == "pendiente"

    persisted = {a.id: a.status for a in ActivityRepository().load()}
    assert persisted == {"past": "vencido", "done": "completado", "future": "pendiente"}


def test_stats_match_activities_after_load(store, repo, make_activity):
    repo.save_all([make_activity(), make_activity(status="completado")])

    store.load()

    assert store.stats.total == 2
    assert store.stats.pending + store.stats.completed == 2


# --- Create / update / toggle / delete ---

def test_create(store, clock):
    """Test a new activity's generated fields and persistence."""
    activity = store.create(form(description="Bring card"))

    assert activity.status == "pendiente"
    assert activity.created_at == activity.updated_at == NOW
    assert len(activity.id) == 36
    assert store.activities == [activity]
    assert store.stats.pending == 1
    assert ActivityRepository().load() == [activity]


def test_create_gives_unique_ids(store):
    ids = {store.create(form()).id for _ in range(5)}

    assert len(ids) == 5


def test_update_partial(store, clock):
    """Test that a patch merges fields and stamps updated_at."""
    activity = store.create(form())
    clock.advance(minutes=5)

    updated = store.update_partial(activity.id, {"title": "Dentist (moved)", "time": "17:00"})

    assert updated.title == "Dentist (moved)"
    assert updated.time == "17:00"
    assert updated.priority == "alta"
    assert updated.updated_at == datetime(2024, 1, 10, 12, 5)
    assert store.get(activity.id) == updated
    assert ActivityRepository().load() == [updated]


def test_update_partial_ignores_immutable_fields(store):
    """Test that id and createdAt cannot be patched."""
    activity = store.create(form())

    updated = store.update_partial(
        activity.id, {"id": "other", "created_at": datetime(2000, 1, 1), "title": "New"}
    )

    assert updated.id == activity.id
    assert updated.created_at == activity.created_at
    assert updated.title == "New"


def test_update_partial_unknown_id(store):
    """Test that an unknown id changes nothing."""
    store.create(form())
    before = store.state

    assert store.update_partial("missing", {"title": "x"}) is None
    assert store.state == before


def test_toggle_twice_restores_status(store):
    """Test that toggling a pending activity twice leaves it pending."""
    activity = store.create(form())

    assert store.toggle_status(activity.id).status == "completado"
    assert store.toggle_status(activity.id).status == "pendiente"
    assert store.stats.completed == 0


def test_toggle_overdue_completes(store, repo, make_activity):
    """Test that vencido toggles to completado."""
    repo.save_all([make_activity(id="late", date=date(2024, 1, 1))])
    store.load()

    assert store.toggle_status("late").status == "completado"


def test_toggle_unknown_id(store):
    assert store.toggle_status("missing") is None


def test_delete(store):
    keep = store.create(form(title="Keep"))
    drop = store.create(form(title="Drop"))

    store.delete(drop.id)

    assert store.activities == [keep]
    assert store.stats.total == 1
    assert [a.id for a in ActivityRepository().load()] == [keep.id]


def test_delete_unknown_id(store):
    """Test that deleting an unknown id leaves state unchanged."""
    store.create(form())
    before = store.state

    store.delete("missing")

    assert store.state == before


def test_clear_all(store):
    """Test that clearing zeroes activities, stats and storage."""
    store.create(form())
    store.create(form())

    store.clear_all()

    assert store.activities == []
    assert store.stats == ActivityStats()
    assert ActivityRepository().load() == []


# --- Import / export ---

def test_import_failure_leaves_state(store):
    """Test that a rejected import changes neither memory nor storage."""
    activity = store.create(form())
    before = store.state

    result = store.import_data('{"foo": 1}')

    assert not result.success
    assert store.state == before
    assert ActivityRepository().load() == [activity]


def test_export_import_round_trip(store):
    """Test that exporting and importing back restores the same activities."""
    store.create(form(title="One"))
    store.create(form(title="Two", description="second"))
    exported = store.export_data()
    before = store.activities

    store.clear_all()
    result = store.import_data(exported)

    assert result.success
    assert result.count == 2
    assert store.activities == before
    assert json.loads(exported)["version"] == "1.0"


def test_import_runs_overdue_pass(store, make_activity):
    """Test that imported past-due activities are promoted."""
    entry = make_activity(date=date(2024, 1, 1)).to_dict()
    text = json.dumps({"version": "1.0", "activities": [entry]})

    assert store.import_data(text).success
    assert store.activities[0].status == "vencido"


# --- Refresh ---

def test_refresh_promotes_and_persists(store, clock):
    """Test that time passing turns a pending activity into vencido."""
    activity = store.create(form(date=date(2024, 1, 10), time="12:30"))
    assert store.stats.overdue == 0

    clock.advance(hours=1)
    store.refresh()

    assert store.get(activity.id).status == "vencido"
    assert store.stats.overdue == 1
    assert ActivityRepository().load()[0].status == "vencido"


def test_refresh_keeps_activities_added_by_another_store(store, clock):
    """Test that a tick reloads storage instead of overwriting it."""
    store.create(form(title="soon", date=date(2024, 1, 10), time="12:30"))
    other = ActivityStore(repository=ActivityRepository(clock=clock), clock=clock)
    other.load()
    other.create(form(title="added elsewhere"))

    clock.advance(hours=1)
    store.refresh()

    persisted = {a.title: a.status for a in ActivityRepository().load()}
    assert persisted == {"soon": "vencido", "added elsewhere": "pendiente"}
    assert {a.title for a in store.activities} == {"soon", "added elsewhere"}


def test_refresh_without_changes_keeps_activities(store):
    store.create(form())
    before = store.activities

    store.refresh()

    assert store.activities == before


def test_refresh_timer_calls_back_until_stopped():
    """Test that the timer ticks on its own thread and stops cleanly."""
    calls = []
    timer = RefreshTimer(0.01, lambda: calls.append(1))

    timer.start()
    deadline = time.monotonic() + 2
    while not calls and time.monotonic() < deadline:
        time.sleep(0.01)
    timer.stop(timeout=1)

    assert calls
    assert not timer.is_running


def test_refresh_timer_survives_callback_errors():
    calls = []

    def flaky():
        calls.append(1)
        raise RuntimeError("boom")

    timer = RefreshTimer(0.01, flaky)
    timer.start()
    deadline = time.monotonic() + 2
    while len(calls) < 2 and time.monotonic() < deadline:
        time.sleep(0.01)
    timer.stop(timeout=1)

    assert len(calls) >= 2


def test_store_context_manager(repo, clock):
    """Test that the store loads on enter and stops its timer on exit."""
    with ActivityStore(repository=repo, clock=clock, refresh_interval=60) as store:
        assert not store.loading
        assert store._timer.is_running

    assert not store._timer.is_running
