"""
Test suite for the command line interface

Runs commands in-process with typer's CliRunner against a temporary
database passed through --db.
"""

import json

import pytest
from typer.testing import CliRunner

from reminders import __version__
from reminders.cli.main import app


runner = CliRunner()

FUTURE = "2099-06-01"
PAST = "2000-01-01"


@pytest.fixture
def cli(tmp_path):
    """Invoke the CLI against a per-test database."""
    db = tmp_path / "cli.db"

    def _invoke(*args, input=None):
        return runner.invoke(app, ["--db", str(db), *args], input=input)

    return _invoke


def add_activity(cli, title, *options):
    """Create an activity and return its full ID."""
    result = cli("add", title, *options, "--json")
    assert result.exit_code == 0, result.output
    return json.loads(result.output)["id"]


# --- add / ls / show ---

def test_add_and_list(cli):
    """Test that a created activity shows up in the listing."""
    result = cli("add", "Dentist", "--date", FUTURE, "--time", "16:30", "-p", "alta", "-c", "salud")

    assert result.exit_code == 0
    assert "Created activity" in result.output

    listing = json.loads(cli("ls", "--json").output)
    assert len(listing) == 1
    assert listing[0]["title"] == "Dentist"
    assert listing[0]["priority"] == "alta"
    assert listing[0]["status"] == "pendiente"


def test_add_json_output(cli):
    result = cli("add", "Call mum", "--date", FUTURE, "--desc", "Sunday", "--json")

    data = json.loads(result.output)
    assert data["description"] == "Sunday"
    assert data["time"] == "09:00"
    assert data["category"] == "personal"


@pytest.mark.parametrize(
    "args",
    [
        ["add", "   ", "--date", FUTURE],
        ["add", "x" * 101, "--date", FUTURE],
        ["add", "Bad time", "--date", FUTURE, "--time", "25:00"],
        ["add", "Bad date", "--date", "01/02/2099"],
        ["add", "Bad priority", "--date", FUTURE, "-p", "urgent"],
    ],
)
def test_add_rejects_invalid_input(cli, args):
    """Test that invalid input exits with code 1 and stores nothing."""
    result = cli(*args)

    assert result.exit_code == 1
    assert "Error" in result.output
    assert json.loads(cli("ls", "--json").output) == []


def test_add_past_date_is_flagged_overdue(cli):
    """Test that a past-due activity is marked overdue on the next load."""
    add_activity(cli, "Old task", "--date", PAST)

    listing = json.loads(cli("ls", "--json").output)

    assert listing[0]["status"] == "vencido"


def test_ls_filters_and_sort(cli):
    add_activity(cli, "Beta", "--date", FUTURE, "-c", "trabajo", "-p", "baja")
    add_activity(cli, "alpha", "--date", "2099-07-01", "-c", "hogar", "-p", "alta")

    by_category = json.loads(cli("ls", "-c", "hogar", "--json").output)
    by_title = json.loads(cli("ls", "--sort", "title", "--json").output)
    by_priority = json.loads(cli("ls", "--sort", "priority", "--json").output)

    assert [a["title"] for a in by_category] == ["alpha"]
    assert [a["title"] for a in by_title] == ["alpha", "Beta"]
    assert [a["title"] for a in by_priority] == ["alpha", "Beta"]


def test_ls_search(cli):
    add_activity(cli, "Dentist", "--date", FUTURE, "--desc", "Bring insurance card")
    add_activity(cli, "Groceries", "--date", FUTURE)

    result = cli("ls", "-q", "INSURANCE", "--raw")

    assert "Dentist" in result.output
    assert "Groceries" not in result.output


def test_ls_invalid_filter(cli):
    result = cli("ls", "--status", "finished")

    assert result.exit_code == 1


def test_ls_empty(cli):
    assert "No activities found" in cli("ls").output


def test_show_by_prefix(cli):
    activity_id = add_activity(cli, "Dentist", "--date", FUTURE)

    result = cli("show", activity_id[:8], "--json")

    assert result.exit_code == 0
    assert json.loads(result.output)["id"] == activity_id


def test_show_unknown_id(cli):
    result = cli("show", "nope")

    assert result.exit_code == 1
    assert "not found" in result.output


# --- edit / done / rm ---

def test_edit_fields(cli):
    """Test partial updates through the edit command."""
    activity_id = add_activity(cli, "Dentist", "--date", FUTURE, "--desc", "old")

    result = cli("edit", activity_id[:8], "--time", "8:15", "--desc", "", "--json")
    data = json.loads(result.output)

    assert result.exit_code == 0
    assert data["time"] == "08:15"
    assert data["title"] == "Dentist"
    assert "description" not in data


def test_edit_without_changes(cli):
    activity_id = add_activity(cli, "Dentist", "--date", FUTURE)

    result = cli("edit", activity_id)

    assert result.exit_code == 1
    assert "Nothing to update" in result.output


def test_done_toggles(cli):
    """Test that done completes and then reopens an activity."""
    activity_id = add_activity(cli, "Dentist", "--date", FUTURE)

    first = cli("done", activity_id[:8])
    second = cli("done", activity_id[:8], "--raw")

    assert "Completed: Dentist" in first.output
    assert second.output.strip() == "pendiente: Dentist"


def test_done_overdue_completes(cli):
    activity_id = add_activity(cli, "Old task", "--date", PAST)

    result = cli("done", activity_id, "--json")

    assert json.loads(result.output)[0]["status"] == "completado"


def test_done_comma_separated_with_unknown(cli):
    """Test that unknown IDs are reported without blocking the others."""
    first = add_activity(cli, "One", "--date", FUTURE)
    second = add_activity(cli, "Two", "--date", FUTURE)

    result = cli("done", f"{first},missing,{second}")

    assert result.exit_code == 0
    assert "Completed: One" in result.output
    assert "Completed: Two" in result.output
    assert "missing" in result.output


def test_done_only_unknown(cli):
    assert cli("done", "missing").exit_code == 1


def test_rm_single(cli):
    activity_id = add_activity(cli, "Dentist", "--date", FUTURE)

    result = cli("rm", activity_id[:8])

    assert result.exit_code == 0
    assert json.loads(cli("ls", "--json").output) == []


def test_rm_multiple_requires_confirmation(cli):
    """Test that deleting several activities asks first."""
    first = add_activity(cli, "One", "--date", FUTURE)
    second = add_activity(cli, "Two", "--date", FUTURE)

    cancelled = cli("rm", f"{first},{second}", input="n\n")
    assert "Cancelled" in cancelled.output
    assert len(json.loads(cli("ls", "--json").output)) == 2

    confirmed = cli("rm", f"{first},{second}", "--yes")
    assert confirmed.exit_code == 0
    assert json.loads(cli("ls", "--json").output) == []


# --- Overview commands ---

def test_stats_json(cli):
    add_activity(cli, "One", "--date", FUTURE, "-p", "baja")
    add_activity(cli, "Two", "--date", FUTURE, "-p", "alta")
    done_id = add_activity(cli, "Three", "--date", FUTURE)
    cli("done", done_id)

    data = json.loads(cli("stats", "--json").output)

    assert data["total"] == 3
    assert data["pending"] == 2
    assert data["completed"] == 1
    assert data["completion_rate"] == 33.3
    assert [a["title"] for a in data["priority"]] == ["Two", "One"]


def test_stats_table(cli):
    result = cli("stats")

    assert result.exit_code == 0
    assert "Summary" in result.output


def test_notify_quiet(cli):
    add_activity(cli, "Later", "--date", FUTURE)

    result = cli("notify")

    assert "Nothing needs your attention" in result.output


def test_notify_json_skips_flagged_overdue(cli):
    """Test that activities already marked vencido do not raise a notice."""
    add_activity(cli, "Old task", "--date", PAST)

    data = json.loads(cli("notify", "--json").output)

    assert data["badge"] == 0
    assert data["message"] is None
    assert data["overdue"] == []


def test_upcoming_excludes_far_future(cli):
    add_activity(cli, "Far away", "--date", FUTURE)

    result = cli("upcoming", "--json")

    assert json.loads(result.output) == []


def test_day_lists_activities_by_time(cli):
    add_activity(cli, "Late", "--date", FUTURE, "--time", "18:00")
    add_activity(cli, "Early", "--date", FUTURE, "--time", "07:30")
    add_activity(cli, "Other day", "--date", "2099-06-02")

    data = json.loads(cli("day", FUTURE, "--json").output)

    assert [a["title"] for a in data] == ["Early", "Late"]


def test_day_invalid_date(cli):
    assert cli("day", "tomorrow").exit_code == 1


def test_calendar(cli):
    add_activity(cli, "Dentist", "--date", FUTURE)

    result = cli("calendar", "2099-06")

    assert result.exit_code == 0
    assert "June 2099" in result.output


def test_calendar_invalid_month(cli):
    assert cli("calendar", "June").exit_code == 1


# --- System commands ---

def test_version(cli):
    result = cli("version")

    assert f"Reminders v{__version__}" in result.output


def test_export_import_round_trip(cli, tmp_path):
    """Test backing up to a file and restoring it."""
    add_activity(cli, "One", "--date", FUTURE)
    add_activity(cli, "Two", "--date", FUTURE, "--desc", "second")
    backup = tmp_path / "backup.json"

    exported = cli("export", str(backup))
    assert "Exported 2 activities" in exported.output
    before = json.loads(cli("ls", "--json").output)

    cli("clear", "--yes")
    assert json.loads(cli("ls", "--json").output) == []

    result = cli("import", str(backup), "--json")
    assert json.loads(result.output) == {
        "success": True,
        "message": "2 activities imported successfully.",
        "count": 2,
    }
    assert json.loads(cli("ls", "--json").output) == before


def test_export_to_stdout(cli):
    add_activity(cli, "One", "--date", FUTURE)

    document = json.loads(cli("export").output)

    assert document["version"] == "1.0"
    assert len(document["activities"]) == 1


def test_import_invalid_file(cli, tmp_path):
    """Test that a rejected backup exits 1 and keeps existing data."""
    add_activity(cli, "Keep me", "--date", FUTURE)
    bad = tmp_path / "bad.json"
    bad.write_text('{"foo": 1}', encoding="utf-8")

    result = cli("import", str(bad), "--yes")

    assert result.exit_code == 1
    assert "No activities were found" in result.output
    assert len(json.loads(cli("ls", "--json").output)) == 1


def test_import_missing_file(cli, tmp_path):
    result = cli("import", str(tmp_path / "missing.json"))

    assert result.exit_code == 1
    assert "Could not read" in result.output


def test_clear_cancelled(cli):
    add_activity(cli, "Keep me", "--date", FUTURE)

    result = cli("clear", input="n\n")

    assert "Cancelled" in result.output
    assert len(json.loads(cli("ls", "--json").output)) == 1


def test_watch_stops_on_interrupt(cli, monkeypatch):
    """Test that watch starts the store and exits cleanly on Ctrl+C."""
    add_activity(cli, "Later", "--date", FUTURE)

    def interrupt(seconds):
        raise KeyboardInterrupt

    monkeypatch.setattr("time.sleep", interrupt)
    result = cli("watch", "--interval", "0.01")

    assert result.exit_code == 0
    assert "Watching activities" in result.output
    assert "Stopped" in result.output


def test_bracketed_title_is_printed_literally(cli):
    """Test that titles and descriptions are never read as rich markup."""
    result = cli("add", "Fix [/b] tag", "--date", FUTURE, "--desc", "see [red]notes")
    assert result.exit_code == 0, result.output
    assert "Fix [/b] tag" in result.output

    activity_id = json.loads(cli("ls", "--json").output)[0]["id"]

    shown = cli("show", activity_id)
    assert shown.exit_code == 0, shown.output
    assert "see [red]notes" in shown.output

    edited = cli("edit", activity_id, "--priority", "alta")
    toggled = cli("done", activity_id)
    removed = cli("rm", activity_id)

    for outcome in (edited, toggled, removed):
        assert outcome.exit_code == 0, outcome.output
        assert "Fix [/b] tag" in outcome.output
