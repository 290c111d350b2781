"""Shared pytest configuration and fixtures for tests."""

import sys
import io
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from reminders.core import repository  # noqa: E402
from reminders.core.models import Activity  # noqa: E402


# Fixed "now" used by most tests: Wednesday 10 January 2024, 12:00
NOW = datetime(2024, 1, 10, 12, 0)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(autouse=True)
def temp_db(monkeypatch, tmp_path):
    """Use temporary database for all tests."""
    db_path = tmp_path / "test_reminders.db"
    monkeypatch.setattr(repository, "DB_PATH", db_path)
    monkeypatch.setattr(repository, "DATA_DIR", tmp_path)
    yield db_path


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_activity():
    """Factory for Activity objects with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides) -> Activity:
        counter["n"] += 1
        fields = {
            "id": f"activity-{counter['n']}",
            "title": f"Activity {counter['n']}",
            "date": date(2024, 1, 15),
            "time": "09:00",
            "priority": "media",
            "category": "personal",
            "status": "pendiente",
            "created_at": NOW - timedelta(days=1),
            "updated_at": NOW - timedelta(days=1),
        }
        fields.update(overrides)
        return Activity(**fields)

    return _make
