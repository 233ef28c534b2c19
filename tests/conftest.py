"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app import create_app  # noqa: E402
from models import db  # noqa: E402


@pytest.fixture
def app():
    """App wired to an in-memory database with the schema created."""
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "CALENDAR_TIMEZONE": "UTC",
        "CALENDAR_FIRST_DAY_OF_WEEK": 0,
        "CALENDAR_CELEBRATIONS": [],
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def may_records():
    """Three events across two days of May 2025, deliberately out of time order."""
    return [
        {"date": "2025-05-15", "time": "2025-05-15 14:30:00", "title": "Event 2"},
        {"date": "2025-05-20", "time": "2025-05-20 09:00:00", "title": "Event 3"},
        {"date": "2025-05-15", "time": "2025-05-15 10:00:00", "title": "Event 1"},
    ]
