"""
Pytest configuration and shared fixtures for Burbli tests.
"""

import pytest
import yaml
from datetime import datetime, timezone
from unittest.mock import Mock

from burbli.models import (
    ExactCost,
    HiddenCost,
    JobRecord,
    RangeCost,
    Recommendation,
)


def make_job(job_id="job", **fields) -> JobRecord:
    """Build a JobRecord with sensible defaults for the fields a test doesn't care about."""
    defaults = {
        "title": "Untitled",
        "suburb": "Epping",
        "region": "VIC",
        "postcode": "3076",
    }
    defaults.update(fields)
    return JobRecord(id=job_id, **defaults)


@pytest.fixture
def job_factory():
    """Factory fixture wrapping make_job."""
    return make_job


@pytest.fixture
def scenario_jobs():
    """
    The three-job feed used across filter tests.

    Returns:
        list: [roof insulation (VIC, $3,899), toilet (NSW, $800-$1,400), deck (VIC, hidden)]
    """
    roof = make_job(
        "A",
        title="Roof insulation",
        business_name="Northside Insulation",
        suburb="Epping",
        region="VIC",
        postcode="3076",
        recommend=Recommendation.RECOMMENDED,
        cost=ExactCost(3899),
        completed_at=datetime(2023, 6, 15, tzinfo=timezone.utc),
    )
    toilet = make_job(
        "B",
        title="Toilet replacement",
        business_name="Adrian - Airtasker",
        suburb="Parramatta",
        region="NSW",
        postcode="2150",
        recommend=Recommendation.NOT_RECOMMENDED,
        cost=RangeCost(800, 1400),
        completed_at=datetime(2022, 11, 2, tzinfo=timezone.utc),
    )
    deck = make_job(
        "C",
        title="Deck build",
        business_name=None,
        suburb="Thornbury",
        region="VIC",
        postcode="3071",
        recommend=Recommendation.UNSPECIFIED,
        cost=HiddenCost(),
    )
    return [roof, toilet, deck]


@pytest.fixture
def valid_submission():
    """A job submission that passes validation."""
    return {
        "title": "Roof insulation",
        "business_name": "Northside Insulation",
        "suburb": "Epping",
        "state": "vic",
        "postcode": "3076",
        "recommend": "yes",
        "cost_type": "exact",
        "cost_exact": "3899",
        "notes": "  Quick and tidy.  ",
        "completed_at": "2023-06-15",
    }


@pytest.fixture
def config_file(tmp_path):
    """
    Write a minimal valid config.yaml pointing at a temporary database.

    Returns:
        Path: Path to the config file
    """
    config_path = tmp_path / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(
            {
                "site": {"name": "Burbli", "base_url": "https://burbli.example.com/"},
                "database": {"path": str(tmp_path / "test.db")},
                "places": {"country": "au", "timeout": 5},
            },
            f,
        )
    return config_path


@pytest.fixture
def app(config_file, monkeypatch):
    """Flask app backed by a fresh temporary database."""
    from burbli import create_app

    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "test-key")
    app = create_app(config_path=config_file)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def mock_places_client(app):
    """
    Replace the app's places client with a Mock.

    Returns:
        Mock: The client the /api/places route will use
    """
    client = Mock()
    app.config["PLACES_CLIENT"] = client
    return client


@pytest.fixture
def temp_db(tmp_path):
    """
    Initialise a temporary SQLite database outside any Flask app.

    Yields:
        sqlite3.Connection: Database connection
    """
    from burbli.database import get_db, init_db

    db_path = tmp_path / "jobs.db"
    init_db(db_path)
    conn = get_db(db_path)
    yield conn
    conn.close()
