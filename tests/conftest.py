"""
Pytest configuration and shared fixtures for FareScope tests.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load test environment variables before any farescope imports
env_file = Path(__file__).parent.parent / ".env.test"
if env_file.exists():
    load_dotenv(env_file, override=True)
else:
    # Fallback: Set minimal environment variables for testing
    os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    os.environ.setdefault("DEBUG", "False")
    os.environ.setdefault("LOG_FILE", "")
    os.environ.setdefault("ERROR_LOG_FILE", "")

from farescope.config import TripDates  # noqa: E402
from farescope.database import Database  # noqa: E402
from farescope.utils.seed_data import seed_airports  # noqa: E402

# Epoch milliseconds, midnight UTC
SEP_01_2021_MS = 1630454400000
SEP_13_2021_MS = 1631491200000
SEP_14_2021_MS = 1631577600000


@pytest.fixture
def temp_logs_dir(tmp_path):
    """Create a temporary logs directory for testing."""
    logs_dir = tmp_path / "logs"
    logs_dir.mkdir(exist_ok=True)
    return logs_dir


@pytest.fixture
async def database(tmp_path):
    """
    Database on a temporary SQLite file with all tables created.

    A file (rather than :memory:) lets concurrent sessions each get their own
    connection.
    """
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'farescope-test.db'}")
    await db.init_models()
    yield db
    await db.dispose()


@pytest.fixture
async def seeded_database(database):
    """Database with the European airport catalog loaded."""
    async with database.session() as db:
        await seed_airports(db)
    return database


@pytest.fixture
async def db_session(database):
    """
    Provide a database session for store and catalog tests.

    Usage:
        async def test_something(db_session):
            result = await db_session.execute(select(FareRecord))
    """
    async with database.session() as session:
        yield session


@pytest.fixture
def trip_dates():
    """September 2021 window used by the default airport group."""
    return TripDates(departure_date="2021-9", return_date="2021-9")


@pytest.fixture
def raw_outbound_fares():
    """Outbound fare entries as the fare API returns them."""
    return [
        {"Price": 89.0, "Date": f"/Date({SEP_13_2021_MS})/"},
        {"Price": 120.5, "Date": f"/Date({SEP_14_2021_MS})/"},
    ]


@pytest.fixture
def raw_inbound_fares():
    """Inbound fare entries as the fare API returns them."""
    return [
        {"Price": 95.0, "Date": f"/Date({SEP_14_2021_MS})/"},
    ]


@pytest.fixture
def fare_api_payload(raw_outbound_fares, raw_inbound_fares):
    """A round-trip fare API response body."""
    return {"Outbound": raw_outbound_fares, "Inbound": raw_inbound_fares}
