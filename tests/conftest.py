"""Shared pytest fixtures for ledgerpilot tests."""

import tempfile
import os
from datetime import date
import pytest

from ledgerpilot.database.factories import create_sqlite_database
from ledgerpilot.domain.account import AccountService
from ledgerpilot.domain.entity import EntityService
from ledgerpilot.domain.journal import JournalService
from ledgerpilot.domain.schedule_definitions import ScheduleDefinitionService

# Fixed reference date so year inference and "this-month" are stable
TODAY = date(2025, 12, 31)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def entity_service(temp_db):
    """Create an EntityService with a temporary database."""
    return EntityService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db)


@pytest.fixture
def schedule_service(temp_db):
    """Create a ScheduleDefinitionService with a temporary database."""
    return ScheduleDefinitionService(temp_db)


@pytest.fixture
def sample_entity(entity_service):
    """Create the default entity with the default chart of accounts."""
    return entity_service.ensure_default_entity()


@pytest.fixture
def today():
    """Reference date used by tests that compose entries from text."""
    return TODAY


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
