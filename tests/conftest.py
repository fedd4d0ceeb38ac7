"""Shared pytest fixtures for settleup tests."""

import tempfile
import os
import pytest

from settleup.database.factories import create_sqlite_database
from settleup.domain.group import GroupService
from settleup.domain.expense import ExpenseService
from settleup.domain.ledger import LedgerService


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
    db.session_factory.kw["bind"].dispose()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def group_service(temp_db):
    """Create a GroupService with a temporary database."""
    return GroupService(temp_db)


@pytest.fixture
def expense_service(temp_db):
    """Create an ExpenseService with a temporary database."""
    return ExpenseService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def sample_group(group_service):
    """Create a USD group with members alice, bob and carol."""
    group_id = group_service.create_group(name="Trip", currency="USD")
    for handle, name in [("alice", "Alice"), ("bob", "Bob"), ("carol", "Carol")]:
        group_service.add_member(group_id, handle, name)
    return group_service.get_group(group_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
