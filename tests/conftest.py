"""Global pytest configuration and fixtures."""

from collections.abc import Generator
from logging import Logger
from pathlib import Path

import pytest

from mediastore import setup_test_logging
from mediastore.database import ConnectionProperties, DatabaseConnection
from mediastore.database.gateways import AdminDatabase


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Setup test logging for all tests."""
    setup_test_logging()


@pytest.fixture(scope="function")
def logger() -> Logger:
    """Provide a logger instance for tests."""
    from mediastore import get_logger

    return get_logger("test")


@pytest.fixture
def sqlite_properties(tmp_path: Path) -> ConnectionProperties:
    """Connection properties for an embedded SQLite database in tmp_path."""
    return ConnectionProperties(
        type="sqlite", database_name="test.db", directory=str(tmp_path)
    )


@pytest.fixture
def sqlite_connection(
    sqlite_properties: ConnectionProperties,
) -> Generator[DatabaseConnection, None, None]:
    """A bare connection with no registries."""
    connection = DatabaseConnection()
    assert connection.connect(sqlite_properties)
    yield connection
    connection.close()


@pytest.fixture
def admin_database(
    sqlite_properties: ConnectionProperties,
) -> Generator[AdminDatabase, None, None]:
    """An admin database with its tables created."""
    database = AdminDatabase()
    assert database.connect(sqlite_properties)
    yield database
    database.close()
