"""Test configuration and fixtures for the Library Catalog.

Every test gets its own SQLite file under ``tmp_path``:
1. ``db_manager`` - a DatabaseManager over that file with the schema created
2. ``scope`` - a TransactionScope from that manager, released after the test
3. ``services`` / ``strict_services`` - the wired service graph
4. ``global_db`` - the same database installed as the global manager, for
   the tool handlers
"""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from library_catalog.config import CatalogConfig, reset_config
from library_catalog.database import (
    DatabaseManager,
    TransactionScope,
    get_db_manager,
    reset_db_manager,
)
from library_catalog.models import Book, Record
from library_catalog.observability import initialize_observability
from library_catalog.services import CatalogServices, build_services

# === Observability ===


@pytest.fixture(scope="session", autouse=True)
def quiet_observability() -> None:
    """Configure Logfire once, with nothing sent and nothing printed."""
    initialize_observability(CatalogConfig(logfire_send=False, logfire_console=False))


# === Test Database Fixtures ===


@pytest.fixture
def test_db_path(tmp_path: Path) -> Generator[Path, None, None]:
    """Provide a temporary database path for each test."""
    db_path = tmp_path / "test_catalog.db"
    yield db_path

    if db_path.exists():
        db_path.unlink()


@pytest.fixture
def test_database_url(test_db_path: Path) -> str:
    return f"sqlite:///{test_db_path}"


@pytest.fixture
def db_manager(test_database_url: str) -> Generator[DatabaseManager, None, None]:
    """Provide a database manager with the catalog schema created."""
    manager = DatabaseManager(test_database_url)
    manager.init_database()
    yield manager
    manager.close()


@pytest.fixture
def scope(db_manager: DatabaseManager) -> Generator[TransactionScope, None, None]:
    """Provide an auto-commit transaction scope."""
    with db_manager.scope() as scope:
        yield scope


@pytest.fixture
def global_db(test_database_url: str) -> Generator[DatabaseManager, None, None]:
    """Install the test database as the global manager used by the tools."""
    reset_db_manager()
    manager = get_db_manager(test_database_url)
    manager.init_database()
    yield manager
    reset_db_manager()


# === Service Fixtures ===


@pytest.fixture
def services() -> CatalogServices:
    return build_services(strict=False)


@pytest.fixture
def strict_services() -> CatalogServices:
    return build_services(strict=True)


# === Test Data Fixtures ===


@pytest.fixture
def rayuela() -> Book:
    return Book(
        title="Rayuela",
        author="Julio Cortázar",
        publisher="Sudamericana",
        edition_year=1963,
    )


@pytest.fixture
def rayuela_record() -> Record:
    return Record(
        isbn="978-84-376-0493-0",
        dewey_class="863.64",
        shelf="A3",
        language="Spanish",
    )


@pytest.fixture
def sample_book_data() -> dict:
    return {
        "title": "El nombre de la rosa",
        "author": "Umberto Eco",
        "publisher": "Lumen",
        "edition_year": 1980,
    }


@pytest.fixture
def sample_record_data() -> dict:
    return {
        "isbn": "978-84-264-1746-1",
        "dewey_class": "853.914",
        "shelf": "B2",
        "language": "Italian",
    }


# === Environment / Cleanup ===


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Provide a clean environment without LIBRARY_CATALOG_* variables."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("LIBRARY_CATALOG_"):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def cleanup_after_test():
    """Reset global configuration after each test."""
    yield

    reset_config()
