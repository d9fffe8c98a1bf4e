"""
Connection management for the Library Catalog.

``DatabaseManager`` is the connection provider: it owns the SQLAlchemy engine
and hands out live connections, each wrapped in a ``TransactionScope`` by
``scope()``. It holds no business logic.

Key considerations:
- Connections are short-lived, one per unit of work
- Scopes are context managers so the connection is always released
- Failure to reach the database surfaces as ``DatabaseConnectionError``
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from ..config import get_config
from ..errors import DatabaseConnectionError
from .schema import Base
from .transaction import TransactionScope

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Owns the engine and acts as the connection provider for transaction scopes.
    """

    def __init__(self, database_url: str | None = None, echo: bool | None = None):
        """
        Initialize the database manager.

        Args:
            database_url: SQLAlchemy database URL. If None, uses the configured one.
            echo: Echo SQL statements. If None, uses the configured value.
        """
        config = get_config()
        if database_url is None:
            database_url = config.get_database_url()
            if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
                db_path = Path(database_url.removeprefix("sqlite:///"))
                db_path.parent.mkdir(exist_ok=True, parents=True)
                logger.info("Using SQLite database at: %s", db_path)

        self.database_url = database_url
        self.echo = config.echo_sql if echo is None else echo
        self._engine: Engine | None = None

    @property
    def engine(self) -> Engine:
        """
        Get or create the database engine.

        SQLite connections get foreign keys switched on; in-memory databases
        share a single connection so every scope sees the same data.
        """
        if self._engine is None:
            if self.database_url.startswith("sqlite"):
                kwargs = {"connect_args": {"check_same_thread": False}}
                if ":memory:" in self.database_url or self.database_url == "sqlite://":
                    kwargs["poolclass"] = StaticPool
                self._engine = create_engine(self.database_url, echo=self.echo, **kwargs)

                @event.listens_for(self._engine, "connect")
                def set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ARG001
                    cursor = dbapi_connection.cursor()
                    cursor.execute("PRAGMA foreign_keys=ON")
                    cursor.close()
            else:
                self._engine = create_engine(
                    self.database_url,
                    pool_size=5,
                    max_overflow=10,
                    pool_pre_ping=True,
                    echo=self.echo,
                )

            logger.info("Database engine created: %s", self._engine.url)

        return self._engine

    def connect(self) -> Connection:
        """
        Get a live connection.

        Raises:
            DatabaseConnectionError: If the database cannot be reached
        """
        try:
            return self.engine.connect()
        except SQLAlchemyError as e:
            logger.exception("Could not connect to %s", self.database_url)
            raise DatabaseConnectionError(f"Could not connect to the database: {e!s}") from e

    @contextmanager
    def scope(self) -> Generator[TransactionScope, None, None]:
        """
        Open a transaction scope over a fresh connection.

        ```python
        with db_manager.scope() as scope:
            scope.begin()
            ...
            scope.commit()
        ```

        The scope is released on every exit path; anything not committed is
        rolled back.
        """
        with TransactionScope(self.connect()) as scope:
            yield scope

    def init_database(self, drop_existing: bool = False) -> None:
        """
        Create the catalog tables.

        Args:
            drop_existing: If True, drop all tables before creating
        """
        engine = self.engine

        if drop_existing:
            logger.warning("Dropping all existing tables...")
            Base.metadata.drop_all(bind=engine)

        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialization complete")

    def verify_connection(self) -> bool:
        """Return True if a trivial query succeeds."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection verified")
            return True
        except SQLAlchemyError:
            logger.exception("Database connection failed")
            return False

    def connection_info(self) -> dict[str, str | None]:
        """
        Describe the live connection: URL, dialect, driver and database name.

        Raises:
            DatabaseConnectionError: If the database cannot be reached
        """
        with self.connect() as conn:
            url = conn.engine.url
            return {
                "url": url.render_as_string(hide_password=True),
                "dialect": conn.dialect.name,
                "driver": conn.dialect.driver,
                "database": url.database,
                "user": url.username,
            }

    def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine:
            self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None


_db_manager: DatabaseManager | None = None


def get_db_manager(database_url: str | None = None) -> DatabaseManager:
    """
    Get the global database manager instance.

    Args:
        database_url: Database URL (only used on first call)
    """
    global _db_manager  # noqa: PLW0603

    if _db_manager is None:
        _db_manager = DatabaseManager(database_url)

    return _db_manager


def reset_db_manager() -> None:
    """Close and discard the global manager (useful in tests)."""
    global _db_manager  # noqa: PLW0603

    if _db_manager is not None:
        _db_manager.close()
    _db_manager = None


@contextmanager
def transaction_scope() -> Generator[TransactionScope, None, None]:
    """
    Convenience context manager over the global manager.

    Example:
        ```python
        with transaction_scope() as scope:
            books = book_service.list_active(scope)
        ```
    """
    with get_db_manager().scope() as scope:
        yield scope
