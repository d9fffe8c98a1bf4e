"""
Transaction scope for the Library Catalog.

A ``TransactionScope`` owns exactly one SQLAlchemy ``Connection`` for its
lifetime and bounds the reads and writes issued through it to one
all-or-nothing commit boundary:

```python
with db_manager.scope() as scope:
    scope.begin()
    book_id = book_service.create(book, scope)
    record.book_id = book_id
    record_service.create(record, scope)
    scope.commit()
# Leaving the block without commit() rolls everything back
```

Outside ``begin()``/``commit()`` the scope is in auto-commit mode: every
write is committed as soon as it executes.

A scope is not safe for concurrent use; open one per unit of work.
"""

import logging
from typing import Any

from sqlalchemy.engine import Connection, CursorResult, RootTransaction
from sqlalchemy.exc import SQLAlchemyError

from ..errors import DatabaseConnectionError, PersistenceError, TransactionStateError

logger = logging.getLogger(__name__)


class TransactionScope:
    """Explicit begin/commit/rollback over one connection, rollback on release."""

    def __init__(self, connection: Connection | None):
        self._connection = connection
        self._transaction: RootTransaction | None = None
        self._active = False
        self._autocommit = True
        self._released = False

    def __enter__(self) -> "TransactionScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc is not None and self._active:
            logger.warning("Leaving transaction scope on %s, rolling back", exc_type.__name__)
        self.close()

    # -- state ---------------------------------------------------------------

    @property
    def connection(self) -> Connection:
        self._ensure_usable("use the connection")
        return self._connection  # type: ignore[return-value]

    @property
    def is_active(self) -> bool:
        """True between ``begin()`` and ``commit()``/``rollback()``."""
        return self._active

    @property
    def autocommit(self) -> bool:
        return self._autocommit

    def _ensure_usable(self, action: str) -> None:
        if self._connection is None:
            raise DatabaseConnectionError(f"Cannot {action}: no connection available")
        if self._released or self._connection.closed:
            raise DatabaseConnectionError(f"Cannot {action}: connection is closed")

    # -- transaction control -------------------------------------------------

    def begin(self) -> None:
        """
        Start a transaction, switching auto-commit off.

        Raises:
            DatabaseConnectionError: If the connection is absent or closed
            TransactionStateError: If a transaction is already active
        """
        self._ensure_usable("begin transaction")
        if self._active:
            raise TransactionStateError("A transaction is already active")

        # Close out the implicit transaction left open by auto-commit reads
        if self._connection.in_transaction():
            self._connection.commit()

        try:
            self._transaction = self._connection.begin()
        except SQLAlchemyError as e:
            raise DatabaseConnectionError(f"Cannot begin transaction: {e!s}") from e

        self._autocommit = False
        self._active = True
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Commit the active transaction.

        Raises:
            TransactionStateError: If no transaction is active
            DatabaseConnectionError: If the connection is gone
            PersistenceError: If the storage rejects the commit
        """
        if not self._active or self._transaction is None:
            raise TransactionStateError("No active transaction to commit")
        self._ensure_usable("commit")

        try:
            self._transaction.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Commit failed: {e!s}") from e

        self._transaction = None
        self._active = False
        self._autocommit = True
        logger.debug("Transaction committed")

    def rollback(self) -> None:
        """
        Roll back the active transaction, if any.

        Failures are logged and swallowed so they never mask the error that
        triggered the rollback.
        """
        if not self._active:
            return

        try:
            if self._transaction is not None:
                self._transaction.rollback()
            logger.debug("Transaction rolled back")
        except SQLAlchemyError:
            logger.exception("Error during rollback")
        finally:
            self._transaction = None
            self._active = False
            self._autocommit = True

    def close(self) -> None:
        """Roll back anything uncommitted, restore auto-commit and release the connection."""
        if self._released:
            return

        if self._active:
            self.rollback()
        self._autocommit = True

        if self._connection is not None:
            try:
                self._connection.close()
            except SQLAlchemyError:
                logger.exception("Error while releasing the connection")
        self._released = True

    # -- statement execution -------------------------------------------------

    def execute(self, statement: Any) -> CursorResult:
        """
        Execute a statement on the scope's connection.

        In auto-commit mode writes are committed immediately.

        Raises:
            DatabaseConnectionError: If the scope has been released
            PersistenceError: On any storage error
        """
        self._ensure_usable("execute statement")

        try:
            result = self._connection.execute(
                statement, execution_options={"preserve_rowcount": True}
            )
            if self._autocommit and not result.returns_rows:
                self._connection.commit()
        except SQLAlchemyError as e:
            if self._autocommit and self._connection.in_transaction():
                self._connection.rollback()
            raise PersistenceError(f"Database error: {e!s}") from e

        return result
