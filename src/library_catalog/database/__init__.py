"""
Database package for the Library Catalog.

This package provides:
- SQLAlchemy schema definitions (schema.py)
- The connection provider (session.py)
- The transaction scope every read and write runs in (transaction.py)
- The book and record stores, built on a shared soft-delete aware base (store.py)
"""

from .book_store import BookStore
from .record_store import RecordStore
from .schema import Base, BookRow, RecordRow, books_table, records_table
from .session import (
    DatabaseManager,
    get_db_manager,
    reset_db_manager,
    transaction_scope,
)
from .store import BaseStore, active_rows, deleted_rows
from .transaction import TransactionScope

__all__ = [
    "Base",
    "BaseStore",
    "BookRow",
    "BookStore",
    "DatabaseManager",
    "RecordRow",
    "RecordStore",
    "TransactionScope",
    "active_rows",
    "books_table",
    "deleted_rows",
    "get_db_manager",
    "records_table",
    "reset_db_manager",
    "transaction_scope",
]
