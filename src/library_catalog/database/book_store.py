"""
Book store for the Library Catalog.

Data access for books. Besides the shared ``BaseStore`` paths it:

1. **Hydrates** each listed book with its active record, resolved through
   ``RecordStore.find_by_book_id`` at read time (a missing record is not an
   error)
2. **Detects duplicates** on the natural key among active books
3. **Relinks** a record to another book, an administrative correction that
   checks neither id
"""

import logging

from sqlalchemy import Table, update

from ..models.book import Book
from .record_store import RecordStore
from .schema import books_table, records_table
from .store import BaseStore
from .transaction import TransactionScope

logger = logging.getLogger(__name__)


class BookStore(BaseStore[Book]):
    """Store for ``books`` rows, composed with a ``RecordStore`` for hydration."""

    def __init__(self, record_store: RecordStore):
        self.record_store = record_store

    @property
    def table(self) -> Table:
        return books_table

    @property
    def model_class(self) -> type[Book]:
        return Book

    @property
    def mutable_fields(self) -> tuple[str, ...]:
        return ("title", "author", "publisher", "edition_year")

    def _hydrate(self, books: list[Book], scope: TransactionScope) -> list[Book]:
        for book in books:
            book.record = self.record_store.find_by_book_id(book.id, scope)
        return books

    def list_active(self, scope: TransactionScope) -> list[Book]:
        """List active books, each with its linked record if it has one."""
        return self._hydrate(super().list_active(scope), scope)

    def list_deleted(self, scope: TransactionScope) -> list[Book]:
        """List soft-deleted books, each with its linked record if it has one."""
        return self._hydrate(super().list_deleted(scope), scope)

    def exists_by_natural_key(self, book: Book, scope: TransactionScope) -> bool:
        """
        Check whether an active book shares title, author, publisher and edition year.

        Absent publisher or edition year match absent.
        """
        c = self.table.c
        title, author, publisher, edition_year = book.natural_key
        return self._exists_active(
            scope,
            c.title == title,
            c.author == author,
            c.publisher.is_not_distinct_from(publisher),
            c.edition_year.is_not_distinct_from(edition_year),
        )

    def relink_record(self, record_id: int, book_id: int, scope: TransactionScope) -> int:
        """
        Point a record at another book, unconditionally.

        Returns:
            The number of rows affected
        """
        statement = (
            update(records_table).where(records_table.c.id == record_id).values(book_id=book_id)
        )
        affected = scope.execute(statement).rowcount
        logger.info("Relinked record %s to book %s (%d row(s))", record_id, book_id, affected)
        return affected
