"""
Record store for the Library Catalog.

Data access for bibliographic records: the shared insert/update/soft-delete
paths from ``BaseStore`` plus the lookups the services need, by parent book
and by ISBN. Every read goes through the active-row predicate.
"""

from sqlalchemy import Table

from ..models.record import Record
from .schema import records_table
from .store import BaseStore
from .transaction import TransactionScope


class RecordStore(BaseStore[Record]):
    """Store for ``records`` rows."""

    @property
    def table(self) -> Table:
        return records_table

    @property
    def model_class(self) -> type[Record]:
        return Record

    @property
    def mutable_fields(self) -> tuple[str, ...]:
        # book_id only changes through BookStore.relink_record
        return ("isbn", "dewey_class", "shelf", "language")

    @property
    def insert_fields(self) -> tuple[str, ...]:
        return (*self.mutable_fields, "book_id")

    def find_by_book_id(self, book_id: int, scope: TransactionScope) -> Record | None:
        """Get the active record linked to a book, or None."""
        query = self.select_active(self.table.c.book_id == book_id)
        return self._first(scope, query.order_by(self.table.c.id))

    def exists_by_isbn(
        self, isbn: str, scope: TransactionScope, exclude_id: int | None = None
    ) -> bool:
        """
        Check whether an active record already carries this ISBN.

        Args:
            isbn: ISBN to look for
            scope: Active transaction scope
            exclude_id: Record id to ignore, so an update does not collide with itself
        """
        criteria = [self.table.c.isbn == isbn]
        if exclude_id is not None:
            criteria.append(self.table.c.id != exclude_id)
        return self._exists_active(scope, *criteria)
