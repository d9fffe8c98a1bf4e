"""
Book service for the Library Catalog.

The orchestration core of the catalog. It validates books, rejects
duplicates on the natural key among active books, and delegates to
``BookStore``. Record operations are passed through to the injected
``RecordService``.

``create`` only creates the book. Creating a book together with its record
is one unit of work composed by the caller over a single scope:

```python
with db_manager.scope() as scope:
    scope.begin()
    record.book_id = book_service.create(book, scope)
    record_service.create(record, scope)
    scope.commit()
```

If either write fails before ``commit()`` the scope rolls both back.
"""

import logging

from ..database.book_store import BookStore
from ..database.schema import AUTHOR_MAX_LENGTH, PUBLISHER_MAX_LENGTH, TITLE_MAX_LENGTH
from ..database.transaction import TransactionScope
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models.book import Book
from ..models.record import Record
from ..observability import traced
from .record_service import RecordService

logger = logging.getLogger(__name__)


def validate_book(book: Book) -> None:
    """
    Check a book against the catalog rules.

    Raises:
        ValidationError: With a message naming the offending field
    """
    if book.title is None or not book.title.strip():
        raise ValidationError("Title is required")
    if book.author is None or not book.author.strip():
        raise ValidationError("Author is required")
    if len(book.title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title exceeds {TITLE_MAX_LENGTH} characters")
    if len(book.author) > AUTHOR_MAX_LENGTH:
        raise ValidationError(f"Author exceeds {AUTHOR_MAX_LENGTH} characters")
    if book.publisher is not None and len(book.publisher) > PUBLISHER_MAX_LENGTH:
        raise ValidationError(f"Publisher exceeds {PUBLISHER_MAX_LENGTH} characters")
    if book.edition_year is not None and book.edition_year < 0:
        raise ValidationError("Edition year cannot be negative")


class BookService:
    """Business rules for books and the entry point for record administration."""

    def __init__(self, book_store: BookStore, record_service: RecordService, strict: bool = False):
        self.book_store = book_store
        self.record_service = record_service
        self.strict = strict

    # -- books ---------------------------------------------------------------

    @traced("book.create")
    def create(self, book: Book, scope: TransactionScope) -> int:
        """
        Create a book after validating it and checking for duplicates.

        Returns:
            The generated book id

        Raises:
            ValidationError: If a field rule is violated
            ConflictError: If an active book has the same natural key
        """
        validate_book(book)

        if self.book_store.exists_by_natural_key(book, scope):
            raise ConflictError(
                f"An active book '{book.title}' by {book.author} with the same "
                "publisher and edition year already exists"
            )

        book_id = self.book_store.insert(book, scope)
        logger.info("Created book %s: %s", book_id, book.title)
        return book_id

    @traced("book.update")
    def update(self, book: Book, scope: TransactionScope) -> None:
        """
        Update a book's title, author, publisher and edition year.

        Raises:
            ValidationError: If a field rule is violated
            NotFoundError: In strict mode, if no active book has this id
        """
        validate_book(book)

        affected = self.book_store.update(book, scope)
        if affected == 0:
            if self.strict:
                raise NotFoundError(f"Book {book.id} not found")
            logger.debug("Update of book %s matched no active row", book.id)

    @traced("book.delete")
    def delete(self, id: int, scope: TransactionScope) -> None:
        self.book_store.soft_delete(id, scope)
        logger.info("Soft-deleted book %s", id)

    def find(self, id: int, scope: TransactionScope) -> Book | None:
        return self.book_store.find_by_id(id, scope)

    @traced("book.list_active")
    def list_active(self, scope: TransactionScope) -> list[Book]:
        return self.book_store.list_active(scope)

    @traced("book.list_deleted")
    def list_deleted(self, scope: TransactionScope) -> list[Book]:
        return self.book_store.list_deleted(scope)

    @traced("book.link_record")
    def link_record(self, record_id: int, book_id: int, scope: TransactionScope) -> None:
        """
        Administratively point a record at a book.

        Meant for operator-driven correction of mis-linked data. By default
        neither id is checked, so the record can end up referencing a
        deleted book. In strict mode both must name active rows.

        Raises:
            NotFoundError: In strict mode, if either id is not an active row
        """
        if self.strict:
            if self.record_service.find(record_id, scope) is None:
                raise NotFoundError(f"Record {record_id} not found")
            if not self.book_store.exists_active(book_id, scope):
                raise NotFoundError(f"Book {book_id} not found")

        self.book_store.relink_record(record_id, book_id, scope)

    # -- records -------------------------------------------------------------

    def list_records(self, scope: TransactionScope) -> list[Record]:
        return self.record_service.list_active(scope)

    def list_deleted_records(self, scope: TransactionScope) -> list[Record]:
        return self.record_service.list_deleted(scope)

    def find_record(self, id: int, scope: TransactionScope) -> Record | None:
        return self.record_service.find(id, scope)

    def update_record(self, record: Record, scope: TransactionScope) -> None:
        self.record_service.update(record, scope)

    def delete_record(self, id: int, scope: TransactionScope) -> None:
        self.record_service.delete(id, scope)
