"""
Record service for the Library Catalog.

Validates record fields and enforces ISBN uniqueness among active records
before delegating to ``RecordStore``. Validation and conflict checks run
before any write, so a rejected call leaves the scope untouched.

By default updates neither re-check the ISBN nor report rows that were not
found; ``strict=True`` turns both checks on.
"""

import logging

from ..database.record_store import RecordStore
from ..database.schema import (
    DEWEY_CLASS_MAX_LENGTH,
    ISBN_MAX_LENGTH,
    LANGUAGE_MAX_LENGTH,
    SHELF_MAX_LENGTH,
)
from ..database.transaction import TransactionScope
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models.record import Record
from ..observability import traced

logger = logging.getLogger(__name__)


def validate_record(record: Record) -> None:
    """
    Check a record against the catalog rules.

    Raises:
        ValidationError: With a message naming the offending field
    """
    if record.isbn is None or not record.isbn.strip():
        raise ValidationError("ISBN is required")
    if len(record.isbn) > ISBN_MAX_LENGTH:
        raise ValidationError(f"ISBN exceeds {ISBN_MAX_LENGTH} characters")
    if record.dewey_class is not None and len(record.dewey_class) > DEWEY_CLASS_MAX_LENGTH:
        raise ValidationError(f"Dewey class exceeds {DEWEY_CLASS_MAX_LENGTH} characters")
    if record.shelf is not None and len(record.shelf) > SHELF_MAX_LENGTH:
        raise ValidationError(f"Shelf exceeds {SHELF_MAX_LENGTH} characters")
    if record.language is not None and len(record.language) > LANGUAGE_MAX_LENGTH:
        raise ValidationError(f"Language exceeds {LANGUAGE_MAX_LENGTH} characters")


class RecordService:
    """Business rules for bibliographic records."""

    def __init__(self, record_store: RecordStore, strict: bool = False):
        self.record_store = record_store
        self.strict = strict

    @traced("record.create")
    def create(self, record: Record, scope: TransactionScope) -> int:
        """
        Create a record after validating it and checking its ISBN.

        Returns:
            The generated record id

        Raises:
            ValidationError: If a field rule is violated
            ConflictError: If an active record already has this ISBN
        """
        validate_record(record)

        if self.record_store.exists_by_isbn(record.isbn, scope):
            raise ConflictError(f"An active record with ISBN {record.isbn} already exists")

        record_id = self.record_store.insert(record, scope)
        logger.info("Created record %s (ISBN %s) for book %s", record_id, record.isbn, record.book_id)
        return record_id

    @traced("record.update")
    def update(self, record: Record, scope: TransactionScope) -> None:
        """
        Update a record's ISBN, Dewey class, shelf and language.

        Raises:
            ValidationError: If a field rule is violated
            ConflictError: In strict mode, if another active record has this ISBN
            NotFoundError: In strict mode, if no active record has this id
        """
        validate_record(record)

        if self.strict and self.record_store.exists_by_isbn(
            record.isbn, scope, exclude_id=record.id
        ):
            raise ConflictError(f"An active record with ISBN {record.isbn} already exists")

        affected = self.record_store.update(record, scope)
        if affected == 0:
            if self.strict:
                raise NotFoundError(f"Record {record.id} not found")
            logger.debug("Update of record %s matched no active row", record.id)

    @traced("record.delete")
    def delete(self, id: int, scope: TransactionScope) -> None:
        self.record_store.soft_delete(id, scope)
        logger.info("Soft-deleted record %s", id)

    def find(self, id: int, scope: TransactionScope) -> Record | None:
        return self.record_store.find_by_id(id, scope)

    def find_by_book(self, book_id: int, scope: TransactionScope) -> Record | None:
        return self.record_store.find_by_book_id(book_id, scope)

    @traced("record.list_active")
    def list_active(self, scope: TransactionScope) -> list[Record]:
        return self.record_store.list_active(scope)

    @traced("record.list_deleted")
    def list_deleted(self, scope: TransactionScope) -> list[Record]:
        return self.record_store.list_deleted(scope)
