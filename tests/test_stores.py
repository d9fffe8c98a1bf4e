"""
Tests for the book and record stores.

Stores do no validation and no duplicate checks; these tests cover the
persistence paths themselves and the soft-delete filtering they share.
"""

from unittest.mock import MagicMock

import pytest

from library_catalog.database import BookStore, RecordStore
from library_catalog.errors import PersistenceError
from library_catalog.models import Book, Record


@pytest.fixture
def record_store():
    return RecordStore()


@pytest.fixture
def book_store(record_store):
    return BookStore(record_store)


def test_insert_returns_generated_ids(book_store, scope, rayuela):
    first = book_store.insert(rayuela, scope)
    second = book_store.insert(Book(title="Ficciones", author="Jorge Luis Borges"), scope)

    assert isinstance(first, int)
    assert second > first


def test_insert_and_find(book_store, record_store, scope, rayuela, rayuela_record):
    book_id = book_store.insert(rayuela, scope)
    record_id = record_store.insert(rayuela_record.model_copy(update={"book_id": book_id}), scope)

    book = book_store.find_by_id(book_id, scope)
    record = record_store.find_by_id(record_id, scope)

    assert book == rayuela.model_copy(update={"id": book_id})
    assert book.deleted is False
    assert record == rayuela_record.model_copy(update={"id": record_id, "book_id": book_id})


def test_insert_without_affected_row(book_store, rayuela):
    scope = MagicMock()
    scope.execute.return_value = MagicMock(rowcount=0)

    with pytest.raises(PersistenceError, match="No books row was inserted"):
        book_store.insert(rayuela, scope)


def test_insert_without_generated_identity(record_store, rayuela_record):
    scope = MagicMock()
    scope.execute.return_value = MagicMock(rowcount=1, inserted_primary_key=(None,))

    with pytest.raises(PersistenceError, match="No identity was generated"):
        record_store.insert(rayuela_record, scope)


def test_find_missing_returns_none(book_store, record_store, scope):
    assert book_store.find_by_id(999, scope) is None
    assert record_store.find_by_id(999, scope) is None


def test_update_active_row(book_store, scope, rayuela):
    book_id = book_store.insert(rayuela, scope)

    changed = rayuela.model_copy(update={"id": book_id, "title": "Rayuela (edición crítica)"})
    affected = book_store.update(changed, scope)

    assert affected == 1
    assert book_store.find_by_id(book_id, scope).title == "Rayuela (edición crítica)"


def test_update_missing_or_deleted_affects_nothing(book_store, scope, rayuela):
    book_id = book_store.insert(rayuela, scope)
    book_store.soft_delete(book_id, scope)

    assert book_store.update(rayuela.model_copy(update={"id": book_id}), scope) == 0
    assert book_store.update(rayuela.model_copy(update={"id": 999}), scope) == 0


def test_record_update_leaves_book_link_alone(book_store, record_store, scope, rayuela):
    book_id = book_store.insert(rayuela, scope)
    record_id = record_store.insert(Record(isbn="111", book_id=book_id), scope)

    record_store.update(Record(id=record_id, isbn="222", shelf="Z9", book_id=None), scope)

    record = record_store.find_by_id(record_id, scope)
    assert record.isbn == "222"
    assert record.shelf == "Z9"
    assert record.book_id == book_id


def test_soft_delete_hides_from_active_reads(book_store, scope, rayuela):
    book_id = book_store.insert(rayuela, scope)

    book_store.soft_delete(book_id, scope)

    assert book_store.find_by_id(book_id, scope) is None
    assert book_store.exists_active(book_id, scope) is False
    assert book_store.list_active(scope) == []

    deleted = book_store.list_deleted(scope)
    assert [b.id for b in deleted] == [book_id]
    assert deleted[0].deleted is True


def test_soft_delete_is_idempotent_and_tolerates_missing(book_store, scope, rayuela):
    book_id = book_store.insert(rayuela, scope)

    book_store.soft_delete(book_id, scope)
    book_store.soft_delete(book_id, scope)
    book_store.soft_delete(999, scope)

    assert len(book_store.list_deleted(scope)) == 1


def test_lists_are_ordered_by_id(record_store, scope):
    ids = [record_store.insert(Record(isbn=isbn), scope) for isbn in ("3", "1", "2")]

    assert [r.id for r in record_store.list_active(scope)] == ids


def test_book_lists_hydrate_records(book_store, record_store, scope, rayuela, rayuela_record):
    linked_id = book_store.insert(rayuela, scope)
    lonely_id = book_store.insert(Book(title="Ficciones", author="Jorge Luis Borges"), scope)
    record_store.insert(rayuela_record.model_copy(update={"book_id": linked_id}), scope)

    books = {b.id: b for b in book_store.list_active(scope)}

    assert books[linked_id].record.isbn == "978-84-376-0493-0"
    assert books[lonely_id].record is None


def test_deleted_record_not_hydrated(book_store, record_store, scope, rayuela, rayuela_record):
    book_id = book_store.insert(rayuela, scope)
    record_id = record_store.insert(rayuela_record.model_copy(update={"book_id": book_id}), scope)

    record_store.soft_delete(record_id, scope)

    assert book_store.list_active(scope)[0].record is None
    assert record_store.find_by_book_id(book_id, scope) is None


def test_find_by_id_does_not_hydrate(book_store, record_store, scope, rayuela, rayuela_record):
    book_id = book_store.insert(rayuela, scope)
    record_store.insert(rayuela_record.model_copy(update={"book_id": book_id}), scope)

    assert book_store.find_by_id(book_id, scope).record is None


def test_exists_by_isbn_ignores_deleted_and_excluded(record_store, scope):
    record_id = record_store.insert(Record(isbn="978-0-452-28423-4"), scope)

    assert record_store.exists_by_isbn("978-0-452-28423-4", scope) is True
    assert record_store.exists_by_isbn("978-0-452-28423-4", scope, exclude_id=record_id) is False

    record_store.soft_delete(record_id, scope)
    assert record_store.exists_by_isbn("978-0-452-28423-4", scope) is False


def test_natural_key_matches_absent_fields(book_store, scope):
    book_store.insert(Book(title="Ficciones", author="Jorge Luis Borges"), scope)

    assert book_store.exists_by_natural_key(
        Book(title="Ficciones", author="Jorge Luis Borges"), scope
    )
    assert not book_store.exists_by_natural_key(
        Book(title="Ficciones", author="Jorge Luis Borges", publisher="Sur"), scope
    )
    assert not book_store.exists_by_natural_key(
        Book(title="Ficciones", author="Jorge Luis Borges", edition_year=1944), scope
    )


def test_relink_record(book_store, record_store, scope, rayuela):
    first = book_store.insert(rayuela, scope)
    second = book_store.insert(Book(title="Ficciones", author="Jorge Luis Borges"), scope)
    record_id = record_store.insert(Record(isbn="111", book_id=first), scope)

    assert book_store.relink_record(record_id, second, scope) == 1
    assert record_store.find_by_id(record_id, scope).book_id == second


def test_relink_missing_record_affects_nothing(book_store, scope, rayuela):
    book_id = book_store.insert(rayuela, scope)

    assert book_store.relink_record(999, book_id, scope) == 0


def test_relink_to_nonexistent_book_is_rejected_by_storage(record_store, book_store, scope):
    record_id = record_store.insert(Record(isbn="111"), scope)

    with pytest.raises(PersistenceError):
        book_store.relink_record(record_id, 999, scope)


def test_insert_rejected_by_storage(book_store, scope):
    with pytest.raises(PersistenceError):
        book_store.insert(Book(title="Negative", author="Someone", edition_year=-1), scope)
