"""
Catalog tools for the Library Catalog MCP server.

Each tool is one unit of work: it opens a single transaction scope, drives
the services, and commits explicitly. Any failure before the commit leaves
the scope to roll back on exit, so an error response always means nothing
was changed.

Tools:
1. create_book_with_record: book + record, all or nothing
2. get_book / list_books / list_deleted_books
3. update_book / delete_book
4. get_record / list_records / list_deleted_records
5. update_record / delete_record
6. relink_record: administrative correction of a record's book
"""

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as InputValidationError

from ..database.session import transaction_scope
from ..database.transaction import TransactionScope
from ..errors import CatalogError, ConflictError, NotFoundError, ValidationError
from ..models.book import Book
from ..models.record import Record
from ..services import CatalogServices, build_services

logger = logging.getLogger(__name__)

NO_CHANGES = "No changes were applied."


# =============================================================================
# INPUT SCHEMAS
# =============================================================================


class BookInput(BaseModel):
    """Book fields accepted by the tools."""

    title: str = Field(..., description="Title of the book", examples=["Rayuela"])
    author: str = Field(..., description="Author of the book", examples=["Julio Cortázar"])
    publisher: str | None = Field(None, description="Publishing house", examples=["Sudamericana"])
    edition_year: int | None = Field(None, description="Year of the edition", examples=[1963])


class RecordInput(BaseModel):
    """Record fields accepted by the tools."""

    isbn: str = Field(..., description="ISBN of the edition", examples=["978-84-376-0493-0"])
    dewey_class: str | None = Field(None, description="Dewey classification", examples=["863.64"])
    shelf: str | None = Field(None, description="Shelf location", examples=["A3"])
    language: str | None = Field(None, description="Language", examples=["Spanish"])


class CreateBookWithRecordInput(BaseModel):
    book: BookInput
    record: RecordInput


class UpdateBookInput(BookInput):
    book_id: int = Field(..., description="Id of the book to update", ge=1)


class UpdateRecordInput(RecordInput):
    record_id: int = Field(..., description="Id of the record to update", ge=1)


class EmptyInput(BaseModel):
    """Tools that take no arguments."""


class EntityIdInput(BaseModel):
    id: int = Field(..., description="Id of the book or record", ge=1)


class RelinkRecordInput(BaseModel):
    record_id: int = Field(..., description="Id of the record to relink", ge=1)
    book_id: int = Field(..., description="Id of the book the record should point at", ge=1)


# =============================================================================
# RESPONSE HELPERS
# =============================================================================


def _text(message: str) -> list[dict[str, str]]:
    return [{"type": "text", "text": message}]


def _success(message: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"content": _text(message), "data": data}


def _error(message: str) -> dict[str, Any]:
    return {"isError": True, "content": _text(message)}


def _book_data(book: Book) -> dict[str, Any]:
    return book.model_dump()


def _record_data(record: Record) -> dict[str, Any]:
    return record.model_dump()


def _run(
    tool_name: str,
    input_model: type[BaseModel],
    arguments: dict[str, Any],
    work: Callable[[BaseModel, CatalogServices, TransactionScope], dict[str, Any]],
) -> dict[str, Any]:
    """
    Validate arguments, then run ``work`` inside one transaction scope.

    Catalog errors become error responses; the scope has already rolled back
    by the time the response is built.
    """
    try:
        params = input_model.model_validate(arguments)
    except InputValidationError as e:
        logger.warning("Invalid %s parameters: %s", tool_name, e)
        return _error(f"Invalid {tool_name} parameters: {e}")

    services = build_services()
    try:
        with transaction_scope() as scope:
            return work(params, services, scope)
    except (ValidationError, ConflictError, NotFoundError) as e:
        logger.info("%s rejected: %s", tool_name, e)
        return _error(f"{e} {NO_CHANGES}")
    except CatalogError as e:
        logger.exception("%s failed", tool_name)
        return _error(f"{tool_name} failed: {e} {NO_CHANGES}")


# =============================================================================
# BOOK TOOLS
# =============================================================================


async def create_book_with_record_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Create a book and its record in one transaction."""

    def work(params, services, scope):
        scope.begin()
        book = Book(**params.book.model_dump())
        book_id = services.books.create(book, scope)

        record = Record(**params.record.model_dump(), book_id=book_id)
        record_id = services.records.create(record, scope)
        scope.commit()

        book.id = book_id
        record.id = record_id
        book.record = record
        return _success(
            f"Created book {book_id} '{book.title}' with record {record_id} (ISBN {record.isbn})",
            {"book": _book_data(book)},
        )

    return _run("create_book_with_record", CreateBookWithRecordInput, arguments, work)


async def get_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def work(params, services, scope):
        book = services.books.find(params.id, scope)
        if book is None:
            return _error(f"Book {params.id} not found")
        book.record = services.records.find_by_book(book.id, scope)
        return _success(f"Book {book.id}: {book.title} by {book.author}", {"book": _book_data(book)})

    return _run("get_book", EntityIdInput, arguments, work)


async def list_books_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def work(params, services, scope):  # noqa: ARG001
        books = services.books.list_active(scope)
        return _success(f"{len(books)} active book(s)", {"books": [_book_data(b) for b in books]})

    return _run("list_books", EmptyInput, arguments, work)


async def list_deleted_books_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def work(params, services, scope):  # noqa: ARG001
        books = services.books.list_deleted(scope)
        return _success(f"{len(books)} deleted book(s)", {"books": [_book_data(b) for b in books]})

    return _run("list_deleted_books", EmptyInput, arguments, work)


async def update_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def work(params, services, scope):
        scope.begin()
        if services.books.find(params.book_id, scope) is None:
            return _error(f"Book {params.book_id} not found. {NO_CHANGES}")

        book = Book(id=params.book_id, **params.model_dump(exclude={"book_id"}))
        services.books.update(book, scope)
        scope.commit()
        return _success(f"Updated book {book.id}", {"book": _book_data(book)})

    return _run("update_book", UpdateBookInput, arguments, work)


async def delete_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def work(params, services, scope):
        scope.begin()
        if services.books.find(params.id, scope) is None:
            return _error(f"Book {params.id} not found. {NO_CHANGES}")

        services.books.delete(params.id, scope)
        scope.commit()
        return _success(f"Deleted book {params.id}", {"book_id": params.id})

    return _run("delete_book", EntityIdInput, arguments, work)


# =============================================================================
# RECORD TOOLS
# =============================================================================


async def get_record_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def work(params, services, scope):
        record = services.books.find_record(params.id, scope)
        if record is None:
            return _error(f"Record {params.id} not found")
        return _success(f"Record {record.id}: ISBN {record.isbn}", {"record": _record_data(record)})

    return _run("get_record", EntityIdInput, arguments, work)


async def list_records_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def work(params, services, scope):  # noqa: ARG001
        records = services.books.list_records(scope)
        return _success(
            f"{len(records)} active record(s)", {"records": [_record_data(r) for r in records]}
        )

    return _run("list_records", EmptyInput, arguments, work)


async def list_deleted_records_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def work(params, services, scope):  # noqa: ARG001
        records = services.books.list_deleted_records(scope)
        return _success(
            f"{len(records)} deleted record(s)", {"records": [_record_data(r) for r in records]}
        )

    return _run("list_deleted_records", EmptyInput, arguments, work)


async def update_record_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def work(params, services, scope):
        scope.begin()
        current = services.books.find_record(params.record_id, scope)
        if current is None:
            return _error(f"Record {params.record_id} not found. {NO_CHANGES}")

        record = Record(
            id=params.record_id,
            book_id=current.book_id,
            **params.model_dump(exclude={"record_id"}),
        )
        services.books.update_record(record, scope)
        scope.commit()
        return _success(f"Updated record {record.id}", {"record": _record_data(record)})

    return _run("update_record", UpdateRecordInput, arguments, work)


async def delete_record_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def work(params, services, scope):
        scope.begin()
        if services.books.find_record(params.id, scope) is None:
            return _error(f"Record {params.id} not found. {NO_CHANGES}")

        services.books.delete_record(params.id, scope)
        scope.commit()
        return _success(f"Deleted record {params.id}", {"record_id": params.id})

    return _run("delete_record", EntityIdInput, arguments, work)


async def relink_record_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def work(params, services, scope):
        scope.begin()
        services.books.link_record(params.record_id, params.book_id, scope)
        scope.commit()
        return _success(
            f"Record {params.record_id} now points at book {params.book_id}",
            {"record_id": params.record_id, "book_id": params.book_id},
        )

    return _run("relink_record", RelinkRecordInput, arguments, work)


# =============================================================================
# TOOL REGISTRY
# =============================================================================

create_book_with_record = {
    "name": "create_book_with_record",
    "description": "Create a book together with its bibliographic record, all or nothing",
    "handler": create_book_with_record_handler,
}

get_book = {
    "name": "get_book",
    "description": "Get an active book and its record by book id",
    "handler": get_book_handler,
}

list_books = {
    "name": "list_books",
    "description": "List active books with their records",
    "handler": list_books_handler,
}

list_deleted_books = {
    "name": "list_deleted_books",
    "description": "List soft-deleted books with their records",
    "handler": list_deleted_books_handler,
}

update_book = {
    "name": "update_book",
    "description": "Update title, author, publisher and edition year of an active book",
    "handler": update_book_handler,
}

delete_book = {
    "name": "delete_book",
    "description": "Soft-delete a book",
    "handler": delete_book_handler,
}

get_record = {
    "name": "get_record",
    "description": "Get an active record by id",
    "handler": get_record_handler,
}

list_records = {
    "name": "list_records",
    "description": "List active records",
    "handler": list_records_handler,
}

list_deleted_records = {
    "name": "list_deleted_records",
    "description": "List soft-deleted records",
    "handler": list_deleted_records_handler,
}

update_record = {
    "name": "update_record",
    "description": "Update ISBN, Dewey class, shelf and language of an active record",
    "handler": update_record_handler,
}

delete_record = {
    "name": "delete_record",
    "description": "Soft-delete a record",
    "handler": delete_record_handler,
}

relink_record = {
    "name": "relink_record",
    "description": (
        "Administrative: point a record at another book. Does not check that "
        "either id exists unless strict integrity is configured"
    ),
    "handler": relink_record_handler,
}
