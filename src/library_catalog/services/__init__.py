"""
Services for the Library Catalog.

Services are wired by hand: ``build_services`` creates the stores and hands
them to the services through their constructors. Nothing is discovered or
registered globally.
"""

from dataclasses import dataclass

from ..config import CatalogConfig, get_config
from ..database.book_store import BookStore
from ..database.record_store import RecordStore
from .book_service import BookService, validate_book
from .record_service import RecordService, validate_record


@dataclass(frozen=True)
class CatalogServices:
    """The wired service graph."""

    books: BookService
    records: RecordService


def build_services(config: CatalogConfig | None = None, strict: bool | None = None) -> CatalogServices:
    """
    Wire stores and services.

    Args:
        config: Configuration to read ``strict_integrity`` from
        strict: Explicit override for the strictness flag
    """
    if strict is None:
        strict = (config or get_config()).strict_integrity

    record_store = RecordStore()
    book_store = BookStore(record_store)
    record_service = RecordService(record_store, strict=strict)
    book_service = BookService(book_store, record_service, strict=strict)
    return CatalogServices(books=book_service, records=record_service)


__all__ = [
    "BookService",
    "CatalogServices",
    "RecordService",
    "build_services",
    "validate_book",
    "validate_record",
]
