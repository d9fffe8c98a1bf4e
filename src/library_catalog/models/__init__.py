"""
Library Catalog models.

Pydantic models for the two catalog entities:
- Book: a catalogued book
- Record: the bibliographic record linked to a book
"""

from .book import Book
from .record import Record

__all__ = [
    "Book",
    "Record",
]
