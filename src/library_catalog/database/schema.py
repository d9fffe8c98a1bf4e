"""
SQLAlchemy database schema for the Library Catalog.

Two tables back the catalog:

1. ``books`` - one row per catalogued book, identified by a surrogate id
2. ``records`` - bibliographic records, each pointing at its book through
   ``book_id``

Neither table is ever pruned: ``deleted`` flips to true instead. The stores
read these tables through SQLAlchemy Core statements, so the declarative
classes here are mostly a typed description of the columns.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    false,
)
from sqlalchemy.orm import declarative_base

# Base class for all SQLAlchemy models
Base = declarative_base()

TITLE_MAX_LENGTH = 150
AUTHOR_MAX_LENGTH = 120
PUBLISHER_MAX_LENGTH = 100
ISBN_MAX_LENGTH = 17
DEWEY_CLASS_MAX_LENGTH = 20
SHELF_MAX_LENGTH = 20
LANGUAGE_MAX_LENGTH = 30


class BookRow(Base):
    """
    Books table - the catalog itself.

    The natural key (title, author, publisher, edition_year) is only unique
    among active rows, so it is checked by the service rather than declared
    as a constraint here.
    """

    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    author = Column(String(AUTHOR_MAX_LENGTH), nullable=False)
    publisher = Column(String(PUBLISHER_MAX_LENGTH), nullable=True)
    edition_year = Column(Integer, nullable=True)
    deleted = Column(Boolean, nullable=False, default=False, server_default=false())

    __table_args__ = (
        Index("idx_book_natural_key", "title", "author"),
        Index("idx_book_deleted", "deleted"),
        CheckConstraint(
            "edition_year IS NULL OR edition_year >= 0", name="check_edition_year_non_negative"
        ),
    )


class RecordRow(Base):
    """
    Records table - bibliographic records.

    ``book_id`` references ``books.id`` but nothing here guarantees the
    referenced book is still active; soft-deleting a book leaves its record
    pointing at it.
    """

    __tablename__ = "records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    isbn = Column(String(ISBN_MAX_LENGTH), nullable=False)
    dewey_class = Column(String(DEWEY_CLASS_MAX_LENGTH), nullable=True)
    shelf = Column(String(SHELF_MAX_LENGTH), nullable=True)
    language = Column(String(LANGUAGE_MAX_LENGTH), nullable=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=True)
    deleted = Column(Boolean, nullable=False, default=False, server_default=false())

    __table_args__ = (
        Index("idx_record_isbn", "isbn"),
        Index("idx_record_book", "book_id"),
        Index("idx_record_deleted", "deleted"),
    )


books_table = BookRow.__table__
records_table = RecordRow.__table__
