"""
MCP tools for the Library Catalog.

Every tool is a dictionary with a name, a description and an async handler
taking the raw ``arguments`` dict. The server registers them all from
``all_tools``.
"""

from .catalog import (
    create_book_with_record,
    delete_book,
    delete_record,
    get_book,
    get_record,
    list_books,
    list_deleted_books,
    list_deleted_records,
    list_records,
    relink_record,
    update_book,
    update_record,
)

all_tools = [
    create_book_with_record,
    get_book,
    list_books,
    list_deleted_books,
    update_book,
    delete_book,
    get_record,
    list_records,
    list_deleted_records,
    update_record,
    delete_record,
    relink_record,
]

__all__ = [
    "all_tools",
    "create_book_with_record",
    "delete_book",
    "delete_record",
    "get_book",
    "get_record",
    "list_books",
    "list_deleted_books",
    "list_deleted_records",
    "list_records",
    "relink_record",
    "update_book",
    "update_record",
]
