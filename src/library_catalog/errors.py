"""
Exception hierarchy for the Library Catalog.

Services raise ``ValidationError`` and ``ConflictError`` before any write is
attempted, so those two never leave partial state behind. Everything raised
from the storage side (``PersistenceError``, ``DatabaseConnectionError``)
may happen mid-transaction; callers are expected to let the transaction scope
roll back on exit.
"""


class CatalogError(Exception):
    """Base exception for catalog operations."""


class ValidationError(CatalogError):
    """A field-level rule was violated. Never reaches storage."""


class ConflictError(CatalogError):
    """A uniqueness rule among active rows would be broken."""


class NotFoundError(CatalogError):
    """An active row required by a strict-mode operation does not exist."""


class DatabaseConnectionError(CatalogError, ConnectionError):
    """The scope cannot acquire or use its connection."""


class TransactionStateError(CatalogError):
    """A transaction operation was called in the wrong state."""


class PersistenceError(CatalogError):
    """A storage operation did not produce the expected effect."""


__all__ = [
    "CatalogError",
    "ConflictError",
    "DatabaseConnectionError",
    "NotFoundError",
    "PersistenceError",
    "TransactionStateError",
    "ValidationError",
]
