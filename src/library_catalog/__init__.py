"""
Library Catalog package.

A transactional catalog of books and their bibliographic records.

Key Components:
- models: Pydantic models for books and records
- database: schema, connection provider, transaction scope and stores
- services: validation, uniqueness rules and the book/record orchestration
- config: settings loaded from the environment
- tools / server: the catalog exposed as MCP tools
"""

__version__ = "0.1.0"

from . import database

__all__ = [
    "__version__",
    "database",
]
