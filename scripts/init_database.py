#!/usr/bin/env python3
"""
Initialize the Library Catalog database.

This script:
1. Verifies the database is reachable and prints the connection details
2. Creates the catalog tables
3. Optionally loads a small sample catalog, each book with its record

Usage:
    python scripts/init_database.py [--drop-existing] [--sample-data] [--database-url URL]
"""

import argparse
import logging
import sys

from library_catalog.database import get_db_manager
from library_catalog.errors import CatalogError
from library_catalog.models import Book, Record
from library_catalog.services import build_services

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SAMPLE_CATALOG = [
    (
        Book(title="Cien años de soledad", author="Gabriel García Márquez",
             publisher="Sudamericana", edition_year=1967),
        Record(isbn="978-84-376-0494-7", dewey_class="863.64", shelf="A1", language="Spanish"),
    ),
    (
        Book(title="El nombre de la rosa", author="Umberto Eco", publisher="Lumen",
             edition_year=1980),
        Record(isbn="978-84-264-1746-1", dewey_class="853.914", shelf="B2", language="Italian"),
    ),
    (
        Book(title="Rayuela", author="Julio Cortázar", publisher="Sudamericana",
             edition_year=1963),
        Record(isbn="978-84-376-0493-0", dewey_class="863.64", shelf="A3", language="Spanish"),
    ),
    (
        Book(title="1984", author="George Orwell", publisher="Secker & Warburg",
             edition_year=1949),
        Record(isbn="978-0-452-28423-4", dewey_class="823.912", shelf="C1", language="English"),
    ),
]


def load_sample_data(db_manager) -> int:
    """Create each sample book with its record in its own transaction."""
    services = build_services()
    created = 0

    for book, record in SAMPLE_CATALOG:
        try:
            with db_manager.scope() as scope:
                scope.begin()
                book_id = services.books.create(book, scope)
                services.records.create(record.model_copy(update={"book_id": book_id}), scope)
                scope.commit()
            created += 1
        except CatalogError as e:
            logger.warning("Skipped '%s': %s", book.title, e)

    return created


def main():
    """Main entry point for database initialization."""
    parser = argparse.ArgumentParser(description="Initialize the Library Catalog database")
    parser.add_argument(
        "--drop-existing",
        action="store_true",
        help="Drop existing tables before creating new ones",
    )
    parser.add_argument(
        "--sample-data",
        action="store_true",
        help="Load sample data after creating tables",
    )
    parser.add_argument(
        "--database-url",
        help="Override default database URL",
    )

    args = parser.parse_args()

    db_manager = get_db_manager(args.database_url)

    if not db_manager.verify_connection():
        logger.error("Failed to connect to database")
        sys.exit(1)

    for key, value in db_manager.connection_info().items():
        logger.info("%s: %s", key, value)

    try:
        db_manager.init_database(drop_existing=args.drop_existing)

        if args.sample_data:
            created = load_sample_data(db_manager)
            logger.info("Loaded %d sample book(s)", created)
    finally:
        db_manager.close()


if __name__ == "__main__":
    main()
