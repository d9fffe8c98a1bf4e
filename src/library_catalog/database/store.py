"""
Base store for the Library Catalog.

Both catalog tables share the same soft-delete discipline: default reads,
updates and uniqueness checks only see rows whose ``deleted`` flag is false,
and a separate path lists the deleted ones. ``BaseStore`` owns that policy
in one place (``active_rows`` / ``deleted_rows``) and builds every filtered
query through it, so the concrete stores only describe their own columns.

Stores never open, commit or close anything: every method takes the caller's
``TransactionScope`` and executes against its connection.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import ColumnElement, Table, func, insert, select, update
from sqlalchemy.engine import Row

from ..errors import PersistenceError
from .transaction import TransactionScope

ModelType = TypeVar("ModelType", bound=BaseModel)


def active_rows(table: Table) -> ColumnElement[bool]:
    """Predicate matching rows that have not been soft-deleted."""
    return table.c.deleted.is_(False)


def deleted_rows(table: Table) -> ColumnElement[bool]:
    """Predicate matching soft-deleted rows."""
    return table.c.deleted.is_(True)


class BaseStore(ABC, Generic[ModelType]):
    """
    Abstract store providing the shared insert/update/soft-delete/read paths.

    Subclasses declare their table, their Pydantic model and which model
    fields are written on insert and update.
    """

    @property
    @abstractmethod
    def table(self) -> Table:
        """Return the SQLAlchemy table."""

    @property
    @abstractmethod
    def model_class(self) -> type[ModelType]:
        """Return the Pydantic model the rows map to."""

    @property
    @abstractmethod
    def mutable_fields(self) -> tuple[str, ...]:
        """Fields written by ``update``."""

    @property
    def insert_fields(self) -> tuple[str, ...]:
        """Fields written by ``insert``."""
        return self.mutable_fields

    def _to_model(self, row: Row) -> ModelType:
        return self.model_class.model_validate(dict(row._mapping))

    def _values(self, entity: ModelType, fields: tuple[str, ...]) -> dict[str, Any]:
        return {name: getattr(entity, name) for name in fields}

    # -- query building ------------------------------------------------------

    def select_active(self, *criteria: ColumnElement[bool]):
        """SELECT over active rows, narrowed by extra criteria."""
        return select(self.table).where(active_rows(self.table), *criteria)

    def select_deleted(self, *criteria: ColumnElement[bool]):
        """SELECT over soft-deleted rows, narrowed by extra criteria."""
        return select(self.table).where(deleted_rows(self.table), *criteria)

    def _exists_active(self, scope: TransactionScope, *criteria: ColumnElement[bool]) -> bool:
        query = (
            select(func.count())
            .select_from(self.table)
            .where(active_rows(self.table), *criteria)
        )
        count = scope.execute(query).scalar()
        return bool(count)

    def _first(self, scope: TransactionScope, query) -> ModelType | None:
        row = scope.execute(query).first()
        return self._to_model(row) if row is not None else None

    def _all(self, scope: TransactionScope, query) -> list[ModelType]:
        rows = scope.execute(query.order_by(self.table.c.id)).all()
        return [self._to_model(row) for row in rows]

    # -- operations ----------------------------------------------------------

    def insert(self, entity: ModelType, scope: TransactionScope) -> int:
        """
        Insert a new active row.

        Returns:
            The generated identity

        Raises:
            PersistenceError: If no row was inserted or no identity generated
        """
        statement = insert(self.table).values(
            **self._values(entity, self.insert_fields), deleted=False
        )
        result = scope.execute(statement)

        if result.rowcount == 0:
            raise PersistenceError(f"No {self.table.name} row was inserted")

        primary_key = result.inserted_primary_key
        if not primary_key or primary_key[0] is None:
            raise PersistenceError(f"No identity was generated for the new {self.table.name} row")

        return int(primary_key[0])

    def update(self, entity: ModelType, scope: TransactionScope) -> int:
        """
        Update every mutable field of the active row with ``entity.id``.

        Missing and soft-deleted rows are left alone.

        Returns:
            The number of rows affected (0 or 1)
        """
        statement = (
            update(self.table)
            .where(self.table.c.id == entity.id, active_rows(self.table))
            .values(**self._values(entity, self.mutable_fields))
        )
        return scope.execute(statement).rowcount

    def soft_delete(self, id: int, scope: TransactionScope) -> None:
        """Mark a row as deleted. No existence check; repeating it changes nothing."""
        statement = update(self.table).where(self.table.c.id == id).values(deleted=True)
        scope.execute(statement)

    def find_by_id(self, id: int, scope: TransactionScope) -> ModelType | None:
        """Get the active row with this id, or None."""
        return self._first(scope, self.select_active(self.table.c.id == id))

    def exists_active(self, id: int, scope: TransactionScope) -> bool:
        return self._exists_active(scope, self.table.c.id == id)

    def list_active(self, scope: TransactionScope) -> list[ModelType]:
        return self._all(scope, self.select_active())

    def list_deleted(self, scope: TransactionScope) -> list[ModelType]:
        return self._all(scope, self.select_deleted())
