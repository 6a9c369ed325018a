"""
Base repository for the catalog store.

Repositories are the catalog core's storage collaborator: synchronous, bound
to one SQLAlchemy session, returning frozen Pydantic snapshots. They signal:

1. **Malformed id**: ``InvalidIdentifierError``, raised before any query
2. **Missing row**: ``None`` from lookups and updates, ``False`` from deletes
3. **Taken unique key**: ``DuplicateError``
4. **Any other database failure**: ``StoreError``

New rows get ids of the form ``<prefix>_<uuid4 hex>``.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Generic, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ValidationError
from sqlalchemy import asc, desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import DuplicateError, InvalidIdentifierError, NotFoundError, StoreError
from .schema import Base
from .session import safe_commit, safe_query

RowType = TypeVar("RowType", bound=Base)
DataType = TypeVar("DataType", bound=BaseModel)
EntityType = TypeVar("EntityType", bound=BaseModel)


class CatalogRepository(ABC, Generic[RowType, DataType, EntityType]):
    """
    CRUD over one catalog table.

    Subclasses name the row class, the entity class and the id prefix, and
    may override the hooks (``_apply``, ``_filter_clause``, ``_query_options``)
    for columns that need more than a plain assignment or comparison.
    """

    #: Prefix of generated identifiers, e.g. ``"genre"``
    id_prefix: str = ""

    def __init__(self, session: Session):
        self.session = session

    @property
    @abstractmethod
    def model_class(self) -> type[RowType]:
        """SQLAlchemy row class."""

    @property
    @abstractmethod
    def response_schema(self) -> type[EntityType]:
        """Entity class rows are converted to."""

    @property
    def _name(self) -> str:
        return self.model_class.__name__

    # === Identifiers ===

    @classmethod
    def is_valid_id(cls, entity_id: object) -> bool:
        """Check that ``entity_id`` is a well-formed identifier for this entity."""
        if not isinstance(entity_id, str):
            return False
        return re.fullmatch(rf"{cls.id_prefix}_[0-9a-f]{{32}}", entity_id) is not None

    @classmethod
    def new_id(cls) -> str:
        return f"{cls.id_prefix}_{uuid4().hex}"

    def _require_valid_id(self, entity_id: str) -> None:
        if not self.is_valid_id(entity_id):
            raise InvalidIdentifierError(self.id_prefix, str(entity_id))

    # === Hooks ===

    def _to_entity(self, row: RowType) -> EntityType:
        """Snapshot ``row``; a row the entity model rejects is a ``StoreError``."""
        try:
            return self.response_schema.model_validate(row, from_attributes=True)
        except ValidationError as e:
            raise StoreError(f"{self._name} {row.id} is not a valid entity: {e}") from e

    def _apply(self, row: RowType, data: DataType) -> None:
        """Copy every field of ``data`` onto ``row`` (full replace)."""
        for field, value in data.model_dump().items():
            setattr(row, field, value)

    def _filter_clause(self, field: str, value: Any):
        """WHERE clause for ``field == value``."""
        column = getattr(self.model_class, field, None)
        if column is None:
            raise ValueError(f"{self._name} has no field {field!r}")
        return column == value

    def _query_options(self) -> tuple:
        """Loader options for every row query."""
        return ()

    def _filtered(self, query, filters: Mapping[str, Any] | None):
        for field, value in (filters or {}).items():
            query = query.where(self._filter_clause(field, value))
        return query

    def _load(self, entity_id: str, purpose: str) -> RowType | None:
        self._require_valid_id(entity_id)
        query = (
            select(self.model_class)
            .where(self.model_class.id == entity_id)
            .options(*self._query_options())
        )
        return safe_query(
            self.session,
            lambda s: s.execute(query).scalar_one_or_none(),
            f"Failed to load {self._name} {entity_id} for {purpose}",
        )

    def _commit(self, operation: str) -> None:
        operation = f"{operation} {self._name}"
        try:
            safe_commit(self.session, operation)
        except IntegrityError as e:
            if "UNIQUE" in str(e.orig).upper():
                raise DuplicateError(f"{self._name} already exists ({operation}): {e.orig!s}") from e
            raise StoreError(f"Database operation '{operation}' failed: {e.orig!s}") from e

    # === Queries ===

    def find_by_id(self, entity_id: str) -> EntityType | None:
        """
        The entity with ``entity_id``, or ``None``.

        Raises:
            InvalidIdentifierError: If the id is malformed
            StoreError: On database errors
        """
        row = self._load(entity_id, "lookup")
        return None if row is None else self._to_entity(row)

    def get_by_id(self, entity_id: str) -> EntityType:
        """Like ``find_by_id`` but a missing entity raises ``NotFoundError``."""
        entity = self.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(f"{self._name} {entity_id} not found")
        return entity

    def find_all(
        self,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        order_desc: bool = False,
    ) -> list[EntityType]:
        """
        Entities matching every equality filter.

        Args:
            filters: Field name to required value
            order_by: Column to sort on; unknown names leave the order unspecified
            order_desc: Sort descending instead of ascending
        """
        query = self._filtered(select(self.model_class), filters).options(*self._query_options())

        column = getattr(self.model_class, order_by, None) if order_by else None
        if column is not None:
            query = query.order_by(desc(column) if order_desc else asc(column))

        rows = safe_query(
            self.session,
            lambda s: s.execute(query).scalars().all(),
            f"Failed to list {self._name}",
        )
        return [self._to_entity(row) for row in rows]

    def count(self, filters: Mapping[str, Any] | None = None) -> int:
        query = self._filtered(select(func.count()).select_from(self.model_class), filters)
        total = safe_query(
            self.session, lambda s: s.execute(query).scalar(), f"Failed to count {self._name}"
        )
        return total or 0

    # === Writes ===

    def save(self, data: DataType) -> EntityType:
        """
        Insert a new entity under a generated id.

        The entity is built before anything is written, so data the model
        rejects never reaches the table.

        Raises:
            DuplicateError: If a unique key is already taken
            StoreError: On invalid data or other database errors
        """
        row = self.model_class(id=self.new_id())
        self._apply(row, data)
        entity = self._to_entity(row)
        self.session.add(row)
        self._commit("create")
        return entity

    def update_by_id(self, entity_id: str, data: DataType) -> EntityType | None:
        """
        Replace every field of an existing entity; ``None`` if it is missing.

        Raises:
            InvalidIdentifierError: If the id is malformed
            DuplicateError: If a unique key is already taken
            StoreError: On invalid data or other database errors
        """
        row = self._load(entity_id, "update")
        if row is None:
            return None

        self._apply(row, data)
        try:
            entity = self._to_entity(row)
        except StoreError:
            self.session.rollback()
            raise
        self._commit("update")
        return entity

    def delete_by_id(self, entity_id: str) -> bool:
        """
        Remove an entity; ``False`` if it was already gone.

        A row still referenced through a foreign key raises ``StoreError``.
        """
        row = self._load(entity_id, "deletion")
        if row is None:
            return False

        self.session.delete(row)
        self._commit("delete")
        return True
