"""
Async repository facade for the catalog core.

``EntityGateway`` exposes one entity type's store operations to the
controllers as coroutines. Each call:

1. Validates the identifier format before touching the store
2. Opens its own session (one transaction) on a worker thread
3. Maps the store's not-found / duplicate signals to outcome values

Because calls share no session, independent lookups can be fanned out with
``asyncio.gather`` and joined before the controller proceeds. The gateway
holds no cache and never retries; ``StoreError`` propagates to the caller.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from .database.author_repository import AuthorRepository
from .database.book_instance_repository import BookInstanceRepository
from .database.book_repository import BookRepository
from .database.genre_repository import GenreRepository
from .database.repository import CatalogRepository
from .database.session import DatabaseManager, get_db_manager
from .errors import DuplicateError, InvalidIdentifierError
from .models import Author, Book, BookInstance, Genre
from .observability.context import trace_store_call
from .outcomes import Conflict, Deleted, NotFound

logger = logging.getLogger(__name__)

EntityType = TypeVar("EntityType", bound=BaseModel)
T = TypeVar("T")


class EntityGateway(Generic[EntityType]):
    """Async CRUD facade over one ``CatalogRepository`` class."""

    def __init__(self, db: DatabaseManager, repository_class: type[CatalogRepository]):
        self.db = db
        self.repository_class = repository_class
        self.entity = repository_class.id_prefix

    def is_valid_id(self, entity_id: object) -> bool:
        return self.repository_class.is_valid_id(entity_id)

    def _run(self, call: Callable[[CatalogRepository], T]) -> T:
        with self.db.session_scope() as session:
            return call(self.repository_class(session))

    async def _call(self, operation: str, call: Callable[[CatalogRepository], T]) -> T:
        with trace_store_call(self.entity, operation):
            return await asyncio.to_thread(self._run, call)

    async def find_all(self, sort: str | None = None, descending: bool = False) -> list[EntityType]:
        """All entities, optionally ordered by ``sort``."""
        return await self._call(
            "find_all", lambda repo: repo.find_all(order_by=sort, order_desc=descending)
        )

    async def find_by_id(self, entity_id: str) -> EntityType | NotFound:
        """The entity with ``entity_id``; malformed or unknown ids give ``NotFound``."""
        not_found = NotFound(entity=self.entity, entity_id=str(entity_id))
        if not self.is_valid_id(entity_id):
            logger.debug("Rejected malformed %s id %r", self.entity, entity_id)
            return not_found

        try:
            entity = await self._call("find_by_id", lambda repo: repo.find_by_id(entity_id))
        except InvalidIdentifierError:
            return not_found
        return not_found if entity is None else entity

    async def find_by_field(
        self, field: str, value: Any, sort: str | None = None
    ) -> list[EntityType]:
        """Entities whose ``field`` equals ``value`` (membership for list fields)."""
        return await self._call(
            "find_by_field", lambda repo: repo.find_all({field: value}, order_by=sort)
        )

    async def find_by_name_key(self, name_key: str) -> EntityType | None:
        """The entity whose normalized name is ``name_key`` (genres and authors only)."""
        return await self._call(
            "find_by_name_key", lambda repo: repo.find_by_name_key(name_key)
        )

    async def count(self, **filters: Any) -> int:
        return await self._call("count", lambda repo: repo.count(filters))

    async def save(self, data: BaseModel) -> EntityType | Conflict:
        """Persist a new entity; a taken unique key gives ``Conflict``."""
        try:
            return await self._call("save", lambda repo: repo.save(data))
        except DuplicateError as e:
            return Conflict(entity=self.entity, detail=str(e))

    async def update(self, entity_id: str, data: BaseModel) -> EntityType | NotFound | Conflict:
        """Replace every field of an existing entity."""
        not_found = NotFound(entity=self.entity, entity_id=str(entity_id))
        if not self.is_valid_id(entity_id):
            return not_found

        try:
            entity = await self._call("update", lambda repo: repo.update_by_id(entity_id, data))
        except InvalidIdentifierError:
            return not_found
        except DuplicateError as e:
            return Conflict(entity=self.entity, detail=str(e))
        return not_found if entity is None else entity

    async def delete(self, entity_id: str) -> Deleted | NotFound:
        not_found = NotFound(entity=self.entity, entity_id=str(entity_id))
        if not self.is_valid_id(entity_id):
            return not_found

        try:
            removed = await self._call("delete", lambda repo: repo.delete_by_id(entity_id))
        except InvalidIdentifierError:
            return not_found
        return Deleted(entity=self.entity, entity_id=entity_id) if removed else not_found


class Catalog:
    """The four entity gateways sharing one database manager."""

    def __init__(self, db: DatabaseManager):
        self.db = db
        self.genres: EntityGateway[Genre] = EntityGateway(db, GenreRepository)
        self.authors: EntityGateway[Author] = EntityGateway(db, AuthorRepository)
        self.books: EntityGateway[Book] = EntityGateway(db, BookRepository)
        self.book_instances: EntityGateway[BookInstance] = EntityGateway(
            db, BookInstanceRepository
        )

    @classmethod
    def from_config(cls) -> "Catalog":
        """Catalog over the globally configured database."""
        return cls(get_db_manager())
