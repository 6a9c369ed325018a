"""
Author repository implementation for the Local Library catalog store.

Authors are deduplicated by their normalized "family, first" name, kept in
``name_key`` under a unique constraint.
"""

from datetime import date

from pydantic import BaseModel

from ..database.schema import Author as AuthorDB
from ..models.author import Author as AuthorModel
from ..normalize import author_name_key
from .repository import CatalogRepository


class AuthorCreateSchema(BaseModel):
    """Schema for creating or fully replacing an author."""

    first_name: str
    family_name: str
    date_of_birth: date | None = None
    date_of_death: date | None = None


class AuthorRepository(CatalogRepository[AuthorDB, AuthorCreateSchema, AuthorModel]):
    """
    Repository for author data access.

    Lookups by name go through ``find_by_name_key``; book references are
    queried on the book repository with an ``author_id`` filter.
    """

    id_prefix = "author"

    @property
    def model_class(self):
        return AuthorDB

    @property
    def response_schema(self):
        return AuthorModel

    def _apply(self, db_obj: AuthorDB, data: AuthorCreateSchema) -> None:
        # Birth date first so the death-date validator sees the new value
        db_obj.date_of_birth = data.date_of_birth
        db_obj.date_of_death = data.date_of_death
        db_obj.first_name = data.first_name
        db_obj.family_name = data.family_name
        db_obj.name_key = author_name_key(data.first_name, data.family_name)

    def find_by_name_key(self, name_key: str) -> AuthorModel | None:
        """Get the author whose normalized name equals ``name_key``."""
        matches = self.find_all({"name_key": name_key})
        return matches[0] if matches else None
