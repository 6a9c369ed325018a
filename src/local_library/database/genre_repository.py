"""
Genre repository implementation for the Local Library catalog store.

Genre names are unique once normalized; the normalized form is stored in
``name_key`` and guarded by a unique constraint, so a racing duplicate insert
fails with ``DuplicateError`` instead of creating a second genre.
"""

from pydantic import BaseModel

from ..database.schema import Genre as GenreDB
from ..models.genre import Genre as GenreModel
from ..normalize import normalize_name
from .repository import CatalogRepository


class GenreCreateSchema(BaseModel):
    """Schema for creating or fully replacing a genre."""

    name: str


class GenreRepository(CatalogRepository[GenreDB, GenreCreateSchema, GenreModel]):
    """Repository for genre data access."""

    id_prefix = "genre"

    @property
    def model_class(self):
        return GenreDB

    @property
    def response_schema(self):
        return GenreModel

    def _apply(self, db_obj: GenreDB, data: GenreCreateSchema) -> None:
        db_obj.name = data.name
        db_obj.name_key = normalize_name(data.name)

    def find_by_name_key(self, name_key: str) -> GenreModel | None:
        """Get the genre whose normalized name equals ``name_key``."""
        matches = self.find_all({"name_key": name_key})
        return matches[0] if matches else None
