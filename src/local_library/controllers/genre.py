"""Genre use cases: list, detail, create, delete and update."""

from collections.abc import Mapping
from typing import Any

from ..config import get_config
from ..database.genre_repository import GenreCreateSchema
from ..duplicates import normalize_name
from ..forms import genre_form_rules
from ..gateway import Catalog
from ..guards import check_referenced
from ..observability.decorators import trace_controller
from ..observability.metrics import record_outcome
from ..outcomes import Blocked, CatalogResult, NotFound, ViewResult
from ..validation import validate_fields
from .base import EntityController


class GenreController(EntityController):
    """Genres are unique by normalized name and undeletable while books use them."""

    entity = "genre"
    list_url = "/catalog/genres"
    not_found_detail = "Genre not found"

    def __init__(self, catalog: Catalog, min_name_length: int | None = None):
        super().__init__(catalog)
        if min_name_length is None:
            min_name_length = get_config().genre_name_min_length
        self.rules = genre_form_rules(min_name_length)

    @trace_controller("genre", "list")
    async def list(self) -> CatalogResult:
        genres = await self.catalog.genres.find_all(sort="name")
        return ViewResult(template="genre_list", data={"title": "Genre List", "genre_list": genres})

    @trace_controller("genre", "detail")
    async def detail(self, genre_id: str) -> CatalogResult:
        genre, books = await self.lookup_with_dependents(
            self.catalog.genres, genre_id, self.catalog.books, "genre_ids", sort="title"
        )
        if isinstance(genre, NotFound):
            return self.not_found(genre)

        return ViewResult(
            template="genre_detail",
            data={"title": "Genre Detail", "genre": genre, "genre_books": books},
        )

    @trace_controller("genre", "create_get")
    async def create_get(self) -> CatalogResult:
        return ViewResult(template="genre_form", data={"title": "Create Genre"})

    @trace_controller("genre", "create_post")
    async def create_post(self, fields: Mapping[str, Any]) -> CatalogResult:
        validation = validate_fields(fields, self.rules)
        if not validation.is_valid:
            return self.invalid_form(
                "genre_form", {"title": "Create Genre", "genre": validation.fields}, validation
            )

        name = validation.fields["name"]
        return await self.persist_unique(
            self.catalog.genres, normalize_name(name), GenreCreateSchema(name=name)
        )

    @trace_controller("genre", "delete_get")
    async def delete_get(self, genre_id: str) -> CatalogResult:
        genre, books = await self.lookup_with_dependents(
            self.catalog.genres, genre_id, self.catalog.books, "genre_ids", sort="title"
        )
        if isinstance(genre, NotFound):
            return self.redirect_to_list()

        return ViewResult(
            template="genre_delete",
            data={"title": "Delete Genre", "genre": genre, "genre_books": books},
        )

    @trace_controller("genre", "delete_post")
    async def delete_post(self, genre_id: str) -> CatalogResult:
        genre, books = await self.lookup_with_dependents(
            self.catalog.genres, genre_id, self.catalog.books, "genre_ids", sort="title"
        )
        if isinstance(genre, NotFound):
            return self.redirect_to_list()

        guard = check_referenced(books)
        if isinstance(guard, Blocked):
            record_outcome(self.entity, "blocked")
            return ViewResult(
                template="genre_delete",
                data={"title": "Delete Genre", "genre": genre, "genre_books": list(guard.dependents)},
            )

        await self.catalog.genres.delete(genre.id)
        return self.redirect_to_list()

    @trace_controller("genre", "update_get")
    async def update_get(self, genre_id: str) -> CatalogResult:
        genre = await self.catalog.genres.find_by_id(genre_id)
        if isinstance(genre, NotFound):
            return self.not_found(genre)

        return ViewResult(template="genre_form", data={"title": "Update Genre", "genre": genre})

    @trace_controller("genre", "update_post")
    async def update_post(self, genre_id: str, fields: Mapping[str, Any]) -> CatalogResult:
        if not self.catalog.genres.is_valid_id(genre_id):
            return self.not_found(NotFound(entity=self.entity, entity_id=str(genre_id)))

        validation = validate_fields(fields, self.rules)
        if not validation.is_valid:
            return self.invalid_form(
                "genre_form",
                {"title": "Update Genre", "genre": {**validation.fields, "id": genre_id}},
                validation,
            )

        name = validation.fields["name"]
        return await self.persist_unique(
            self.catalog.genres,
            normalize_name(name),
            GenreCreateSchema(name=name),
            entity_id=genre_id,
        )
