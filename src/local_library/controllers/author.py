"""Author use cases: list, detail, create, delete and update."""

from collections.abc import Mapping
from typing import Any

from ..database.author_repository import AuthorCreateSchema
from ..duplicates import author_name_key
from ..forms import AUTHOR_FORM
from ..guards import check_referenced
from ..observability.decorators import trace_controller
from ..observability.metrics import record_outcome
from ..outcomes import Blocked, CatalogResult, FieldError, NotFound, ValidationOutcome, ViewResult
from ..validation import validate_fields
from .base import EntityController


def validate_author(fields: Mapping[str, Any]) -> ValidationOutcome:
    """Form rules plus the cross-field check on the two dates."""
    validation = validate_fields(fields, AUTHOR_FORM)
    born = validation.fields.get("date_of_birth")
    died = validation.fields.get("date_of_death")
    if born and died and died < born:
        validation = validation.with_errors(
            FieldError(
                field="date_of_death",
                message="Date of death cannot be before date of birth",
                value=died,
            )
        )
    return validation


def _author_data(fields: Mapping[str, Any]) -> AuthorCreateSchema:
    return AuthorCreateSchema(
        first_name=fields["first_name"],
        family_name=fields["family_name"],
        date_of_birth=fields["date_of_birth"],
        date_of_death=fields["date_of_death"],
    )


class AuthorController(EntityController):
    """Authors are unique by "family, first" and undeletable while books cite them."""

    entity = "author"
    list_url = "/catalog/authors"
    not_found_detail = "Author not found"

    @trace_controller("author", "list")
    async def list(self) -> CatalogResult:
        authors = await self.catalog.authors.find_all(sort="family_name")
        return ViewResult(
            template="author_list", data={"title": "Author List", "author_list": authors}
        )

    @trace_controller("author", "detail")
    async def detail(self, author_id: str) -> CatalogResult:
        author, books = await self.lookup_with_dependents(
            self.catalog.authors, author_id, self.catalog.books, "author_id", sort="title"
        )
        if isinstance(author, NotFound):
            return self.not_found(author)

        return ViewResult(
            template="author_detail",
            data={"title": "Author Detail", "author": author, "author_books": books},
        )

    @trace_controller("author", "create_get")
    async def create_get(self) -> CatalogResult:
        return ViewResult(template="author_form", data={"title": "Create Author"})

    @trace_controller("author", "create_post")
    async def create_post(self, fields: Mapping[str, Any]) -> CatalogResult:
        validation = validate_author(fields)
        if not validation.is_valid:
            return self.invalid_form(
                "author_form", {"title": "Create Author", "author": validation.fields}, validation
            )

        data = _author_data(validation.fields)
        return await self.persist_unique(
            self.catalog.authors, author_name_key(data.first_name, data.family_name), data
        )

    @trace_controller("author", "delete_get")
    async def delete_get(self, author_id: str) -> CatalogResult:
        author, books = await self.lookup_with_dependents(
            self.catalog.authors, author_id, self.catalog.books, "author_id", sort="title"
        )
        if isinstance(author, NotFound):
            return self.redirect_to_list()

        return ViewResult(
            template="author_delete",
            data={"title": "Delete Author", "author": author, "author_books": books},
        )

    @trace_controller("author", "delete_post")
    async def delete_post(self, author_id: str) -> CatalogResult:
        author, books = await self.lookup_with_dependents(
            self.catalog.authors, author_id, self.catalog.books, "author_id", sort="title"
        )
        if isinstance(author, NotFound):
            return self.redirect_to_list()

        guard = check_referenced(books)
        if isinstance(guard, Blocked):
            record_outcome(self.entity, "blocked")
            return ViewResult(
                template="author_delete",
                data={
                    "title": "Delete Author",
                    "author": author,
                    "author_books": list(guard.dependents),
                },
            )

        await self.catalog.authors.delete(author.id)
        return self.redirect_to_list()

    @trace_controller("author", "update_get")
    async def update_get(self, author_id: str) -> CatalogResult:
        author = await self.catalog.authors.find_by_id(author_id)
        if isinstance(author, NotFound):
            return self.not_found(author)

        return ViewResult(template="author_form", data={"title": "Update Author", "author": author})

    @trace_controller("author", "update_post")
    async def update_post(self, author_id: str, fields: Mapping[str, Any]) -> CatalogResult:
        if not self.catalog.authors.is_valid_id(author_id):
            return self.not_found(NotFound(entity=self.entity, entity_id=str(author_id)))

        validation = validate_author(fields)
        if not validation.is_valid:
            return self.invalid_form(
                "author_form",
                {"title": "Update Author", "author": {**validation.fields, "id": author_id}},
                validation,
            )

        data = _author_data(validation.fields)
        return await self.persist_unique(
            self.catalog.authors,
            author_name_key(data.first_name, data.family_name),
            data,
            entity_id=author_id,
        )
