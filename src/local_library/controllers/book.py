"""Book use cases: list, detail, create, delete and update."""

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

from ..database.book_repository import BookCreateSchema
from ..forms import BOOK_FORM
from ..guards import check_referenced
from ..models import Author, Genre
from ..observability.decorators import trace_controller
from ..observability.metrics import record_outcome
from ..outcomes import Blocked, CatalogResult, FieldError, NotFound, ValidationOutcome, ViewResult
from ..validation import validate_fields
from .base import EntityController


def genre_choices(genres: Iterable[Genre], selected: Iterable[str]) -> list[dict[str, Any]]:
    """Genre checkboxes for the book form, ticking the selected ones."""
    selected = set(selected)
    return [{"genre": genre, "checked": genre.id in selected} for genre in genres]


def check_book_references(
    validation: ValidationOutcome, authors: Iterable[Author], genres: Iterable[Genre]
) -> ValidationOutcome:
    """Add a field error for an unknown author and for each unknown genre."""
    errors = []
    author_id = validation.fields.get("author")
    if author_id and author_id not in {author.id for author in authors}:
        errors.append(FieldError(field="author", message="Author not found", value=author_id))

    known_genres = {genre.id for genre in genres}
    for genre_id in validation.fields.get("genre", []):
        if genre_id not in known_genres:
            errors.append(FieldError(field="genre", message="Genre not found", value=genre_id))

    return validation.with_errors(*errors) if errors else validation


def _book_data(fields: Mapping[str, Any]) -> BookCreateSchema:
    return BookCreateSchema(
        title=fields["title"],
        author_id=fields["author"],
        summary=fields["summary"],
        isbn=fields["isbn"],
        genre_ids=tuple(fields["genre"]),
    )


class BookController(EntityController):
    """
    Books reference one author and an ordered list of genres.

    Create and update verify both references against the store, reusing the
    author and genre lists the form needs anyway. A book with copies cannot be
    deleted.
    """

    entity = "book"
    list_url = "/catalog/books"
    not_found_detail = "Book not found"

    async def _form_choices(self):
        return await asyncio.gather(
            self.catalog.authors.find_all(sort="family_name"),
            self.catalog.genres.find_all(sort="name"),
        )

    @trace_controller("book", "list")
    async def list(self) -> CatalogResult:
        books, authors = await asyncio.gather(
            self.catalog.books.find_all(sort="title"),
            self.catalog.authors.find_all(),
        )
        return ViewResult(
            template="book_list",
            data={
                "title": "Book List",
                "book_list": books,
                "authors": {author.id: author for author in authors},
            },
        )

    @trace_controller("book", "detail")
    async def detail(self, book_id: str) -> CatalogResult:
        book, copies = await self.lookup_with_dependents(
            self.catalog.books, book_id, self.catalog.book_instances, "book_id"
        )
        if isinstance(book, NotFound):
            return self.not_found(book)

        author, all_genres = await asyncio.gather(
            self.catalog.authors.find_by_id(book.author_id),
            self.catalog.genres.find_all(),
        )
        by_id = {genre.id: genre for genre in all_genres}
        return ViewResult(
            template="book_detail",
            data={
                "title": book.title,
                "book": book,
                "author": None if isinstance(author, NotFound) else author,
                "genres": [by_id[genre_id] for genre_id in book.genre_ids if genre_id in by_id],
                "book_instances": copies,
            },
        )

    @trace_controller("book", "create_get")
    async def create_get(self) -> CatalogResult:
        authors, genres = await self._form_choices()
        return ViewResult(
            template="book_form",
            data={"title": "Create Book", "authors": authors, "genres": genre_choices(genres, ())},
        )

    @trace_controller("book", "create_post")
    async def create_post(self, fields: Mapping[str, Any]) -> CatalogResult:
        validation = validate_fields(fields, BOOK_FORM)
        authors, genres = await self._form_choices()
        validation = check_book_references(validation, authors, genres)
        if not validation.is_valid:
            return self.invalid_form(
                "book_form",
                {
                    "title": "Create Book",
                    "authors": authors,
                    "genres": genre_choices(genres, validation.fields["genre"]),
                    "book": validation.fields,
                },
                validation,
            )

        return await self.persist(self.catalog.books, _book_data(validation.fields))

    @trace_controller("book", "delete_get")
    async def delete_get(self, book_id: str) -> CatalogResult:
        book, copies = await self.lookup_with_dependents(
            self.catalog.books, book_id, self.catalog.book_instances, "book_id"
        )
        if isinstance(book, NotFound):
            return self.redirect_to_list()

        return ViewResult(
            template="book_delete",
            data={"title": "Delete Book", "book": book, "book_instances": copies},
        )

    @trace_controller("book", "delete_post")
    async def delete_post(self, book_id: str) -> CatalogResult:
        book, copies = await self.lookup_with_dependents(
            self.catalog.books, book_id, self.catalog.book_instances, "book_id"
        )
        if isinstance(book, NotFound):
            return self.redirect_to_list()

        guard = check_referenced(copies)
        if isinstance(guard, Blocked):
            record_outcome(self.entity, "blocked")
            return ViewResult(
                template="book_delete",
                data={"title": "Delete Book", "book": book, "book_instances": list(guard.dependents)},
            )

        await self.catalog.books.delete(book.id)
        return self.redirect_to_list()

    @trace_controller("book", "update_get")
    async def update_get(self, book_id: str) -> CatalogResult:
        book, (authors, genres) = await asyncio.gather(
            self.catalog.books.find_by_id(book_id), self._form_choices()
        )
        if isinstance(book, NotFound):
            return self.not_found(book)

        return ViewResult(
            template="book_form",
            data={
                "title": "Update Book",
                "authors": authors,
                "genres": genre_choices(genres, book.genre_ids),
                "book": book,
            },
        )

    @trace_controller("book", "update_post")
    async def update_post(self, book_id: str, fields: Mapping[str, Any]) -> CatalogResult:
        if not self.catalog.books.is_valid_id(book_id):
            return self.not_found(NotFound(entity=self.entity, entity_id=str(book_id)))

        validation = validate_fields(fields, BOOK_FORM)
        authors, genres = await self._form_choices()
        validation = check_book_references(validation, authors, genres)
        if not validation.is_valid:
            return self.invalid_form(
                "book_form",
                {
                    "title": "Update Book",
                    "authors": authors,
                    "genres": genre_choices(genres, validation.fields["genre"]),
                    "book": {**validation.fields, "id": book_id},
                },
                validation,
            )

        return await self.persist(self.catalog.books, _book_data(validation.fields), book_id)
