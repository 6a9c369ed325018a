"""BookInstance (physical copy) use cases: list, detail, create, delete and update."""

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

from ..database.book_instance_repository import BookInstanceCreateSchema
from ..forms import BOOK_INSTANCE_FORM, STATUS_CHOICES
from ..guards import check_instance_status
from ..models import Book, BookInstance, BookInstanceStatus
from ..observability.decorators import trace_controller
from ..observability.metrics import record_outcome
from ..outcomes import (
    Blocked,
    CatalogResult,
    FieldError,
    NotFound,
    ValidationOutcome,
    ViewResult,
)
from ..validation import validate_fields
from .base import EntityController


def validate_book_instance(fields: Mapping[str, Any], books: Iterable[Book]) -> ValidationOutcome:
    """Form rules plus a check that the selected book exists."""
    validation = validate_fields(fields, BOOK_INSTANCE_FORM)
    book_id = validation.fields.get("book")
    if book_id and book_id not in {book.id for book in books}:
        validation = validation.with_errors(
            FieldError(field="book", message="Book not found", value=book_id)
        )
    return validation


def _book_instance_data(fields: Mapping[str, Any]) -> BookInstanceCreateSchema:
    """
    Build the stored copy from sanitized fields.

    A missing status means the copy is in maintenance; an available copy is
    on the shelf, so any due-back date is dropped.
    """
    status = BookInstanceStatus(fields["status"] or BookInstanceStatus.MAINTENANCE)
    due_back = None if status is BookInstanceStatus.AVAILABLE else fields["due_back"]
    return BookInstanceCreateSchema(
        book_id=fields["book"],
        imprint=fields["imprint"],
        status=status,
        due_back=due_back,
    )


class BookInstanceController(EntityController):
    """Copies have no dependents; only an ``Available`` copy may be deleted."""

    entity = "bookinstance"
    list_url = "/catalog/bookinstances"
    not_found_detail = "Book copy not found"

    def _form_data(
        self, title: str, books: Iterable[Book], instance: Any = None, selected: str | None = None
    ) -> dict[str, Any]:
        data = {
            "title": title,
            "book_list": books,
            "status_choices": STATUS_CHOICES,
        }
        if instance is not None:
            data["bookinstance"] = instance
            data["selected_book"] = selected
        return data

    def _delete_view(self, instance: BookInstance, guard: Any) -> ViewResult:
        if isinstance(guard, Blocked):
            return ViewResult(
                template="bookinstance_delete",
                data={
                    "title": "You cannot delete this",
                    "bookinstance": instance,
                    "status": guard.reason,
                },
            )
        return ViewResult(
            template="bookinstance_delete",
            data={"title": "Delete Book Instance", "bookinstance": instance},
        )

    @trace_controller("bookinstance", "list")
    async def list(self) -> CatalogResult:
        instances, books = await asyncio.gather(
            self.catalog.book_instances.find_all(),
            self.catalog.books.find_all(),
        )
        return ViewResult(
            template="bookinstance_list",
            data={
                "title": "Book Instance List",
                "bookinstance_list": instances,
                "books": {book.id: book for book in books},
            },
        )

    @trace_controller("bookinstance", "detail")
    async def detail(self, instance_id: str) -> CatalogResult:
        instance = await self.catalog.book_instances.find_by_id(instance_id)
        if isinstance(instance, NotFound):
            return self.not_found(instance)

        book = await self.catalog.books.find_by_id(instance.book_id)
        return ViewResult(
            template="bookinstance_detail",
            data={
                "title": "Book:",
                "bookinstance": instance,
                "book": None if isinstance(book, NotFound) else book,
            },
        )

    @trace_controller("bookinstance", "create_get")
    async def create_get(self) -> CatalogResult:
        books = await self.catalog.books.find_all(sort="title")
        return ViewResult(
            template="bookinstance_form", data=self._form_data("Create BookInstance", books)
        )

    @trace_controller("bookinstance", "create_post")
    async def create_post(self, fields: Mapping[str, Any]) -> CatalogResult:
        books = await self.catalog.books.find_all(sort="title")
        validation = validate_book_instance(fields, books)
        if not validation.is_valid:
            return self.invalid_form(
                "bookinstance_form",
                self._form_data(
                    "Create BookInstance",
                    books,
                    instance=validation.fields,
                    selected=validation.fields["book"],
                ),
                validation,
            )

        return await self.persist(
            self.catalog.book_instances, _book_instance_data(validation.fields)
        )

    @trace_controller("bookinstance", "delete_get")
    async def delete_get(self, instance_id: str) -> CatalogResult:
        instance = await self.catalog.book_instances.find_by_id(instance_id)
        if isinstance(instance, NotFound):
            return self.redirect_to_list()

        return self._delete_view(instance, check_instance_status(instance))

    @trace_controller("bookinstance", "delete_post")
    async def delete_post(self, instance_id: str) -> CatalogResult:
        instance = await self.catalog.book_instances.find_by_id(instance_id)
        if isinstance(instance, NotFound):
            return self.redirect_to_list()

        guard = check_instance_status(instance)
        if isinstance(guard, Blocked):
            record_outcome(self.entity, "blocked")
            return self._delete_view(instance, guard)

        await self.catalog.book_instances.delete(instance.id)
        return self.redirect_to_list()

    @trace_controller("bookinstance", "update_get")
    async def update_get(self, instance_id: str) -> CatalogResult:
        instance, books = await asyncio.gather(
            self.catalog.book_instances.find_by_id(instance_id),
            self.catalog.books.find_all(sort="title"),
        )
        if isinstance(instance, NotFound):
            return self.not_found(instance)

        return ViewResult(
            template="bookinstance_form",
            data=self._form_data(
                "Update BookInstance", books, instance=instance, selected=instance.book_id
            ),
        )

    @trace_controller("bookinstance", "update_post")
    async def update_post(self, instance_id: str, fields: Mapping[str, Any]) -> CatalogResult:
        if not self.catalog.book_instances.is_valid_id(instance_id):
            return self.not_found(NotFound(entity=self.entity, entity_id=str(instance_id)))

        books = await self.catalog.books.find_all(sort="title")
        validation = validate_book_instance(fields, books)
        if not validation.is_valid:
            return self.invalid_form(
                "bookinstance_form",
                self._form_data(
                    "Update BookInstance",
                    books,
                    instance={**validation.fields, "id": instance_id},
                    selected=validation.fields["book"],
                ),
                validation,
            )

        return await self.persist(
            self.catalog.book_instances, _book_instance_data(validation.fields), instance_id
        )
