"""
Book repository implementation for the Local Library catalog store.

Books own their genre links: saving or replacing a book rewrites the
``book_genres`` rows so they follow the order of ``genre_ids``.
"""

from typing import Any

from pydantic import BaseModel, Field
from sqlalchemy.orm import selectinload

from ..database.schema import Book as BookDB
from ..database.schema import BookGenre as BookGenreDB
from ..models.book import Book as BookModel
from .repository import CatalogRepository


class BookCreateSchema(BaseModel):
    """Schema for creating or fully replacing a book."""

    title: str
    author_id: str
    summary: str
    isbn: str
    genre_ids: tuple[str, ...] = Field(default=())


class BookRepository(CatalogRepository[BookDB, BookCreateSchema, BookModel]):
    """
    Repository for book data access.

    ``find_all({"genre_ids": genre_id})`` matches books that list the genre
    anywhere in their genre sequence.
    """

    id_prefix = "book"

    @property
    def model_class(self):
        return BookDB

    @property
    def response_schema(self):
        return BookModel

    def _query_options(self) -> tuple:
        return (selectinload(BookDB.genre_links),)

    def _filter_clause(self, field: str, value: Any):
        if field == "genre_ids":
            return BookDB.genre_links.any(BookGenreDB.genre_id == value)
        return super()._filter_clause(field, value)

    def _apply(self, db_obj: BookDB, data: BookCreateSchema) -> None:
        db_obj.title = data.title
        db_obj.author_id = data.author_id
        db_obj.summary = data.summary
        db_obj.isbn = data.isbn

        # Reuse existing link rows so an unchanged genre keeps its primary key
        existing = {link.genre_id: link for link in db_obj.genre_links}
        links = []
        for position, genre_id in enumerate(dict.fromkeys(data.genre_ids)):
            link = existing.get(genre_id) or BookGenreDB(genre_id=genre_id)
            link.position = position
            links.append(link)
        db_obj.genre_links = links
