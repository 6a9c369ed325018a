"""
Database package for the Local Library catalog.

This package is the catalog's storage collaborator:
- SQLAlchemy schema definitions (schema.py)
- Session management and connection handling (session.py)
- Synchronous repositories per entity returning Pydantic snapshots
- Development seeding (seed.py)
"""

from .author_repository import AuthorCreateSchema, AuthorRepository
from .book_instance_repository import BookInstanceCreateSchema, BookInstanceRepository
from .book_repository import BookCreateSchema, BookRepository
from .genre_repository import GenreCreateSchema, GenreRepository
from .repository import CatalogRepository
from .schema import Author, Base, Book, BookGenre, BookInstance, Genre
from .session import (
    DatabaseManager,
    get_db_manager,
    reset_db_manager,
    safe_commit,
    safe_query,
)

__all__ = [
    "Author",
    "AuthorCreateSchema",
    "AuthorRepository",
    "Base",
    "Book",
    "BookCreateSchema",
    "BookGenre",
    "BookInstance",
    "BookInstanceCreateSchema",
    "BookInstanceRepository",
    "BookRepository",
    "CatalogRepository",
    "DatabaseManager",
    "Genre",
    "GenreCreateSchema",
    "GenreRepository",
    "get_db_manager",
    "reset_db_manager",
    "safe_commit",
    "safe_query",
]
