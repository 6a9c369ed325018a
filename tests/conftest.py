"""Test configuration and fixtures for the Local Library catalog.

1. Isolated test databases - each test gets a fresh SQLite file under tmp_path
2. Configuration isolation - the global config points at that file and is reset
3. Async support - controller and gateway tests run under pytest-asyncio
4. Seeding helpers - entities are written through the repositories
"""

import os
from collections.abc import Generator
from datetime import date
from pathlib import Path

import logfire
import pytest
from sqlalchemy.orm import Session

from local_library.config import reset_config
from local_library.database.author_repository import AuthorCreateSchema, AuthorRepository
from local_library.database.book_instance_repository import (
    BookInstanceCreateSchema,
    BookInstanceRepository,
)
from local_library.database.book_repository import BookCreateSchema, BookRepository
from local_library.database.genre_repository import GenreCreateSchema, GenreRepository
from local_library.database.session import DatabaseManager, reset_db_manager
from local_library.gateway import Catalog
from local_library.models import Author, Book, BookInstance, BookInstanceStatus, Genre

# === Pytest Configuration ===


def pytest_configure(config):
    """Keep spans and metrics local during the test run."""
    logfire.configure(send_to_logfire=False, console=False)


# === Configuration Fixtures ===


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path for each test."""
    return tmp_path / "test_library.db"


@pytest.fixture
def test_database_url(test_db_path: Path) -> str:
    return f"sqlite:///{test_db_path}"


@pytest.fixture(autouse=True)
def isolated_config(test_db_path: Path, monkeypatch) -> Generator[None, None, None]:
    """Point the global configuration at the test database."""
    for key in list(os.environ):
        if key.startswith("LOCAL_LIBRARY_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("LOCAL_LIBRARY_DATABASE_PATH", str(test_db_path))
    reset_config()

    yield

    reset_db_manager()
    reset_config()


# === Database Fixtures ===


@pytest.fixture
def db_manager(test_database_url: str) -> Generator[DatabaseManager, None, None]:
    """Provide a database manager with the schema created."""
    manager = DatabaseManager(test_database_url)
    manager.init_database()

    yield manager

    manager.close()


@pytest.fixture
def db_session(db_manager: DatabaseManager) -> Generator[Session, None, None]:
    """Provide a SQLAlchemy session for repository tests."""
    session = db_manager.create_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def catalog(db_manager: DatabaseManager) -> Catalog:
    return Catalog(db_manager)


# === Test Data Fixtures ===


class Seeder:
    """Writes entities through the repositories, one transaction each."""

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    def genre(self, name: str = "Fiction") -> Genre:
        with self.db_manager.session_scope() as session:
            return GenreRepository(session).save(GenreCreateSchema(name=name))

    def author(
        self,
        first_name: str = "Patrick",
        family_name: str = "Rothfuss",
        date_of_birth: date | None = date(1973, 6, 6),
        date_of_death: date | None = None,
    ) -> Author:
        with self.db_manager.session_scope() as session:
            return AuthorRepository(session).save(
                AuthorCreateSchema(
                    first_name=first_name,
                    family_name=family_name,
                    date_of_birth=date_of_birth,
                    date_of_death=date_of_death,
                )
            )

    def book(
        self,
        author: Author,
        genres: tuple[Genre, ...] = (),
        title: str = "The Name of the Wind",
    ) -> Book:
        with self.db_manager.session_scope() as session:
            return BookRepository(session).save(
                BookCreateSchema(
                    title=title,
                    author_id=author.id,
                    summary="A young man grows to be the most notorious wizard his world has seen.",
                    isbn="9780756404741",
                    genre_ids=tuple(genre.id for genre in genres),
                )
            )

    def copy(
        self,
        book: Book,
        status: BookInstanceStatus = BookInstanceStatus.AVAILABLE,
        due_back: date | None = None,
        imprint: str = "DAW Books, 2007.",
    ) -> BookInstance:
        with self.db_manager.session_scope() as session:
            return BookInstanceRepository(session).save(
                BookInstanceCreateSchema(
                    book_id=book.id, imprint=imprint, status=status, due_back=due_back
                )
            )


@pytest.fixture
def seed(db_manager: DatabaseManager) -> Seeder:
    return Seeder(db_manager)

