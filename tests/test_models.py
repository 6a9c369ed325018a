"""Tests for the catalog's immutable value types."""

from datetime import date

import pytest
from pydantic import ValidationError

from local_library.models import Author, Book, BookInstance, BookInstanceStatus, Genre

AUTHOR_ID = "author_5b0e2c7d9a4f4e1b8c3d2a1f0e9d8c7b"
BOOK_ID = "book_9d1e0f2a3b4c4d5e8f6a7b8c9d0e1f2a"
COPY_ID = "bookinstance_3f2e1d0c9b8a47f6a5e4d3c2b1a09f8e"
GENRE_ID = "genre_0c6f5dbb9d7a4a0f9b1c2e3d4f5a6b7c"


class TestGenre:
    def test_derived_fields(self):
        genre = Genre(id=GENRE_ID, name="  Science  Fiction")

        assert genre.name_key == "science fiction"
        assert genre.url == f"/catalog/genre/{GENRE_ID}"

    @pytest.mark.parametrize("genre_id", ["genre_1", "author_0c6f5dbb9d7a4a0f9b1c2e3d4f5a6b7c"])
    def test_rejects_malformed_id(self, genre_id: str):
        with pytest.raises(ValidationError):
            Genre(id=genre_id, name="Fiction")

    def test_is_frozen(self):
        genre = Genre(id=GENRE_ID, name="Fiction")

        with pytest.raises(ValidationError):
            genre.name = "Poetry"


class TestAuthor:
    def test_name_and_lifespan(self):
        author = Author(
            id=AUTHOR_ID,
            first_name="Ursula",
            family_name="LeGuin",
            date_of_birth=date(1929, 10, 21),
            date_of_death=date(2018, 1, 22),
        )

        assert author.name == "LeGuin, Ursula"
        assert author.lifespan == "1929-10-21 - 2018-01-22"
        assert author.name_key == "leguin, ursula"
        assert author.url == f"/catalog/author/{AUTHOR_ID}"

    def test_lifespan_without_dates(self):
        author = Author(id=AUTHOR_ID, first_name="Homer", family_name="Unknown")

        assert author.lifespan == " - "

    def test_death_before_birth_rejected(self):
        with pytest.raises(ValidationError, match="Date of death cannot be before date of birth"):
            Author(
                id=AUTHOR_ID,
                first_name="Ursula",
                family_name="LeGuin",
                date_of_birth=date(2018, 1, 22),
                date_of_death=date(1929, 10, 21),
            )


class TestBook:
    def test_genre_order_is_kept(self):
        second_genre = "genre_" + "f" * 32
        book = Book(
            id=BOOK_ID,
            title="The Dispossessed",
            author_id=AUTHOR_ID,
            summary="An ambiguous utopia.",
            isbn="9780061054884",
            genre_ids=[second_genre, GENRE_ID],
        )

        assert book.genre_ids == (second_genre, GENRE_ID)
        assert book.url == f"/catalog/book/{BOOK_ID}"


class TestBookInstance:
    def test_defaults_to_maintenance(self):
        copy = BookInstance(id=COPY_ID, book_id=BOOK_ID, imprint="Harper, 1974.")

        assert copy.status is BookInstanceStatus.MAINTENANCE
        assert copy.is_available is False
        assert copy.due_back_formatted == ""

    def test_due_back_formatted(self):
        copy = BookInstance(
            id=COPY_ID,
            book_id=BOOK_ID,
            imprint="Harper, 1974.",
            status="Loaned",
            due_back=date(2024, 3, 5),
        )

        assert copy.due_back_formatted == "Mar 5, 2024"
        assert copy.url == f"/catalog/bookinstance/{COPY_ID}"

    def test_available_copy_cannot_have_due_back(self):
        with pytest.raises(ValidationError):
            BookInstance(
                id=COPY_ID,
                book_id=BOOK_ID,
                imprint="Harper, 1974.",
                status=BookInstanceStatus.AVAILABLE,
                due_back=date(2024, 3, 5),
            )

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            BookInstance(id=COPY_ID, book_id=BOOK_ID, imprint="Harper, 1974.", status="Lost")
