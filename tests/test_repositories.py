"""Tests for the SQLAlchemy repositories (the catalog's storage collaborator)."""

from datetime import date

import pytest
from sqlalchemy import inspect

from local_library.database import (
    AuthorCreateSchema,
    AuthorRepository,
    BookCreateSchema,
    BookInstanceCreateSchema,
    BookInstanceRepository,
    BookRepository,
    GenreCreateSchema,
    GenreRepository,
)
from local_library.errors import (
    DuplicateError,
    InvalidIdentifierError,
    NotFoundError,
    StoreError,
)
from local_library.models import BookInstanceStatus


class TestSchema:
    def test_tables_created(self, db_manager):
        tables = set(inspect(db_manager.engine).get_table_names())

        assert {"authors", "genres", "books", "book_genres", "book_instances"} <= tables

    def test_connection(self, db_manager):
        assert db_manager.verify_connection() is True


class TestGenreRepository:
    def test_save_generates_prefixed_id(self, db_session):
        genre = GenreRepository(db_session).save(GenreCreateSchema(name="Fantasy"))

        assert GenreRepository.is_valid_id(genre.id)
        assert genre.id.startswith("genre_")
        assert genre.name == "Fantasy"

    def test_find_by_id(self, db_session):
        repo = GenreRepository(db_session)
        genre = repo.save(GenreCreateSchema(name="Fantasy"))

        assert repo.find_by_id(genre.id) == genre
        assert repo.find_by_id("genre_" + "0" * 32) is None

    def test_get_by_id_requires_entity(self, db_session):
        repo = GenreRepository(db_session)
        genre = repo.save(GenreCreateSchema(name="Fantasy"))

        assert repo.get_by_id(genre.id) == genre
        with pytest.raises(NotFoundError, match="not found"):
            repo.get_by_id("genre_" + "0" * 32)

    def test_malformed_id_raises(self, db_session):
        with pytest.raises(InvalidIdentifierError):
            GenreRepository(db_session).find_by_id("genre_xyz")

    def test_normalized_name_is_unique(self, db_session):
        repo = GenreRepository(db_session)
        repo.save(GenreCreateSchema(name="Fiction"))

        with pytest.raises(DuplicateError):
            repo.save(GenreCreateSchema(name="  FICTION "))

        assert repo.count() == 1

    def test_find_by_name_key(self, db_session):
        repo = GenreRepository(db_session)
        genre = repo.save(GenreCreateSchema(name="Science Fiction"))

        assert repo.find_by_name_key("science fiction") == genre
        assert repo.find_by_name_key("poetry") is None

    def test_find_all_sorted(self, db_session):
        repo = GenreRepository(db_session)
        for name in ["Poetry", "Drama", "Fantasy"]:
            repo.save(GenreCreateSchema(name=name))

        assert [g.name for g in repo.find_all(order_by="name")] == ["Drama", "Fantasy", "Poetry"]
        assert [g.name for g in repo.find_all(order_by="name", order_desc=True)][0] == "Poetry"

    def test_unknown_filter_field(self, db_session):
        with pytest.raises(ValueError):
            GenreRepository(db_session).find_all({"colour": "red"})

    def test_update_replaces_name(self, db_session):
        repo = GenreRepository(db_session)
        genre = repo.save(GenreCreateSchema(name="Fantasy"))

        updated = repo.update_by_id(genre.id, GenreCreateSchema(name="High Fantasy"))

        assert updated.id == genre.id
        assert updated.name == "High Fantasy"
        assert repo.find_by_name_key("fantasy") is None

    def test_update_missing_returns_none(self, db_session):
        result = GenreRepository(db_session).update_by_id(
            "genre_" + "0" * 32, GenreCreateSchema(name="Fantasy")
        )

        assert result is None

    def test_delete(self, db_session):
        repo = GenreRepository(db_session)
        genre = repo.save(GenreCreateSchema(name="Fantasy"))

        assert repo.delete_by_id(genre.id) is True
        assert repo.delete_by_id(genre.id) is False
        assert repo.find_by_id(genre.id) is None

    def test_invalid_entity_is_never_written(self, db_session):
        repo = GenreRepository(db_session)

        with pytest.raises(StoreError, match="not a valid entity"):
            repo.save(GenreCreateSchema(name="x" * 101))

        assert repo.count() == 0
        assert repo.find_all() == []

    def test_invalid_update_leaves_row_unchanged(self, db_session):
        repo = GenreRepository(db_session)
        genre = repo.save(GenreCreateSchema(name="Fantasy"))

        with pytest.raises(StoreError):
            repo.update_by_id(genre.id, GenreCreateSchema(name="x" * 101))

        assert repo.find_by_id(genre.id) == genre


class TestAuthorRepository:
    def test_name_key_is_unique(self, db_session):
        repo = AuthorRepository(db_session)
        repo.save(AuthorCreateSchema(first_name="Ursula", family_name="LeGuin"))

        with pytest.raises(DuplicateError):
            repo.save(AuthorCreateSchema(first_name="ursula", family_name="LEGUIN"))

    def test_same_family_name_different_first_name(self, db_session):
        repo = AuthorRepository(db_session)
        repo.save(AuthorCreateSchema(first_name="Charlotte", family_name="Bronte"))
        repo.save(AuthorCreateSchema(first_name="Emily", family_name="Bronte"))

        assert repo.count({"family_name": "Bronte"}) == 2

    def test_dates_round_trip(self, db_session):
        repo = AuthorRepository(db_session)
        author = repo.save(
            AuthorCreateSchema(
                first_name="Jane",
                family_name="Austen",
                date_of_birth=date(1775, 12, 16),
                date_of_death=date(1817, 7, 18),
            )
        )

        found = repo.find_by_id(author.id)
        assert found.date_of_birth == date(1775, 12, 16)
        assert found.lifespan == "1775-12-16 - 1817-07-18"


class TestBookRepository:
    @pytest.fixture
    def author(self, seed):
        return seed.author()

    def test_genre_order_preserved(self, db_session, seed, author):
        poetry, drama, fantasy = seed.genre("Poetry"), seed.genre("Drama"), seed.genre("Fantasy")
        repo = BookRepository(db_session)

        book = repo.save(
            BookCreateSchema(
                title="Collected Works",
                author_id=author.id,
                summary="Everything.",
                isbn="9780000000001",
                genre_ids=(fantasy.id, poetry.id, drama.id),
            )
        )

        assert repo.find_by_id(book.id).genre_ids == (fantasy.id, poetry.id, drama.id)

    def test_update_reorders_and_drops_genres(self, db_session, seed, author):
        poetry, drama = seed.genre("Poetry"), seed.genre("Drama")
        book = seed.book(author, (poetry, drama))
        repo = BookRepository(db_session)

        updated = repo.update_by_id(
            book.id,
            BookCreateSchema(
                title=book.title,
                author_id=author.id,
                summary=book.summary,
                isbn=book.isbn,
                genre_ids=(drama.id,),
            ),
        )

        assert updated.genre_ids == (drama.id,)

    def test_filter_by_genre_membership(self, db_session, seed, author):
        poetry, drama = seed.genre("Poetry"), seed.genre("Drama")
        seed.book(author, (poetry,), title="Odes")
        seed.book(author, (poetry, drama), title="Verse Plays")
        seed.book(author, (), title="Essays")
        repo = BookRepository(db_session)

        titles = [b.title for b in repo.find_all({"genre_ids": poetry.id}, order_by="title")]

        assert titles == ["Odes", "Verse Plays"]
        assert repo.count({"genre_ids": drama.id}) == 1

    def test_unknown_author_is_a_store_error(self, db_session):
        with pytest.raises(StoreError):
            BookRepository(db_session).save(
                BookCreateSchema(
                    title="Orphan",
                    author_id="author_" + "0" * 32,
                    summary="No author.",
                    isbn="9780000000002",
                )
            )

    def test_referenced_genre_cannot_be_deleted(self, db_session, seed, author):
        poetry = seed.genre("Poetry")
        seed.book(author, (poetry,))

        with pytest.raises(StoreError):
            GenreRepository(db_session).delete_by_id(poetry.id)

    def test_deleting_book_removes_genre_links(self, db_session, seed, author):
        poetry = seed.genre("Poetry")
        book = seed.book(author, (poetry,))

        assert BookRepository(db_session).delete_by_id(book.id) is True
        assert GenreRepository(db_session).delete_by_id(poetry.id) is True


class TestBookInstanceRepository:
    def test_save_and_filter_by_status(self, db_session, seed):
        book = seed.book(seed.author())
        repo = BookInstanceRepository(db_session)
        repo.save(BookInstanceCreateSchema(book_id=book.id, imprint="First", status="Available"))
        loaned = repo.save(
            BookInstanceCreateSchema(
                book_id=book.id,
                imprint="Second",
                status=BookInstanceStatus.LOANED,
                due_back=date(2024, 3, 5),
            )
        )

        assert repo.count({"status": BookInstanceStatus.AVAILABLE}) == 1
        assert repo.find_by_id(loaned.id).due_back == date(2024, 3, 5)
        assert len(repo.find_all({"book_id": book.id})) == 2

    def test_book_with_copies_cannot_be_deleted(self, db_session, seed):
        book = seed.book(seed.author())
        seed.copy(book)

        with pytest.raises(StoreError):
            BookRepository(db_session).delete_by_id(book.id)
