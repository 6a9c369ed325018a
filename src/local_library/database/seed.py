"""
Database initialization and seeding for the Local Library catalog.

Creates the schema and, on request, fills it with realistic sample data:
- Genres from a fixed list of common shelf categories
- Authors with Faker names and plausible birth/death dates
- Books with valid ISBN-13s, one author and one to three genres
- One to four copies per book across every shelf status

Rows are written through the repositories, so generated ids and normalized
name keys follow the same rules as the catalog's own writes.

Usage:
    local-library-init-db [--drop-existing] [--sample-data] [--database-url URL]
"""

import argparse
import logging
import random
import sys
from datetime import date, timedelta

from faker import Faker
from sqlalchemy import text

from ..errors import CatalogError
from ..models.book_instance import BookInstanceStatus
from ..normalize import author_name_key
from ..observability import configure_logging
from .author_repository import AuthorCreateSchema, AuthorRepository
from .book_instance_repository import BookInstanceCreateSchema, BookInstanceRepository
from .book_repository import BookCreateSchema, BookRepository
from .genre_repository import GenreCreateSchema, GenreRepository
from .session import DatabaseManager, get_db_manager, reset_db_manager

logger = logging.getLogger(__name__)

EXPECTED_TABLES = {"authors", "genres", "books", "book_genres", "book_instances"}

GENRES = [
    "Fiction", "Mystery", "Science Fiction", "Fantasy", "Romance",
    "Thriller", "Horror", "Biography", "History", "Science",
    "Poetry", "Drama", "Adventure", "Children's", "Young Adult",
]

# Share of copies per status; most of the collection sits on the shelf
STATUS_WEIGHTS = {
    BookInstanceStatus.AVAILABLE: 60,
    BookInstanceStatus.LOANED: 25,
    BookInstanceStatus.RESERVED: 10,
    BookInstanceStatus.MAINTENANCE: 5,
}


def generate_isbn13(rng: random.Random) -> str:
    """Generate a valid ISBN-13 number."""
    digits = f"978{rng.randint(0, 9)}{rng.randint(1000, 9999)}{rng.randint(1000, 9999)}"
    total = sum(int(digit) * (3 if i % 2 else 1) for i, digit in enumerate(digits))
    return f"{digits}{(10 - total % 10) % 10}"


def generate_authors(fake: Faker, rng: random.Random, count: int) -> list[AuthorCreateSchema]:
    """Authors with unique names; about one in five has a date of death."""
    authors = []
    seen = set()
    while len(authors) < count:
        first_name, family_name = fake.first_name(), fake.last_name()
        key = author_name_key(first_name, family_name)
        if key in seen:
            continue
        seen.add(key)

        birth_year = rng.randint(1850, 1990)
        date_of_birth = fake.date_between(date(birth_year, 1, 1), date(birth_year, 12, 31))
        date_of_death = None
        if rng.random() < 0.2 and birth_year < 1960:
            date_of_death = date_of_birth + timedelta(days=rng.randint(30, 90) * 365)

        authors.append(
            AuthorCreateSchema(
                first_name=first_name,
                family_name=family_name,
                date_of_birth=date_of_birth,
                date_of_death=min(date_of_death, date.today()) if date_of_death else None,
            )
        )
    return authors


def generate_copies(
    fake: Faker, rng: random.Random, book_id: str
) -> list[BookInstanceCreateSchema]:
    copies = []
    for _ in range(rng.randint(1, 4)):
        status = rng.choices(list(STATUS_WEIGHTS), weights=list(STATUS_WEIGHTS.values()))[0]
        due_back = None
        if status is not BookInstanceStatus.AVAILABLE:
            due_back = fake.date_between(start_date="-1w", end_date="+4w")
        copies.append(
            BookInstanceCreateSchema(
                book_id=book_id,
                imprint=f"{fake.city()}: {fake.company()}, {rng.randint(1950, 2024)}.",
                status=status,
                due_back=due_back,
            )
        )
    return copies


def load_sample_data(
    db_manager: DatabaseManager, num_authors: int = 20, num_books: int = 60, seed: int = 42
) -> None:
    """Fill an empty catalog with deterministic sample data."""
    fake = Faker()
    fake.seed_instance(seed)
    rng = random.Random(seed)

    with db_manager.session_scope() as session:
        genres = GenreRepository(session)
        genre_ids = [genres.save(GenreCreateSchema(name=name)).id for name in GENRES]

        authors = AuthorRepository(session)
        author_ids = [
            authors.save(data).id for data in generate_authors(fake, rng, num_authors)
        ]

        books = BookRepository(session)
        copies = BookInstanceRepository(session)
        num_copies = 0
        for _ in range(num_books):
            book = books.save(
                BookCreateSchema(
                    title=fake.catch_phrase().title(),
                    author_id=rng.choice(author_ids),
                    summary=fake.text(max_nb_chars=600),
                    isbn=generate_isbn13(rng),
                    genre_ids=tuple(rng.sample(genre_ids, rng.randint(1, 3))),
                )
            )
            for data in generate_copies(fake, rng, book.id):
                copies.save(data)
                num_copies += 1

    logger.info(
        "Created %d genres, %d authors, %d books and %d copies",
        len(GENRES),
        num_authors,
        num_books,
        num_copies,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="local-library-init-db",
        description="Create the catalog tables and optionally fill them with sample data",
    )
    parser.add_argument("--drop-existing", action="store_true", help="recreate every table")
    parser.add_argument(
        "--sample-data", action="store_true", help="add Faker genres, authors, books and copies"
    )
    parser.add_argument("--database-url", help="SQLAlchemy URL instead of the configured file")
    return parser


def missing_tables(db_manager: DatabaseManager) -> set[str]:
    """Catalog tables absent from the SQLite database."""
    with db_manager.session_scope() as session:
        rows = session.execute(text("SELECT name FROM sqlite_master WHERE type='table'"))
        return EXPECTED_TABLES - {name for (name,) in rows}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    db_manager = get_db_manager(args.database_url)
    if not db_manager.verify_connection():
        return 1

    try:
        db_manager.init_database(drop_existing=args.drop_existing)
        if args.sample_data:
            load_sample_data(db_manager)

        absent = missing_tables(db_manager)
        if absent:
            logger.error("Tables not created: %s", ", ".join(sorted(absent)))
            return 1
    except CatalogError:
        logger.exception("Catalog initialization failed")
        return 1
    finally:
        reset_db_manager()

    logger.info("Catalog database ready at %s", db_manager.database_url)
    return 0


if __name__ == "__main__":
    sys.exit(main())
