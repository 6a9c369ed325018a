"""
SQLAlchemy database schema for the Local Library catalog.

These tables mirror the Pydantic models in ``local_library.models``. Two
details carry catalog rules into the store itself:

1. ``genres.name_key`` and ``authors.name_key`` hold the normalized name under a
   unique constraint, which gives the store an atomic insert-if-absent primitive
   backing the duplicate resolver.
2. Foreign keys are declared without cascades, so the database refuses to
   orphan books or copies even if a caller skipped the integrity guard.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship, validates
from sqlalchemy.sql import func

from ..models.book_instance import BookInstanceStatus

Base = declarative_base()


class CatalogRowMixin:
    """Prefixed string id and audit timestamps shared by every entity table."""

    id = Column(String(50), primary_key=True)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())


class Author(CatalogRowMixin, Base):
    """Authors table - one row per person books are attributed to."""

    __tablename__ = "authors"

    first_name = Column(String(100), nullable=False)
    family_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=True)
    date_of_death = Column(Date, nullable=True)
    # Normalized "family, first" used for duplicate detection
    name_key = Column(String(250), nullable=False, unique=True)

    # passive_deletes: the database refuses to orphan dependents
    books = relationship("Book", back_populates="author", passive_deletes="all")

    __table_args__ = (
        Index("idx_author_family_name", "family_name"),
        CheckConstraint("id LIKE 'author_%'", name="check_author_id_format"),
    )

    @validates("date_of_death")
    def validate_date_of_death(self, key, value):  # noqa: ARG002
        """Reject a death date earlier than the birth date."""
        if value and self.date_of_birth and value < self.date_of_birth:
            raise ValueError("Date of death cannot be before date of birth")
        return value


class Genre(CatalogRowMixin, Base):
    """Genres table - uniquely named classifications."""

    __tablename__ = "genres"

    name = Column(String(100), nullable=False)
    name_key = Column(String(100), nullable=False, unique=True)

    book_links = relationship("BookGenre", back_populates="genre", passive_deletes="all")

    __table_args__ = (
        Index("idx_genre_name", "name"),
        CheckConstraint("id LIKE 'genre_%'", name="check_genre_id_format"),
    )


class Book(CatalogRowMixin, Base):
    """Books table - the catalog of titles."""

    __tablename__ = "books"

    title = Column(String(500), nullable=False)
    author_id = Column(String(50), ForeignKey("authors.id"), nullable=False)
    summary = Column(Text, nullable=False)
    isbn = Column(String(32), nullable=False)

    author = relationship("Author", back_populates="books")
    # Position keeps the genre order chosen on the form
    genre_links = relationship(
        "BookGenre",
        back_populates="book",
        order_by="BookGenre.position",
        cascade="all, delete-orphan",
    )
    instances = relationship("BookInstance", back_populates="book", passive_deletes="all")

    __table_args__ = (
        Index("idx_book_title", "title"),
        Index("idx_book_author", "author_id"),
        CheckConstraint("id LIKE 'book_%'", name="check_book_id_format"),
    )

    @property
    def genre_ids(self) -> tuple[str, ...]:
        return tuple(link.genre_id for link in self.genre_links)


class BookGenre(Base):
    """Association between books and genres, ordered by position."""

    __tablename__ = "book_genres"

    book_id = Column(String(50), ForeignKey("books.id"), primary_key=True)
    genre_id = Column(String(50), ForeignKey("genres.id"), primary_key=True)
    position = Column(Integer, nullable=False, default=0)

    book = relationship("Book", back_populates="genre_links")
    genre = relationship("Genre", back_populates="book_links")

    __table_args__ = (
        Index("idx_book_genre_genre", "genre_id"),
        CheckConstraint("position >= 0", name="check_book_genre_position_non_negative"),
    )


class BookInstance(CatalogRowMixin, Base):
    """Book instances table - physical copies on (or off) the shelf."""

    __tablename__ = "book_instances"

    book_id = Column(String(50), ForeignKey("books.id"), nullable=False)
    imprint = Column(String(500), nullable=False)
    status = Column(
        Enum(
            BookInstanceStatus,
            name="book_instance_status",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=BookInstanceStatus.MAINTENANCE,
    )
    due_back = Column(Date, nullable=True)

    book = relationship("Book", back_populates="instances")

    __table_args__ = (
        Index("idx_book_instance_book", "book_id"),
        Index("idx_book_instance_status", "status"),
        CheckConstraint("id LIKE 'bookinstance_%'", name="check_book_instance_id_format"),
    )
