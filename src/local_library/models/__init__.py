"""
Local Library catalog models.

Immutable Pydantic v2 value types for the catalog entities:
- Book: a title with its author and genres
- Author: the person a book is attributed to
- Genre: a uniquely named classification
- BookInstance: one physical copy of a book
"""

from .author import AUTHOR_ID_PATTERN, Author
from .book import BOOK_ID_PATTERN, Book
from .book_instance import BOOK_INSTANCE_ID_PATTERN, BookInstance, BookInstanceStatus
from .genre import GENRE_ID_PATTERN, Genre

__all__ = [
    "AUTHOR_ID_PATTERN",
    "BOOK_ID_PATTERN",
    "BOOK_INSTANCE_ID_PATTERN",
    "GENRE_ID_PATTERN",
    "Author",
    "Book",
    "BookInstance",
    "BookInstanceStatus",
    "Genre",
]
